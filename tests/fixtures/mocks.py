"""
Mock services for testing invite notifications.

These mocks record what would have been emailed without touching the broker.
"""

from typing import Dict, List, Optional


class MockInviteNotifier:
    """
    Stand-in for InviteNotifier.

    Records every notify() call. Set ``result`` to control the return value
    or ``raise_error`` to simulate a notifier that blows up.
    """

    def __init__(self):
        self.calls: List[Dict] = []
        self.result = True
        self.raise_error: Optional[Exception] = None

    def notify(self, invite, message: Optional[str] = None) -> bool:
        self.calls.append(
            {"invite_id": invite.id, "email": invite.email, "token": invite.token, "message": message}
        )
        if self.raise_error:
            raise self.raise_error
        return self.result

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_call(self) -> Optional[Dict]:
        return self.calls[-1] if self.calls else None
