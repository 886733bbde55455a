"""
Login and session handling for the dashboard API.

Routes never talk to a provider class directly; they ask for the current
user through ``get_current_user`` and the provider is resolved here:

    from app.services.auth.dependencies import get_current_user

    @router.get("/members/{member_id}")
    async def get_member(member_id: UUID, user: User = Depends(get_current_user)):
        ...
"""
from app.services.auth.base import AuthProvider
from app.services.auth.local_provider import local_auth_provider


def get_auth_provider() -> AuthProvider:
    """Return the provider used for password logins and cookie sessions."""
    return local_auth_provider


__all__ = ["AuthProvider", "get_auth_provider", "local_auth_provider"]
