"""Interface every login backend implements."""
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from app.models.user import User


class AuthProvider(ABC):
    """
    Credentials check plus cookie-session lifecycle.

    Invite acceptance matches users by email only, so a provider is free to
    leave ``password_hash`` empty for accounts it manages elsewhere.
    """

    @abstractmethod
    async def authenticate(self, db: DBSession, email: str, password: str) -> Optional[User]:
        """The matching user, or None for unknown email or wrong password."""

    @abstractmethod
    async def create_user(
        self,
        db: DBSession,
        email: str,
        password: str,
        is_admin: bool = False,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> User:
        ...

    @abstractmethod
    async def get_user_from_request(self, db: DBSession, request: Request) -> Optional[User]:
        """Resolve the session cookie on ``request`` to a user."""

    @abstractmethod
    async def create_session(self, db: DBSession, user: User, request: Request) -> str:
        """Start a session and return the token to set as the cookie value."""

    @abstractmethod
    async def revoke_session(self, db: DBSession, token: str) -> bool:
        """End a session. False when no session had that token."""
