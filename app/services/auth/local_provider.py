"""Password logins backed by the users and sessions tables."""
import logging
import secrets
from datetime import timedelta
from typing import Optional

import bcrypt
from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from app.config import settings
from app.models.session import Session
from app.models.types import utcnow
from app.models.user import User
from app.services.auth.base import AuthProvider

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


class LocalAuthProvider(AuthProvider):
    """
    bcrypt password check and opaque session tokens stored in ``sessions``.

    Emails are compared lowercased, matching how invites store them.
    """

    @staticmethod
    def _new_token() -> str:
        return secrets.token_urlsafe(32)

    def _lookup(self, db: DBSession, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    async def authenticate(self, db: DBSession, email: str, password: str) -> Optional[User]:
        user = self._lookup(db, email)
        if user is None or not user.password_hash:
            return None
        if not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", user.email)
            return None
        return user

    async def create_user(
        self,
        db: DBSession,
        email: str,
        password: str,
        is_admin: bool = False,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> User:
        user = User(
            email=email.strip().lower(),
            password_hash=hash_password(password),
            is_admin=is_admin,
            first_name=first_name,
            last_name=last_name,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    async def get_user_from_request(self, db: DBSession, request: Request) -> Optional[User]:
        token = request.cookies.get(settings.session_cookie_name)
        if not token:
            return None

        session = (
            db.query(Session)
            .filter(Session.token == token, Session.expires_at > utcnow())
            .first()
        )
        return session.user if session else None

    async def create_session(self, db: DBSession, user: User, request: Request) -> str:
        session = Session(
            user_id=user.id,
            token=self._new_token(),
            expires_at=utcnow() + timedelta(seconds=settings.session_max_age),
            user_agent=request.headers.get("user-agent", "")[:512],
            ip_address=request.client.host if request.client else None,
        )
        db.add(session)
        db.commit()

        logger.info("Session started for user %s", user.id)
        return session.token

    async def revoke_session(self, db: DBSession, token: str) -> bool:
        session = db.query(Session).filter(Session.token == token).first()
        if session is None:
            return False
        db.delete(session)
        db.commit()
        return True


local_auth_provider = LocalAuthProvider()
