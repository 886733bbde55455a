"""Turns an accepted invite into a website membership."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.member import Member
from app.models.member_invite import MemberInvite
from app.models.types import utcnow
from app.models.user import User
from app.services.errors import ConflictError, NotFoundError


class MembershipResolver:
    """
    Creates the Member row for an invite that has already passed its
    status and expiry checks.

    Only flushes; the caller commits together with the invite update.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_user(self, email: str) -> User:
        user = (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )
        if not user:
            raise NotFoundError(
                "No account found with this email. Please sign up first."
            )
        return user

    def resolve(self, invite: MemberInvite) -> Member:
        user = self.find_user(invite.email)

        existing = (
            self.db.query(Member)
            .filter(Member.user_id == user.id, Member.website_id == invite.website_id)
            .first()
        )
        if existing:
            raise ConflictError("You are already a member of this website")

        member = Member(
            user_id=user.id,
            website_id=invite.website_id,
            is_active=True,
            joined_at=utcnow(),
            invited_at=invite.created_at,
            invited_by=invite.invited_by,
        )
        self.db.add(member)
        self.db.flush()
        return member
