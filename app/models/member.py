"""Member model: a user's access to a website."""

import uuid

from sqlalchemy import Column, Boolean, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.types import UTCDateTime, utcnow


class Member(Base):
    """
    Durable (user, website) relationship.

    Rows are never deleted; removing a member sets ``is_active`` to False.
    """

    __tablename__ = "members"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    website_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("websites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    joined_at = Column(UTCDateTime, nullable=True)
    invited_at = Column(UTCDateTime, nullable=True)
    invited_by = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, onupdate=utcnow)

    # Relationships
    user = relationship("User", foreign_keys=[user_id], back_populates="memberships")
    inviter = relationship("User", foreign_keys=[invited_by])
    website = relationship("Website", back_populates="members")
    invites = relationship("MemberInvite", back_populates="member")

    __table_args__ = (
        UniqueConstraint("user_id", "website_id", name="uq_members_user_website"),
    )

    def __repr__(self):
        return (
            f"<Member(id={self.id}, user_id={self.user_id}, "
            f"website_id={self.website_id}, is_active={self.is_active})>"
        )
