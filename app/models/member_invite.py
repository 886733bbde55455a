"""MemberInvite model: a time-boxed, token-bearing offer to join a website."""

import enum
import uuid

from sqlalchemy import Column, String, ForeignKey, Enum, Index, Uuid, text
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.types import UTCDateTime, utcnow


class InviteStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"


class MemberInvite(Base):
    """Invitation for an email address to become a member of a website."""

    __tablename__ = "member_invites"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    website_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("websites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email = Column(String(255), nullable=False, index=True)
    token = Column(String(64), unique=True, index=True, nullable=False)
    status = Column(
        Enum(InviteStatus, name="invite_status"),
        nullable=False,
        default=InviteStatus.PENDING,
    )
    invited_by = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    member_id = Column(
        Uuid(as_uuid=True), ForeignKey("members.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, onupdate=utcnow)
    expires_at = Column(UTCDateTime, nullable=False)
    accepted_at = Column(UTCDateTime, nullable=True)
    rejected_at = Column(UTCDateTime, nullable=True)
    revoked_at = Column(UTCDateTime, nullable=True)
    rejection_reason = Column(String(500), nullable=True)

    # Relationships
    website = relationship("Website", back_populates="invites")
    inviter = relationship("User", foreign_keys=[invited_by])
    member = relationship("Member", back_populates="invites")

    __table_args__ = (
        # One open invite per (email, website); terminal rows may repeat
        Index(
            "uq_member_invites_pending_email_website",
            "email",
            "website_id",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
            sqlite_where=text("status = 'PENDING'"),
        ),
    )

    def __repr__(self):
        return f"<MemberInvite(id={self.id}, email={self.email}, status={self.status})>"
