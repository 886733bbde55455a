from sqlalchemy import Column, String, Boolean, Uuid
from sqlalchemy.orm import relationship
import uuid

from app.database import Base
from app.models.types import UTCDateTime, utcnow


class User(Base):
    """User model for authentication and website ownership."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, onupdate=utcnow)

    # Relationships
    sessions = relationship(
        "Session", back_populates="user", cascade="all, delete-orphan"
    )
    websites = relationship(
        "Website", back_populates="owner", cascade="all, delete-orphan"
    )
    memberships = relationship(
        "Member", foreign_keys="Member.user_id", back_populates="user"
    )

    @property
    def display_name(self) -> str:
        """Full name when known, otherwise the email address."""
        if self.first_name:
            return f"{self.first_name} {self.last_name or ''}".strip()
        return self.email
