"""Website model: a site onboarded by a user and shared with its members."""

import enum
import uuid

from sqlalchemy import Column, String, Text, Boolean, ForeignKey, Enum, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.types import UTCDateTime, utcnow


class ScrapingStatus(str, enum.Enum):
    """Progress of the onboarding scrape for a website."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Website(Base):
    __tablename__ = "websites"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url = Column(String(2048), nullable=False)
    name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    scraping_status = Column(
        Enum(
            ScrapingStatus,
            name="scraping_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ScrapingStatus.PENDING,
    )
    scraping_error = Column(Text, nullable=True)
    scraped_at = Column(UTCDateTime, nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime, default=utcnow)
    updated_at = Column(UTCDateTime, onupdate=utcnow)

    # Relationships
    owner = relationship("User", back_populates="websites")
    members = relationship("Member", back_populates="website")
    invites = relationship("MemberInvite", back_populates="website")

    def __repr__(self):
        return f"<Website(id={self.id}, url={self.url}, status={self.scraping_status})>"
