"""
Database models for Inkwell.

Import all models here so Alembic can detect them for migrations.
"""

from app.database import Base
from app.models.user import User
from app.models.session import Session
from app.models.website import Website, ScrapingStatus
from app.models.member import Member
from app.models.member_invite import MemberInvite, InviteStatus

__all__ = [
    "Base",
    "User",
    "Session",
    "Website",
    "ScrapingStatus",
    "Member",
    "MemberInvite",
    "InviteStatus",
]
