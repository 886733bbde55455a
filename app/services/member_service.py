"""Business logic for website membership administration."""

import logging
import math
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.models.member import Member
from app.models.member_invite import InviteStatus, MemberInvite
from app.services.errors import NotFoundError

logger = logging.getLogger(__name__)


def _paginate(query, page: int, limit: int) -> Dict:
    total = query.count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return {
        "data": items,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": math.ceil(total / limit) if limit else 0,
        },
    }


class MemberService:
    """Service for member and invite listing, updates and soft removal."""

    @staticmethod
    def get_members(db: Session, website_id: UUID, page: int = 1, limit: int = 10) -> Dict:
        """Active members of a website, newest first."""
        query = (
            db.query(Member)
            .options(joinedload(Member.user))
            .filter(Member.website_id == website_id, Member.is_active.is_(True))
            .order_by(Member.created_at.desc())
        )
        return _paginate(query, page, limit)

    @staticmethod
    def get_invites(
        db: Session,
        website_id: UUID,
        page: int = 1,
        limit: int = 10,
        status: Optional[InviteStatus] = None,
    ) -> Dict:
        """Invites of a website, newest first, optionally filtered by status."""
        query = (
            db.query(MemberInvite)
            .options(joinedload(MemberInvite.inviter))
            .filter(MemberInvite.website_id == website_id)
        )
        if status is not None:
            query = query.filter(MemberInvite.status == status)
        return _paginate(query.order_by(MemberInvite.created_at.desc()), page, limit)

    @staticmethod
    def get_member(db: Session, member_id: UUID) -> Member:
        member = (
            db.query(Member)
            .options(joinedload(Member.user))
            .filter(Member.id == member_id)
            .first()
        )
        if not member:
            raise NotFoundError("Member not found")
        return member

    @staticmethod
    def update_member(
        db: Session, member_id: UUID, is_active: Optional[bool] = None
    ) -> Member:
        member = MemberService.get_member(db, member_id)

        if is_active is not None:
            member.is_active = is_active
            logger.info("Member %s is_active set to %s", member.id, is_active)

        db.commit()
        db.refresh(member)
        return member

    @staticmethod
    def remove_member(db: Session, member_id: UUID) -> Dict:
        """Soft delete: the row is kept and marked inactive."""
        member = MemberService.get_member(db, member_id)
        member.is_active = False
        db.commit()

        logger.info("Member %s removed from website %s", member.id, member.website_id)
        return {"message": "Member removed successfully"}

    @staticmethod
    def count_members(db: Session, website_id: UUID) -> int:
        return (
            db.query(Member)
            .filter(Member.website_id == website_id, Member.is_active.is_(True))
            .count()
        )


member_service = MemberService()
