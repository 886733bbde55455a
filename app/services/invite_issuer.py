"""Issues member invites for websites."""

import logging
import secrets
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.member_invite import InviteStatus, MemberInvite
from app.models.types import utcnow
from app.models.website import Website
from app.services.errors import ConflictError, NotFoundError, ServiceError
from app.services.invite_notifier import InviteNotifier

logger = logging.getLogger(__name__)

PENDING_INVITE_EXISTS = "This email already has a pending invitation"
ALREADY_A_MEMBER = "This email is already a member of this website"


def generate_invite_token() -> str:
    """64 hex chars from 32 random bytes; the token is a bearer capability."""
    return secrets.token_hex(32)


def invite_expiry(now: Optional[datetime] = None) -> datetime:
    return (now or utcnow()) + timedelta(days=settings.invite_expiry_days)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class InviteIssuer:
    """Creates PENDING invites and sends their notification emails."""

    def __init__(self, db: Session, notifier: Optional[InviteNotifier] = None):
        self.db = db
        self.notifier = notifier or InviteNotifier(db)

    def _find_open_invite(self, email: str, website_id: UUID, status: InviteStatus):
        return (
            self.db.query(MemberInvite)
            .filter(
                MemberInvite.email == email,
                MemberInvite.website_id == website_id,
                MemberInvite.status == status,
            )
            .first()
        )

    def create_invite(
        self,
        website_id: UUID,
        email: str,
        invited_by: Optional[UUID],
        message: Optional[str] = None,
    ) -> MemberInvite:
        """
        Create a PENDING invite for ``email`` on ``website_id``.

        Raises:
            NotFoundError: website does not exist
            ConflictError: a pending invite exists, or the email already
                accepted an invite for this website
        """
        email = normalize_email(email)

        website = self.db.query(Website).filter(Website.id == website_id).first()
        if not website:
            raise NotFoundError("Website not found")

        if self._find_open_invite(email, website_id, InviteStatus.PENDING):
            raise ConflictError(PENDING_INVITE_EXISTS)
        if self._find_open_invite(email, website_id, InviteStatus.ACCEPTED):
            raise ConflictError(ALREADY_A_MEMBER)

        invite = MemberInvite(
            email=email,
            website_id=website_id,
            token=generate_invite_token(),
            invited_by=invited_by,
            expires_at=invite_expiry(),
            status=InviteStatus.PENDING,
        )
        self.db.add(invite)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent create for the same pair
            self.db.rollback()
            raise ConflictError(PENDING_INVITE_EXISTS)
        self.db.refresh(invite)

        logger.info(
            "Created invite %s for %s on website %s", invite.id, email, website_id
        )

        self._notify(invite, message=message)
        return invite

    def _notify(self, invite: MemberInvite, message: Optional[str] = None) -> None:
        # The invite is already committed; a notifier error must not undo that
        try:
            self.notifier.notify(invite, message=message)
        except Exception:
            logger.exception("Notifier failed for invite %s", invite.id)

    def bulk_create_invites(
        self, email: str, website_ids: List[UUID], invited_by: Optional[UUID]
    ) -> List[MemberInvite]:
        """
        Invite one email to several websites.

        Each website is independent: failures are logged and skipped, and only
        the invites that were created are returned.
        """
        invites = []
        for website_id in website_ids:
            try:
                invites.append(self.create_invite(website_id, email, invited_by))
            except ServiceError as e:
                logger.warning(
                    "Failed to create invite for website %s: %s", website_id, e.message
                )
            except Exception:
                self.db.rollback()
                logger.exception("Failed to create invite for website %s", website_id)
        return invites
