"""
Invite lifecycle transitions.

    PENDING -> ACCEPTED | REJECTED | REVOKED | EXPIRED

Every transition requires PENDING. Expiry is detected lazily when a token is
looked up or accepted; ``expire_stale_invites`` sweeps the rest on demand.
"""

import logging
from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.member_invite import InviteStatus, MemberInvite
from app.models.types import utcnow
from app.services.errors import ConflictError, InvalidStateError, NotFoundError
from app.services.invite_issuer import generate_invite_token, invite_expiry
from app.services.invite_notifier import InviteNotifier
from app.services.membership_resolver import MembershipResolver

logger = logging.getLogger(__name__)


def _already(invite: MemberInvite) -> InvalidStateError:
    return InvalidStateError(f"Invite has already been {invite.status.value.lower()}")


class InviteStateMachine:
    """Applies accept/reject/revoke/resend/expire to stored invites."""

    def __init__(
        self,
        db: Session,
        notifier: Optional[InviteNotifier] = None,
        resolver: Optional[MembershipResolver] = None,
    ):
        self.db = db
        self.notifier = notifier or InviteNotifier(db)
        self.resolver = resolver or MembershipResolver(db)

    # =========================================================================
    # Lookups
    # =========================================================================

    def _by_token(self, token: str) -> Optional[MemberInvite]:
        return self.db.query(MemberInvite).filter(MemberInvite.token == token).first()

    def _by_id(self, invite_id: UUID) -> MemberInvite:
        invite = self.db.query(MemberInvite).filter(MemberInvite.id == invite_id).first()
        if not invite:
            raise NotFoundError("Invite not found")
        return invite

    @staticmethod
    def is_expired(invite: MemberInvite, now: Optional[datetime] = None) -> bool:
        return invite.expires_at is not None and (now or utcnow()) > invite.expires_at

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _mark_expired(self, invite: MemberInvite) -> None:
        invite.status = InviteStatus.EXPIRED
        self._commit()
        logger.info("Invite %s expired", invite.id)

    def get_invite_by_token(self, token: str) -> MemberInvite:
        """Return the invite behind ``token`` if it can still be accepted."""
        invite = self._by_token(token)
        if not invite:
            raise NotFoundError("Invite not found or expired")

        if invite.status != InviteStatus.PENDING:
            raise InvalidStateError("This invitation is no longer valid")

        if self.is_expired(invite):
            self._mark_expired(invite)
            raise InvalidStateError("This invitation has expired")

        return invite

    # =========================================================================
    # Transitions
    # =========================================================================

    def accept_invite(self, token: str) -> Dict:
        """
        Accept an invite and create the membership.

        The membership insert and the invite update commit together; if
        either fails both are rolled back and the invite stays PENDING.
        """
        invite = self._by_token(token)
        if not invite:
            raise NotFoundError("Invite not found or expired")

        if invite.status != InviteStatus.PENDING:
            raise _already(invite)

        if self.is_expired(invite):
            self._mark_expired(invite)
            raise InvalidStateError("Invite has expired")

        try:
            member = self.resolver.resolve(invite)
            invite.status = InviteStatus.ACCEPTED
            invite.accepted_at = utcnow()
            invite.member_id = member.id
            self.db.commit()
        except (NotFoundError, ConflictError):
            self.db.rollback()
            raise
        except IntegrityError:
            # Concurrent accept created the (user, website) row first
            self.db.rollback()
            raise ConflictError("You are already a member of this website")
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(member)
        logger.info(
            "Invite %s accepted; member %s joined website %s",
            invite.id,
            member.id,
            member.website_id,
        )
        return {"member": member, "message": "Successfully accepted the invitation"}

    def reject_invite(self, token: str, reason: Optional[str] = None) -> Dict:
        invite = self._by_token(token)
        if not invite:
            raise NotFoundError("Invite not found")

        if invite.status != InviteStatus.PENDING:
            raise _already(invite)

        invite.status = InviteStatus.REJECTED
        invite.rejected_at = utcnow()
        invite.rejection_reason = reason
        self._commit()

        logger.info("Invite %s rejected", invite.id)
        return {"message": "Invitation rejected successfully"}

    def revoke_invite(self, invite_id: UUID) -> Dict:
        invite = self._by_id(invite_id)

        if invite.status != InviteStatus.PENDING:
            raise InvalidStateError("Only pending invitations can be revoked")

        invite.status = InviteStatus.REVOKED
        invite.revoked_at = utcnow()
        self._commit()

        logger.info("Invite %s revoked", invite.id)
        return {"message": "Invitation revoked successfully"}

    def resend_invite(self, invite_id: UUID) -> MemberInvite:
        """Rotate the token, restart the expiry window and email it again."""
        invite = self._by_id(invite_id)

        if invite.status != InviteStatus.PENDING:
            raise InvalidStateError("Only pending invitations can be resent")

        invite.token = generate_invite_token()
        invite.expires_at = invite_expiry()
        self._commit()
        self.db.refresh(invite)

        logger.info("Invite %s resent to %s", invite.id, invite.email)
        try:
            self.notifier.notify(invite)
        except Exception:
            logger.exception("Notifier failed for invite %s", invite.id)
        return invite

    def expire_stale_invites(self, now: Optional[datetime] = None) -> int:
        """Mark every overdue PENDING invite as EXPIRED. Returns the count."""
        now = now or utcnow()
        stale = (
            self.db.query(MemberInvite)
            .filter(
                MemberInvite.status == InviteStatus.PENDING,
                MemberInvite.expires_at < now,
            )
            .all()
        )
        for invite in stale:
            invite.status = InviteStatus.EXPIRED
        self._commit()

        if stale:
            logger.info("Expired %d stale invites", len(stale))
        return len(stale)
