"""
Invite email notifications.

Sending is best-effort: an invite is valid whether or not its email goes
out, so every failure here is logged and swallowed.
"""

import logging
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.orm import Session

from app.config import settings
from app.models.member_invite import MemberInvite
from app.models.user import User
from app.workers.mail_worker import send_invite_email

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
INVITE_SUBJECT = "You've Been Invited to Join Our Team"
ACCEPT_INVITE_PATH = "/dashboard/website-settings/accept-invite"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
)


def build_invite_url(token: str, frontend_url: Optional[str] = None) -> str:
    """Accept link embedded in the invite email."""
    base = (frontend_url or settings.frontend_url or "http://localhost:3000").rstrip("/")
    return f"{base}{ACCEPT_INVITE_PATH}?token={token}"


class InviteNotifier:
    """Renders invite emails and hands them to the mail worker."""

    def __init__(self, db: Session):
        self.db = db

    def _inviter_name(self, invited_by) -> str:
        if invited_by is None:
            return "Someone"
        inviter = self.db.query(User).filter(User.id == invited_by).first()
        if not inviter:
            return "Someone"
        return inviter.display_name

    def render(self, invite: MemberInvite, message: Optional[str] = None) -> str:
        template = _env.get_template("email/member_invite.html")
        website = invite.website
        return template.render(
            inviter_name=self._inviter_name(invite.invited_by),
            website_name=(website.name or website.url) if website else None,
            invite_url=build_invite_url(invite.token),
            expiry_days=settings.invite_expiry_days,
            message=message,
        )

    def notify(self, invite: MemberInvite, message: Optional[str] = None) -> bool:
        """
        Queue the invite email for ``invite``.

        Returns True if the email was queued. Never raises.
        """
        try:
            html_body = self.render(invite, message=message)
            send_invite_email.send(invite.email, INVITE_SUBJECT, html_body)
        except Exception:
            logger.exception("Error queueing invite email for invite %s", invite.id)
            return False

        logger.info("Queued invite email for %s (invite %s)", invite.email, invite.id)
        return True
