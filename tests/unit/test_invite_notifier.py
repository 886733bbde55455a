"""
Unit tests for InviteNotifier.

Tests rendering of the invite email and the never-raise contract of notify().
"""
from unittest.mock import patch

from sqlalchemy.orm import Session

from app.services.invite_notifier import (
    ACCEPT_INVITE_PATH,
    INVITE_SUBJECT,
    InviteNotifier,
    build_invite_url,
)
from tests.factories import create_invite, create_user


class TestBuildInviteUrl:
    def test_uses_given_frontend_url(self):
        url = build_invite_url("abc123", frontend_url="https://app.example.com/")

        assert url == f"https://app.example.com{ACCEPT_INVITE_PATH}?token=abc123"

    def test_defaults_to_settings(self):
        with patch("app.services.invite_notifier.settings") as mock_settings:
            mock_settings.frontend_url = "https://dash.example.com"

            url = build_invite_url("tok")

        assert url.startswith("https://dash.example.com/dashboard/")
        assert url.endswith("?token=tok")


class TestRender:
    def test_render_includes_inviter_site_and_link(self, db: Session, website, test_user):
        invite = create_invite(db, website, invited_by=test_user)

        html = InviteNotifier(db).render(invite, message="Come write with us")

        assert "Test User" in html
        assert "Acme Blog" in html
        assert f"token={invite.token}" in html
        assert "Come write with us" in html
        assert "7 days" in html

    def test_render_falls_back_to_email_then_someone(self, db: Session, website):
        plain = create_user(db, email="plain@example.com")
        invite = create_invite(db, website, invited_by=plain)
        notifier = InviteNotifier(db)

        assert "plain@example.com" in notifier.render(invite)

        anonymous = create_invite(db, website)
        assert "Someone" in notifier.render(anonymous)

    def test_render_escapes_message(self, db: Session, website):
        invite = create_invite(db, website)

        html = InviteNotifier(db).render(invite, message="<script>alert(1)</script>")

        assert "<script>" not in html
        assert "&lt;script&gt;" in html


class TestNotify:
    def test_notify_queues_email(self, db: Session, website, mock_send_invite_email):
        invite = create_invite(db, website, email="to@example.com")

        assert InviteNotifier(db).notify(invite) is True

        mock_send_invite_email.assert_called_once()
        to_address, subject, html_body = mock_send_invite_email.call_args.args
        assert to_address == "to@example.com"
        assert subject == INVITE_SUBJECT
        assert invite.token in html_body

    def test_notify_swallows_queue_errors(self, db: Session, website, mock_send_invite_email):
        invite = create_invite(db, website)
        mock_send_invite_email.side_effect = ConnectionError("redis unavailable")

        assert InviteNotifier(db).notify(invite) is False

    def test_notify_swallows_render_errors(self, db: Session, website, mock_send_invite_email):
        invite = create_invite(db, website)
        notifier = InviteNotifier(db)

        with patch.object(notifier, "render", side_effect=ValueError("bad template")):
            assert notifier.notify(invite) is False

        mock_send_invite_email.assert_not_called()
