"""Unit tests for MembershipResolver."""
import pytest
from sqlalchemy.orm import Session

from app.models import Member
from app.services.errors import ConflictError, NotFoundError
from app.services.membership_resolver import MembershipResolver
from tests.factories import create_invite, create_member, create_website


class TestFindUser:
    def test_find_user_ignores_case(self, db: Session, invitee):
        resolver = MembershipResolver(db)

        assert resolver.find_user("  INVITEE@example.com ").id == invitee.id

    def test_find_user_missing(self, db: Session):
        resolver = MembershipResolver(db)

        with pytest.raises(NotFoundError) as exc_info:
            resolver.find_user("ghost@example.com")

        assert "Please sign up first" in exc_info.value.message


class TestResolve:
    def test_resolve_adds_member_without_committing(self, db: Session, website, invitee, test_user):
        invite = create_invite(db, website, email=invitee.email, invited_by=test_user)
        resolver = MembershipResolver(db)

        member = resolver.resolve(invite)

        assert member.id is not None
        assert member.user_id == invitee.id
        assert member.invited_by == test_user.id
        assert member.invited_at == invite.created_at

        # Flushed only: the caller owns the transaction
        db.rollback()
        assert db.query(Member).count() == 0

    def test_resolve_existing_membership(self, db: Session, website, invitee):
        create_member(db, invitee, website)
        invite = create_invite(db, website, email=invitee.email)

        with pytest.raises(ConflictError):
            MembershipResolver(db).resolve(invite)

    def test_membership_on_other_website_does_not_conflict(self, db: Session, website, invitee):
        create_member(db, invitee, create_website(db))
        invite = create_invite(db, website, email=invitee.email)

        member = MembershipResolver(db).resolve(invite)

        assert member.website_id == website.id
