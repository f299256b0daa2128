"""Tests for registration, verification and token handling."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from portfolio_cms.data.crud.delegates import UserDelegate
from portfolio_cms.data.models import UserRole
from portfolio_cms.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from portfolio_cms.services import auth

PASSWORD = "correct-horse"


def _registered_and_verified(session, sent, email="ada@example.com"):
    user = auth.register_user(session, email, PASSWORD, "Ada")
    auth.verify_email(session, sent[-1][1])
    return user


class TestPasswordHashing:
    def test_hash_and_verify(self):
        stored = auth.hash_password("pa55word")

        assert ":" in stored
        assert auth.verify_password("pa55word", stored)
        assert not auth.verify_password("wrong", stored)

    def test_hashes_are_salted(self):
        assert auth.hash_password("same") != auth.hash_password("same")

    def test_malformed_hash_does_not_verify(self):
        assert not auth.verify_password("x", "not-a-hash")
        assert not auth.verify_password("x", "zz:zz")


class TestRegistration:
    def test_register_user(self, session, sent_verifications):
        user = auth.register_user(session, "  Ada@Example.COM ", PASSWORD, "Ada")

        assert user.email == "ada@example.com"
        assert user.role == UserRole.USER
        assert user.email_verified is False
        assert user.password != PASSWORD
        assert sent_verifications == [("ada@example.com", user.email_verify_token)]

    def test_duplicate_unverified_email(self, session, sent_verifications):
        auth.register_user(session, "ada@example.com", PASSWORD)

        with pytest.raises(ConflictError, match="resend verification"):
            auth.register_user(session, "ADA@example.com", PASSWORD)

    def test_duplicate_verified_email(self, session, sent_verifications):
        _registered_and_verified(session, sent_verifications)

        with pytest.raises(ConflictError, match="already registered and verified"):
            auth.register_user(session, "ada@example.com", PASSWORD)

    def test_short_password(self, session):
        with pytest.raises(ValidationError):
            auth.register_user(session, "ada@example.com", "short")

    def test_staff_registration_requires_staff(self, session, make_user, sent_verifications):
        requester = make_user(UserRole.CRAFTER)

        with pytest.raises(PermissionDeniedError):
            auth.register_staff(session, requester, "new@example.com", PASSWORD, UserRole.FINANCE)

    def test_staff_registration_cannot_create_super_admin(self, session, make_user):
        admin = make_user(UserRole.ADMIN)

        with pytest.raises(ValidationError):
            auth.register_staff(
                session, admin, "boss@example.com", PASSWORD, UserRole.SUPER_ADMIN
            )

    def test_staff_registration(self, session, make_user, sent_verifications):
        admin = make_user(UserRole.ADMIN)

        staff = auth.register_staff(
            session, admin, "crafter@example.com", PASSWORD, UserRole.CRAFTER, "Cee"
        )

        assert staff.role == UserRole.CRAFTER
        assert staff.email_verified is False
        assert len(sent_verifications) == 1

    def test_super_admin_bootstrap_only_once(self, session, sent_verifications):
        first = auth.register_super_admin(session, "root@example.com", PASSWORD)
        assert first.role == UserRole.SUPER_ADMIN

        with pytest.raises(PermissionDeniedError):
            auth.register_super_admin(session, "root2@example.com", PASSWORD)

        second = auth.register_super_admin(
            session, "root2@example.com", PASSWORD, requesting_user=first
        )
        assert second.role == UserRole.SUPER_ADMIN

    def test_super_admin_requester_must_be_super_admin(self, session, make_user):
        admin = make_user(UserRole.ADMIN)

        with pytest.raises(PermissionDeniedError):
            auth.register_super_admin(
                session, "root@example.com", PASSWORD, requesting_user=admin
            )


class TestEmailVerification:
    def test_verify_clears_token(self, session, sent_verifications):
        user = _registered_and_verified(session, sent_verifications)

        assert user.email_verified is True
        assert user.email_verify_token is None
        assert user.email_verify_expiry is None

    def test_token_is_single_use(self, session, sent_verifications):
        auth.register_user(session, "ada@example.com", PASSWORD)
        token = sent_verifications[-1][1]
        auth.verify_email(session, token)

        with pytest.raises(ValidationError):
            auth.verify_email(session, token)

    def test_unknown_token(self, session):
        with pytest.raises(ValidationError):
            auth.verify_email(session, "nope")

    def test_expired_token(self, session, sent_verifications):
        user = auth.register_user(session, "ada@example.com", PASSWORD)
        user.email_verify_expiry = datetime.now(UTC) - timedelta(minutes=1)
        session.flush()

        with pytest.raises(ValidationError):
            auth.verify_email(session, sent_verifications[-1][1])

    def test_resend_issues_new_token(self, session, sent_verifications):
        auth.register_user(session, "ada@example.com", PASSWORD)
        first_token = sent_verifications[-1][1]

        auth.resend_verification(session, "ada@example.com")

        assert len(sent_verifications) == 2
        assert sent_verifications[-1][1] != first_token
        with pytest.raises(ValidationError):
            auth.verify_email(session, first_token)

    def test_resend_for_verified_or_unknown(self, session, sent_verifications):
        _registered_and_verified(session, sent_verifications)

        with pytest.raises(ValidationError):
            auth.resend_verification(session, "ada@example.com")
        with pytest.raises(NotFoundError):
            auth.resend_verification(session, "ghost@example.com")


class TestGoogleSignIn:
    def test_creates_verified_user(self, session):
        user = auth.validate_or_create_google_user(session, "Grace@Example.com", "g-1", " Grace ")

        assert user.email == "grace@example.com"
        assert user.name == "Grace"
        assert user.google_id == "g-1"
        assert user.role == UserRole.USER
        assert user.email_verified is True
        assert user.password is None

    def test_links_and_verifies_existing_account(self, session, sent_verifications):
        registered = auth.register_user(session, "ada@example.com", PASSWORD)

        user = auth.validate_or_create_google_user(session, "ADA@example.com", "g-2")

        assert user.id == registered.id
        assert user.google_id == "g-2"
        assert user.email_verified is True
        assert user.email_verify_token is None
        assert auth.login(session, "ada@example.com", PASSWORD).user.id == registered.id

    def test_matches_by_google_id_first(self, session):
        first = auth.validate_or_create_google_user(session, "old@example.com", "g-3")

        again = auth.validate_or_create_google_user(session, "new@example.com", "g-3")

        assert again.id == first.id
        assert again.email == "old@example.com"
        assert UserDelegate(session).count() == 1

    def test_existing_link_is_kept(self, session, make_user):
        linked = make_user(email="kai@example.com", google_id="g-4")

        user = auth.validate_or_create_google_user(session, "kai@example.com", "g-other")

        assert user.id == linked.id
        assert user.google_id == "g-4"

    def test_requires_google_id(self, session):
        with pytest.raises(ValidationError):
            auth.validate_or_create_google_user(session, "x@example.com", "")

    def test_google_only_account_cannot_use_password_login(self, session):
        auth.validate_or_create_google_user(session, "lin@example.com", "g-5")

        with pytest.raises(AuthenticationError):
            auth.login(session, "lin@example.com", "anything-at-all")


class TestSessions:
    def test_login_requires_verified_email(self, session, sent_verifications):
        auth.register_user(session, "ada@example.com", PASSWORD)

        with pytest.raises(AuthenticationError):
            auth.login(session, "ada@example.com", PASSWORD)

    def test_login_issues_tokens(self, session, sent_verifications):
        user = _registered_and_verified(session, sent_verifications)

        pair = auth.login(session, "ADA@example.com", PASSWORD)

        assert pair.user.id == user.id
        assert pair.token_type == "bearer"
        assert auth.decode_access_token(pair.access_token) == user.id
        assert user.last_login_at is not None
        assert user.refresh_token is not None
        assert user.refresh_token != pair.refresh_token

    def test_login_wrong_password(self, session, sent_verifications):
        _registered_and_verified(session, sent_verifications)

        with pytest.raises(AuthenticationError):
            auth.login(session, "ada@example.com", "wrong-password")

    def test_login_deactivated(self, session, make_user):
        user = make_user(email="off@example.com", is_active=False)

        with pytest.raises(AuthenticationError, match="deactivated"):
            auth.login(session, user.email, "s3cret-pass")

    def test_refresh_rotates_tokens(self, session, make_user):
        user = make_user(email="ada@example.com")
        first = auth.login(session, user.email, "s3cret-pass")

        second = auth.refresh(session, first.refresh_token)

        assert second.refresh_token != first.refresh_token
        assert auth.decode_access_token(second.access_token) == user.id
        with pytest.raises(AuthenticationError):
            auth.refresh(session, first.refresh_token)

    def test_access_token_is_not_a_refresh_token(self, session, make_user):
        user = make_user()
        pair = auth.login(session, user.email, "s3cret-pass")

        with pytest.raises(AuthenticationError):
            auth.refresh(session, pair.access_token)
        with pytest.raises(AuthenticationError):
            auth.decode_access_token(pair.refresh_token)

    def test_logout_revokes_refresh_token(self, session, make_user):
        user = make_user()
        pair = auth.login(session, user.email, "s3cret-pass")

        auth.logout(session, user.id)

        assert UserDelegate(session).find_unique(id=user.id).refresh_token is None
        with pytest.raises(AuthenticationError):
            auth.refresh(session, pair.refresh_token)

    def test_garbage_token(self):
        with pytest.raises(AuthenticationError):
            auth.decode_access_token("not.a.jwt")
