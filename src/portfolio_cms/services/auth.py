"""Authentication and account registration.

Passwords are stored as salted PBKDF2 hashes. Sessions use a pair of signed
JWTs: a short-lived access token and a longer-lived refresh token. Only a
hash of the current refresh token is kept on the user row, so each refresh
rotates the pair and invalidates the previous refresh token.

New accounts must verify their email before they can log in. Delivery of the
verification message is delegated to a pluggable sender (see
:func:`set_verification_sender`).
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
import secrets
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from portfolio_cms.config import get_settings
from portfolio_cms.constants.roles import ASSIGNABLE_STAFF_ROLES, STAFF_ROLES
from portfolio_cms.data.crud.delegates import UserDelegate
from portfolio_cms.data.models import User, UserRole
from portfolio_cms.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

__all__ = [
    "TokenPair",
    "hash_password",
    "verify_password",
    "register_user",
    "register_staff",
    "register_super_admin",
    "verify_email",
    "resend_verification",
    "validate_or_create_google_user",
    "login",
    "issue_tokens",
    "refresh",
    "logout",
    "decode_access_token",
    "set_verification_sender",
]

_PBKDF2_ITERATIONS = 100_000
_SALT_BYTES = 16
MIN_PASSWORD_LENGTH = 8

VerificationSender = Callable[[User, str, str], None]


@dataclass
class TokenPair:
    """Tokens returned after a successful login or refresh."""

    access_token: str
    refresh_token: str
    user: User
    token_type: str = "bearer"


def _log_verification(user: User, token: str, verify_url: str) -> None:  # noqa: ARG001
    logger.info("Verification email for user %s ready (link base %s)", user.id, verify_url)


_verification_sender: VerificationSender = _log_verification


def set_verification_sender(sender: VerificationSender | None) -> None:
    """Install the callable that delivers verification emails.

    The sender receives the user, the raw token and the frontend verification
    URL. Passing ``None`` restores the default, which only logs.
    """
    global _verification_sender
    _verification_sender = sender or _log_verification


# ----------------------------------------------------------------------
# Hashing
# ----------------------------------------------------------------------


def hash_password(password: str) -> str:
    """Return a salted PBKDF2 hash for the given password.

    The result is stored as ``<salt_hex>:<hash_hex>``.
    """
    salt = os.urandom(_SALT_BYTES)
    derived = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)
    return f"{salt.hex()}:{derived.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against a stored ``salt:hash`` string."""
    try:
        salt_hex, hash_hex = stored_hash.split(":", 1)
    except ValueError:
        return False

    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False

    candidate = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        _PBKDF2_ITERATIONS,
    )
    return hmac.compare_digest(candidate, expected)


def _digest_token(token: str) -> str:
    # Refresh tokens are high-entropy JWTs, a plain digest is enough.
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


# ----------------------------------------------------------------------
# Registration
# ----------------------------------------------------------------------


def _normalize_email(email: str) -> str:
    cleaned = email.strip().lower()
    if not cleaned or "@" not in cleaned:
        raise ValidationError("Invalid email address")
    return cleaned


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def _issue_verification(user: User) -> str:
    settings = get_settings()
    token = secrets.token_hex(32)
    user.email_verify_token = token
    user.email_verify_expiry = datetime.now(UTC) + timedelta(
        hours=settings.email_verify_expiry_hours
    )
    return token


def _send_verification(user: User, token: str) -> None:
    verify_url = f"{get_settings().frontend_url.rstrip('/')}/verify-email"
    _verification_sender(user, token, verify_url)


def _create_account(
    session: Session, email: str, password: str, name: str | None, role: UserRole
) -> User:
    users = UserDelegate(session)
    normalized = _normalize_email(email)
    _check_password(password)

    existing = users.find_by_email(normalized)
    if existing is not None:
        if existing.email_verified:
            raise ConflictError("Email already registered and verified.")
        raise ConflictError("Email already registered. Check your inbox or resend verification.")

    user = users.create(
        email=normalized,
        name=name.strip() if name and name.strip() else None,
        password=hash_password(password),
        role=role,
        email_verified=False,
    )
    token = _issue_verification(user)
    session.flush()
    _send_verification(user, token)
    return user


def register_user(session: Session, email: str, password: str, name: str | None = None) -> User:
    """Create a regular USER account pending email verification."""
    user = _create_account(session, email, password, name, UserRole.USER)
    logger.info("Registered user %s", user.id)
    return user


def register_staff(
    session: Session,
    requesting_user: User,
    email: str,
    password: str,
    role: UserRole,
    name: str | None = None,
) -> User:
    """Create an account with a staff role on behalf of an administrator.

    Raises:
        PermissionDeniedError: If the requester is not SUPER_ADMIN or ADMIN.
        ValidationError: If ``role`` is SUPER_ADMIN.
    """
    if requesting_user.role not in STAFF_ROLES:
        raise PermissionDeniedError("Only ADMIN or SUPER_ADMIN can create staff accounts.")
    if role == UserRole.SUPER_ADMIN:
        raise ValidationError("Cannot create SUPER_ADMIN via staff registration.")
    if role not in ASSIGNABLE_STAFF_ROLES:
        raise ValidationError("Invalid role for staff creation.")

    user = _create_account(session, email, password, name, role)
    logger.info("Staff account %s (%s) created by %s", user.id, role, requesting_user.id)
    return user


def register_super_admin(
    session: Session,
    email: str,
    password: str,
    name: str | None = None,
    requesting_user: User | None = None,
) -> User:
    """Create a SUPER_ADMIN account.

    Without a requester this is the bootstrap path and is only allowed while
    no SUPER_ADMIN exists yet. Otherwise the requester must be a SUPER_ADMIN.
    """
    users = UserDelegate(session)
    if requesting_user is not None:
        if requesting_user.role != UserRole.SUPER_ADMIN:
            raise PermissionDeniedError("Only SUPER_ADMIN can create another SUPER_ADMIN.")
    elif users.count(role=UserRole.SUPER_ADMIN) > 0:
        raise PermissionDeniedError("SUPER_ADMIN already exists.")

    user = _create_account(session, email, password, name, UserRole.SUPER_ADMIN)
    logger.info("SUPER_ADMIN account %s created", user.id)
    return user


def verify_email(session: Session, token: str) -> User:
    """Mark the account holding ``token`` as verified.

    Raises:
        ValidationError: If the token is unknown, expired or already used.
    """
    user = UserDelegate(session).find_by_verify_token(token) if token else None
    if user is None or user.email_verified or user.email_verify_expiry is None:
        raise ValidationError("Invalid or expired token.")

    expiry = user.email_verify_expiry
    if expiry.tzinfo is None:
        expiry = expiry.replace(tzinfo=UTC)
    if expiry <= datetime.now(UTC):
        raise ValidationError("Invalid or expired token.")

    user.email_verified = True
    user.email_verify_token = None
    user.email_verify_expiry = None
    session.flush()
    logger.info("Email verified for user %s", user.id)
    return user


def resend_verification(session: Session, email: str) -> User:
    """Issue a fresh verification token for an unverified account."""
    user = UserDelegate(session).find_by_email(email)
    if user is None:
        raise NotFoundError("No account registered with this email.")
    if user.email_verified:
        raise ValidationError("Email is already verified.")

    token = _issue_verification(user)
    session.flush()
    _send_verification(user, token)
    return user


def validate_or_create_google_user(
    session: Session, email: str, google_id: str, name: str | None = None
) -> User:
    """Resolve the account for a Google sign-in.

    The account is matched by Google id first, then by email. A matched
    account is linked to ``google_id`` if it has none yet and is marked
    verified, since Google has confirmed the address. Without a match a
    verified USER account with no password is created.

    Raises:
        ValidationError: If ``google_id`` or ``email`` is empty.
    """
    if not google_id or not email or not email.strip():
        raise ValidationError("Google id and email are required.")

    users = UserDelegate(session)
    user = users.find_by_google_id(google_id) or users.find_by_email(email)
    if user is None:
        user = users.create(
            email=_normalize_email(email),
            name=name.strip() if name and name.strip() else None,
            google_id=google_id,
            role=UserRole.USER,
            email_verified=True,
        )
        logger.info("Registered user %s via Google", user.id)
        return user

    if user.google_id is None:
        user.google_id = google_id
        logger.info("Linked Google account to user %s", user.id)
    if not user.email_verified:
        user.email_verified = True
        user.email_verify_token = None
        user.email_verify_expiry = None
    session.flush()
    return user


# ----------------------------------------------------------------------
# Sessions
# ----------------------------------------------------------------------


def _encode(user_id: str, token_type: str, secret: str, lifetime: timedelta) -> str:
    settings = get_settings()
    now = datetime.now(UTC)
    claims = {
        "sub": user_id,
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(claims, secret, algorithm=settings.jwt_algorithm)


def _decode(token: str, token_type: str, secret: str) -> str:
    settings = get_settings()
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise AuthenticationError("Invalid or expired token.") from exc

    subject = payload.get("sub")
    if payload.get("type") != token_type or not subject:
        raise AuthenticationError("Invalid or expired token.")
    return str(subject)


def issue_tokens(session: Session, user: User) -> TokenPair:
    """Sign a new token pair and remember the refresh token's digest."""
    settings = get_settings()
    access = _encode(
        user.id,
        "access",
        settings.jwt_access_secret,
        timedelta(minutes=settings.access_token_minutes),
    )
    refresh_token = _encode(
        user.id,
        "refresh",
        settings.jwt_refresh_secret,
        timedelta(days=settings.refresh_token_days),
    )
    user.refresh_token = _digest_token(refresh_token)
    session.flush()
    return TokenPair(access_token=access, refresh_token=refresh_token, user=user)


def login(session: Session, email: str, password: str) -> TokenPair:
    """Authenticate with email and password.

    Raises:
        AuthenticationError: If the credentials are wrong, the email is not
            verified, or the account is deactivated.
    """
    user = UserDelegate(session).find_by_email(email)
    if user is None or not user.email_verified:
        raise AuthenticationError("Invalid credentials or unverified email.")
    if not user.password or not verify_password(password, user.password):
        raise AuthenticationError("Invalid credentials.")
    if not user.is_active:
        raise AuthenticationError("Account is deactivated.")

    user.last_login_at = datetime.now(UTC)
    pair = issue_tokens(session, user)
    logger.info("User %s logged in", user.id)
    return pair


def refresh(session: Session, token: str) -> TokenPair:
    """Exchange a valid refresh token for a new pair (rotation)."""
    settings = get_settings()
    user_id = _decode(token, "refresh", settings.jwt_refresh_secret)
    user = UserDelegate(session).find_unique(id=user_id)
    if (
        user is None
        or not user.is_active
        or not user.refresh_token
        or not hmac.compare_digest(user.refresh_token, _digest_token(token))
    ):
        raise AuthenticationError("Invalid refresh token.")
    return issue_tokens(session, user)


def logout(session: Session, user_id: str) -> None:
    """Forget the stored refresh token so it can no longer be exchanged."""
    UserDelegate(session).update({"id": user_id}, refresh_token=None)
    logger.info("User %s logged out", user_id)


def decode_access_token(token: str) -> str:
    """Return the user id carried by a valid access token."""
    return _decode(token, "access", get_settings().jwt_access_secret)
