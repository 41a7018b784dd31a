"""Auth service: registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import asyncio
import logging
import re
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

import bcrypt

from domain.model.errors import (
    IdentityError,
    IdentityErrorDetail,
    InvalidCredentialsError,
    LockedOutError,
)
from domain.model.user import DEFAULT_LOCKOUT_TIMESPAN, MAX_FAILED_ACCESS_ATTEMPTS, User
from port.user_repository import UserRepository
from services.validation import MAX_PASSWORD_BYTES, LoginPayload, RegisterPayload, validate

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
MIN_PASSWORD_LENGTH = 6


def _hash_password(password: str) -> str:
    secret = password.encode("utf-8")
    if len(secret) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password exceeds {MAX_PASSWORD_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(secret, salt).decode("utf-8")


def _verify_password(plain: str, hashed: str) -> bool:
    secret = plain.encode("utf-8")
    # Same bcrypt work either way; an over-long password never matches
    matches = bcrypt.checkpw(secret[:MAX_PASSWORD_BYTES], hashed.encode("utf-8"))
    return matches and len(secret) <= MAX_PASSWORD_BYTES


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return _hash_password("unknown-account")


def _verify_unknown_account(plain: str) -> bool:
    """Spend the same bcrypt work as a real check when the email is unknown."""
    return _verify_password(plain, _dummy_hash())


def password_errors(password: str) -> list[IdentityErrorDetail]:
    """Check a password against the identity store's complexity rules.

    Returns every rule the password breaks, in a fixed order.
    """
    errors = []
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(IdentityErrorDetail(
            "PasswordTooShort", f"Passwords must be at least {MIN_PASSWORD_LENGTH} characters."))
    if not re.search(r"[^a-zA-Z0-9]", password):
        errors.append(IdentityErrorDetail(
            "PasswordRequiresNonAlphanumeric", "Passwords must have at least one non alphanumeric character."))
    if not re.search(r"[0-9]", password):
        errors.append(IdentityErrorDetail(
            "PasswordRequiresDigit", "Passwords must have at least one digit ('0'-'9')."))
    if not re.search(r"[a-z]", password):
        errors.append(IdentityErrorDetail(
            "PasswordRequiresLower", "Passwords must have at least one lowercase ('a'-'z')."))
    if not re.search(r"[A-Z]", password):
        errors.append(IdentityErrorDetail(
            "PasswordRequiresUpper", "Passwords must have at least one uppercase ('A'-'Z')."))
    return errors


def _duplicate_user(email: str) -> IdentityErrorDetail:
    return IdentityErrorDetail("DuplicateUserName", f"Username '{email}' is already taken.")


async def register(repo: UserRepository, payload: Any) -> User:
    """Register a new account with its email already confirmed.

    Returns the created User domain object.

    Raises:
        ValidationError: payload breaks a field rule
        IdentityError: email taken and/or password too weak (all reasons listed)
    """
    data = validate(RegisterPayload, payload)
    email = data.email.lower()

    errors = []
    if await repo.get_by_email(email):
        errors.append(_duplicate_user(email))
    errors.extend(password_errors(data.password))
    if errors:
        logger.info("Registration rejected", extra={"email": email, "codes": [e.code for e in errors]})
        raise IdentityError(errors)

    password_hash = await asyncio.to_thread(_hash_password, data.password)

    user = await repo.create(email=email, password_hash=password_hash, email_confirmed=True)
    if not user:
        # Lost a race with a concurrent registration for the same email
        raise IdentityError([_duplicate_user(email)])

    logger.info("User registered", extra={"userId": user.id, "email": email})
    return user


async def authenticate(repo: UserRepository, payload: Any, now: datetime | None = None) -> User:
    """Authenticate a user by email and password.

    Returns the authenticated User domain object.
    Doesn't reveal whether the email exists.

    Raises:
        ValidationError: payload breaks a field rule
        LockedOutError: account is locked, or this failure just locked it
        InvalidCredentialsError: invalid credentials (deliberately vague)
    """
    data = validate(LoginPayload, payload)
    email = data.email.lower()
    now = now or datetime.now(timezone.utc)

    user = await repo.get_by_email(email)
    if not user:
        await asyncio.to_thread(_verify_unknown_account, data.password)
        raise InvalidCredentialsError()

    if user.is_locked_out(now):
        logger.warning("Login refused: account locked", extra={"userId": user.id})
        raise LockedOutError()

    if await asyncio.to_thread(_verify_password, data.password, user.password_hash):
        if user.access_failed_count or user.lockout_end:
            await repo.update_access_state(user.id, 0, None)
        logger.info("User logged in", extra={"userId": user.id, "email": email})
        return user

    failed = user.access_failed_count + 1
    if failed >= MAX_FAILED_ACCESS_ATTEMPTS:
        await repo.update_access_state(user.id, 0, now + DEFAULT_LOCKOUT_TIMESPAN)
        logger.warning("Account locked after repeated failures", extra={"userId": user.id})
        raise LockedOutError()

    await repo.update_access_state(user.id, failed, user.lockout_end)
    raise InvalidCredentialsError()
