"""Bearer token issuance and verification (HS256 JWT).

Tokens are self-contained: they carry the user id, email, roles and claims
as they were at issuance, and nothing is stored server-side.
"""

import os
import uuid
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from domain.model.user import User, UserClaim

logger = logging.getLogger(__name__)

# JWT Configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError(
        "JWT_SECRET_KEY environment variable is required. "
        "Generate a secure key with: openssl rand -hex 32"
    )
JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "2"))
JWT_ISSUER = os.getenv("JWT_ISSUER", "provider-api")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "https://localhost")

ROLE_CLAIM = "role"

# Registered claim names; user claims with these types are never embedded
_RESERVED_CLAIMS = {"sub", "email", "jti", "nbf", "iat", "exp", "iss", "aud", ROLE_CLAIM}


@dataclass(frozen=True)
class AccessToken:
    """Issued token plus the user details returned alongside it."""
    access_token: str
    expires_in: int
    user_id: str
    email: str
    claims: list[UserClaim]


@dataclass(frozen=True)
class TokenPrincipal:
    """Identity read back from a verified token."""
    user_id: str
    email: str
    claims: list[UserClaim]
    roles: list[str]

    def has_claim(self, claim_type: str, value: str | None = None) -> bool:
        return any(
            c.type == claim_type and (value is None or c.value == value)
            for c in self.claims
        )


def _embed_claims(payload: dict[str, Any], claims: list[UserClaim]) -> None:
    for claim in claims:
        if claim.type in _RESERVED_CLAIMS:
            logger.warning("Skipping claim with reserved name", extra={"claimType": claim.type})
            continue
        existing = payload.get(claim.type)
        if existing is None:
            payload[claim.type] = claim.value
        elif isinstance(existing, list):
            existing.append(claim.value)
        else:
            payload[claim.type] = [existing, claim.value]


def create_access_token(user: User) -> AccessToken:
    """Create a JWT embedding the user's current claims and roles."""
    now = datetime.now(timezone.utc)
    expires_in = JWT_EXPIRATION_HOURS * 3600
    payload: dict[str, Any] = {
        "sub": user.id,
        "email": user.email,
        "jti": uuid.uuid4().hex,
        "nbf": now,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
    }
    if user.roles:
        payload[ROLE_CLAIM] = list(user.roles)
    _embed_claims(payload, user.claims)

    token = jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)
    role_claims = [UserClaim(type=ROLE_CLAIM, value=role) for role in user.roles]
    return AccessToken(
        access_token=token,
        expires_in=expires_in,
        user_id=user.id,
        email=user.email,
        claims=list(user.claims) + role_claims,
    )


def verify_token(token: str) -> TokenPrincipal | None:
    """Verify signature, lifetime, issuer and audience.

    Returns:
        The token's principal, or None if the token is not acceptable
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except JWTError as e:
        logger.debug(f"JWT verification failed: {e}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    claims = []
    for claim_type, value in payload.items():
        if claim_type in _RESERVED_CLAIMS:
            continue
        values = value if isinstance(value, list) else [value]
        claims.extend(UserClaim(type=claim_type, value=str(v)) for v in values)

    roles = payload.get(ROLE_CLAIM) or []
    if isinstance(roles, str):
        roles = [roles]

    return TokenPrincipal(
        user_id=user_id,
        email=payload.get("email", ""),
        claims=claims,
        roles=list(roles),
    )
