"""Bearer token authentication and claim-based authorization dependencies."""

import logging
from typing import Callable, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from domain.model.user import DELETE_PROVIDER_CLAIM
from services.token_service import TokenPrincipal, verify_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[TokenPrincipal]:
    """Get current authenticated user (optional). Returns None if no valid token."""
    if not credentials:
        return None
    return verify_token(credentials.credentials)


def get_current_user_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenPrincipal:
    """Get current authenticated user (required). Raises 401 if not authenticated.

    Identity comes from the token alone; the user store is not consulted.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    principal = verify_token(credentials.credentials)
    if not principal:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return principal


def require_claim(claim_type: str, value: str | None = None) -> Callable[..., TokenPrincipal]:
    """Build a dependency that admits only callers holding the given claim.

    Unauthenticated callers get 401 from get_current_user_required;
    authenticated callers without the claim get 403.
    """
    def dependency(principal: TokenPrincipal = Depends(get_current_user_required)) -> TokenPrincipal:
        if not principal.has_claim(claim_type, value):
            logger.info("Claim check failed", extra={"userId": principal.user_id, "claimType": claim_type})
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return principal

    dependency.__name__ = f"require_claim_{claim_type}"
    return dependency


require_delete_provider = require_claim(DELETE_PROVIDER_CLAIM)
