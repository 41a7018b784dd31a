"""Pydantic models for API responses."""

import uuid
from pydantic import BaseModel, Field

from domain.model.provider import Provider
from domain.model.errors import IdentityErrorDetail
from services.token_service import AccessToken


class ProviderResponse(BaseModel):
    """Response model for a provider."""
    id: uuid.UUID = Field(..., description="Provider ID")
    name: str
    document: str = Field(..., description="11 or 14 digit registration document")
    active: bool

    @classmethod
    def from_domain(cls, provider: Provider) -> 'ProviderResponse':
        return cls(id=provider.id, name=provider.name, document=provider.document, active=provider.active)


class ClaimResponse(BaseModel):
    type: str
    value: str


class UserTokenResponse(BaseModel):
    id: str
    email: str
    claims: list[ClaimResponse]


class AuthResponse(BaseModel):
    """Token payload returned by register and login."""
    access_token: str
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user_token: UserTokenResponse

    @classmethod
    def from_token(cls, token: AccessToken) -> 'AuthResponse':
        return cls(
            access_token=token.access_token,
            expires_in=token.expires_in,
            user_token=UserTokenResponse(
                id=token.user_id,
                email=token.email,
                claims=[ClaimResponse(type=c.type, value=c.value) for c in token.claims],
            ),
        )


class IdentityErrorResponse(BaseModel):
    code: str
    description: str

    @classmethod
    def from_domain(cls, error: IdentityErrorDetail) -> 'IdentityErrorResponse':
        return cls(code=error.code, description=error.description)


class ValidationProblem(BaseModel):
    """Problem document for request validation failures."""
    type: str = "https://tools.ietf.org/html/rfc9110#section-15.5.1"
    title: str = "One or more validation errors occurred."
    status: int = 400
    errors: dict[str, list[str]]


class MessageResponse(BaseModel):
    detail: str
