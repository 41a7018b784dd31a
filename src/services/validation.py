"""Declarative validation rules for incoming payloads.

Payload models describe the accepted shape of each request body; validate()
runs them and converts pydantic failures into a field-keyed error map that
route handlers render as a validation problem document.
"""

import uuid
from typing import Any, TypeVar

from pydantic import (
    BaseModel,
    EmailStr,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)

from domain.model.errors import ValidationError

T = TypeVar('T', bound=BaseModel)

# bcrypt hashes at most this many bytes of a password
MAX_PASSWORD_BYTES = 72


class ProviderPayload(BaseModel):
    """Accepted body for creating or replacing a provider."""
    id: uuid.UUID | None = None
    name: str = Field(..., min_length=2, max_length=100)
    document: str = Field(..., pattern=r'^\d{11}(\d{3})?$', description="11 or 14 digits")
    active: bool = False

    model_config = {"str_strip_whitespace": True}


class RegisterPayload(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    confirm_password: str

    @field_validator('password')
    @classmethod
    def _password_fits_hash(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Passwords must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded.")
        return value

    @model_validator(mode='after')
    def _passwords_match(self) -> 'RegisterPayload':
        if self.password != self.confirm_password:
            raise ValueError("The passwords do not match.")
        return self


class LoginPayload(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


def _field_name(loc: tuple) -> str:
    # Model-level validators report an empty loc
    return ".".join(str(part) for part in loc) or "body"


def errors_from_pydantic(errors: list[dict]) -> dict[str, list[str]]:
    """Group pydantic error entries by field name."""
    grouped: dict[str, list[str]] = {}
    for error in errors:
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        grouped.setdefault(_field_name(tuple(error["loc"])), []).append(message)
    return grouped


def validate(model: type[T], payload: Any) -> T:
    """Validate a raw JSON payload against a payload model.

    Raises:
        ValidationError: with every failing field and its messages
    """
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(errors_from_pydantic(e.errors())) from e
