"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""

from dataclasses import dataclass


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class ValidationError(DomainError):
    """Input violates a declarative validation rule.

    ``errors`` maps each offending field to its list of messages.
    """

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__("One or more validation errors occurred.")


class SaveError(DomainError):
    """The store reported zero affected rows for a write."""

    def __init__(self, message: str = "There was a problem saving the record"):
        super().__init__(message)


@dataclass(frozen=True)
class IdentityErrorDetail:
    """A single failure reported by the identity store (code + human text)."""
    code: str
    description: str


class IdentityError(DomainError):
    """Account creation failed; carries every rule the request broke."""

    def __init__(self, errors: list[IdentityErrorDetail]):
        self.errors = errors
        super().__init__("; ".join(e.description for e in errors))


class InvalidCredentialsError(DomainError):
    """Email or password is wrong. Deliberately does not say which."""

    def __init__(self):
        super().__init__("Invalid username or password")


class LockedOutError(DomainError):
    """Account is locked after repeated failed sign-in attempts."""

    def __init__(self):
        super().__init__("User temporarily locked out after repeated invalid attempts")
