from datetime import datetime
from typing import Protocol

from domain.model.user import User, UserClaim


class UserRepository(Protocol):
    """Protocol defining the interface for user, claim and role data access."""
    async def create(self, email: str, password_hash: str, email_confirmed: bool = True) -> User | None:
        """Create a new user. Return User or None if creation failed (e.g. duplicate email)."""
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Find a user by email, with claims and roles loaded. Return None if not found."""
        ...

    async def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID, with claims and roles loaded. Return None if not found."""
        ...

    async def update_access_state(
        self, user_id: str, access_failed_count: int, lockout_end: datetime | None
    ) -> bool:
        """Persist the failed-attempt counter and lockout deadline. Return True if successful."""
        ...

    async def add_claim(self, user_id: str, claim: UserClaim) -> bool:
        """Attach a claim to the user. Return True if a row was added."""
        ...

    async def remove_claim(self, user_id: str, claim: UserClaim) -> bool:
        """Detach a claim from the user. Return True if a row was removed."""
        ...

    async def add_to_role(self, user_id: str, role: str) -> bool:
        """Put the user in a role, creating the role if needed. Return True if successful."""
        ...
