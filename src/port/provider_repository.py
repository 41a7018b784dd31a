"""Port definition for ProviderRepository."""

import uuid
from typing import Protocol

from domain.model.provider import Provider


class ProviderRepository(Protocol):
    """Protocol for provider persistence.

    Writes report the number of affected rows; 0 means nothing was saved.
    """

    async def add(self, provider: Provider) -> int:
        """Insert a new provider and commit."""
        ...

    async def update(self, provider: Provider) -> int:
        """Replace every field of an existing provider and commit."""
        ...

    async def remove(self, provider_id: uuid.UUID) -> int:
        """Delete a provider and commit."""
        ...

    async def get_by_id(self, provider_id: uuid.UUID) -> Provider | None:
        """Find a provider by ID. Return None if not found."""
        ...

    async def list_all(self) -> list[Provider]:
        """Return every provider in store order."""
        ...
