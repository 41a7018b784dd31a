"""Provider domain model."""

import uuid
from dataclasses import dataclass


@dataclass
class Provider:
    """A business entity registered with the service."""
    id: uuid.UUID
    name: str
    document: str
    active: bool = False

    @classmethod
    def create(
        cls,
        name: str,
        document: str,
        active: bool = False,
        provider_id: uuid.UUID | None = None,
    ) -> 'Provider':
        """Build a Provider, generating the id when the caller supplied none."""
        return cls(
            id=provider_id or uuid.uuid4(),
            name=name,
            document=document,
            active=active,
        )
