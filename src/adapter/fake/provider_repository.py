"""In-memory implementation of ProviderRepository for testing."""

import uuid
from dataclasses import replace

from domain.model.provider import Provider


class FakeProviderRepository:
    def __init__(self):
        self.store: dict[uuid.UUID, Provider] = {}

    # ── write operations ─────────────────────────────────────

    async def add(self, provider: Provider) -> int:
        if provider.id in self.store:
            return 0
        self.store[provider.id] = replace(provider)
        return 1

    async def update(self, provider: Provider) -> int:
        if provider.id not in self.store:
            return 0
        self.store[provider.id] = replace(provider)
        return 1

    async def remove(self, provider_id: uuid.UUID) -> int:
        return 1 if self.store.pop(provider_id, None) else 0

    # ── read operations ──────────────────────────────────────

    async def get_by_id(self, provider_id: uuid.UUID) -> Provider | None:
        provider = self.store.get(provider_id)
        return replace(provider) if provider else None

    async def list_all(self) -> list[Provider]:
        return [replace(p) for p in self.store.values()]
