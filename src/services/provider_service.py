"""Provider service: CRUD rules for the provider registry.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging
import uuid
from typing import Any

from domain.model.errors import NotFoundError, SaveError, ValidationError
from domain.model.provider import Provider
from port.provider_repository import ProviderRepository
from services.validation import ProviderPayload, validate

logger = logging.getLogger(__name__)


async def list_providers(repo: ProviderRepository) -> list[Provider]:
    return await repo.list_all()


async def get_provider(repo: ProviderRepository, provider_id: uuid.UUID) -> Provider:
    """Raises NotFoundError if no provider has this id."""
    provider = await repo.get_by_id(provider_id)
    if provider is None:
        raise NotFoundError(f"Provider {provider_id} not found")
    return provider


async def create_provider(repo: ProviderRepository, payload: Any) -> Provider:
    """Validate and insert a new provider.

    The id comes from the payload when given, otherwise it is generated.

    Raises:
        ValidationError: payload breaks a field rule
        SaveError: the insert affected no rows
    """
    data = validate(ProviderPayload, payload)
    provider = Provider.create(
        name=data.name,
        document=data.document,
        active=data.active,
        provider_id=data.id,
    )

    if await repo.add(provider) <= 0:
        raise SaveError()

    logger.info("Provider created", extra={"providerId": str(provider.id)})
    return provider


async def update_provider(repo: ProviderRepository, provider_id: uuid.UUID, payload: Any) -> Provider:
    """Replace every field of an existing provider.

    Existence is checked before the payload is validated, so an unknown id
    always yields NotFoundError regardless of the body.

    Raises:
        NotFoundError: no provider has this id
        ValidationError: payload breaks a field rule or names another id
        SaveError: the update affected no rows
    """
    if await repo.get_by_id(provider_id) is None:
        raise NotFoundError(f"Provider {provider_id} not found")

    data = validate(ProviderPayload, payload)
    if data.id is not None and data.id != provider_id:
        raise ValidationError({"id": ["The id in the body does not match the id in the route."]})

    provider = Provider(id=provider_id, name=data.name, document=data.document, active=data.active)
    # A zero count here means the row vanished after the existence check
    if await repo.update(provider) <= 0:
        raise SaveError()

    logger.info("Provider updated", extra={"providerId": str(provider_id)})
    return provider


async def delete_provider(repo: ProviderRepository, provider_id: uuid.UUID) -> None:
    """Raises NotFoundError or SaveError."""
    if await repo.get_by_id(provider_id) is None:
        raise NotFoundError(f"Provider {provider_id} not found")

    if await repo.remove(provider_id) <= 0:
        raise SaveError()

    logger.info("Provider deleted", extra={"providerId": str(provider_id)})
