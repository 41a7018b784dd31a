"""Provider CRUD routes.

Endpoints:
- GET /provider: List all providers
- GET /provider/{id}: Get a provider
- POST /provider: Create a provider (authenticated)
- PUT /provider/{id}: Replace a provider (authenticated)
- DELETE /provider/{id}: Delete a provider (DeleteProvider claim)
"""

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from api.dependencies import get_provider_repo
from api.models import MessageResponse, ProviderResponse, ValidationProblem
from api.problems import validation_problem
from api.security import get_current_user, get_current_user_required, require_delete_provider
from domain.model.errors import NotFoundError, SaveError, ValidationError
from port.provider_repository import ProviderRepository
from services import provider_service
from services.token_service import TokenPrincipal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/provider", tags=["Provider"])

_NOT_FOUND = {"model": MessageResponse, "description": "Provider not found"}
_BAD_REQUEST = {"model": ValidationProblem | MessageResponse, "description": "Validation or save failure"}


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


def _save_failed(e: SaveError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=list[ProviderResponse], name="GetProvider")
async def list_providers(
    current_user: TokenPrincipal | None = Depends(get_current_user),
    repo: ProviderRepository = Depends(get_provider_repo),
):
    """Get all providers. Authentication is optional."""
    providers = await provider_service.list_providers(repo)
    logger.debug("Providers listed", extra={
        "count": len(providers), "userId": current_user.user_id if current_user else None
    })
    return [ProviderResponse.from_domain(p) for p in providers]


@router.get(
    "/{provider_id}",
    response_model=ProviderResponse,
    name="GetProviderById",
    responses={404: _NOT_FOUND},
)
async def get_provider(provider_id: uuid.UUID, repo: ProviderRepository = Depends(get_provider_repo)):
    """Get a single provider by ID."""
    try:
        provider = await provider_service.get_provider(repo, provider_id)
    except NotFoundError:
        raise _not_found()
    return ProviderResponse.from_domain(provider)


@router.post(
    "",
    response_model=ProviderResponse,
    status_code=status.HTTP_201_CREATED,
    name="CreateProvider",
    responses={400: _BAD_REQUEST},
)
async def create_provider(
    response: Response,
    payload: Any = Body(...),
    current_user: TokenPrincipal = Depends(get_current_user_required),
    repo: ProviderRepository = Depends(get_provider_repo),
):
    """Create a provider. The id is generated when the body omits it."""
    try:
        provider = await provider_service.create_provider(repo, payload)
    except ValidationError as e:
        return validation_problem(e.errors)
    except SaveError as e:
        raise _save_failed(e)

    response.headers["Location"] = f"/provider/{provider.id}"
    logger.info("Provider created via API", extra={"providerId": str(provider.id), "userId": current_user.user_id})
    return ProviderResponse.from_domain(provider)


@router.put(
    "/{provider_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    name="EditProvider",
    responses={400: _BAD_REQUEST, 404: _NOT_FOUND},
)
async def update_provider(
    provider_id: uuid.UUID,
    payload: Any = Body(...),
    current_user: TokenPrincipal = Depends(get_current_user_required),
    repo: ProviderRepository = Depends(get_provider_repo),
):
    """Replace every field of an existing provider."""
    try:
        await provider_service.update_provider(repo, provider_id, payload)
    except NotFoundError:
        raise _not_found()
    except ValidationError as e:
        return validation_problem(e.errors)
    except SaveError as e:
        raise _save_failed(e)

    logger.info("Provider updated via API", extra={"providerId": str(provider_id), "userId": current_user.user_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{provider_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    name="DeleteProvider",
    responses={400: {"model": MessageResponse}, 403: {"model": MessageResponse}, 404: _NOT_FOUND},
)
async def delete_provider(
    provider_id: uuid.UUID,
    current_user: TokenPrincipal = Depends(require_delete_provider),
    repo: ProviderRepository = Depends(get_provider_repo),
):
    """Delete a provider. Requires the DeleteProvider claim."""
    try:
        await provider_service.delete_provider(repo, provider_id)
    except NotFoundError:
        raise _not_found()
    except SaveError as e:
        raise _save_failed(e)

    logger.info("Provider deleted via API", extra={"providerId": str(provider_id), "userId": current_user.user_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
