"""Authentication routes (register, login)."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from api.dependencies import get_user_repo
from api.models import AuthResponse, IdentityErrorResponse, MessageResponse, ValidationProblem
from api.problems import validation_problem
from domain.model.errors import IdentityError, InvalidCredentialsError, LockedOutError, ValidationError
from port.user_repository import UserRepository
from services import auth_service
from services.token_service import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    name="RegisterUser",
    responses={400: {"model": ValidationProblem | list[IdentityErrorResponse]}},
)
async def register(payload: Any = Body(...), repo: UserRepository = Depends(get_user_repo)):
    """Register a new user and sign them in.

    Returns:
        Token payload, exactly as login would return it

    Raises:
        400 with a validation problem, or with the identity store's error list
    """
    try:
        user = await auth_service.register(repo, payload)
    except ValidationError as e:
        return validation_problem(e.errors)
    except IdentityError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=[IdentityErrorResponse.from_domain(err).model_dump() for err in e.errors],
        )

    return AuthResponse.from_token(create_access_token(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    name="LoginUser",
    responses={400: {"model": ValidationProblem | MessageResponse}},
)
async def login(payload: Any = Body(...), repo: UserRepository = Depends(get_user_repo)):
    """Login user and return a token carrying their claims and roles.

    Raises:
        400 if locked out, if credentials are invalid, or if the body is malformed
    """
    try:
        user = await auth_service.authenticate(repo, payload)
    except ValidationError as e:
        return validation_problem(e.errors)
    except (LockedOutError, InvalidCredentialsError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AuthResponse.from_token(create_access_token(user))
