"""Rendering of validation failures as problem documents."""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.models import ValidationProblem
from services.validation import errors_from_pydantic


def validation_problem(errors: dict[str, list[str]]) -> JSONResponse:
    problem = ValidationProblem(errors=errors)
    return JSONResponse(
        content=problem.model_dump(),
        status_code=status.HTTP_400_BAD_REQUEST,
        media_type="application/problem+json",
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies and path ids as 400 problems instead of FastAPI's 422."""
    errors = [
        # Drop the "body"/"path" prefix so keys name the field itself
        {**e, "loc": tuple(e["loc"][1:]) if len(e["loc"]) > 1 else tuple(e["loc"])}
        for e in exc.errors()
    ]
    return validation_problem(errors_from_pydantic(errors))
