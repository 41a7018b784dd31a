"""FastAPI application entry point."""

import os
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware
from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before importing modules that read env vars (like the token service)
load_dotenv()

from api.routes import auth, providers
from api.problems import request_validation_handler
from utils.logging import setup_structured_logging
from adapter.sql.connection import create_tables

# Set up structured JSON logging
setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
# main.py is at <root>/src/api/main.py
_project_root = Path(__file__).parent.parent.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Provider Registry API"

APP_ENV = os.getenv("APP_ENV", "development").lower()
IS_PRODUCTION = APP_ENV == "production"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    # Startup: ensure provider and identity tables exist
    if await create_tables():
        logger.info("Database tables verified/created successfully")
    else:
        logger.warning("Failed to create some database tables")

    yield  # App runs here


# Interactive docs are only served outside production
app = FastAPI(
    title=SERVICE_NAME,
    description="CRUD API for providers with token-based authentication",
    version=VERSION,
    lifespan=lifespan,
    docs_url=None if IS_PRODUCTION else "/docs",
    redoc_url=None if IS_PRODUCTION else "/redoc",
    openapi_url=None if IS_PRODUCTION else "/openapi.json",
)

app.add_exception_handler(RequestValidationError, request_validation_handler)

if os.getenv("FORCE_HTTPS", "").lower() in ("1", "true", "yes"):
    app.add_middleware(HTTPSRedirectMiddleware)
    logger.info("HTTPS redirection enabled")

# Register routes
app.include_router(providers.router)
app.include_router(auth.router)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    # Disable uvicorn access logs to reduce noise
    # Application logs (via our structured logging) will still be captured
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
