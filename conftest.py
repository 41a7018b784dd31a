"""Test process environment.

The token service refuses to import without a signing key, so one is set
before any test module imports the application.
"""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("APP_ENV", "development")
