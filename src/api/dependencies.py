from collections.abc import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from adapter.sql.connection import get_sessionmaker
from adapter.sql.provider_repository import SqlProviderRepository
from adapter.sql.user_repository import SqlUserRepository
from port.provider_repository import ProviderRepository
from port.user_repository import UserRepository


async def get_session() -> AsyncIterator[AsyncSession]:
    """One database session per request, closed when the response is sent."""
    async with get_sessionmaker()() as session:
        yield session


def get_provider_repo(session: AsyncSession = Depends(get_session)) -> ProviderRepository:
    return SqlProviderRepository(session)


def get_user_repo(session: AsyncSession = Depends(get_session)) -> UserRepository:
    return SqlUserRepository(session)
