"""SQLAlchemy implementation of ProviderRepository.

Every method works on Core statements against the providers table rather
than on tracked ORM instances, so a read never leaves an object in the
session's identity map and each write reports the driver's rowcount.
"""

import uuid
from logging import getLogger

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from adapter.sql.tables import ProviderRow
from domain.model.provider import Provider

logger = getLogger(__name__)

_providers = ProviderRow.__table__


class SqlProviderRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, row) -> Provider:
        """Convert a providers table row to the Provider domain model."""
        return Provider(
            id=row.id,
            name=row.name,
            document=row.document,
            active=row.active,
        )

    async def _commit_write(self, statement, action: str, provider_id: uuid.UUID) -> int:
        """Execute a single write statement in its own transaction.

        Returns the affected row count, or 0 after rolling back on failure.
        """
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
            return result.rowcount
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Provider {action} rejected by constraint", extra={
                "providerId": str(provider_id), "error": str(e.orig)[:200]
            })
            return 0
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to {action} provider", extra={
                "providerId": str(provider_id), "error": str(e)[:200]
            })
            return 0

    async def add(self, provider: Provider) -> int:
        statement = insert(_providers).values(
            id=provider.id,
            name=provider.name,
            document=provider.document,
            active=provider.active,
        )
        return await self._commit_write(statement, "insert", provider.id)

    async def update(self, provider: Provider) -> int:
        statement = (
            update(_providers)
            .where(_providers.c.id == provider.id)
            .values(name=provider.name, document=provider.document, active=provider.active)
        )
        return await self._commit_write(statement, "update", provider.id)

    async def remove(self, provider_id: uuid.UUID) -> int:
        statement = delete(_providers).where(_providers.c.id == provider_id)
        return await self._commit_write(statement, "delete", provider_id)

    async def get_by_id(self, provider_id: uuid.UUID) -> Provider | None:
        result = await self.session.execute(select(_providers).where(_providers.c.id == provider_id))
        row = result.first()
        return self._to_domain(row) if row else None

    async def list_all(self) -> list[Provider]:
        result = await self.session.execute(select(_providers))
        return [self._to_domain(row) for row in result]
