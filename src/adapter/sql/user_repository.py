"""SQLAlchemy implementation of UserRepository."""

import uuid
from datetime import datetime
from logging import getLogger

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from adapter.sql.tables import RoleRow, UserClaimRow, UserRow, user_roles
from domain.model.user import User, UserClaim

logger = getLogger(__name__)


class SqlUserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, row: UserRow) -> User:
        """Convert a users row (claims and roles loaded) to the User domain model."""
        return User(
            id=row.id,
            email=row.email,
            created_at=row.created_at,
            updated_at=row.updated_at,
            password_hash=row.password_hash,
            email_confirmed=row.email_confirmed,
            access_failed_count=row.access_failed_count,
            lockout_end=row.lockout_end,
            claims=[UserClaim(type=c.claim_type, value=c.claim_value) for c in row.claims],
            roles=sorted(r.name for r in row.roles),
        )

    async def _find_one(self, *criteria) -> User | None:
        # Reload claims and roles even when the row is already in the identity map
        statement = select(UserRow).where(*criteria).execution_options(populate_existing=True)
        result = await self.session.execute(statement)
        row = result.scalar_one_or_none()
        return self._to_domain(row) if row else None

    async def create(self, email: str, password_hash: str, email_confirmed: bool = True) -> User | None:
        """Create a new user and return the User object."""
        user_id = uuid.uuid4().hex
        row = UserRow(
            id=user_id,
            email=email,
            password_hash=password_hash,
            email_confirmed=email_confirmed,
            access_failed_count=0,
            claims=[],
            roles=[],
        )
        try:
            self.session.add(row)
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.warning("User creation failed: email already exists", extra={"email": email})
            return None
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to create user", extra={"email": email, "error": str(e)[:200]})
            return None

        logger.info("User created", extra={"userId": user_id, "email": email})
        return self._to_domain(row)

    async def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            return await self._find_one(UserRow.email == email)
        except SQLAlchemyError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)[:200]})
            return None

    async def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            return await self._find_one(UserRow.id == user_id)
        except SQLAlchemyError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)[:200]})
            return None

    async def update_access_state(
        self, user_id: str, access_failed_count: int, lockout_end: datetime | None
    ) -> bool:
        """Persist the failed-attempt counter and lockout deadline."""
        try:
            result = await self.session.execute(
                update(UserRow)
                .where(UserRow.id == user_id)
                .values(access_failed_count=access_failed_count, lockout_end=lockout_end)
            )
            await self.session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to update access state", extra={"userId": user_id, "error": str(e)[:200]})
            return False

    async def add_claim(self, user_id: str, claim: UserClaim) -> bool:
        try:
            if await self.session.scalar(select(UserRow.id).where(UserRow.id == user_id)) is None:
                return False
            await self.session.execute(
                insert(UserClaimRow).values(user_id=user_id, claim_type=claim.type, claim_value=claim.value)
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.debug("Claim already present", extra={"userId": user_id, "claimType": claim.type})
            return False
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to add claim", extra={"userId": user_id, "error": str(e)[:200]})
            return False

        logger.info("Claim added", extra={"userId": user_id, "claimType": claim.type})
        return True

    async def remove_claim(self, user_id: str, claim: UserClaim) -> bool:
        try:
            result = await self.session.execute(
                delete(UserClaimRow).where(and_(
                    UserClaimRow.user_id == user_id,
                    UserClaimRow.claim_type == claim.type,
                    UserClaimRow.claim_value == claim.value,
                ))
            )
            await self.session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to remove claim", extra={"userId": user_id, "error": str(e)[:200]})
            return False

    async def add_to_role(self, user_id: str, role: str) -> bool:
        try:
            if await self.session.scalar(select(UserRow.id).where(UserRow.id == user_id)) is None:
                return False

            role_id = await self.session.scalar(select(RoleRow.id).where(RoleRow.name == role))
            if role_id is None:
                role_row = RoleRow(name=role)
                self.session.add(role_row)
                await self.session.flush()
                role_id = role_row.id

            member = await self.session.scalar(
                select(user_roles.c.user_id).where(and_(
                    user_roles.c.user_id == user_id, user_roles.c.role_id == role_id
                ))
            )
            if member is None:
                await self.session.execute(insert(user_roles).values(user_id=user_id, role_id=role_id))
            await self.session.commit()
            return True
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to add user to role", extra={"userId": user_id, "role": role, "error": str(e)[:200]})
            return False
