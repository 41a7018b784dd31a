"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from domain.model.user import User, UserClaim


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    async def create(self, email: str, password_hash: str, email_confirmed: bool = True) -> User | None:
        if any(u.email == email for u in self.store.values()):
            return None

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            email=email,
            created_at=now,
            updated_at=now,
            password_hash=password_hash,
            email_confirmed=email_confirmed,
        )
        self.store[user_id] = user
        return self._copy(user)

    async def update_access_state(
        self, user_id: str, access_failed_count: int, lockout_end: datetime | None
    ) -> bool:
        user = self.store.get(user_id)
        if not user:
            return False

        user.access_failed_count = access_failed_count
        user.lockout_end = lockout_end
        user.updated_at = datetime.now(timezone.utc)
        return True

    async def add_claim(self, user_id: str, claim: UserClaim) -> bool:
        user = self.store.get(user_id)
        if not user or claim in user.claims:
            return False
        user.claims.append(claim)
        return True

    async def remove_claim(self, user_id: str, claim: UserClaim) -> bool:
        user = self.store.get(user_id)
        if not user or claim not in user.claims:
            return False
        user.claims.remove(claim)
        return True

    async def add_to_role(self, user_id: str, role: str) -> bool:
        user = self.store.get(user_id)
        if not user:
            return False
        if role not in user.roles:
            user.roles.append(role)
        return True

    # ── read operations ──────────────────────────────────────

    async def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return self._copy(user)
        return None

    async def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return self._copy(user) if user else None

    @staticmethod
    def _copy(user: User) -> User:
        return replace(user, claims=list(user.claims), roles=list(user.roles))
