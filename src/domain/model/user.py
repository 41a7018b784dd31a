from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

# Lockout policy applied by the identity store.
MAX_FAILED_ACCESS_ATTEMPTS = 5
DEFAULT_LOCKOUT_TIMESPAN = timedelta(minutes=5)

DELETE_PROVIDER_CLAIM = 'DeleteProvider'


@dataclass(frozen=True)
class UserClaim:
    """A named grant attached to a user account."""
    type: str
    value: str


@dataclass
class User:
    """Domain model representing a user account."""
    id: str
    email: str
    created_at: datetime
    updated_at: datetime
    password_hash: str | None = None
    email_confirmed: bool = False
    access_failed_count: int = 0
    lockout_end: datetime | None = None
    claims: list[UserClaim] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)

    def is_locked_out(self, now: datetime | None = None) -> bool:
        if self.lockout_end is None:
            return False
        now = now or datetime.now(timezone.utc)
        lockout_end = self.lockout_end
        # SQLite hands back naive datetimes; they are stored as UTC.
        if lockout_end.tzinfo is None:
            lockout_end = lockout_end.replace(tzinfo=timezone.utc)
        return lockout_end > now
