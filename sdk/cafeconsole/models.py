"""Client-side data model: roles, accounts, sessions and token claims"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """Admin privilege tiers, lowest first."""

    STAFF = "staff"
    MANAGER = "manager"
    OWNER = "owner"

    @classmethod
    def parse(cls, value: Any) -> Optional["Role"]:
        """Return the matching role, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class PresenceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class SessionScope(str, Enum):
    """Where a session is stored.

    ``persistent`` survives a restart ("remember me"); ``ephemeral`` lives only
    as long as the current console process/tab.
    """

    PERSISTENT = "persistent"
    EPHEMERAL = "ephemeral"


class AdminAccount(BaseModel):
    """Last-known snapshot of one operator, as returned by the API.

    ``role`` and ``status`` are kept as plain strings so that an unknown value
    coming off the wire (or out of a stale store) survives parsing and is
    rejected by the role policy instead of crashing the caller.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = ""
    full_name: str = ""
    email: str = ""
    role: str = ""
    status: str = PresenceStatus.INACTIVE.value
    last_login_at: Optional[datetime] = None

    @property
    def is_new(self) -> bool:
        """True for accounts that have never logged in."""
        return self.last_login_at is None

    @property
    def is_active(self) -> bool:
        return self.status == PresenceStatus.ACTIVE.value

    def with_status(self, status: PresenceStatus) -> "AdminAccount":
        return self.model_copy(update={"status": status.value})


class TokenClaims(BaseModel):
    """Unverified claims read out of a bearer token.

    This is a display hint only. It is a separate type from
    :class:`AdminAccount`; use :meth:`reconcile` to compare the two.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    sub: str
    role: str = ""
    exp: Optional[int] = None

    @classmethod
    def decode(cls, token: str) -> Optional["TokenClaims"]:
        """Read claims without verifying the signature. Returns None if unreadable."""
        try:
            payload: Dict[str, Any] = jwt.get_unverified_claims(token)
        except JWTError:
            return None
        if not isinstance(payload, dict) or not payload.get("sub"):
            return None
        try:
            return cls.model_validate(payload)
        except ValueError:
            return None

    @property
    def expires_at(self) -> Optional[datetime]:
        if self.exp is None:
            return None
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)

    def reconcile(self, account: AdminAccount) -> bool:
        """True when the hint agrees with the authoritative account record."""
        return self.sub == account.id and self.role == account.role


class Session(NamedTuple):
    """The resolved session for this console."""
    token: str
    user: AdminAccount
    scope: SessionScope

    @property
    def role(self) -> Optional[Role]:
        return Role.parse(self.user.role)
