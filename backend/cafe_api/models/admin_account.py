"""AdminAccount model: console operators with RBAC roles and presence"""
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, String

from cafe_api.database import Base

ROLE_STAFF = "staff"
ROLE_MANAGER = "manager"
ROLE_OWNER = "owner"

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"


class AdminAccount(Base):
    """One console operator.

    ``status`` is presence only ("is this admin in the console right now"),
    driven by login, heartbeat and logout. It is not an account-enabled flag
    and cannot be written through the admin CRUD endpoints.
    """

    __tablename__ = "admin_accounts"

    id = Column(Integer, primary_key=True)
    admin_id = Column(String(50), unique=True, nullable=False, index=True)   # "adm_xxx"
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)     # stored lowercased
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_STAFF)           # owner|manager|staff
    status = Column(String(20), nullable=False, default=STATUS_INACTIVE)    # active|inactive
    last_login_at = Column(DateTime, nullable=True)                          # null = never logged in
    last_seen_at = Column(DateTime, nullable=True)                           # last login or heartbeat
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def effective_status(self, timeout_seconds: int, now: Optional[datetime] = None) -> str:
        """Presence as the roster should report it.

        An ``active`` row whose last heartbeat is older than ``timeout_seconds``
        is reported inactive; this is what expires admins whose unload
        notification never arrived.
        """
        if self.status != STATUS_ACTIVE or self.last_seen_at is None:
            return STATUS_INACTIVE
        now = now or datetime.utcnow()
        if now - self.last_seen_at > timedelta(seconds=timeout_seconds):
            return STATUS_INACTIVE
        return STATUS_ACTIVE
