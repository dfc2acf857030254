"""AdminAccount schemas"""
import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from cafe_api.models.admin_account import AdminAccount

VALID_ROLES = {"owner", "manager", "staff"}

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z .'-]*$")


def _check_role(value: str) -> str:
    if value not in VALID_ROLES:
        raise ValueError("role must be one of: owner, manager, staff")
    return value


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not _EMAIL_RE.match(value):
        raise ValueError("Please provide a valid email address")
    return value


def _check_name(value: str) -> str:
    value = value.strip()
    if not 2 <= len(value) <= 50:
        raise ValueError("Full name must be between 2 and 50 characters")
    if not _NAME_RE.match(value):
        raise ValueError("Full name can only contain letters and spaces")
    return value


def _check_password(value: str) -> str:
    if len(value) < 8:
        raise ValueError("Password must be at least 8 characters long")
    if not (re.search(r"[a-z]", value) and re.search(r"[A-Z]", value) and re.search(r"\d", value)):
        raise ValueError("Password must contain at least one uppercase letter, one lowercase letter, and one number")
    return value


class AdminAccountCreate(BaseModel):
    full_name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email (case-insensitive)")
    password: str = Field(..., description="Initial password")
    role: str = Field(..., description="Role: owner | manager | staff")

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        return _check_name(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password(value)

    @field_validator("role")
    @classmethod
    def validate_role(cls, value: str) -> str:
        return _check_role(value)


class AdminAccountUpdate(BaseModel):
    """Partial update. ``status`` is not accepted; presence is server-managed."""
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_name(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_email(value)

    @field_validator("role")
    @classmethod
    def validate_role(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_role(value)


class PasswordReset(BaseModel):
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        return _check_password(value)


class AdminAccountResponse(BaseModel):
    id: str
    full_name: str
    email: str
    role: str
    status: str
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_account(cls, account: AdminAccount, presence_timeout: int) -> "AdminAccountResponse":
        return cls(
            id=account.admin_id,
            full_name=account.full_name,
            email=account.email,
            role=account.role,
            status=account.effective_status(presence_timeout),
            last_login_at=account.last_login_at,
            created_at=account.created_at,
        )
