"""Admin account management endpoints"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from cafe_api.api.deps import require_role
from cafe_api.config import settings
from cafe_api.database import get_db
from cafe_api.models.admin_account import (
    ROLE_MANAGER,
    ROLE_OWNER,
    ROLE_STAFF,
    STATUS_INACTIVE,
    AdminAccount,
)
from cafe_api.models.admin_activity import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_RESET_PASSWORD,
    ACTION_UPDATE,
    AdminActivity,
)
from cafe_api.schemas.admin_account import (
    AdminAccountCreate,
    AdminAccountResponse,
    AdminAccountUpdate,
    PasswordReset,
)
from cafe_api.schemas.admin_activity import AdminActivityResponse
from cafe_api.schemas.auth import MessageResponse
from cafe_api.utils.activity import record_activity
from cafe_api.utils.auth import generate_admin_id, hash_password
from cafe_api.utils.logger import logger

router = APIRouter(prefix="/admins", tags=["admins"])


def _to_response(account: AdminAccount) -> AdminAccountResponse:
    return AdminAccountResponse.from_account(account, settings.PRESENCE_TIMEOUT_SECONDS)


def _get_or_404(db: Session, admin_id: str) -> AdminAccount:
    account = db.query(AdminAccount).filter(AdminAccount.admin_id == admin_id).first()
    if not account:
        raise HTTPException(status_code=404, detail=f"Admin {admin_id} not found")
    return account


def _email_taken(db: Session, email: str, exclude_id: int = None) -> bool:
    query = db.query(AdminAccount).filter(AdminAccount.email == email)
    if exclude_id is not None:
        query = query.filter(AdminAccount.id != exclude_id)
    return query.first() is not None


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

@router.get("", response_model=List[AdminAccountResponse])
def list_admins(
    db: Session = Depends(get_db),
    _: AdminAccount = Depends(require_role(ROLE_MANAGER)),
):
    """Roster snapshot, newest first (manager+). Presence is aged out server-side."""
    accounts = db.query(AdminAccount).order_by(AdminAccount.created_at.desc(), AdminAccount.id.desc()).all()
    return [_to_response(account) for account in accounts]


@router.get("/activity", response_model=List[AdminActivityResponse])
def list_activity(
    action: Optional[str] = Query(None, description="Filter by action"),
    target_id: Optional[str] = Query(None, description="Filter by target admin ID"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of entries to return"),
    offset: int = Query(0, ge=0, description="Number of entries to skip"),
    db: Session = Depends(get_db),
    _: AdminAccount = Depends(require_role(ROLE_OWNER)),
):
    """Admin activity log, newest first (owner only)."""
    query = db.query(AdminActivity)
    if action:
        query = query.filter(AdminActivity.action == action)
    if target_id:
        query = query.filter(AdminActivity.target_id == target_id)

    query = query.order_by(AdminActivity.timestamp.desc(), AdminActivity.id.desc())
    return query.offset(offset).limit(limit).all()


@router.get("/{admin_id}", response_model=AdminAccountResponse)
def get_admin(
    admin_id: str,
    db: Session = Depends(get_db),
    _: AdminAccount = Depends(require_role(ROLE_MANAGER)),
):
    """Get one admin account (manager+)."""
    return _to_response(_get_or_404(db, admin_id))


# ---------------------------------------------------------------------------
# Write
# ---------------------------------------------------------------------------

@router.post("", response_model=AdminAccountResponse, status_code=status.HTTP_201_CREATED)
def create_admin(
    data: AdminAccountCreate,
    db: Session = Depends(get_db),
    actor: AdminAccount = Depends(require_role(ROLE_OWNER)),
):
    """Create an admin account (owner only). New accounts start inactive."""
    if _email_taken(db, data.email):
        raise HTTPException(status_code=400, detail="Email is already in use")

    account = AdminAccount(
        admin_id=generate_admin_id(),
        full_name=data.full_name,
        email=data.email,
        password_hash=hash_password(data.password),
        role=data.role,
        status=STATUS_INACTIVE,
    )
    db.add(account)
    record_activity(db, actor, ACTION_CREATE, target=account, details={"role": data.role})
    db.commit()
    db.refresh(account)

    logger.info(
        f"Created admin: {account.admin_id}",
        extra={"admin_id": actor.admin_id, "role": data.role, "action": ACTION_CREATE},
    )
    return _to_response(account)


@router.put("/{admin_id}", response_model=AdminAccountResponse)
def update_admin(
    admin_id: str,
    data: AdminAccountUpdate,
    db: Session = Depends(get_db),
    actor: AdminAccount = Depends(require_role(ROLE_MANAGER)),
):
    """
    Update name, email or role.

    Owners may edit anyone but may not demote themselves. Managers may edit
    staff accounts only and may only assign the staff role.
    """
    account = _get_or_404(db, admin_id)
    is_self = account.id == actor.id

    if actor.role == ROLE_MANAGER and account.role != ROLE_STAFF:
        raise HTTPException(status_code=403, detail="Managers can only edit staff accounts")

    if data.role is not None and data.role != account.role:
        if actor.role == ROLE_MANAGER and data.role != ROLE_STAFF:
            raise HTTPException(status_code=403, detail="Managers can only assign the staff role")
        if is_self:
            raise HTTPException(status_code=403, detail="You cannot change your own role")

    if data.email is not None and _email_taken(db, data.email, exclude_id=account.id):
        raise HTTPException(status_code=400, detail="Email is already in use")

    changes = {
        field: value
        for field, value in data.model_dump(exclude_none=True).items()
        if getattr(account, field) != value
    }
    details = {"fields": sorted(changes)}
    if "role" in changes:
        details["previous_role"] = account.role

    for field, value in changes.items():
        setattr(account, field, value)

    record_activity(db, actor, ACTION_UPDATE, target=account, details=details)
    db.commit()
    db.refresh(account)

    logger.info(
        f"Updated admin: {admin_id}",
        extra={"admin_id": actor.admin_id, "role": account.role, "action": ACTION_UPDATE},
    )
    return _to_response(account)


@router.post("/{admin_id}/reset-password", response_model=MessageResponse)
def reset_password(
    admin_id: str,
    data: PasswordReset,
    db: Session = Depends(get_db),
    actor: AdminAccount = Depends(require_role(ROLE_OWNER)),
):
    """Set a new password for an admin (owner only). Existing tokens stay valid."""
    account = _get_or_404(db, admin_id)
    account.password_hash = hash_password(data.new_password)
    record_activity(db, actor, ACTION_RESET_PASSWORD, target=account)
    db.commit()

    logger.info(
        f"Password reset for admin: {admin_id}",
        extra={"admin_id": actor.admin_id, "action": ACTION_RESET_PASSWORD},
    )
    return MessageResponse(message="Password updated")


@router.delete("/{admin_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_admin(
    admin_id: str,
    db: Session = Depends(get_db),
    actor: AdminAccount = Depends(require_role(ROLE_OWNER)),
):
    """Delete an admin account (owner only). Never self, never another owner."""
    account = _get_or_404(db, admin_id)

    if account.id == actor.id:
        raise HTTPException(status_code=403, detail="You cannot delete your own account")
    if account.role == ROLE_OWNER:
        raise HTTPException(status_code=403, detail="Owner accounts cannot be deleted")

    record_activity(db, actor, ACTION_DELETE, target=account, details={"role": account.role})
    db.delete(account)
    db.commit()

    logger.info(
        f"Deleted admin: {admin_id}",
        extra={"admin_id": actor.admin_id, "action": ACTION_DELETE},
    )
    return None
