"""Session endpoints: login, identity, heartbeat and logout"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, status
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from cafe_api.api.deps import get_current_admin
from cafe_api.config import settings
from cafe_api.database import get_db
from cafe_api.middleware.monitoring import (
    record_auth_failure,
    record_heartbeat,
    record_login,
    record_logout,
)
from cafe_api.middleware.rate_limit import get_rate_limit, limiter
from cafe_api.models.admin_account import STATUS_ACTIVE, STATUS_INACTIVE, AdminAccount
from cafe_api.schemas.admin_account import AdminAccountResponse
from cafe_api.schemas.auth import LoginRequest, LoginResponse, MessageResponse
from cafe_api.utils.auth import verify_password
from cafe_api.utils.jwt_utils import create_access_token, token_lifetime
from cafe_api.utils.logger import logger

router = APIRouter(prefix="/auth", tags=["auth"])


def _to_response(account: AdminAccount) -> AdminAccountResponse:
    return AdminAccountResponse.from_account(account, settings.PRESENCE_TIMEOUT_SECONDS)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(get_rate_limit("login"), key_func=get_remote_address)
def login(
    request: Request,
    data: LoginRequest,
    db: Session = Depends(get_db),
):
    """
    Exchange email and password for a bearer token.

    On success the account is marked active. ``remember_me`` issues the
    long-lived token the console keeps in its persistent store.
    """
    email = data.email.strip().lower()
    account = db.query(AdminAccount).filter(AdminAccount.email == email).first()

    if account is None or not verify_password(data.password, account.password_hash):
        record_login(False)
        record_auth_failure("bad_credentials")
        logger.warning("Login failed", extra={"action": "login"})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    now = datetime.utcnow()
    account.status = STATUS_ACTIVE
    account.last_login_at = now
    account.last_seen_at = now
    db.commit()
    db.refresh(account)

    token = create_access_token(account.admin_id, account.role, remember_me=data.remember_me)
    record_login(True)
    logger.info(
        f"Admin logged in: {account.admin_id}",
        extra={"admin_id": account.admin_id, "role": account.role, "action": "login"},
    )

    return LoginResponse(
        access_token=token,
        expires_in=token_lifetime(data.remember_me),
        user=_to_response(account),
    )


@router.get("/me", response_model=AdminAccountResponse)
def me(actor: AdminAccount = Depends(get_current_admin)):
    """The calling admin's account, as currently stored."""
    return _to_response(actor)


@router.post("/heartbeat", response_model=MessageResponse)
def heartbeat(
    actor: AdminAccount = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Mark the caller present. Sent every 30 seconds by a live console."""
    actor.status = STATUS_ACTIVE
    actor.last_seen_at = datetime.utcnow()
    db.commit()

    record_heartbeat(actor.role)
    return MessageResponse(message="ok")


@router.post("/logout", response_model=MessageResponse)
def logout(
    actor: AdminAccount = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """
    Mark the caller inactive.

    The token itself stays valid until it expires; clients drop it locally.
    """
    actor.status = STATUS_INACTIVE
    db.commit()

    record_logout()
    logger.info(
        f"Admin logged out: {actor.admin_id}",
        extra={"admin_id": actor.admin_id, "role": actor.role, "action": "logout"},
    )
    return MessageResponse(message="Logged out")
