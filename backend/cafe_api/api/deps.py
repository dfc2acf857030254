"""API dependencies for authentication and authorization.

Every protected route takes ``Authorization: Bearer <JWT>``. The token proves
identity only: the account is re-loaded from the database on every request
and its stored role is the one that is enforced.

Role hierarchy (higher level → more permissions):
    owner (3) > manager (2) > staff (1)
"""
from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cafe_api.database import get_db
from cafe_api.middleware.monitoring import record_auth_failure
from cafe_api.models.admin_account import AdminAccount
from cafe_api.utils.jwt_utils import decode_access_token
from cafe_api.utils.logger import logger

_bearer_scheme = HTTPBearer(auto_error=False)

# ---------------------------------------------------------------------------
# Role hierarchy
# ---------------------------------------------------------------------------

ROLE_HIERARCHY: dict[str, int] = {
    "owner": 3,
    "manager": 2,
    "staff": 1,
}


def role_level(role: Optional[str]) -> int:
    return ROLE_HIERARCHY.get(role or "", 0)


# ---------------------------------------------------------------------------
# get_current_admin
# ---------------------------------------------------------------------------

def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> AdminAccount:
    """Resolve the calling admin from the bearer token.

    Raises 401 when the token is missing, invalid or expired, or when the
    account it names no longer exists.
    """
    if not credentials:
        record_auth_failure("missing_token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required. Provide Authorization: Bearer <token>.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_access_token(credentials.credentials)
    except HTTPException:
        record_auth_failure("invalid_token")
        logger.info("Rejected bearer token", extra={"action": "authenticate"})
        raise

    account = db.query(AdminAccount).filter(AdminAccount.admin_id == payload["sub"]).first()
    if account is None or role_level(account.role) == 0:
        record_auth_failure("unknown_account")
        logger.info("Token for unknown account", extra={"admin_id": payload["sub"], "action": "authenticate"})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account no longer exists",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return account


# ---------------------------------------------------------------------------
# require_role factory
# ---------------------------------------------------------------------------

def require_role(min_role: str) -> Callable:
    """Return a FastAPI dependency that enforces a minimum admin role.

    Usage::

        @router.get("/admins")
        def endpoint(actor: AdminAccount = Depends(require_role("manager"))):
            ...

    Args:
        min_role: Minimum required role (``owner`` | ``manager`` | ``staff``).

    Returns:
        A FastAPI-injectable callable that resolves to :class:`AdminAccount` or raises 403.
    """
    min_level = role_level(min_role)

    def _role_dep(actor: AdminAccount = Depends(get_current_admin)) -> AdminAccount:
        if min_level == 0 or role_level(actor.role) < min_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{min_role}' or higher required (your role: '{actor.role}')",
            )
        return actor

    # Give FastAPI a unique name so it doesn't collapse distinct dependencies
    _role_dep.__name__ = f"require_role_{min_role}"
    return _role_dep
