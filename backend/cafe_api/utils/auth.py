"""Authentication utilities"""
import secrets
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from sqlalchemy.orm import Session

from cafe_api.config import settings
from cafe_api.models.admin_account import ROLE_OWNER, STATUS_INACTIVE, AdminAccount
from cafe_api.utils.logger import logger

_password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password with Argon2id"""
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored Argon2 hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def generate_admin_id() -> str:
    """Generate a unique admin account ID"""
    random_part = secrets.token_urlsafe(10)
    return f"{settings.ADMIN_ID_PREFIX}{random_part}"


def ensure_bootstrap_owner(db: Session) -> Optional[AdminAccount]:
    """Create the first owner from BOOTSTRAP_OWNER_* settings.

    Does nothing unless both email and password are configured and the
    admin table is empty. Returns the created account, if any.
    """
    if not settings.BOOTSTRAP_OWNER_EMAIL or not settings.BOOTSTRAP_OWNER_PASSWORD:
        return None
    if db.query(AdminAccount).count() > 0:
        return None

    owner = AdminAccount(
        admin_id=generate_admin_id(),
        full_name=settings.BOOTSTRAP_OWNER_NAME,
        email=settings.BOOTSTRAP_OWNER_EMAIL.strip().lower(),
        password_hash=hash_password(settings.BOOTSTRAP_OWNER_PASSWORD),
        role=ROLE_OWNER,
        status=STATUS_INACTIVE,
    )
    db.add(owner)
    db.commit()
    db.refresh(owner)

    logger.info(f"Bootstrap owner created: {owner.admin_id}", extra={"admin_id": owner.admin_id, "role": ROLE_OWNER})
    return owner
