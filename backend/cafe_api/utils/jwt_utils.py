"""JWT utilities: RS256 keypair management, token signing and verification"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import HTTPException, status
from jose import JWTError, jwt

from cafe_api.config import settings
from cafe_api.utils.logger import logger

# ---------------------------------------------------------------------------
# Keypair management
# ---------------------------------------------------------------------------

_private_key: Any = None   # cryptography RSAPrivateKey object
_public_key: Any = None    # cryptography RSAPublicKey object


def _load_keypair() -> None:
    """Load or auto-generate the RSA keypair.

    Reads JWT_PRIVATE_KEY from settings (PEM string).
    If absent, generates a fresh RSA-2048 keypair for this process; every
    console session is then invalidated on restart.
    """
    global _private_key, _public_key

    from cryptography.hazmat.primitives import serialization
    from cryptography.hazmat.primitives.asymmetric import rsa

    if settings.JWT_PRIVATE_KEY:
        pem = settings.JWT_PRIVATE_KEY.encode()
        _private_key = serialization.load_pem_private_key(pem, password=None)
        logger.info("JWT keypair loaded from JWT_PRIVATE_KEY setting")
    else:
        _private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        logger.warning(
            "JWT_PRIVATE_KEY not set; auto-generated RSA-2048 keypair for this process. "
            "All console sessions will be invalidated on restart."
        )
    _public_key = _private_key.public_key()


def get_private_key() -> Any:
    """Return the loaded private key, initialising on first call."""
    if _private_key is None:
        _load_keypair()
    return _private_key


def get_public_key() -> Any:
    """Return the loaded public key, initialising on first call."""
    if _public_key is None:
        _load_keypair()
    return _public_key


# ---------------------------------------------------------------------------
# Token creation
# ---------------------------------------------------------------------------

def token_lifetime(remember_me: bool) -> int:
    return settings.JWT_REMEMBER_ME_EXPIRE_SECONDS if remember_me else settings.JWT_ADMIN_EXPIRE_SECONDS


def create_access_token(subject: str, role: str, remember_me: bool = False) -> str:
    """Sign and return an admin access token.

    Args:
        subject:     Value for the 'sub' claim (the admin_id).
        role:        Role at issue time. Clients may read it for display; the
                     server always re-reads the role from the database.
        remember_me: Use the long "remember me" lifetime.

    Returns:
        Signed JWT string.
    """
    now = int(datetime.now(timezone.utc).timestamp())

    payload: Dict[str, Any] = {
        "sub": subject,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + token_lifetime(remember_me),
        "type": "admin",
        "role": role,
    }

    if settings.JWT_KEY_ID:
        payload["kid"] = settings.JWT_KEY_ID

    return jwt.encode(payload, get_private_key(), algorithm=settings.JWT_ALGORITHM)


# ---------------------------------------------------------------------------
# Token verification
# ---------------------------------------------------------------------------

def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify a JWT and return its payload.

    Checks signature validity, expiry ('exp', handled by jose) and that the
    token is an admin token.

    Raises:
        HTTPException 401: on any verification failure.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, get_public_key(), algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        logger.debug(f"JWT decode failed: {exc}")
        raise credentials_exception

    if payload.get("type") != "admin" or not payload.get("sub"):
        raise credentials_exception

    return payload
