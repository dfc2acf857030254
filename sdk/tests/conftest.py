"""Pytest configuration and fixtures for the console client"""
import time
from typing import Callable
from unittest.mock import MagicMock

import pytest
from jose import jwt

from cafeconsole.client import CafeConsoleClient
from cafeconsole.credentials import CredentialStore
from cafeconsole.device import ClientProfile, DeviceGate
from cafeconsole.models import AdminAccount, SessionScope
from cafeconsole.storage import MemoryStore

DESKTOP_UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"
IPHONE_UA = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"


def _make_token(sub: str, role: str, ttl: int = 3600) -> str:
    return jwt.encode({"sub": sub, "role": role, "exp": int(time.time()) + ttl}, "test-secret", algorithm="HS256")


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Factory for decodable tokens; the client never checks signatures"""
    return _make_token


@pytest.fixture
def account() -> Callable[..., AdminAccount]:
    """Factory for admin account snapshots"""

    def _make(role: str = "staff", id: str = None, status: str = "inactive", **kwargs) -> AdminAccount:
        return AdminAccount(
            id=id or f"adm_{role}",
            full_name=kwargs.pop("full_name", f"{role.title()} User"),
            email=kwargs.pop("email", f"{role}@cafe.test"),
            role=role,
            status=status,
            **kwargs,
        )

    return _make


@pytest.fixture
def persistent() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def ephemeral() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def credentials(persistent, ephemeral) -> CredentialStore:
    return CredentialStore(persistent=persistent, ephemeral=ephemeral)


@pytest.fixture
def signed_in(credentials, account) -> Callable[..., AdminAccount]:
    """Put a session for ``role`` into the ephemeral store"""
    def _sign_in(role: str = "owner", scope: SessionScope = SessionScope.EPHEMERAL, **kwargs) -> AdminAccount:
        user = account(role, **kwargs)
        credentials.save(_make_token(user.id, role), user, scope)
        return user

    return _sign_in


@pytest.fixture
def mock_client() -> MagicMock:
    """A console API client whose calls all succeed by default"""
    return MagicMock(spec=CafeConsoleClient)


@pytest.fixture
def desktop_gate() -> DeviceGate:
    return DeviceGate(ClientProfile(DESKTOP_UA, 1280, 800))


@pytest.fixture
def phone_gate() -> DeviceGate:
    return DeviceGate(ClientProfile(IPHONE_UA, 390, 844, has_touch=True))
