"""Pytest configuration and fixtures"""
import os
from typing import Callable, Generator

# Point the app at the test database before it is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from cafe_api.database import Base, engine, get_db
from cafe_api.main import app
from cafe_api.middleware.rate_limit import limiter
from cafe_api.models.admin_account import AdminAccount
from cafe_api.utils.auth import generate_admin_id, hash_password

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "Secret123"


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override"""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    limiter.reset()
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_admin(db: Session) -> Callable[..., AdminAccount]:
    """Factory inserting an admin account directly into the database"""

    def _make(role: str = "staff", email: str = None, full_name: str = None,
              password: str = DEFAULT_PASSWORD) -> AdminAccount:
        admin_id = generate_admin_id()
        account = AdminAccount(
            admin_id=admin_id,
            full_name=full_name or f"{role.title()} User",
            email=email or f"{role}-{admin_id[-6:].lower()}@cafe.test",
            password_hash=hash_password(password),
            role=role,
            status="inactive",
        )
        db.add(account)
        db.commit()
        db.refresh(account)
        return account

    return _make


@pytest.fixture
def login(client: TestClient) -> Callable[..., dict]:
    """Log in through the API and return bearer headers"""

    def _login(account: AdminAccount, password: str = DEFAULT_PASSWORD, remember_me: bool = False) -> dict:
        response = client.post(
            "/auth/login",
            json={"email": account.email, "password": password, "remember_me": remember_me},
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login


@pytest.fixture
def owner(make_admin) -> AdminAccount:
    return make_admin("owner", email="owner@cafe.test", full_name="Olive Owner")


@pytest.fixture
def manager(make_admin) -> AdminAccount:
    return make_admin("manager", email="manager@cafe.test", full_name="Milo Manager")


@pytest.fixture
def staff(make_admin) -> AdminAccount:
    return make_admin("staff", email="staff@cafe.test", full_name="Sam Staff")


@pytest.fixture
def owner_headers(owner, login) -> dict:
    return login(owner)


@pytest.fixture
def manager_headers(manager, login) -> dict:
    return login(manager)


@pytest.fixture
def staff_headers(staff, login) -> dict:
    return login(staff)


@pytest.fixture
def sample_admin_data() -> dict:
    """Sample admin creation payload"""
    return {
        "full_name": "Nina Newhire",
        "email": "Nina@Cafe.test",
        "password": "Welcome123",
        "role": "staff",
    }
