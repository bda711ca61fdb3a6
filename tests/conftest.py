"""
Test configuration for pytest
"""

import pytest
import hashlib
import os
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session
from typing import Generator

# Test environment variables
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"

from fastapi.testclient import TestClient  # noqa: E402

import resto_console.models  # noqa: E402,F401
from resto_console.core.database import get_session  # noqa: E402
from resto_console.main import app  # noqa: E402
from resto_console.schemas.instance import InstanceCreate  # noqa: E402
from resto_console.services import provisioner  # noqa: E402

PASSWORD = "secret"
PASSWORD_DIGEST = hashlib.sha1(PASSWORD.encode()).hexdigest()

# One in-memory SQLite database shared by every connection of the test
test_engine = create_engine(
    "sqlite://",
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a clean database session for each test"""
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """API client whose requests share the test database"""

    def override_get_session():
        with Session(test_engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_instance(**overrides) -> InstanceCreate:
    data = {
        "companyName": "Acme",
        "companyId": "ACME",
        "companyEmail": "owner@acmecafe.com",
        "userName": "Olivia Owner",
        "userEmail": "olivia@acmecafe.com",
        "userPhone": "555",
        "password": PASSWORD_DIGEST,
    }
    data.update(overrides)
    return InstanceCreate(**data)


@pytest.fixture
def tenant(db: Session):
    """A fully provisioned tenant with API key acme_1234"""
    return provisioner.provision_tenant(db, make_instance(), timestamp_ms=1700000001234)


@pytest.fixture
def api_headers(tenant):
    return {"X-API-Key": tenant.api_key}
