"""
Pytest configuration and fixtures
"""
import os

# Keep tests off the real database, log file and SMS gateway
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["TWILIO_ACCOUNT_SID"] = ""
os.environ["TWILIO_AUTH_TOKEN"] = ""
os.environ["ADMIN_PASSWORD"] = "test-admin"

from datetime import date, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from cleanlab.database import Base, get_db
from cleanlab.models import Service, User
from cleanlab.services import auth_service


# Use in-memory database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="session")
def test_engine():
    """Create test database engine"""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_engine):
    """Create test database session"""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    # Create tables for this test
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    # Cleanup
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(test_db_session):
    """Test client sharing the test session"""
    from cleanlab.main import app

    def override_get_db():
        yield test_db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_services(test_db_session):
    """Create an active service with express pricing, one without, and an inactive one"""
    shirt = Service(name="Shirt", category="laundry", base_price=1500, express_price=3000)
    coat = Service(name="Coat", category="dry_cleaning", base_price=2500)
    retired = Service(name="Carpet", category="special", base_price=9000, is_active=False)
    test_db_session.add_all([shirt, coat, retired])
    test_db_session.commit()
    for service in (shirt, coat, retired):
        test_db_session.refresh(service)
    return {"shirt": shirt, "coat": coat, "retired": retired}


@pytest.fixture
def slot():
    """A fixed booking slot"""
    return date(2030, 5, 14), time(10, 0)


@pytest.fixture
def verified_user(test_db_session) -> User:
    """Registered and verified user with password 'secret123'"""
    user, code = auth_service.register_user(
        test_db_session,
        phone_number="+250788000001",
        full_name="Aline Uwase",
        password="secret123",
        email="aline@example.com",
    )
    return auth_service.verify_user(test_db_session, user.phone_number, code)


@pytest.fixture
def other_user(test_db_session) -> User:
    user, code = auth_service.register_user(
        test_db_session,
        phone_number="+250788000002",
        full_name="Eric Mugisha",
        password="secret456",
    )
    return auth_service.verify_user(test_db_session, user.phone_number, code)


@pytest.fixture
def auth_headers(test_db_session, verified_user):
    _, token = auth_service.login_user(test_db_session, verified_user.phone_number, "secret123")
    return {"Authorization": f"Bearer {token.token}"}


@pytest.fixture
def other_auth_headers(test_db_session, other_user):
    _, token = auth_service.login_user(test_db_session, other_user.phone_number, "secret456")
    return {"Authorization": f"Bearer {token.token}"}


# Test markers
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
