"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before each test and
dropped after it, so no test data persists.
"""

import os

# Must be set before secure_banking.config is first imported
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from secure_banking.main import app
from secure_banking.models import Base, Role
from secure_banking.models.base import get_db
from secure_banking.security.identity import Principal
from secure_banking.security.registry import RoleRegistry


# SQLite file database: no external database needed, and
# separate sessions (threads) see each other's commits.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 10},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    """For tests that need more than one session (concurrency)."""
    return TestSessionLocal


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def staff(db_session):
    """
    Grant the three standard roles and return their principals.

    teller1 is a TELLER, manager1 a MANAGER, auditor1 an AUDITOR;
    nobody1 holds no role at all.
    """
    registry = RoleRegistry(db_session)
    registry.assign_role("teller1", Role.TELLER)
    registry.assign_role("manager1", Role.MANAGER)
    registry.assign_role("auditor1", Role.AUDITOR)
    db_session.commit()
    return {
        "teller": Principal("teller1"),
        "manager": Principal("manager1"),
        "auditor": Principal("auditor1"),
        "nobody": Principal("nobody1"),
    }


@pytest.fixture
def teller(staff):
    return staff["teller"]


@pytest.fixture
def manager(staff):
    return staff["manager"]


@pytest.fixture
def auditor(staff):
    return staff["auditor"]


@pytest.fixture
def nobody(staff):
    return staff["nobody"]


@pytest.fixture
def client(db_session, staff):
    """
    Provide a test client with the test database.

    We override the get_db dependency so the FastAPI app
    uses our test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
