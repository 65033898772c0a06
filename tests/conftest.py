import pytest
import os
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_PER_MINUTE"] = "10000"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ.pop("LEAVE_CATALOG_PATH", None)

from app.database import Base, get_db
from app.main import app
from app.models.leave_request import LeaveRequest, LeaveStatus
from app.services.leave_catalog import load_catalog
from app.services.leave_ledger import LeaveLedger
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed "today" for ledger and validator unit tests
TODAY = date(2025, 1, 1)


@pytest.fixture(scope="session")
def today():
    return TODAY

@pytest.fixture(scope="session")
def make_request():
    """Factory for transient LeaveRequest rows used as history in pure functions."""
    def _make_request(leave_type, from_date, to_date, status=LeaveStatus.PENDING, employee_id="EMP001", **kwargs):
        return LeaveRequest(
            employee_id=employee_id,
            leave_type=leave_type,
            from_date=from_date,
            to_date=to_date,
            reason=kwargs.pop("reason", "Personal work"),
            status=status.value if isinstance(status, LeaveStatus) else status,
            applied_date=kwargs.pop("applied_date", TODAY),
            **kwargs
        )
    return _make_request

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    # Use sessionmaker with the active connection
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture(scope="function")
def session_factory(db_session):
    """Extra sessions joined to the test transaction, e.g. one per thread."""
    connection = db_session.get_bind()
    return lambda: TestingSessionLocal(bind=connection)

@pytest.fixture(scope="session")
def catalog():
    return load_catalog()

@pytest.fixture(scope="function")
def ledger(db_session, catalog):
    """Ledger whose clock is pinned to TODAY."""
    return LeaveLedger(db_session, catalog, clock=lambda: TODAY)

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
