"""
Shared test fixtures: SQLite test database, test client, in-memory collaborators.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point the app at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from subquote.database import Base, get_db
from subquote.discount_profiles import InMemoryDiscountProfileStore
from subquote.main import app
from subquote.quote_session import QuoteSession
from subquote.repositories import InMemoryFrequentClientRepository, InMemoryProjectRepository


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def project_repo():
    return InMemoryProjectRepository()


@pytest.fixture
def profile_store():
    return InMemoryDiscountProfileStore()


@pytest.fixture
def frequent_clients():
    return InMemoryFrequentClientRepository()


@pytest.fixture
def quote_session(project_repo, profile_store, frequent_clients):
    """QuoteSession wired to in-memory stores."""
    return QuoteSession(
        projects=project_repo,
        profiles=profile_store,
        clients=frequent_clients,
    )
