# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Safety check to prevent tests from running against production database
if os.getenv("TESTING") != "1":
    os.environ["TESTING"] = "1"
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("SUPABASE_URL", "https://mauka.supabase.co")

# Create test database engine and session
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    echo=False
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

from mauka.db.database import Base, get_db, get_session_factory
from mauka.app import app
from tests.test_helpers import create_ngo, create_profile


@pytest.fixture(name="db_session", scope="function")
def db_session_fixture():
    """
    Creates a new database session for each test, with all tables created.
    Uses simple session creation for SQLite in-memory database.
    """
    # Create the tables in the test database
    Base.metadata.create_all(bind=test_engine)

    # Create session
    db = TestSessionLocal()

    try:
        yield db
    finally:
        db.close()
        # Drop all tables after the test to ensure a clean slate
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(name="session_factory")
def session_factory_fixture(db_session: Session):
    """
    Factory handing out fresh sessions on the test database, for code that opens its own.
    """
    return TestSessionLocal


@pytest.fixture(name="client")
def client_fixture(db_session: Session, mocker):
    """
    Provides a FastAPI TestClient that overrides the get_db dependency
    to use the test database session and mocks the notification tasks.
    """
    def override_get_db():
        yield db_session

    def override_get_session_factory():
        return TestSessionLocal

    # Mock all background task functions globally
    mocker.patch('mauka.events.notification_handlers.notify_new_application')
    mocker.patch('mauka.events.notification_handlers.notify_ngo_decision')

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = override_get_session_factory

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(name="volunteer")
def volunteer_fixture(db_session: Session):
    return create_profile(
        db_session, "volunteer", full_name="Asha Volunteer", latitude=19.0760, longitude=72.8777
    )


@pytest.fixture(name="approved_ngo")
def approved_ngo_fixture(db_session: Session):
    return create_ngo(db_session, "approved")


@pytest.fixture(name="admin")
def admin_fixture(db_session: Session):
    return create_profile(db_session, "admin", full_name="Site Admin")
