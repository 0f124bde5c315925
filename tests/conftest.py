"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client (with the Session Guard pointed at the test database)
- Accounts with profiles and roles
"""

import os

os.environ.setdefault("SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("JSON_LOGS", "false")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.security import get_password_hash
from app.models.candidate import Candidate, CandidateStatus
from app.models.identity import AccountIdentity
from app.models.job import Job
from app.models.user import User, UserRole
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "Password123!"


def create_account(db_session, email, role=UserRole.CUSTOMER, password=DEFAULT_PASSWORD, with_profile=True):
    """Helper to create a confirmed identity and (optionally) its profile"""
    identity = AccountIdentity(
        email=email,
        hashed_password=get_password_hash(password),
        email_confirmed_at=datetime.now(timezone.utc)
    )
    db_session.add(identity)
    db_session.flush()

    if with_profile:
        db_session.add(User(user_id=identity.id, email=email, role=role))

    db_session.commit()
    return identity


def create_job(db_session, owner, title="Engineer", description=None):
    """Helper to insert a job owned by an account"""
    job = Job(user_id=owner.id, title=title, description=description)
    db_session.add(job)
    db_session.commit()
    db_session.refresh(job)
    return job


def create_candidate(db_session, job, name="Jane", linkedin=None, status=CandidateStatus.APPLIED):
    """Helper to insert a candidate for a job"""
    candidate = Candidate(job_id=job.job_id, name=name, linkedin=linkedin, status=status)
    db_session.add(candidate)
    db_session.commit()
    db_session.refresh(candidate)
    return candidate


def login(client, email, password=DEFAULT_PASSWORD):
    """Helper to sign in; the session cookies stay on the client"""
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    original_factory = app.state.session_factory
    app.state.session_factory = TestingSessionLocal

    with TestClient(app) as test_client:
        yield test_client

    app.state.session_factory = original_factory
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(db_session):
    return create_account(db_session, "admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def customer_user(db_session):
    return create_account(db_session, "customer@example.com")


@pytest.fixture
def other_customer(db_session):
    return create_account(db_session, "other@example.com")
