"""
Pytest configuration and shared fixtures for the Job Board Tracker tests.
"""
import os

# Settings are cached on first import; the app must see the test environment
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-tokens-12345678901234567890")

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from job_board_app.backend.main import app
from job_board_app.backend.models.db.database import get_db, Base
from job_board_app.backend import schemas
from job_board_app.backend.services.job_store import JobStore, StoreError


# Test Database Setup
@pytest.fixture(scope="function")
def test_db_engine():
    """Create a fresh in-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def test_client(test_db_session):
    """Create a test client with overridden database dependency."""
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# User Fixtures
@pytest.fixture
def test_user_data():
    """Sample user data for testing."""
    return {
        "email": "test@example.com",
        "password": "testpassword123",
        "full_name": "Test User"
    }


@pytest.fixture
def test_user(test_db_session, test_user_data):
    """Create a test user directly in the database."""
    from job_board_app.backend.models.db.crud import create_user
    from job_board_app.backend.security import get_password_hash

    hashed_password = get_password_hash(test_user_data["password"])
    user_schema = schemas.UserCreate(**test_user_data)
    return create_user(test_db_session, user_schema, hashed_password)


def login_headers(client: TestClient, user_data: Dict[str, str]) -> Dict[str, str]:
    response = client.post("/api/auth/register", json=user_data)
    assert response.status_code == 200

    login_data = {
        "username": user_data["email"],
        "password": user_data["password"]
    }
    response = client.post("/api/auth/login", data=login_data)
    assert response.status_code == 200

    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_client, test_user_data):
    """Get authentication headers for API requests."""
    return login_headers(test_client, test_user_data)


@pytest.fixture
def other_auth_headers(test_client):
    """Authentication headers for a second, unrelated user."""
    return login_headers(test_client, {
        "email": "other@example.com",
        "password": "otherpassword123",
        "full_name": "Other User"
    })


# Job Fixtures
@pytest.fixture
def sample_job_data():
    """Sample job record payload."""
    return {
        "job_title": "Senior Python Developer",
        "company_name": "Tech Innovations Inc",
        "status": "Applied",
        "date_applied": "2026-01-15",
        "expected_salary": "$150k",
        "contact_name": "Jane Recruiter",
        "location": "Remote",
        "job_type": "Full-time",
        "has_resume": True,
        "has_cover_letter": False
    }


@pytest.fixture
def make_job() -> Callable[..., schemas.Job]:
    """Build a full job record without touching a database."""
    def _make_job(job_id: int, status: str = "Wishlist", title: Optional[str] = None,
                  owner_id: int = 1, created_at: Optional[datetime] = None, **fields: Any) -> schemas.Job:
        created = created_at or datetime(2026, 1, 1, 12, 0) + timedelta(minutes=job_id)
        return schemas.Job(
            id=job_id,
            owner_id=owner_id,
            job_title=title or f"Engineer {job_id}",
            company_name=fields.pop("company_name", f"Company {job_id}"),
            status=status,
            created_at=created,
            updated_at=created,
            **fields
        )
    return _make_job


class FakeJobStore(JobStore):
    """In-memory JobStore with per-operation failure injection."""

    def __init__(self, jobs: Optional[List[schemas.Job]] = None):
        self.rows: Dict[int, schemas.Job] = {job.id: job for job in jobs or []}
        self.calls: List[tuple] = []
        self.fail_on: set = set()
        self.observe: Optional[Callable[[], Any]] = None
        self.observed: List[Any] = []
        self._next_id = max(self.rows, default=0) + 1

    def _record(self, *call):
        self.calls.append(call)
        if self.observe is not None:
            self.observed.append(self.observe())
        if call[0] in self.fail_on:
            raise StoreError(f"{call[0]} rejected")

    async def list_jobs(self, owner_id):
        self._record("list", owner_id)
        jobs = [job for job in self.rows.values() if job.owner_id == owner_id]
        return sorted(jobs, key=lambda j: (j.created_at, j.id), reverse=True)

    async def insert_job(self, owner_id, draft):
        self._record("insert", owner_id, draft.job_title)
        now = datetime(2026, 2, 1, 9, 0) + timedelta(seconds=self._next_id)
        job = schemas.Job(id=self._next_id, owner_id=owner_id, created_at=now, updated_at=now,
                          **draft.model_dump())
        self.rows[job.id] = job
        self._next_id += 1
        return job

    async def update_job(self, owner_id, job_id, changes):
        self._record("update", owner_id, job_id, changes)
        job = self.rows.get(job_id)
        if job is None or job.owner_id != owner_id:
            raise StoreError(f"Job {job_id} not found")
        self.rows[job_id] = job.model_copy(update=changes)
        return self.rows[job_id]

    async def delete_job(self, owner_id, job_id):
        self._record("delete", owner_id, job_id)
        job = self.rows.get(job_id)
        if job is None or job.owner_id != owner_id:
            raise StoreError(f"Job {job_id} not found")
        del self.rows[job_id]

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)


@pytest.fixture
def fake_store_factory():
    return FakeJobStore


# Markup Fixtures
@pytest.fixture
def sample_posting_html():
    """A job posting page carrying every field the extractor looks for."""
    return """
    <html>
      <head>
        <title>Backend Engineer | Acme Careers</title>
        <meta property="og:title" content="Backend Engineer at Acme" />
        <meta property="og:site_name" content="Acme Careers" />
        <meta name="description" content="Join Acme to build APIs." />
      </head>
      <body>
        <h1 class="posting-header job-title">
            Backend   Engineer
        </h1>
        <span class="company-name">Acme  Corp</span>
        <span class="job-location">Berlin, Germany</span>
        <div class="job-description"><p>You will design <b>reliable</b> services.</p></div>
      </body>
    </html>
    """
