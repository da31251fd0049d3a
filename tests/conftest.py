import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Must be set before anything imports backend.app.config.
os.environ["DISABLE_DOTENV"] = "1"
os.environ["DATABASE_URL"] = ""
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SMTP_HOST"] = ""
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASS"] = ""

# Ensure `import backend.app...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from backend.app.main import create_app  # noqa: E402
from backend.app.storage.memory import MemoryStorage  # noqa: E402
from backend.app.storage.sql import SqlStorage  # noqa: E402


class FakeClock:
    """Deterministic clock so expiry can be tested without sleeping."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now = self.now + timedelta(**delta)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(params=["memory", "sql"])
def storage(request, tmp_path: Path, clock: FakeClock):
    """A fresh, empty storage per test, run once per backend."""
    if request.param == "memory":
        yield MemoryStorage(clock=clock, otp_ttl_minutes=5)
        return

    sql_storage = SqlStorage(
        f"sqlite+pysqlite:///{tmp_path / 'test.sqlite3'}",
        clock=clock,
        otp_ttl_minutes=5,
    )
    try:
        yield sql_storage
    finally:
        sql_storage.dispose()


@pytest.fixture()
def memory_storage(clock: FakeClock) -> MemoryStorage:
    return MemoryStorage(clock=clock, otp_ttl_minutes=5)


@pytest.fixture()
def app(memory_storage: MemoryStorage) -> FastAPI:
    """API wired to a seeded in-memory store."""
    memory_storage.seed_sample_data()
    return create_app(storage=memory_storage)


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


def job_fields(company_id: str, closing_date: datetime, **overrides) -> dict:
    fields = {
        "company_id": company_id,
        "title": "Backend Engineer",
        "description": "Build and run Python services.",
        "requirements": "APIs, databases",
        "qualifications": "B.Tech or equivalent",
        "skills": "Python, SQL, Docker",
        "experience_level": "experienced",
        "location": "Pune, India",
        "job_type": "full-time",
        "closing_date": closing_date,
    }
    fields.update(overrides)
    return fields


@pytest.fixture()
def make_job_fields(clock: FakeClock):
    def _make(company_id: str, **overrides) -> dict:
        return job_fields(company_id, clock() + timedelta(days=30), **overrides)
    return _make
