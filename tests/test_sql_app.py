from fastapi.testclient import TestClient
from sqlalchemy import select

from backend.app.main import create_app
from backend.app.models.company import CompanyRow
from backend.app.storage import sql as sql_storage
from backend.app.storage.sql import SqlStorage


def test_api_runs_on_sql_storage(tmp_path, clock):
    storage = SqlStorage(f"sqlite+pysqlite:///{tmp_path / 'api.sqlite3'}", clock=clock)
    try:
        storage.seed_sample_data()
        client = TestClient(create_app(storage=storage))

        r = client.post(
            "/api/auth/register",
            json={"email": "sql@example.com", "password": "Testpass123!", "full_name": "Sql User"},
        )
        assert r.status_code == 201, r.text
        headers = {"Authorization": f"Bearer {r.json()['access_token']}"}

        assert client.get("/health").json()["storage"] == "SqlStorage"
        assert [j["id"] for j in client.get("/api/jobs", params={"search": "python"}).json()] == ["job-1"]

        applied = client.post("/api/applications", json={"job_id": "job-1"}, headers=headers)
        assert applied.status_code == 201, applied.text
        [item] = client.get("/api/applications", headers=headers).json()
        assert item["job"]["company"]["id"] == "accenture-id"
    finally:
        storage.dispose()


def test_insert_retries_when_another_writer_took_the_next_seq(tmp_path, clock, monkeypatch):
    storage = SqlStorage(f"sqlite+pysqlite:///{tmp_path / 'seq.sqlite3'}", clock=clock)
    try:
        first = storage.create_company("First Co")

        real_next_seq = sql_storage._next_seq
        stale = iter([1])

        def next_seq_after_a_race(session, model):
            # First read returns the value `first` already holds, as a concurrent writer would.
            return next(stale, None) or real_next_seq(session, model)

        monkeypatch.setattr(sql_storage, "_next_seq", next_seq_after_a_race)
        second = storage.create_company("Second Co")

        assert [c.id for c in storage.get_companies()] == [first.id, second.id]
        with storage.Session() as session:
            assert session.scalars(select(CompanyRow.seq).order_by(CompanyRow.seq)).all() == [1, 2]
    finally:
        storage.dispose()
