from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.logging import JsonLogFormatter
from app.main import app


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_logs_include_correlation_id_for_http(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    response = client.delete(f"/subscriptions/{uuid.uuid4()}", headers={"X-Correlation-Id": "abc-123"})
    assert response.status_code == 404

    records = [record for record in caplog.records if record.name == "app.request" and record.getMessage() == "http.request"]
    assert records
    assert any(
        getattr(record, "correlation_id", None) == "abc-123"
        and getattr(record, "method", None) == "DELETE"
        and getattr(record, "path", None) == "/subscriptions/{id}"
        and getattr(record, "status_code", None) == 404
        and isinstance(getattr(record, "duration_ms", None), float)
        for record in records
    )


def test_service_logs_lifecycle_events(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    created = client.post(
        "/subscriptions",
        json={"service_name": "Netflix", "price": 599, "user_id": str(uuid.uuid4()), "start_date": "01-2023"},
        headers={"X-Correlation-Id": "log-create-1"},
    )
    assert created.status_code == 201
    subscription_id = created.json()["id"]

    deleted = client.delete(f"/subscriptions/{subscription_id}", headers={"X-Correlation-Id": "log-delete-1"})
    assert deleted.status_code == 204

    service_records = [record for record in caplog.records if record.name == "app.subscriptions"]
    messages = {(record.getMessage(), getattr(record, "correlation_id", None)) for record in service_records}
    assert ("subscription.created", "log-create-1") in messages
    assert ("subscription.deleted", "log-delete-1") in messages
    assert all(getattr(record, "subscription_id", None) == subscription_id for record in service_records)


def test_json_formatter_keeps_known_fields_and_truncates_errors() -> None:
    record = logging.makeLogRecord(
        {
            "name": "app.subscriptions.repository",
            "levelname": "ERROR",
            "msg": "storage.failed",
            "operation": "fetch_subscriptions",
            "error": "x" * 800,
            "unrelated": "dropped",
            "correlation_id": "fmt-1",
        }
    )

    payload = json.loads(JsonLogFormatter().format(record))

    assert payload["msg"] == "storage.failed"
    assert payload["correlation_id"] == "fmt-1"
    assert payload["fields"]["operation"] == "fetch_subscriptions"
    assert len(payload["fields"]["error"]) == 500
    assert "unrelated" not in payload["fields"]
