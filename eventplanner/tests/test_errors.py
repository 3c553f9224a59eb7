import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from eventplanner.core.config import Settings
from eventplanner.core.errors import (
    AppError,
    ConflictError,
    DependencyError,
    ValidationError,
    classify_database_error,
)
from eventplanner.models.events import Attendance
from eventplanner.schemas.attendance import AttendanceStatus
from eventplanner.services import user_service


class _DriverError(Exception):
    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def test_sqlite_unique_violation_maps_to_conflict():
    exc = IntegrityError(
        "INSERT INTO users ...",
        {},
        sqlite3.IntegrityError("UNIQUE constraint failed: users.email"),
    )

    error = classify_database_error(exc)

    assert isinstance(error, ConflictError)
    assert error.status_code == 409
    assert error.detail == "Duplicate entry. This record already exists."


def test_sqlite_foreign_key_violation_maps_to_400():
    exc = IntegrityError(
        "INSERT INTO events ...",
        {},
        sqlite3.IntegrityError("FOREIGN KEY constraint failed"),
    )

    error = classify_database_error(exc)

    assert isinstance(error, ValidationError)
    assert error.detail == "Invalid reference. Related record does not exist."


def test_postgres_sqlstate_takes_precedence_over_message():
    exc = IntegrityError("INSERT ...", {}, _DriverError("something odd", "23502"))

    error = classify_database_error(exc)

    assert error.status_code == 400
    assert error.detail == "Required field is missing."


def test_missing_table_is_a_dependency_error():
    exc = OperationalError("SELECT ...", {}, sqlite3.OperationalError("no such table: events"))

    error = classify_database_error(exc)

    assert isinstance(error, DependencyError)
    assert error.status_code == 500
    assert error.detail == "Database table does not exist."


def test_auth_and_catalog_failures_map_to_500():
    auth = OperationalError("connect", {}, _DriverError("auth", "28P01"))
    catalog = OperationalError("connect", {}, _DriverError("db", "3D000"))

    assert classify_database_error(auth).detail.startswith(
        "Database authentication failed"
    )
    assert classify_database_error(catalog).detail.startswith("Database does not exist")


def test_connection_refused_maps_to_dependency_error():
    exc = OperationalError(
        "connect", {}, _DriverError("connection refused: is the server running?")
    )

    error = classify_database_error(exc)

    assert isinstance(error, DependencyError)
    assert "connection failed" in error.detail


def test_unknown_fault_is_internal_error():
    exc = ProgrammingError("SELECT ...", {}, _DriverError("syntax error", "42601"))

    error = classify_database_error(exc)

    assert type(error) is AppError
    assert error.status_code == 500
    assert error.detail == "Internal server error"


def test_classified_errors_are_fresh_instances():
    exc = IntegrityError("INSERT ...", {}, _DriverError("dup", "23505"))

    assert classify_database_error(exc) is not classify_database_error(exc)


def test_validation_errors_use_flat_shape(auth_client):
    client, _ = auth_client

    response = client.post("/events", json={"title": "Missing everything"})

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Validation failed"
    fields = {err["field"] for err in body["errors"]}
    assert fields == {"event_date", "event_time", "location"}
    assert all(err["message"] for err in body["errors"])


def test_non_numeric_path_id_is_a_validation_error(auth_client):
    client, _ = auth_client

    response = client.get("/events/not-a-number")

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "event_id"


def test_health_reports_database_status(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}


def test_settings_parse_cors_origins():
    settings = Settings(
        JWT_SECRET="x",
        DATABASE_URL="postgresql+psycopg://app@db/events",
        CORS_ORIGINS="https://a.example, https://b.example ,",
    )

    assert settings.cors_origin_list == ["https://a.example", "https://b.example"]
    assert settings.is_sqlite is False
    assert settings.access_min == 1440


def test_unique_violation_from_storage_is_rendered_as_409(
    client, db_session, test_user, monkeypatch
):
    # Skip the pre-check so the insert itself hits the unique constraint.
    monkeypatch.setattr(user_service, "get_by_email", lambda db, email: None)

    response = client.post(
        "/auth/register",
        json={"email": test_user.email, "password": "hunter22"},
    )

    assert response.status_code == 409
    assert response.json() == {"detail": "Duplicate entry. This record already exists."}
    db_session.rollback()


def test_attendance_is_unique_per_event_and_user(db_session, event, test_user):
    db_session.add(
        Attendance(event_id=event.id, user_id=test_user.id, status=AttendanceStatus.going)
    )
    db_session.add(
        Attendance(event_id=event.id, user_id=test_user.id, status=AttendanceStatus.maybe)
    )

    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()
