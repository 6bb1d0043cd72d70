import sqlite3

import pytest
from fastapi.testclient import TestClient

from wish_lighthouse_api.app.core.config import Settings
from wish_lighthouse_api.app.core.db import get_cursor
from wish_lighthouse_api.app.core.errors import InternalError, format_validation_errors
from wish_lighthouse_api.app.main import create_app
from wish_lighthouse_api.app.models.wish import WishFilter
from wish_lighthouse_api.app.repositories.wish_repository import InMemoryWishRepository, SQLiteWishRepository


class BrokenRepository(InMemoryWishRepository):
    def count(self, wish_filter):
        raise RuntimeError("disk on fire")

    def ping(self):
        raise RuntimeError("disk on fire")


def broken_client(environment):
    app_settings = Settings(environment=environment, wish_store="memory", seed_demo_data=False)
    app = create_app(app_settings, repository=BrokenRepository())
    return TestClient(app, raise_server_exceptions=False)


def test_internal_error_is_hidden_in_production():
    with broken_client("production") as client:
        response = client.get("/api/wishes")
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal Server Error"}


def test_internal_error_details_in_development():
    with broken_client("development") as client:
        response = client.get("/api/wishes")
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "disk on fire"
    assert "RuntimeError" in body["stack"]


def test_not_found_is_not_an_internal_error():
    with broken_client("production") as client:
        response = client.get("/api/wishes/missing")
    assert response.status_code == 404


def test_health_reports_unavailable_store():
    with broken_client("production") as client:
        response = client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "UNAVAILABLE"


def test_format_validation_errors():
    errors = format_validation_errors(
        [
            {"loc": ("body", "content"), "msg": "Value error, Content too short"},
            {"loc": ("query", "page"), "msg": "Input should be a valid integer"},
            {"loc": (), "msg": "Broken payload"},
        ]
    )
    assert errors == [
        "content: Content too short",
        "page: Input should be a valid integer",
        "Broken payload",
    ]


def drop_wishes_table(database_url):
    with get_cursor(database_url) as cursor:
        cursor.execute("DROP TABLE wish_likes")
        cursor.execute("DROP TABLE wishes")


def sqlite_app(tmp_path, environment):
    database_url = str(tmp_path / "broken.db")
    app_settings = Settings(
        environment=environment,
        wish_store="sqlite",
        database_url=database_url,
        seed_demo_data=False,
    )
    return create_app(app_settings), database_url


def test_sqlite_failure_raises_internal_error(tmp_path):
    database_url = str(tmp_path / "broken.db")
    repository = SQLiteWishRepository(database_url)
    drop_wishes_table(database_url)
    with pytest.raises(InternalError) as excinfo:
        repository.count(WishFilter())
    assert excinfo.value.status_code == 500
    assert isinstance(excinfo.value.__cause__, sqlite3.OperationalError)


def test_store_failure_envelope_in_production(tmp_path):
    app, database_url = sqlite_app(tmp_path, "production")
    with TestClient(app) as client:
        drop_wishes_table(database_url)
        response = client.get("/api/wishes")
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal Server Error"}


def test_store_failure_envelope_in_development(tmp_path):
    app, database_url = sqlite_app(tmp_path, "development")
    with TestClient(app) as client:
        drop_wishes_table(database_url)
        response = client.get("/api/wishes/some-id")
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Wish store unavailable"}
