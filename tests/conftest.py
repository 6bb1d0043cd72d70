import pytest
from fastapi.testclient import TestClient

from wish_lighthouse_api.app.core.config import Settings
from wish_lighthouse_api.app.core.seed import seed_demo_wishes
from wish_lighthouse_api.app.core.security import create_access_token
from wish_lighthouse_api.app.main import create_app
from wish_lighthouse_api.app.repositories.wish_repository import (
    InMemoryWishRepository,
    SQLiteWishRepository,
)
from wish_lighthouse_api.app.services.wish_service import WishService


TEST_SECRET = "test-secret"


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        environment="test",
        wish_store="memory",
        database_url=str(tmp_path / "wishes.db"),
        seed_demo_data=True,
        secret_key=TEST_SECRET,
    )


@pytest.fixture(params=["memory", "sqlite"])
def repository(request, tmp_path):
    """An empty repository of each backend."""
    if request.param == "memory":
        return InMemoryWishRepository()
    return SQLiteWishRepository(str(tmp_path / "wishes.db"))


@pytest.fixture
def seeded_repository(repository):
    seed_demo_wishes(repository)
    return repository


@pytest.fixture
def service(seeded_repository):
    return WishService(seeded_repository)


@pytest.fixture
def client(test_settings):
    app = create_app(test_settings, repository=InMemoryWishRepository())
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sqlite_client(test_settings):
    test_settings.wish_store = "sqlite"
    app = create_app(test_settings)
    with TestClient(app) as c:
        yield c


def make_token(user_id, name=None, **claims):
    claims = {"sub": user_id, "name": name or user_id, **claims}
    return create_access_token(claims, secret_key=TEST_SECRET)


def auth_header(user_id, name=None, **claims):
    return {"Authorization": f"Bearer {make_token(user_id, name, **claims)}"}
