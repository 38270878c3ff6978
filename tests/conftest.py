"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from mpoly.config import Settings
from mpoly.main import create_app
from mpoly.seed import DEMO_PASSWORD, DEMO_RECORDS, build_users
from mpoly.services.auth_service import AuthService
from mpoly.store import Collection, DocumentStore, serialize_document

JWT_SECRET = "test-secret-key-for-jwt-unit-tests"


class FakeClock:
    """Settable clock for token issuance/expiry tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime.now(timezone.utc).replace(microsecond=0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(scope="session")
def demo_users() -> list[dict[str, str]]:
    """Demo users hashed once per session; bcrypt is slow."""
    return build_users(DEMO_PASSWORD)


def write_collection(data_dir: Path, collection: Collection, entities: list[dict]) -> Path:
    path = data_dir / f"{collection.value}.xml"
    path.write_text(serialize_document(entities, collection), encoding="utf-8")
    return path


@pytest.fixture
def data_dir(tmp_path: Path, demo_users) -> Path:
    """Temporary data directory seeded with the demo collections."""
    write_collection(tmp_path, Collection.USERS, [dict(u) for u in demo_users])
    write_collection(tmp_path, Collection.RECORDS, [dict(r) for r in DEMO_RECORDS])
    return tmp_path


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    return Settings(_env_file=None, jwt_secret=JWT_SECRET, data_dir=data_dir)


@pytest.fixture
def store(data_dir: Path) -> DocumentStore:
    return DocumentStore(data_dir)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def auth_service(settings: Settings, store: DocumentStore, clock: FakeClock) -> AuthService:
    """AuthService with a deterministic secret and a controllable clock."""
    return AuthService(settings, store, clock=clock)


@pytest.fixture
def app(settings: Settings, store: DocumentStore, auth_service: AuthService):
    return create_app(settings, store=store, auth_service=auth_service)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as tc:
        yield tc


@pytest.fixture
def login_as(client: TestClient):
    """Log in through the API and return the Authorization header."""

    def _login(user_id: str, password: str = DEMO_PASSWORD) -> dict[str, str]:
        response = client.post("/auth/login", json={"userId": user_id, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest.fixture
def admin_headers(login_as) -> dict[str, str]:
    return login_as("admin")


@pytest.fixture
def john_headers(login_as) -> dict[str, str]:
    return login_as("john.doe")
