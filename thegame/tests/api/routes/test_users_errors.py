from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session

from thegame.core.config import settings
from thegame.main import create_app

USERS_URL = f"{settings.API_V1_STR}/users"


class FailingCommitSession(Session):
    """Session whose commits fail with a preset driver error."""

    def __init__(self, bind: Engine, error: Exception) -> None:
        super().__init__(bind)
        self.error = error

    def commit(self) -> None:
        raise self.error


def client_with_commit_error(
    engine: Engine, error: Exception
) -> Generator[TestClient, None, None]:
    app = create_app(session_factory=lambda: FailingCommitSession(engine, error))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def integrity_client(engine: Engine) -> Generator[TestClient, None, None]:
    error = IntegrityError("INSERT INTO users", {}, Exception("UNIQUE constraint"))
    yield from client_with_commit_error(engine, error)


@pytest.fixture
def unavailable_client(engine: Engine) -> Generator[TestClient, None, None]:
    error = OperationalError("INSERT INTO users", {}, Exception("connection lost"))
    yield from client_with_commit_error(engine, error)


def test_constraint_violation_maps_to_409(integrity_client: TestClient) -> None:
    r = integrity_client.post(USERS_URL, json={"name": "John Doe"})

    assert r.status_code == 409
    assert r.json()["detail"]["type"] == "constraint_violation"


def test_database_failure_maps_to_500(unavailable_client: TestClient) -> None:
    r = unavailable_client.post(USERS_URL, json={"name": "John Doe"})

    assert r.status_code == 500
    assert r.json()["detail"]["type"] == "repository"


def test_failed_create_leaves_no_rows(
    integrity_client: TestClient, client: TestClient
) -> None:
    integrity_client.post(USERS_URL, json={"name": "John Doe"})

    assert client.get(USERS_URL).json() == []


def test_collection_route_has_no_redirect(client: TestClient) -> None:
    r = client.post(USERS_URL, json={"name": "John Doe"}, follow_redirects=False)
    assert r.status_code == 201

    r = client.get(USERS_URL, follow_redirects=False)
    assert r.status_code == 200
