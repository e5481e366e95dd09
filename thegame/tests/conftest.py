from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from thegame.core.db import create_db_engine, init_db
from thegame.main import create_app
from thegame.middleware.db_session import bind_session
from thegame.repositories import UserRepository
from thegame.tests.utils.sql import StatementRecorder


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory database with the schema created, fresh for every test."""
    engine = create_db_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Generator[Session, None, None]:
    """Session bound to the current context, as the request middleware does."""
    with Session(engine) as session, bind_session(session):
        yield session


@pytest.fixture
def repo(db: Session) -> UserRepository:
    return UserRepository()


@pytest.fixture
def recorder(engine: Engine) -> Generator[StatementRecorder, None, None]:
    recorder = StatementRecorder()
    recorder.attach(engine)
    yield recorder
    recorder.detach(engine)


@pytest.fixture
def client(engine: Engine) -> Generator[TestClient, None, None]:
    app = create_app(session_factory=lambda: Session(engine))
    with TestClient(app) as c:
        yield c
