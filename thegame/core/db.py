from functools import lru_cache
from typing import Any

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from thegame.core.config import settings

# make sure all SQLModel models are imported before metadata is used,
# otherwise relationships between users and game states are not configured
from thegame import models  # noqa: F401


def create_db_engine(url: str | None = None, **overrides: Any) -> Engine:
    """Build an engine with the pool settings from the environment."""
    url = url or str(settings.SQLALCHEMY_DATABASE_URI)

    engine_kwargs: dict[str, Any] = {"echo": settings.LOG_SQL}
    if not url.startswith("sqlite"):
        engine_kwargs.update(
            {
                "pool_pre_ping": settings.DATABASE_POOL_PRE_PING,
                "pool_recycle": settings.DATABASE_POOL_RECYCLE,
                "pool_size": settings.DATABASE_POOL_SIZE,
                "max_overflow": settings.DATABASE_MAX_OVERFLOW,
            }
        )
        if settings.ENVIRONMENT != "local":
            engine_kwargs["connect_args"] = {
                "sslmode": "require",
                "connect_timeout": 10,
                "application_name": settings.PROJECT_NAME,
            }
    engine_kwargs.update(overrides)

    return create_engine(url, **engine_kwargs)


@lru_cache
def get_engine() -> Engine:
    return create_db_engine()


def init_db(engine: Engine | None = None) -> None:
    # Tables should be provisioned ahead of time in deployed environments.
    # This covers local runs and tests.
    SQLModel.metadata.create_all(engine or get_engine())


def get_session() -> Session:
    return Session(get_engine())
