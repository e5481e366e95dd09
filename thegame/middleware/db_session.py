"""
Request-scoped database sessions.

A session is bound to the current execution context so repositories can
pick it up without it being threaded through every call.
"""

import contextvars
from collections.abc import Callable, Generator
from contextlib import contextmanager

from fastapi import Request
from sqlmodel import Session
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from thegame.core.db import get_session
from thegame.core.observability import get_logger
from thegame.shared.exceptions import DatabaseError

logger = get_logger(__name__)

db_session_var: contextvars.ContextVar[Session | None] = contextvars.ContextVar(
    "db_session", default=None
)

SessionFactory = Callable[[], Session]


def get_db_from_context() -> Session:
    """Return the session bound to the current context."""
    session = db_session_var.get()
    if session is None:
        raise DatabaseError("No database session bound to the current context")
    return session


@contextmanager
def bind_session(session: Session) -> Generator[Session, None, None]:
    """Bind ``session`` to the current context for the duration of the block."""
    token = db_session_var.set(session)
    try:
        yield session
    finally:
        db_session_var.reset(token)


class DbSessionMiddleware(BaseHTTPMiddleware):
    """Open one session per request and bind it for the request handlers."""

    def __init__(
        self, app: ASGIApp, session_factory: SessionFactory | None = None
    ) -> None:
        super().__init__(app)
        self.session_factory = session_factory or get_session

    async def dispatch(self, request: Request, call_next):
        session = self.session_factory()
        token = db_session_var.set(session)
        try:
            return await call_next(request)
        except Exception:
            logger.warning(
                "Rolling back request session",
                method=request.method,
                path=request.url.path,
            )
            session.rollback()
            raise
        finally:
            db_session_var.reset(token)
            session.close()
