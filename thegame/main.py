import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from thegame.api.main import api_router
from thegame.core.config import settings
from thegame.core.db import init_db
from thegame.core.observability import (
    get_logger,
    set_correlation_id,
    setup_structured_logging,
)
from thegame.middleware.db_session import DbSessionMiddleware, SessionFactory
from thegame.shared.exceptions import DomainError, ErrorType

logger = get_logger(__name__)

ERROR_STATUS_CODES = {
    ErrorType.VALIDATION: 422,
    ErrorType.NOT_FOUND: 404,
    ErrorType.CONSTRAINT_VIOLATION: 409,
    ErrorType.REPOSITORY: 500,
}


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Middleware for request correlation and access logging."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        start_time = time.time()
        method = request.method
        path = request.url.path

        logger.info("Request started", method=method, path=path)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                method=method,
                path=path,
                duration_seconds=time.time() - start_time,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise

        response.headers["X-Correlation-ID"] = correlation_id
        logger.info(
            "Request completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_seconds=time.time() - start_time,
        )
        return response


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(exc.error_type, 400)
    if status_code >= 500:
        logger.error("Domain error", path=request.url.path, **exc.to_dict())
    else:
        logger.warning("Domain error", path=request.url.path, **exc.to_dict())
    return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        "Starting application",
        project_name=settings.PROJECT_NAME,
        environment=settings.ENVIRONMENT,
    )
    if settings.AUTO_CREATE_TABLES:
        init_db()
        logger.info("Database tables created")
    yield
    logger.info("Shutting down application")


def create_app(session_factory: SessionFactory | None = None) -> FastAPI:
    setup_structured_logging()

    application = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )
    # Added last so it runs first and every request is logged
    application.add_middleware(DbSessionMiddleware, session_factory=session_factory)
    application.add_middleware(ObservabilityMiddleware)
    application.add_exception_handler(DomainError, domain_error_handler)
    application.include_router(api_router, prefix=settings.API_V1_STR)
    return application


app = create_app()
