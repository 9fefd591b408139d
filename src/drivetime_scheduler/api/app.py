"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from drivetime_scheduler.api.notifications import router as notifications_router
from drivetime_scheduler.api.sessions import router as sessions_router
from drivetime_scheduler.api.users import router as users_router
from drivetime_scheduler.api.vehicles import router as vehicles_router
from drivetime_scheduler.app_logging import configure_logging
from drivetime_scheduler.containers import AppContainer
from drivetime_scheduler.domain.errors import (
    AuthorizationError,
    ConflictError,
    LimitExceededError,
    NotFoundError,
    SchedulerError,
    TemporalError,
    ValidationError,
)

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)

_STATUS_CODES: dict[type[SchedulerError], int] = {
    ValidationError: HTTP_422_UNPROCESSABLE,
    TemporalError: HTTP_422_UNPROCESSABLE,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    LimitExceededError: status.HTTP_409_CONFLICT,
}


def status_code_for(error: SchedulerError) -> int:
    """Map a business-rule error onto an HTTP status."""
    for error_type, code in _STATUS_CODES.items():
        if isinstance(error, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        scheduler = app.state.container.scheduler
        if app.state.container.settings.sweep_enabled:
            await scheduler.start()
            logger.info(
                "Status sweep running every %.0f seconds", scheduler.interval_seconds
            )
        yield
        await scheduler.stop()

    app = FastAPI(title="Drivetime Scheduler", lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(SchedulerError)
    async def scheduler_error_handler(
        request: Request, exc: SchedulerError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status_code_for(exc),
            content={"detail": {"message": exc.message, "code": exc.code}},
        )

    app.include_router(users_router)
    app.include_router(vehicles_router)
    app.include_router(sessions_router)
    app.include_router(notifications_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
