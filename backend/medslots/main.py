# backend/medslots/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis import Redis
from sqlalchemy.orm import sessionmaker

from .config import Settings, get_settings
from .database import create_db_engine, create_session_factory, ensure_sqlite_directory
from .errors import SchedulingError
from .models.tables import Base
from .redis_client import create_redis
from .routers import doctors, patients, patterns, slots
from .services.slots.config import SlotsConfig

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    redis: Redis | None = None,
    session_factory: sessionmaker | None = None,
) -> FastAPI:
    """
    Build the API application.

    Collaborators passed in are used as-is and left open; the ones created
    here are opened at startup and closed at shutdown.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        owned_redis = None

        if app.state.session_factory is None:
            ensure_sqlite_directory(settings.resolved_database_url)
            engine = create_db_engine(settings.resolved_database_url)
            if settings.auto_create_tables:
                Base.metadata.create_all(engine)
            app.state.session_factory = create_session_factory(engine)

        if app.state.redis is None:
            owned_redis = create_redis(settings.redis_url)
            app.state.redis = owned_redis

        logger.info("medslots started (timezone=%s)", app.state.slots_config.timezone)
        try:
            yield
        finally:
            if owned_redis is not None:
                owned_redis.close()
                app.state.redis = None
            if engine is not None:
                engine.dispose()
                app.state.session_factory = None
            logger.info("medslots stopped")

    app = FastAPI(title="Doctor Slots API", lifespan=lifespan)

    app.state.settings = settings
    app.state.redis = redis
    app.state.session_factory = session_factory
    app.state.slots_config = SlotsConfig(
        timezone=settings.timezone,
        cache_ttl_seconds=settings.slots_cache_ttl_seconds,
    )

    _register_exception_handlers(app)

    app.include_router(doctors.router)
    app.include_router(patients.router)
    app.include_router(patterns.router)
    app.include_router(slots.router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SchedulingError)
    async def scheduling_error_handler(request: Request, exc: SchedulingError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Validation failed", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"},
        )


app = create_app()
