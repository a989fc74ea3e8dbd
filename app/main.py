"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.v1 import router as api_router
from app.core.config import Settings, get_settings
from app.core.database import Database
from app.core.logging import configure_logging
from app.core.tokens import TokenService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """
    Build the application for one settings object. The Database is created
    here (or passed in by tests) and disposed when the app shuts down.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting TaskNest API (env=%s)", settings.APP_ENV)
        yield
        database.dispose()
        logger.info("Database engine disposed")

    app = FastAPI(
        title="TaskNest API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.tokens = TokenService.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    def root() -> dict[str, object]:
        """Root route; minimal payload for discovery."""
        prefix = settings.API_PREFIX
        return {
            "message": "TaskNest API",
            "version": app.version,
            "docs": app.docs_url,
            "endpoints": {
                "health": f"{prefix}/health",
                "auth": f"{prefix}/auth",
                "users": f"{prefix}/users",
                "todos": f"{prefix}/todos",
                "posts": f"{prefix}/posts",
            },
        }

    return app


app = create_app()
