import traceback
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from heard.app.api import comments_router, submissions_router
from heard.app.core.config import Settings, settings as default_settings
from heard.app.core.logging import get_logger, setup_logging
from heard.app.db import models  # noqa: F401 - import to register models
from heard.app.db.async_session import (
    create_engine_from_settings,
    create_session_maker,
    init_database,
)
from heard.app.exceptions import HeardException, RateLimitExceededError
from heard.app.middleware.request_id import RequestIdMiddleware, get_request_id
from heard.app.services.rate_limit import FixedWindowRateLimiter, rules_from_settings


def create_app(
    config: Optional[Settings] = None,
    rate_limiter: Optional[FixedWindowRateLimiter] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Settings to use; defaults to the environment-derived settings
        rate_limiter: Limiter to share across requests; built from settings if omitted

    Returns:
        Configured FastAPI application instance
    """
    config = config or default_settings
    setup_logging(config)
    logger = get_logger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Create the database engine and tables on startup; dispose on shutdown."""
        engine = create_engine_from_settings(config)
        await init_database(engine)
        app.state.engine = engine
        app.state.session_maker = create_session_maker(engine)

        logger.info(
            "Application startup complete",
            extra={
                "rate_limits": {
                    kind: f"{rule.max}/{rule.window_ms}ms"
                    for kind, rule in app.state.rate_limiter.rules.items()
                },
                "debug_mode": config.debug,
            },
        )

        yield

        await engine.dispose()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title="Heard API",
        description="Anonymous church experience sharing with vote-ranked discussion",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limit state lives for the lifetime of the process, shared by all requests
    app.state.settings = config
    # An empty limiter is falsy (it defines __len__), so compare against None
    if rate_limiter is None:
        rate_limiter = FixedWindowRateLimiter(rules_from_settings(config))
    app.state.rate_limiter = rate_limiter

    # Middleware (last added = first executed)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
        max_age=600,
    )
    app.add_middleware(RequestIdMiddleware)

    app.include_router(submissions_router)
    app.include_router(comments_router)

    @app.get("/health")
    async def health(request: Request) -> dict[str, Any]:
        """Health check with database connectivity status."""
        health_status: dict[str, Any] = {"status": "ok", "components": {}}

        try:
            async with request.app.state.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            health_status["components"]["database"] = {"status": "ok"}
        except Exception as e:
            health_status["status"] = "degraded"
            health_status["components"]["database"] = {
                "status": "error",
                "error": str(e)[:100],  # Truncate for security
            }

        return health_status

    @app.exception_handler(RateLimitExceededError)
    async def rate_limit_handler(request: Request, exc: RateLimitExceededError) -> JSONResponse:
        """Handle RateLimitExceededError and return HTTP 429 response."""
        headers = {
            "X-RateLimit-Limit": str(exc.limit),
            "X-RateLimit-Remaining": "0",
        }
        if exc.reset_at_ms is not None:
            limiter: FixedWindowRateLimiter = request.app.state.rate_limiter
            retry_after_ms = max(0.0, exc.reset_at_ms - limiter.now())
            headers["X-RateLimit-Reset"] = str(int(exc.reset_at_ms // 1000))
            headers["Retry-After"] = str(int(-(-retry_after_ms // 1000)))
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error_code, "message": exc.message},
            headers=headers,
        )

    @app.exception_handler(HeardException)
    async def heard_exception_handler(request: Request, exc: HeardException) -> JSONResponse:
        """Render domain exceptions with their own status code."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error_code, "message": exc.message},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log unhandled exceptions; never return a traceback to the client."""
        request_id = get_request_id(request)

        logger.exception(
            f"Unhandled exception [request_id={request_id}]",
            extra={
                "request_id": request_id,
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc(),
            },
        )

        content = {
            "error": "internal_error",
            "message": str(exc) if config.debug else "Internal server error",
            "request_id": request_id,
        }
        return JSONResponse(status_code=500, content=content)

    return app


# Create the application instance
app = create_app()
