"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workspace_access.core.config import settings
from workspace_access.core.logging import configure_logging
from workspace_access.api.dependencies.limits import limit_error_detail
from workspace_access.api.routes import router as api_router
from workspace_access.api.middleware.logging import LoggingMiddleware
from workspace_access.limits import LimitError
from workspace_access.models.database import close_db, init_db
from workspace_access.utils.context import RequestContextMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    if settings.database.create_tables:
        await init_db()
    logger.info("app_started", version=settings.app_version, environment=settings.environment)

    yield

    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Middleware (last added is outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestContextMiddleware)

    # Routes
    app.include_router(api_router, prefix="/api")

    # Exception handlers
    @app.exception_handler(LimitError)
    async def limit_exception_handler(request: Request, exc: LimitError):
        """Limit errors raised outside a guard (direct service calls)."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": limit_error_detail(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.exception("unhandled_error", path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": str(exc) if settings.debug else "An error occurred",
            },
        )

    # Health check
    @app.get("/health")
    async def health_check():
        """Quick health check endpoint (for load balancers)."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "workspace_access.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers,
    )
