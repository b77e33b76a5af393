"""FastAPI application factory and server configuration."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sp.config import get_settings
from sp.db.base import close_db, init_db
from sp.errors import PlannerError
from sp.middleware import (
    AuthMiddleware,
    RateLimitMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
)
from sp.routes import analytics, auth, feedback, study_plans
from sp.schemas.common import ErrorResponse
from sp.services.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 401, 404, 409)}


def configure_logging() -> None:
    """Configure root logging from settings."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    # Startup
    await init_db()
    logger.info("Study Planner started")

    yield

    # Shutdown
    await close_db()


async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    """Render domain errors as the standard error envelope."""
    logger.warning(
        "%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message
    )
    body = ErrorResponse(
        error={"code": exc.code, "message": exc.message, "details": exc.details}
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def register_routes(app: FastAPI) -> None:
    """Mount API routers and the health check."""
    app.include_router(
        auth.router, prefix="/v1/auth", tags=["auth"], responses=ERROR_RESPONSES
    )
    app.include_router(
        study_plans.generate_router,
        prefix="/v1/generate-plan",
        tags=["study-plans"],
        responses=ERROR_RESPONSES,
    )
    app.include_router(
        study_plans.router,
        prefix="/v1/study-plans",
        tags=["study-plans"],
        responses=ERROR_RESPONSES,
    )
    app.include_router(
        feedback.router,
        prefix="/v1/feedback",
        tags=["feedback"],
        responses=ERROR_RESPONSES,
    )
    app.include_router(
        analytics.router,
        prefix="/v1/analytics",
        tags=["analytics"],
        responses=ERROR_RESPONSES,
    )
    app.add_exception_handler(PlannerError, planner_error_handler)

    # Health check
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "study-planner"}


def create_app(rate_limiter: Optional[RateLimiter] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=86400,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(AuthMiddleware)
    app.add_middleware(RateLimitMiddleware, limiter=rate_limiter)

    register_routes(app)

    @app.get("/")
    async def root():
        return JSONResponse(
            content={
                "service": settings.app_name,
                "version": "0.1.0",
                "docs": "/docs" if settings.debug else None,
            }
        )

    return app


app = create_app()


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("sp.server:app", host="0.0.0.0", port=8000)
