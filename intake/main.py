"""FastAPI application factory and main entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse, RedirectResponse, Response

from intake import __version__
from intake.config import get_settings
from intake.database import get_engine
from intake.exceptions import AuthenticationError, IntakeError
from intake.logging import setup_logging
from intake.schemas.responses import FieldError

# Initialize logging
setup_logging()
logger = structlog.get_logger()

LOGIN_PATH = "/api/login"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    logger.info(
        "Starting Intake Funnel",
        env=settings.env,
        debug=settings.debug,
        version=__version__,
    )

    # Database connection pool is created lazily
    yield

    logger.info("Shutting down Intake Funnel")
    if get_engine.cache_info().currsize:
        await get_engine().dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Intake Funnel",
        description="Multi-step intake form with submission storage and funnel analytics",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from intake.middleware import RequestContextMiddleware

    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    from intake.routers import api, web

    app.include_router(api.router, prefix="/api")
    app.include_router(web.router)

    return app


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(IntakeError)
    async def intake_error_handler(request: Request, exc: IntakeError) -> Response:
        """Render application errors; browsers without a session go to login."""
        if isinstance(exc, AuthenticationError) and _wants_html(request):
            return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_302_FOUND)

        logger.warning(
            "Application error",
            error_code=exc.code,
            message=exc.message,
            path=request.url.path,
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.code,
                    "message": exc.message,
                    **({"details": exc.details} if exc.details else {}),
                }
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Handle request validation errors as 400 with per-field messages."""
        field_errors = [
            FieldError(
                field=".".join(str(loc) for loc in error.get("loc", ())[1:]) or None,
                message=error.get("msg", "Validation error"),
            ).model_dump()
            for error in exc.errors()
        ]
        first = field_errors[0] if field_errors else {"field": None, "message": "Validation error"}

        logger.warning(
            "Validation error",
            path=request.url.path,
            errors=field_errors,
        )
        return ORJSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": {
                    "code": "validation_error",
                    "message": first["message"],
                    "field": first["field"],
                    "details": {"errors": field_errors},
                }
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
        """Handle unhandled exceptions."""
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "internal_error",
                    "message": "An unexpected error occurred",
                }
            },
        )


app = create_app()
