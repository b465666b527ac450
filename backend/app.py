import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.core.errors import (
    AuthenticationError,
    ClaimLockedError,
    ClaimValidationError,
    InvalidCredentialsError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    UserAlreadyExistsError,
    WeldTrackError,
)
from backend.core.logging_config import configure_logging
from backend.core.settings import get_settings
from backend.routes import admin, auth, catalog, claims, notifications

logger = logging.getLogger(__name__)

# most specific first; the first matching entry wins
ERROR_STATUS = [
    (ClaimValidationError, 422),
    (NotFoundError, 404),
    (InvalidCredentialsError, 401),
    (AuthenticationError, 403),
    (UserAlreadyExistsError, 409),
    (ClaimLockedError, 409),
    (InvalidTransitionError, 409),
    (PermissionDeniedError, 403),
    (StoreError, 503),
]


def status_for(exc: WeldTrackError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 400


async def handle_domain_error(request: Request, exc: WeldTrackError) -> JSONResponse:
    status_code = status_for(exc)
    if isinstance(exc, StoreError):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        detail = "Storage backend unavailable, please retry later"
    else:
        detail = exc.message
    return JSONResponse(status_code=status_code, content={"detail": detail, "reason": exc.reason})


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(WeldTrackError, handle_domain_error)

    for module in (auth, catalog, claims, admin, notifications):
        app.include_router(module.router, prefix=settings.api_prefix)

    @app.get(f"{settings.api_prefix}/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": settings.app_name,
                "docs": "/docs",
                "health": f"{settings.api_prefix}/health",
            }
        )

    return app


app = create_app()
