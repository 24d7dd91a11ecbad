import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.app_context import AppContext
from core.exceptions import (
    AceleraError,
    AuthenticationError,
    DuplicateGoalError,
    GoalNotFoundError,
    ValidationError,
)
from web.backend.routers import analytics, auth, goals, organization, validation

logger = logging.getLogger("acelera.api")

ERROR_STATUS = (
    (GoalNotFoundError, 404),
    (ValidationError, 400),
    (DuplicateGoalError, 409),
    (AuthenticationError, 401),
)


def status_for(exc: AceleraError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the API. Without a context, one is created from the environment on
    the first request that needs it.
    """
    app = FastAPI(title="Acelera SMART Goals API", version="1.0")
    app.state.context = context

    raw_origins = os.getenv("ACELERA_ALLOWED_ORIGINS", "*")
    allow_origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    allow_credentials = "*" not in allow_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AceleraError)
    async def handle_domain_error(request: Request, exc: AceleraError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error("Unhandled application error on %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "hint": exc.hint},
        )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "Acelera SMART Goals"}

    app.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
    app.include_router(goals.router, prefix="/api/v1/goals", tags=["goals"])
    app.include_router(validation.router, prefix="/api/v1/validation", tags=["validation"])
    app.include_router(organization.router, prefix="/api/v1/organization", tags=["organization"])
    app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["analytics"])

    return app


app = create_app()
