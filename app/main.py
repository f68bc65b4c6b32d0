# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the ModelHub API.
# create_app() configures the FastAPI application with middleware, routers
# and handlers for an explicit Settings instance.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth import routes as auth_routes
from app.auth import require_admin_user
from app.config import Settings, get_settings
from app.exceptions import (
    ModelHubException,
    modelhub_exception_handler,
    validation_exception_handler,
)
from app.routers import admin, announcements, favorites, health, models, upload, users

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

DESCRIPTION = """
## Model Sharing Platform API

Users upload model files, browse and download published models, and keep
favorites. Moderators review new models and edits before they go live.

### Review Workflow

| Action | Regular user | Admin |
|--------|--------------|-------|
| Create model | pending until approved | pending until approved |
| Edit model | staged for review | applied immediately |
| Edit profile | staged for review | applied immediately |

### Roles

`user` < `admin` < `super_admin`. Only the super admin grants or revokes
the admin role; the super admin cannot be banned, demoted or deleted.
"""


def _bootstrap_admin(settings: Settings) -> None:
    """Create the configured super admin when the users table is empty."""
    from core.repositories import UserRepository
    from core.services import NotificationService, UserService
    from lib.security import TokenIssuer
    from lib.supabase_client import SupabaseClient

    users = UserService(
        UserRepository(SupabaseClient.get_client(settings)),
        settings,
        TokenIssuer(settings),
        NotificationService(settings),
    )
    created = users.ensure_bootstrap_admin()
    if created is not None:
        logger.info(f"Bootstrap super admin ready: {created.email}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Log configuration, create the bootstrap admin if configured
    - Shutdown: Log
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(f"Starting ModelHub API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    if settings.BOOTSTRAP_ADMIN_EMAIL and settings.BOOTSTRAP_ADMIN_PASSWORD:
        try:
            _bootstrap_admin(settings)
        except Exception as e:
            logger.error(f"Failed to create bootstrap admin: {e}")

    yield

    # Shutdown
    logger.info("Shutting down ModelHub API")


def create_app(settings: Settings) -> FastAPI:
    """
    Build the FastAPI application for the given settings.

    The settings are stored on app.state and reach every dependency from
    there; nothing reads a global configuration.
    """
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    app = FastAPI(
        title="ModelHub API",
        description=DESCRIPTION,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Auth", "description": "Registration, login and tokens"},
            {"name": "Users", "description": "Own account and public profiles"},
            {"name": "Models", "description": "Browse, publish and download models"},
            {"name": "Favorites", "description": "The caller's favorite models"},
            {"name": "Announcements", "description": "Site announcements"},
            {"name": "Upload", "description": "Upload model files and images"},
            {"name": "Admin", "description": "Moderation and user administration"},
            {"name": "Health", "description": "API health and readiness checks"},
        ],
    )
    app.state.settings = settings

    # =========================================================================
    # Middleware
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(ModelHubException, modelhub_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.exception_handler(Exception)
    async def handle_general_exception(request: Request, exc: Exception):
        """Unexpected errors (including storage/database failures) collapse to a generic 500."""
        logger.exception(f"Unexpected error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            }
        )

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(auth_routes.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])
    app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
    app.include_router(users.router, prefix=f"{API_PREFIX}/users", tags=["Users"])
    app.include_router(models.router, prefix=f"{API_PREFIX}/models", tags=["Models"])
    app.include_router(favorites.router, prefix=f"{API_PREFIX}/favorites", tags=["Favorites"])
    app.include_router(
        announcements.router,
        prefix=f"{API_PREFIX}/announcements",
        tags=["Announcements"],
    )
    app.include_router(upload.router, prefix=f"{API_PREFIX}/upload", tags=["Upload"])
    app.include_router(
        admin.router,
        prefix=f"{API_PREFIX}/admin",
        tags=["Admin"],
        dependencies=[Depends(require_admin_user)],
    )

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint - returns API info.
        """
        return {
            "name": "ModelHub API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": f"{API_PREFIX}/health",
        }

    return app


# Create FastAPI application
app = create_app(get_settings())
