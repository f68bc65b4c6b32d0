# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# - main.py: create_app(), middleware, exception handlers
# - config.py: Settings loaded from the environment
# - dependencies.py: request-scoped wiring of repositories and services
# - auth/: token endpoints and the current-user dependencies
# - routers/: catalog, users, favorites, announcements, uploads, admin
# =============================================================================
