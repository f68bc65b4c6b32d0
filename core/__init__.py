# =============================================================================
# core/ - Domain Layer
# =============================================================================
# Everything that does not depend on HTTP:
# - models/: Pydantic records, patches and request/response schemas
# - access.py: role-tier rules (who may act on whom)
# - repositories/: Supabase table access, one class per table
# - services/: moderation workflow, catalog, accounts, storage, email enqueue
#
# Services raise app.exceptions errors; nothing here imports FastAPI routing
# or Celery directly.
# =============================================================================
