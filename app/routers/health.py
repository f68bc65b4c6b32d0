# =============================================================================
# app/routers/health.py - Liveness and Readiness
# =============================================================================
# /health answers without touching any backend. /health/ready probes every
# table the API queries and both storage buckets; it reports "degraded"
# rather than failing so load balancers can read the per-dependency state.
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel

from app.dependencies import SettingsDep, SupabaseDep
from lib.utils import utc_now

router = APIRouter()

VERSION = "1.0.0"
PROBED_TABLES = ("users", "models", "favorites", "announcements")


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ReadinessResponse(BaseModel):
    """Overall status plus one "ok" / "error: ..." entry per dependency."""
    status: str
    checks: dict[str, str]
    timestamp: str


def _probe(action) -> str:
    try:
        action()
    except Exception as e:
        return f"error: {str(e)[:80]}"
    return "ok"


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep):
    return HealthResponse(
        status="healthy",
        timestamp=utc_now().isoformat(),
        environment=settings.ENVIRONMENT,
        version=VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(client: SupabaseDep, settings: SettingsDep):
    checks = {
        f"table:{table}": _probe(lambda t=table: client.table(t).select("id").limit(1).execute())
        for table in PROBED_TABLES
    }
    for bucket in (settings.MODELS_BUCKET, settings.IMAGES_BUCKET):
        checks[f"bucket:{bucket}"] = _probe(lambda b=bucket: client.storage.get_bucket(b))

    ready = all(result == "ok" for result in checks.values())
    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=utc_now().isoformat(),
    )
