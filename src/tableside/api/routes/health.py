from __future__ import annotations

from fastapi import APIRouter, Response, status

from tableside.infrastructure.cache.redis_client import ping_redis
from tableside.infrastructure.db.session import ping_database

router = APIRouter(tags=["health"])

PROBE_TIMEOUT_SECONDS = 1.0


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response) -> dict[str, object]:
    # redis only carries events, but staff dashboards go stale without it
    checks = {
        "database": ping_database(timeout_seconds=PROBE_TIMEOUT_SECONDS),
        "redis": ping_redis(timeout_seconds=PROBE_TIMEOUT_SECONDS),
    }
    if all(checks.values()):
        return {"status": "ok"}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "unavailable", "checks": checks}
