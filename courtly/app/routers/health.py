from fastapi import APIRouter, Depends, status

from courtly.app.core import redis_client as redis_module
from courtly.app.core.errors import UpstreamFailure
from courtly.app.db.store import ReservationStore, get_store


router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, bool]:
    """Basic liveness probe."""
    return {"ok": True}


@router.get("/readiness")
async def readiness(store: ReservationStore = Depends(get_store)) -> dict[str, bool]:
    """Ensure Postgres and Redis are reachable."""
    if redis_module.redis_client is None:
        raise UpstreamFailure("Redis unavailable", status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    await store.ping()
    try:
        await redis_module.redis_client.ping()
    except Exception as exc:  # pragma: no cover
        raise UpstreamFailure("Redis unavailable", status_code=status.HTTP_503_SERVICE_UNAVAILABLE) from exc

    return {"ready": True}
