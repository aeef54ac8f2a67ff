from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

import redis.asyncio as redis
from fastapi import status
from redis.exceptions import RedisError

from courtly.app.core import redis_client as redis_module
from courtly.app.core.config import settings
from courtly.app.core.errors import UpstreamFailure


logger = logging.getLogger(__name__)


def hold_key(day: date, court_id: str, slot_id: str) -> str:
    return f"hold:{day.isoformat()}:{court_id}:{slot_id}"


class SlotHolds:
    """Short-lived Redis locks on (date, court, slot) while a booking commits."""

    def __init__(self, client: redis.Redis, ttl_seconds: int | None = None) -> None:
        self.client = client
        self.ttl_ms = (ttl_seconds or settings.HOLD_TTL_SECONDS) * 1000

    async def acquire(self, day: date, court_id: str, slot_ids: Iterable[str]) -> bool:
        """Hold every slot or none. Returns False if any slot is already held."""
        acquired: list[str] = []
        try:
            for slot_id in slot_ids:
                key = hold_key(day, court_id, slot_id)
                if not await self.client.set(key, "1", nx=True, px=self.ttl_ms):
                    logger.info("Slot %s already held", key)
                    await self._delete(acquired)
                    return False
                acquired.append(key)
        except RedisError as exc:
            await self._delete(acquired)
            raise UpstreamFailure("Redis unavailable", status_code=status.HTTP_503_SERVICE_UNAVAILABLE) from exc
        return True

    async def release(self, day: date, court_id: str, slot_ids: Iterable[str]) -> None:
        await self._delete([hold_key(day, court_id, slot_id) for slot_id in slot_ids])

    async def _delete(self, keys: list[str]) -> None:
        if not keys:
            return
        try:
            await self.client.delete(*keys)
        except RedisError:
            # Keys expire on their own after the TTL.
            logger.warning("Could not release holds %s", keys, exc_info=True)


async def get_holds() -> SlotHolds:
    if redis_module.redis_client is None:
        raise UpstreamFailure("Redis unavailable", status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return SlotHolds(redis_module.redis_client)
