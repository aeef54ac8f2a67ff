import logging
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from courtly.app.core.config import settings


logger = logging.getLogger(__name__)


def venue_timezone() -> tzinfo:
    try:
        return ZoneInfo(settings.TIME_ZONE)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown TIME_ZONE %r, falling back to UTC", settings.TIME_ZONE)
        return timezone.utc


def server_now() -> datetime:
    """Current wall-clock time in the venue time zone."""
    return datetime.now(timezone.utc).astimezone(venue_timezone())


def venue_today() -> date:
    return server_now().date()


def clock_snapshot(now: datetime | None = None) -> dict[str, object]:
    now = now or server_now()
    offset = now.utcoffset()
    return {
        "nowUnixMs": int(now.timestamp() * 1000),
        "nowISO": now.isoformat(timespec="seconds"),
        "timezone": str(now.tzinfo),
        "utcOffsetMinutes": int(offset.total_seconds() // 60) if offset is not None else 0,
    }
