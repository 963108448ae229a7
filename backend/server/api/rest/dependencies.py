from __future__ import annotations

from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from application.movies.tracker_service import MovieTrackerService
from config.settings import TRACKER_DISPLAY_TZ


def _display_tz() -> Optional[ZoneInfo]:
    return ZoneInfo(TRACKER_DISPLAY_TZ) if TRACKER_DISPLAY_TZ else None


@lru_cache(maxsize=1)
def _build_tracker_service() -> MovieTrackerService:
    from infrastructure.bootstrap import build_tracker_session

    # One session per process: it owns the dataset.
    return MovieTrackerService(session=build_tracker_session(), tz=_display_tz())


def get_tracker_service() -> MovieTrackerService:
    return _build_tracker_service()


async def shutdown_dependencies() -> None:
    # Every mutation is persisted synchronously; only the cached session is dropped.
    _build_tracker_service.cache_clear()
