"""
Combine releases from every enabled *arr service
"""

import logging
from datetime import datetime, timezone
from typing import List

import requests

from .config import ServiceConfig
from .models import Release
from .radarr import fetch_releases_from_radarr
from .sonarr import fetch_releases_from_sonarr

logger = logging.getLogger(__name__)


def fetch_releases_from_arr_stack(
    sonarr: ServiceConfig,
    radarr: ServiceConfig,
    now: datetime | None = None,
    session: requests.Session | None = None,
) -> List[Release]:
    """
    Fetch Sonarr releases, then Radarr releases

    Any failure aborts the whole aggregation; no partial list is returned.

    Raises:
        ReleasarrError from the failing service
    """
    now = now or datetime.now(timezone.utc)
    result: List[Release] = []

    if sonarr.enable:
        try:
            result.extend(fetch_releases_from_sonarr(sonarr, now, session=session))
        except Exception as e:
            logger.warning(f"failed to fetch releases from sonarr: {e}")
            raise

    if radarr.enable:
        try:
            result.extend(fetch_releases_from_radarr(radarr, now, session=session))
        except Exception as e:
            logger.warning(f"failed to fetch releases from radarr: {e}")
            raise

    return result
