"""
Radarr API Client
"""

import logging
from datetime import datetime
from typing import List

import requests

from .base_client import BaseArrClient
from .config import ServiceConfig
from .exceptions import DecodeError
from .models import RadarrCalendarEntry, Release
from .timewindow import format_in_zone, resolve_timezone
from .utils import (
    DEFAULT_DATE_FORMAT,
    build_link,
    display_base_url,
    first_poster,
    overview_or_placeholder,
    parse_api_datetime,
    require_mapping,
)

logger = logging.getLogger(__name__)

# Order matters: the first non-empty field wins
RELEASE_DATE_FIELDS = [
    ("releaseDate", ""),
    ("inCinemas", "Cinemas: "),
    ("physicalRelease", "Physical: "),
    ("digitalRelease", "Digital: "),
]


def select_release_date(item: dict) -> tuple[str, str]:
    """
    Pick the date to display for a movie

    Returns:
        (raw date string, label prefix)

    Raises:
        DecodeError if the movie carries no date at all
    """
    for field_name, label in RELEASE_DATE_FIELDS:
        value = item.get(field_name)
        if value:
            return value, label
    raise DecodeError(f"no release date for movie {item.get('title', '?')!r}")


class RadarrClient(BaseArrClient):
    """Client to interact with the Radarr calendar"""

    service_name = "radarr"

    def __init__(
        self,
        url: str,
        api_key: str,
        skip_ssl: bool = False,
        timeout: float = 10,
        session: requests.Session | None = None,
        external_url: str | None = None,
        timezone_name: str | None = None,
        tags: str | None = None,
        date_format: str = DEFAULT_DATE_FORMAT,
    ):
        super().__init__(url, api_key, skip_ssl, timeout, session)
        self.external_url = external_url
        self.timezone_name = timezone_name
        self.tags = tags
        self.date_format = date_format

    @classmethod
    def from_config(
        cls, config: ServiceConfig, session: requests.Session | None = None
    ) -> "RadarrClient":
        return cls(
            config.internal_url,
            config.api_key,
            skip_ssl=config.skip_ssl,
            timeout=config.timeout,
            session=session,
            external_url=config.external_url,
            timezone_name=config.timezone,
            tags=config.tags,
            date_format=config.date_format,
        )

    def get_calendar(self) -> List[RadarrCalendarEntry]:
        """Fetch calendar entries"""
        params = {"tags": self.tags} if self.tags else None
        data = self._get("calendar", params=params)
        if not isinstance(data, list):
            raise DecodeError("radarr calendar response is not a list")

        entries = []
        for item in data:
            item = require_mapping(item, "radarr calendar entry")
            raw_date, label = select_release_date(item)
            entry = RadarrCalendarEntry(
                title=item.get("title", ""),
                release_date=parse_api_datetime(raw_date, "release date"),
                date_label=label,
                has_file=bool(item.get("hasFile", False)),
                title_slug=item.get("titleSlug", ""),
                overview=item.get("overview", ""),
                poster_url=first_poster(item.get("images")),
            )
            entries.append(entry)

        return entries

    def get_releases(self, now: datetime | None = None) -> List[Release]:
        """
        Fetch movies from the Radarr calendar

        Radarr has no day window: the calendar's own default range is used
        as is, so `now` only exists to match BaseArrClient.get_releases and
        is ignored.
        """
        tz = resolve_timezone(self.timezone_name)
        entries = self.get_calendar()
        logger.debug(f"Radarr returned {len(entries)} entries")

        base_url = display_base_url(self.external_url, self.url)
        return [
            Release(
                title=entry.title,
                overview=overview_or_placeholder(entry.overview),
                image_cover_url=entry.poster_url,
                air_date=entry.date_label
                + format_in_zone(entry.release_date, tz, self.date_format),
                grabbed=entry.has_file,
                url=build_link(base_url, "movie", entry.title_slug),
                service=self.service_name,
            )
            for entry in entries
        ]


def fetch_releases_from_radarr(
    config: ServiceConfig,
    now: datetime | None = None,
    session: requests.Session | None = None,
) -> List[Release]:
    """Fetch and normalize Radarr releases"""
    with RadarrClient.from_config(config, session=session) as client:
        return client.get_releases(now)
