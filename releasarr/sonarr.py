"""
Sonarr API Client
"""

import logging
from datetime import datetime, timezone
from typing import List

import requests

from .base_client import BaseArrClient
from .config import ServiceConfig
from .exceptions import DecodeError
from .models import Release, SonarrCalendarEntry
from .timewindow import compute_window, format_in_zone, resolve_timezone
from .utils import (
    DEFAULT_DATE_FORMAT,
    build_link,
    decode_int,
    display_base_url,
    first_poster,
    overview_or_placeholder,
    pad_number,
    parse_api_datetime,
    require_mapping,
)

logger = logging.getLogger(__name__)


class SonarrClient(BaseArrClient):
    """Client to interact with the Sonarr calendar"""

    service_name = "sonarr"

    def __init__(
        self,
        url: str,
        api_key: str,
        skip_ssl: bool = False,
        timeout: float = 10,
        session: requests.Session | None = None,
        external_url: str | None = None,
        timezone_name: str | None = None,
        day_offset: int = 0,
        from_previous_days: int = 0,
        tags: str | None = None,
        internal_thumbnail: bool = False,
        date_format: str = DEFAULT_DATE_FORMAT,
    ):
        super().__init__(url, api_key, skip_ssl, timeout, session)
        self.external_url = external_url
        self.timezone_name = timezone_name
        self.day_offset = day_offset
        self.from_previous_days = from_previous_days
        self.tags = tags
        self.internal_thumbnail = internal_thumbnail
        self.date_format = date_format

    @classmethod
    def from_config(
        cls, config: ServiceConfig, session: requests.Session | None = None
    ) -> "SonarrClient":
        return cls(
            config.internal_url,
            config.api_key,
            skip_ssl=config.skip_ssl,
            timeout=config.timeout,
            session=session,
            external_url=config.external_url,
            timezone_name=config.timezone,
            day_offset=config.day_offset,
            from_previous_days=config.from_previous_days,
            tags=config.tags,
            internal_thumbnail=config.internal_thumbnail,
            date_format=config.date_format,
        )

    def get_calendar(self, params: dict) -> List[SonarrCalendarEntry]:
        """Fetch calendar entries"""
        data = self._get("calendar", params=params)
        if not isinstance(data, list):
            raise DecodeError("sonarr calendar response is not a list")

        entries = []
        for item in data:
            item = require_mapping(item, "sonarr calendar entry")
            series = require_mapping(item.get("series") or {}, "sonarr series")
            entry = SonarrCalendarEntry(
                series_id=decode_int(item.get("seriesId", 0), "series id"),
                series_title=series.get("title", ""),
                title_slug=series.get("titleSlug", ""),
                season_number=decode_int(item.get("seasonNumber", 0), "season number"),
                episode_number=decode_int(item.get("episodeNumber", 0), "episode number"),
                air_date_utc=parse_api_datetime(item.get("airDateUtc"), "air date"),
                has_file=bool(item.get("hasFile", False)),
                title=item.get("title", ""),
                overview=item.get("overview", ""),
                poster_url=first_poster(series.get("images")),
            )
            entries.append(entry)

        return entries

    def get_releases(self, now: datetime | None = None) -> List[Release]:
        """Fetch the episodes airing in the configured day window"""
        tz = resolve_timezone(self.timezone_name)
        window = compute_window(
            now or datetime.now(timezone.utc),
            tz,
            day_offset=self.day_offset,
            previous_days=self.from_previous_days,
        )

        params = {"includeSeries": "true"}
        if self.tags:
            params["tags"] = self.tags
        params.update(window.query_params())

        entries = self.get_calendar(params)
        kept = [e for e in entries if window.contains(e.air_date_utc)]
        logger.debug(
            f"Sonarr returned {len(entries)} entries, {len(kept)} in window"
        )

        base_url = display_base_url(self.external_url, self.url)
        releases = []
        for entry in kept:
            season_number = pad_number(entry.season_number)
            episode_number = pad_number(entry.episode_number)
            releases.append(
                Release(
                    title=entry.series_title,
                    overview=overview_or_placeholder(entry.overview),
                    image_cover_url=self._cover_url(entry, base_url),
                    air_date=format_in_zone(entry.air_date_utc, tz, self.date_format),
                    grabbed=entry.has_file,
                    url=build_link(base_url, "series", entry.title_slug),
                    service=self.service_name,
                    episode_title=entry.title,
                    season_number=season_number,
                    episode_number=episode_number,
                )
            )

        return releases

    def _cover_url(self, entry: SonarrCalendarEntry, base_url: str) -> str:
        if not self.internal_thumbnail:
            return entry.poster_url
        # Exposes the API key to whoever can read the page
        return (
            f"{base_url}/api/v3/mediacover/{entry.series_id}/poster-500.jpg"
            f"?apikey={self.api_key}"
        )


def fetch_releases_from_sonarr(
    config: ServiceConfig,
    now: datetime | None = None,
    session: requests.Session | None = None,
) -> List[Release]:
    """Fetch and normalize today's Sonarr releases"""
    with SonarrClient.from_config(config, session=session) as client:
        return client.get_releases(now)
