"""
Data models for Releasarr
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List


@dataclass
class SonarrCalendarEntry:
    """Represents an episode returned by the Sonarr calendar"""

    series_id: int
    series_title: str
    title_slug: str
    season_number: int
    episode_number: int
    air_date_utc: datetime
    has_file: bool
    title: str = ""
    overview: str = ""
    poster_url: str = ""


@dataclass
class RadarrCalendarEntry:
    """Represents a movie returned by the Radarr calendar"""

    title: str
    release_date: datetime
    date_label: str
    has_file: bool
    title_slug: str = ""
    overview: str = ""
    poster_url: str = ""


@dataclass
class Release:
    """A release ready for display"""

    title: str
    overview: str
    image_cover_url: str
    air_date: str
    grabbed: bool
    url: str
    service: str
    episode_title: str | None = None
    season_number: str | None = None
    episode_number: str | None = None


@dataclass
class FreshRSSFeed:
    """Represents a feed subscription in FreshRSS"""

    id: int
    title: str
    url: str
    site_url: str = ""
    favicon_id: int | None = None
    last_updated_on_time: int | None = None


@dataclass
class FeedRequest:
    """A feed to hand over to the RSS fetcher"""

    url: str
    title: str = ""
    # Ask the fetcher for descriptions and categories too
    is_detailed: bool = False


@dataclass
class FeedItem:
    """An item produced by the RSS fetcher"""

    title: str
    link: str
    channel_name: str = ""
    published_at: datetime | None = None
    description: str = ""
    categories: List[str] = field(default_factory=list)
    image_url: str = ""
