"""
Dashboard widgets

A widget owns its configuration, refreshes its data through one of the
release pipelines and renders itself through an injected Renderer.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import List

import requests

from .aggregator import fetch_releases_from_arr_stack
from .config import WidgetConfig
from .exceptions import ConfigError, ReleasarrError
from .freshrss import FeedFetcher, get_items_from_freshrss_feeds
from .models import FeedItem, Release
from .radarr import fetch_releases_from_radarr
from .rendering import Renderer
from .sonarr import fetch_releases_from_sonarr

logger = logging.getLogger(__name__)

DEFAULT_COLLAPSE_AFTER = 5


class Widget(ABC):
    """Base class for all widgets"""

    template_name = ""
    default_title = ""
    default_cache_duration = 5 * 60.0

    def __init__(
        self,
        config: WidgetConfig,
        renderer: Renderer,
        session: requests.Session | None = None,
    ):
        self.config = config
        self.renderer = renderer
        self.session = session
        self.type = config.type
        self.title = config.title or ""
        self.cache_duration = config.cache_duration or 0
        self.collapse_after = config.collapse_after
        self.error: ReleasarrError | None = None
        self.notice = False
        self.content_available = False
        self.last_updated: datetime | None = None

    def initialize(self) -> "Widget":
        """Apply defaults to unset options"""
        if not self.title:
            self.title = self.default_title
        if not self.cache_duration:
            self.cache_duration = self.default_cache_duration
        if self.collapse_after == 0 or self.collapse_after < -1:
            self.collapse_after = DEFAULT_COLLAPSE_AFTER
        return self

    def requires_update(self, now: datetime | None = None) -> bool:
        if self.last_updated is None:
            return True
        now = now or datetime.now(timezone.utc)
        return now - self.last_updated >= timedelta(seconds=self.cache_duration)

    def update(self, now: datetime | None = None) -> None:
        """Refresh the widget data, keeping the previous data on failure"""
        now = now or datetime.now(timezone.utc)
        try:
            self.refresh(now)
        except ReleasarrError as e:
            self._handle_update_error(e)
        else:
            self.error = None
            self.notice = False
            self.content_available = True
        finally:
            self.last_updated = now

    def _handle_update_error(self, error: ReleasarrError) -> None:
        self.error = error
        if self.content_available:
            logger.warning(f"{self.title}: update failed, keeping previous data: {error}")
            self.notice = True
        else:
            logger.error(f"{self.title}: update failed: {error}")
            self.notice = False

    @abstractmethod
    def refresh(self, now: datetime) -> None:
        """Fetch fresh data - must be implemented by subclasses"""
        pass

    def render(self) -> str:
        return self.renderer.render(self.template_name, {"widget": self})


class ReleasesWidget(Widget):
    """Widget listing calendar releases"""

    template_name = "releases.html"

    def __init__(self, config, renderer, session=None):
        super().__init__(config, renderer, session)
        self.releases: List[Release] = []


class SonarrReleasesWidget(ReleasesWidget):
    default_title = "Sonarr: Releasing Today"

    def refresh(self, now: datetime) -> None:
        self.releases = fetch_releases_from_sonarr(
            self.config.service, now, session=self.session
        )


class RadarrReleasesWidget(ReleasesWidget):
    default_title = "Radarr: Releasing Today"

    def refresh(self, now: datetime) -> None:
        self.releases = fetch_releases_from_radarr(
            self.config.service, now, session=self.session
        )


class ArrReleasesWidget(ReleasesWidget):
    default_title = "Releasing Today"

    def refresh(self, now: datetime) -> None:
        self.releases = fetch_releases_from_arr_stack(
            self.config.sonarr, self.config.radarr, now, session=self.session
        )


class FreshRSSWidget(Widget):
    """Widget listing the latest items of the feeds subscribed to in FreshRSS"""

    template_name = "rss-list.html"
    default_title = "FreshRSS Feed"
    default_cache_duration = 60 * 60.0
    default_limit = 25
    style_templates = {
        "horizontal-cards": "rss-horizontal-cards.html",
        "horizontal-cards-2": "rss-horizontal-cards-2.html",
        "detailed-list": "rss-detailed-list.html",
    }

    def __init__(self, config, renderer, session=None, feed_fetcher=None):
        super().__init__(config, renderer, session)
        self.feed_fetcher: FeedFetcher | None = feed_fetcher
        self.items: List[FeedItem] = []
        self.limit = config.limit
        self.style = config.style
        self.thumbnail_height = config.thumbnail_height
        self.card_height = config.card_height
        self.single_line_titles = config.single_line_titles
        self.no_items_message = "No items were returned from the feeds."

    def initialize(self) -> "FreshRSSWidget":
        super().initialize()
        if self.limit <= 0:
            self.limit = self.default_limit
        if self.thumbnail_height < 0:
            self.thumbnail_height = 0
        if self.card_height < 0:
            self.card_height = 0
        return self

    @property
    def is_detailed(self) -> bool:
        return self.style == "detailed-list"

    def refresh(self, now: datetime) -> None:
        if self.feed_fetcher is None:
            raise ConfigError("no RSS feed fetcher available for the freshrss widget")
        items = get_items_from_freshrss_feeds(
            self.config.freshrss_url,
            self.config.freshrss_user,
            self.config.freshrss_api_pass,
            self.feed_fetcher,
            skip_ssl=self.config.skip_ssl,
            session=self.session,
            detailed=self.is_detailed,
        )
        self.items = items[: self.limit]

    def render(self) -> str:
        # Unknown styles fall back to the plain list
        template = self.style_templates.get(self.style, self.template_name)
        return self.renderer.render(template, {"widget": self})


WIDGET_CLASSES = {
    "sonarr-releases": SonarrReleasesWidget,
    "radarr-releases": RadarrReleasesWidget,
    "arr-releases": ArrReleasesWidget,
}


def create_widget(
    config: WidgetConfig,
    renderer: Renderer,
    feed_fetcher: FeedFetcher | None = None,
    session: requests.Session | None = None,
) -> Widget:
    """Instantiate and initialize the widget described by config"""
    if config.type == "freshrss":
        widget: Widget = FreshRSSWidget(
            config, renderer, session=session, feed_fetcher=feed_fetcher
        )
    elif config.type in WIDGET_CLASSES:
        widget = WIDGET_CLASSES[config.type](config, renderer, session=session)
    else:
        raise ConfigError(f"unknown widget type: {config.type}")
    return widget.initialize()
