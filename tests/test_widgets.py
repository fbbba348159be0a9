"""
Tests for widget lifecycle and rendering
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from releasarr.config import ServiceConfig, WidgetConfig
from releasarr.exceptions import ConfigError, DecodeError, UpstreamError
from releasarr.models import FeedItem
from releasarr.rendering import JinjaRenderer, render_page
from releasarr.widgets import (
    ArrReleasesWidget,
    FreshRSSWidget,
    RadarrReleasesWidget,
    SonarrReleasesWidget,
    create_widget,
)


@pytest.fixture
def renderer():
    return JinjaRenderer()


@pytest.fixture
def sonarr_widget_config(sonarr_config):
    return WidgetConfig(type="sonarr-releases", service=sonarr_config)


class TestCreateWidget:
    def test_defaults(self, renderer, sonarr_widget_config):
        widget = create_widget(sonarr_widget_config, renderer)

        assert isinstance(widget, SonarrReleasesWidget)
        assert widget.title == "Sonarr: Releasing Today"
        assert widget.cache_duration == 300
        assert widget.collapse_after == 5

    @pytest.mark.parametrize(
        "widget_type,cls,title",
        [
            ("radarr-releases", RadarrReleasesWidget, "Radarr: Releasing Today"),
            ("arr-releases", ArrReleasesWidget, "Releasing Today"),
            ("freshrss", FreshRSSWidget, "FreshRSS Feed"),
        ],
    )
    def test_widget_types(self, renderer, widget_type, cls, title):
        widget = create_widget(WidgetConfig(type=widget_type), renderer)
        assert isinstance(widget, cls)
        assert widget.title == title

    def test_freshrss_defaults(self, renderer):
        widget = create_widget(WidgetConfig(type="freshrss"), renderer)
        assert widget.cache_duration == 3600
        assert widget.limit == 25

    @pytest.mark.parametrize("collapse_after,expected", [(0, 5), (-5, 5), (-1, -1), (8, 8)])
    def test_collapse_after(self, renderer, collapse_after, expected):
        config = WidgetConfig(type="arr-releases", collapse_after=collapse_after)
        assert create_widget(config, renderer).collapse_after == expected

    def test_explicit_title_and_cache_duration(self, renderer):
        config = WidgetConfig(type="arr-releases", title="TV", cache_duration=60)
        widget = create_widget(config, renderer)
        assert (widget.title, widget.cache_duration) == ("TV", 60)

    def test_unknown_type(self, renderer):
        with pytest.raises(ConfigError):
            create_widget(WidgetConfig(type="weather"), renderer)


class TestUpdate:
    def test_successful_update(
        self, now, session, make_response, sonarr_entry, renderer, sonarr_widget_config
    ):
        session.get.return_value = make_response([sonarr_entry()])
        widget = create_widget(sonarr_widget_config, renderer, session=session)

        widget.update(now)

        assert widget.content_available is True
        assert widget.error is None
        assert [r.title for r in widget.releases] == ["The Show"]
        assert widget.last_updated == now

    def test_first_failure_is_an_error_state(
        self, now, session, make_response, renderer, sonarr_widget_config
    ):
        session.get.return_value = make_response({}, status_code=500)
        widget = create_widget(sonarr_widget_config, renderer, session=session)

        widget.update(now)

        assert widget.content_available is False
        assert isinstance(widget.error, UpstreamError)
        assert widget.notice is False
        assert widget.releases == []

    def test_later_failure_keeps_previous_data(
        self, now, session, make_response, sonarr_entry, renderer, sonarr_widget_config
    ):
        widget = create_widget(sonarr_widget_config, renderer, session=session)
        session.get.return_value = make_response([sonarr_entry()])
        widget.update(now)

        session.get.return_value = make_response({}, status_code=502)
        widget.update(now + timedelta(minutes=5))

        assert widget.content_available is True
        assert widget.notice is True
        assert isinstance(widget.error, UpstreamError)
        assert len(widget.releases) == 1

    def test_recovery_clears_notice(
        self, now, session, make_response, sonarr_entry, renderer, sonarr_widget_config
    ):
        widget = create_widget(sonarr_widget_config, renderer, session=session)
        session.get.return_value = make_response([sonarr_entry()])
        widget.update(now)
        session.get.return_value = make_response({}, status_code=502)
        widget.update(now)
        session.get.return_value = make_response([])
        widget.update(now)

        assert widget.notice is False
        assert widget.error is None
        assert widget.releases == []

    def test_requires_update_follows_cache_duration(
        self, now, session, make_response, renderer, sonarr_widget_config
    ):
        session.get.return_value = make_response([])
        widget = create_widget(sonarr_widget_config, renderer, session=session)

        assert widget.requires_update(now) is True
        widget.update(now)
        assert widget.requires_update(now + timedelta(minutes=4)) is False
        assert widget.requires_update(now + timedelta(minutes=5)) is True

    def test_missing_api_key_is_reported(self, now, session, renderer):
        config = WidgetConfig(
            type="sonarr-releases", service=ServiceConfig(internal_url="http://sonarr")
        )
        widget = create_widget(config, renderer, session=session)

        widget.update(now)

        assert isinstance(widget.error, ConfigError)
        assert session.get.call_count == 0


class TestFreshRSSWidget:
    def _config(self):
        return WidgetConfig(
            type="freshrss",
            freshrss_url="https://rss.example.com",
            freshrss_user="alice",
            freshrss_api_pass="secret",
            limit=2,
        )

    def test_items_are_limited(self, now, session, make_response, renderer):
        session.post.return_value = make_response(
            {"auth": 1, "feeds": [{"id": 1, "title": "F", "url": "https://f/rss"}]}
        )
        fetcher = MagicMock(
            return_value=[FeedItem(title=f"item {i}", link=f"https://f/{i}") for i in range(5)]
        )
        widget = create_widget(
            self._config(), renderer, feed_fetcher=fetcher, session=session
        )

        widget.update(now)

        assert [i.title for i in widget.items] == ["item 0", "item 1"]
        fetcher.assert_called_once()

    def test_without_fetcher(self, now, session, renderer):
        widget = create_widget(self._config(), renderer, session=session)

        widget.update(now)

        assert isinstance(widget.error, ConfigError)
        assert session.post.call_count == 0


class TestRender:
    def test_releases_are_rendered(
        self, now, session, make_response, sonarr_entry, renderer, sonarr_widget_config
    ):
        session.get.return_value = make_response(
            [sonarr_entry(title="<b>Bold</b>")]
        )
        widget = create_widget(sonarr_widget_config, renderer, session=session)
        widget.update(now)

        html = widget.render()

        assert "Sonarr: Releasing Today" in html
        assert "https://tv.example.com/series/the-show" in html
        assert "S02E05" in html
        assert "&lt;b&gt;Bold&lt;/b&gt;" in html
        assert "release-grabbed" in html

    def test_error_state_is_rendered(
        self, now, session, make_response, renderer, sonarr_widget_config
    ):
        session.get.return_value = make_response({}, status_code=500)
        widget = create_widget(sonarr_widget_config, renderer, session=session)
        widget.update(now)

        html = widget.render()

        assert "widget-error" in html
        assert "500" in html

    def test_empty_rss_widget(self, renderer):
        widget = create_widget(WidgetConfig(type="freshrss"), renderer)
        widget.content_available = True

        assert "No items were returned from the feeds." in widget.render()

    def test_page_wraps_fragments(self):
        html = render_page(["<div>one</div>", "<div>two</div>"], title="Home")
        assert "<title>Home</title>" in html
        assert "<div>one</div>" in html and "<div>two</div>" in html


class TestMalformedUpstream:
    """One bad calendar entry puts the widget in its error state"""

    @pytest.mark.parametrize("bad_entry", ["oops", {"seasonNumber": None}])
    def test_first_update(
        self,
        now,
        session,
        make_response,
        sonarr_entry,
        renderer,
        sonarr_widget_config,
        bad_entry,
    ):
        if isinstance(bad_entry, dict):
            bad_entry = sonarr_entry(**bad_entry)
        session.get.return_value = make_response([sonarr_entry(), bad_entry])
        widget = create_widget(sonarr_widget_config, renderer, session=session)

        widget.update(now)

        assert widget.content_available is False
        assert isinstance(widget.error, DecodeError)
        assert "widget-error" in widget.render()

    def test_later_update_keeps_previous_data(
        self, now, session, make_response, sonarr_entry, renderer, sonarr_widget_config
    ):
        widget = create_widget(sonarr_widget_config, renderer, session=session)
        session.get.return_value = make_response([sonarr_entry()])
        widget.update(now)

        session.get.return_value = make_response([sonarr_entry(seasonNumber=None)])
        widget.update(now + timedelta(minutes=5))

        assert widget.notice is True
        assert isinstance(widget.error, DecodeError)
        assert len(widget.releases) == 1


class TestFreshRSSDisplay:
    ITEMS = [
        FeedItem(
            title="Release notes",
            link="https://f/1",
            channel_name="Planet Python",
            description="What changed",
            categories=["python"],
            image_url="https://f/1.png",
        )
    ]

    def _widget(self, renderer, **options):
        config = WidgetConfig(type="freshrss", **options)
        widget = create_widget(config, renderer)
        widget.items = list(self.ITEMS)
        widget.content_available = True
        return widget

    def test_negative_heights_are_clamped(self, renderer):
        widget = self._widget(renderer, thumbnail_height=-3, card_height=-1)
        assert (widget.thumbnail_height, widget.card_height) == (0, 0)

    def test_positive_heights_are_kept(self, renderer):
        widget = self._widget(renderer, thumbnail_height=8, card_height=14.5)
        assert (widget.thumbnail_height, widget.card_height) == (8, 14.5)

    @pytest.mark.parametrize(
        "style,css_class",
        [
            ("list", "rss-style-list"),
            ("horizontal-cards", "rss-style-horizontal-cards"),
            ("horizontal-cards-2", "rss-style-horizontal-cards-2"),
            ("detailed-list", "rss-style-detailed-list"),
            ("mosaic", "rss-style-list"),
        ],
    )
    def test_template_follows_style(self, renderer, style, css_class):
        html = self._widget(renderer, style=style).render()
        assert f'{css_class}"' in html
        assert "Release notes" in html

    def test_detailed_list_shows_description(self, renderer):
        html = self._widget(renderer, style="detailed-list", thumbnail_height=6).render()
        assert "What changed" in html
        assert "<li>python</li>" in html
        assert "height: 6rem" in html

    def test_card_height(self, renderer):
        html = self._widget(renderer, style="horizontal-cards", card_height=12).render()
        assert "height: 12rem" in html

    def test_single_line_titles(self, renderer):
        assert "single-line" in self._widget(renderer, single_line_titles=True).render()
        assert "single-line" not in self._widget(renderer).render()

    def test_detailed_list_asks_for_details(self, now, session, make_response, renderer):
        session.post.return_value = make_response(
            {"auth": 1, "feeds": [{"id": 1, "title": "F", "url": "https://f/rss"}]}
        )
        fetcher = MagicMock(return_value=[])
        config = WidgetConfig(
            type="freshrss",
            freshrss_url="https://rss.example.com",
            freshrss_user="alice",
            style="detailed-list",
        )
        widget = create_widget(config, renderer, feed_fetcher=fetcher, session=session)

        widget.update(now)

        (feed_requests,), _ = fetcher.call_args
        assert feed_requests[0].is_detailed is True
