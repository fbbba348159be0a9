"""
FreshRSS client using the Fever API
"""

import hashlib
import logging
from typing import Callable, List

import requests

from .base_client import DEFAULT_TIMEOUT, check_response
from .exceptions import ConfigError, DecodeError, NetworkError, UpstreamError
from .models import FeedItem, FeedRequest, FreshRSSFeed
from .utils import decode_int, require_mapping

logger = logging.getLogger(__name__)

# Fetches and parses RSS feeds; supplied by the host application
FeedFetcher = Callable[[List[FeedRequest]], List[FeedItem]]


def fever_api_key(user: str, password: str) -> str:
    """Fever API key: md5 of "user:password" as hex"""
    return hashlib.md5(f"{user}:{password}".encode("utf-8")).hexdigest()


class FreshRSSClient:
    """Client to list the feeds a FreshRSS user subscribes to"""

    service_name = "freshrss"

    def __init__(
        self,
        url: str,
        user: str,
        api_pass: str,
        skip_ssl: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        if not url:
            raise ConfigError("missing freshrss-url config")
        if not user:
            raise ConfigError("missing freshrss-user config")

        self.url = url.rstrip("/")
        self.user = user
        self.api_key = fever_api_key(user, api_pass or "")
        self.skip_ssl = skip_ssl
        self.timeout = timeout
        # A session we create is ours to close
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "FreshRSSClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def get_feeds(self) -> List[FreshRSSFeed]:
        """Fetch the feed subscriptions"""
        url = f"{self.url}/api/fever.php?api"
        try:
            response = self.session.post(
                url,
                data={"api_key": self.api_key, "feeds": ""},
                timeout=self.timeout,
                verify=not self.skip_ssl,
            )
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"failed to reach freshrss at {self.url}: {e}") from e

        data = check_response(response, self.service_name)
        if not isinstance(data, dict):
            raise DecodeError("freshrss response is not an object")
        if data.get("auth") == 0:
            raise UpstreamError(
                f"freshrss rejected the credentials of {self.user}",
                status_code=response.status_code,
            )

        raw_feeds = data.get("feeds") or []
        if not isinstance(raw_feeds, list):
            raise DecodeError("freshrss feeds field is not a list")

        feeds = []
        for item in raw_feeds:
            item = require_mapping(item, "freshrss feed")
            feeds.append(
                FreshRSSFeed(
                    id=decode_int(item.get("id", 0), "feed id"),
                    title=item.get("title", ""),
                    url=item.get("url", ""),
                    site_url=item.get("site_url", ""),
                    favicon_id=item.get("favicon_id"),
                    last_updated_on_time=item.get("last_updated_on_time"),
                )
            )

        logger.debug(f"FreshRSS returned {len(feeds)} feeds")
        return feeds

    def get_feed_requests(self, detailed: bool = False) -> List[FeedRequest]:
        return [
            FeedRequest(url=f.url, title=f.title, is_detailed=detailed)
            for f in self.get_feeds()
        ]


def get_items_from_freshrss_feeds(
    url: str,
    user: str,
    api_pass: str,
    feed_fetcher: FeedFetcher,
    skip_ssl: bool = False,
    session: requests.Session | None = None,
    detailed: bool = False,
) -> List[FeedItem]:
    """Fetch the items of every feed subscribed to in FreshRSS"""
    with FreshRSSClient(
        url, user, api_pass, skip_ssl=skip_ssl, session=session
    ) as client:
        feed_requests = client.get_feed_requests(detailed)
    return feed_fetcher(feed_requests)
