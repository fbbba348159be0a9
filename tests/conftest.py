"""
Shared fixtures: fake HTTP session and upstream payloads
"""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from releasarr.config import ServiceConfig

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def build_response(payload=None, status_code=200, body: bytes | None = None):
    response = requests.Response()
    response.status_code = status_code
    response._content = body if body is not None else json.dumps(payload).encode()
    response.encoding = "utf-8"
    return response


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def session():
    """A requests.Session stand-in; set session.get.return_value per test"""
    fake = MagicMock()
    fake.headers = {}
    return fake


@pytest.fixture
def sonarr_entry():
    def factory(air_date="2024-05-01T10:00:00Z", **overrides):
        entry = {
            "seriesId": 7,
            "seasonNumber": 2,
            "episodeNumber": 5,
            "title": "The Return",
            "overview": "Everyone comes back.",
            "airDateUtc": air_date,
            "hasFile": True,
            "series": {
                "title": "The Show",
                "titleSlug": "the-show",
                "images": [
                    {"coverType": "banner", "remoteUrl": "http://img/banner.jpg"},
                    {"coverType": "poster", "remoteUrl": "http://img/poster.jpg"},
                ],
            },
        }
        entry.update(overrides)
        return entry

    return factory


@pytest.fixture
def radarr_entry():
    def factory(**overrides):
        entry = {
            "title": "The Movie",
            "titleSlug": "the-movie-2024",
            "overview": "A movie.",
            "hasFile": False,
            "images": [
                {"coverType": "fanart", "remoteUrl": "http://img/fanart.jpg"},
                {"coverType": "poster", "remoteUrl": "http://img/movie.jpg"},
            ],
            "inCinemas": "2024-05-01T00:00:00Z",
        }
        entry.update(overrides)
        return entry

    return factory


@pytest.fixture
def sonarr_config():
    return ServiceConfig(
        internal_url="http://sonarr:8989/",
        api_key="sonarr-key",
        external_url="https://tv.example.com/",
        timezone="UTC",
    )


@pytest.fixture
def radarr_config():
    return ServiceConfig(
        internal_url="http://radarr:7878",
        api_key="radarr-key",
        timezone="UTC",
    )
