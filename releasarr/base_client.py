"""
Base API Client for *arr applications (Sonarr, Radarr)
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import requests

from .exceptions import ConfigError, DecodeError, NetworkError, UpstreamError
from .models import Release

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


def check_response(response: requests.Response, service: str) -> Any:
    """Validate status and decode the JSON body of a response"""
    if response.status_code != 200:
        raise UpstreamError(
            f"{service} answered with unexpected status code: {response.status_code}",
            status_code=response.status_code,
        )
    try:
        return response.json()
    except ValueError as e:
        raise DecodeError(f"failed to decode {service} response: {e}") from e


class BaseArrClient(ABC):
    """Base client for *arr applications API"""

    service_name = "arr"

    def __init__(
        self,
        url: str,
        api_key: str,
        skip_ssl: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        if not url:
            raise ConfigError(f"missing {self.service_name} internal-url config")
        if not api_key:
            raise ConfigError(f"missing {self.service_name} apikey config")

        self.url = url.rstrip("/")
        self.api_key = api_key
        self.skip_ssl = skip_ssl
        self.timeout = timeout
        # A session we create is ours to close
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.session.headers.update(
            {"X-Api-Key": api_key, "Content-Type": "application/json"}
        )

    def close(self) -> None:
        """Release the connection pool of a session this client created"""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get(self, endpoint: str, params: dict | None = None) -> Any:
        """Perform a GET request to the API"""
        url = f"{self.url}/api/v3/{endpoint}"
        logger.debug(f"GET {url} params={params}")
        try:
            # Certificate checks are relaxed for this request only
            response = self.session.get(
                url,
                params=params,
                timeout=self.timeout,
                verify=not self.skip_ssl,
            )
        except requests.exceptions.RequestException as e:
            raise NetworkError(
                f"failed to reach {self.service_name} at {self.url}: {e}"
            ) from e
        return check_response(response, self.service_name)

    def test_connection(self) -> bool:
        """Test the connection to the *arr application"""
        try:
            self._get("system/status")
            return True
        except Exception as e:
            logger.error(f"Connection test failed: {e}")
            return False

    @abstractmethod
    def get_releases(self, now: datetime | None = None) -> list[Release]:
        """Fetch and normalize calendar releases - must be implemented by subclasses"""
        pass
