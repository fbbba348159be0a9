"""
Error kinds raised by the release pipelines
"""


class ReleasarrError(Exception):
    """Base class for all releasarr errors"""


class ConfigError(ReleasarrError):
    """Raised when a required option is missing or invalid"""


class TimezoneError(ConfigError):
    """Raised when a timezone name is not a known IANA zone"""


class NetworkError(ReleasarrError):
    """Raised when the upstream service cannot be reached"""


class UpstreamError(ReleasarrError):
    """Raised when the upstream service answers with an unexpected status"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(ReleasarrError):
    """Raised when an upstream payload cannot be decoded"""
