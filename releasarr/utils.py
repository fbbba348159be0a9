"""
Miscellaneous utilities
"""

import logging
from datetime import datetime, timezone

from .exceptions import DecodeError

PLACEHOLDER_OVERVIEW = "TBA"
DEFAULT_DATE_FORMAT = "%m-%d %H:%M"


def setup_logging(log_level: str = "INFO"):
    """Configure logging system"""
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def format_episode_info(
    series_title: str, season: str | None, episode: str | None, title: str | None
) -> str:
    """Format episode information for display"""
    if season is None or episode is None:
        return series_title
    info = f"{series_title} - S{season}E{episode}"
    if title:
        info += f" - {title}"
    return info


def pad_number(value: int) -> str:
    """Render a season/episode number with at least two digits"""
    return f"{value:02d}"


def decode_int(value, field_name: str) -> int:
    """Read an integer field of an API payload"""
    if isinstance(value, bool):
        raise DecodeError(f"invalid {field_name}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"invalid {field_name}: {value!r}") from e


def require_mapping(value, what: str) -> dict:
    """Raise DecodeError unless value is a JSON object"""
    if not isinstance(value, dict):
        raise DecodeError(f"{what} is not an object: {value!r}")
    return value


def overview_or_placeholder(overview: str | None) -> str:
    return overview if overview else PLACEHOLDER_OVERVIEW


def first_poster(images: list | None) -> str:
    """Return the remote URL of the first poster image"""
    if not isinstance(images, list):
        return ""
    for image in images:
        if isinstance(image, dict) and image.get("coverType") == "poster":
            return image.get("remoteUrl") or ""
    return ""


def display_base_url(external_url: str | None, internal_url: str) -> str:
    """External URL when set, internal URL otherwise, without trailing slash"""
    return (external_url or internal_url).rstrip("/")


def build_link(base_url: str, section: str, slug: str | None) -> str:
    """Build a deep link like http://host/series/some-show"""
    if not slug:
        return ""
    return f"{base_url}/{section}/{slug}"


def parse_api_datetime(value: str | None, field_name: str = "date") -> datetime:
    """
    Parse a date returned by an *arr API

    Accepts RFC3339 timestamps ("2024-05-01T01:00:00Z") and plain dates
    ("2024-05-01", taken as UTC midnight).

    Raises:
        DecodeError if the value is empty or unparseable
    """
    if not value:
        raise DecodeError(f"missing {field_name}")
    if not isinstance(value, str):
        raise DecodeError(f"invalid {field_name}: {value!r}")

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise DecodeError(f"failed to parse {field_name} {value!r}: {e}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
