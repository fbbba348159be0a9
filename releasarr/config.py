"""
Configuration management
"""

import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Protocol

import yaml

from .exceptions import ConfigError
from .utils import DEFAULT_DATE_FORMAT

WIDGET_TYPES = ("sonarr-releases", "radarr-releases", "arr-releases", "freshrss")

_ENV_REFERENCE = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_]*)\}$")
_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600}

_TRUE_VALUES = {"true", "yes", "on", "1"}
_FALSE_VALUES = {"false", "no", "off", "0", ""}

# Options a widget accepts besides its type and cache-duration; service
# sections are parsed separately
_COMMON_WIDGET_OPTIONS = {"title", "collapse_after"}
_WIDGET_OPTIONS = {
    "freshrss": {
        "freshrss_url",
        "freshrss_user",
        "freshrss_api_pass",
        "skip_ssl",
        "limit",
        "style",
        "thumbnail_height",
        "card_height",
        "single_line_titles",
    },
}

# YAML spellings that differ from the attribute names
_SERVICE_ALIASES = {
    "endpoint": "internal_url",
    "apikey": "api_key",
    "skipssl": "skip_ssl",
    "internal_insecure_thumbnail": "internal_thumbnail",
}


def normalize_keys(data: dict) -> dict:
    """Turn kebab-case YAML keys into attribute names"""
    return {str(key).replace("-", "_"): value for key, value in data.items()}


def expand_env(value: Any) -> Any:
    """Replace a "${NAME}" value with the NAME environment variable"""
    if not isinstance(value, str):
        return value
    match = _ENV_REFERENCE.match(value.strip())
    if not match:
        return value
    name = match.group(1)
    if name not in os.environ:
        raise ConfigError(f"environment variable {name} is not set")
    return os.environ[name]


def parse_duration(value: Any) -> float:
    """
    Parse a duration into seconds

    Accepts numbers (seconds) and Go-style strings such as "30s", "5m" or "1h30m".
    """
    if isinstance(value, bool):
        raise ConfigError(f"invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip()
    if text.isdigit():
        return float(text)

    parts = _DURATION_PART.findall(text)
    if not parts or "".join(n + u for n, u in parts) != text:
        raise ConfigError(f"invalid duration: {value!r}")
    return sum(float(number) * _DURATION_UNITS[unit] for number, unit in parts)


def parse_bool(value: Any, name: str = "option") -> bool:
    """
    Parse a boolean option

    YAML booleans are taken as is. Strings, as produced by "${VAR}"
    references, must spell true/yes/on/1 or false/no/off/0.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be true or false, got {value!r}")


def _normalize_tags(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, (list, tuple)):
        return ",".join(str(tag) for tag in value)
    return str(value)


@dataclass(frozen=True)
class ServiceConfig:
    """Connection and display settings for one *arr service"""

    internal_url: str = ""
    api_key: str = ""
    external_url: str | None = None
    skip_ssl: bool = False
    timezone: str | None = None
    day_offset: int = 0
    from_previous_days: int = 0
    tags: str | None = None
    internal_thumbnail: bool = False
    date_format: str = DEFAULT_DATE_FORMAT
    timeout: float = 10
    enable: bool = True

    @classmethod
    def from_dict(cls, data: dict | None, name: str = "service") -> "ServiceConfig":
        """Build a service configuration from its YAML mapping"""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"{name} configuration must be a mapping")

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in normalize_keys(data).items():
            key = _SERVICE_ALIASES.get(key, key)
            if key not in known:
                raise ConfigError(f"unknown {name} option: {key}")
            values[key] = expand_env(value)

        if "tags" in values:
            values["tags"] = _normalize_tags(values["tags"])
        for key in ("day_offset", "from_previous_days"):
            if key in values:
                try:
                    values[key] = int(values[key] or 0)
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"{name} {key} must be an integer") from e
        if "timeout" in values:
            values["timeout"] = parse_duration(values["timeout"])
        for key in ("skip_ssl", "internal_thumbnail", "enable"):
            if key in values:
                values[key] = parse_bool(values[key], f"{name} {key}")
        for key in ("internal_url", "api_key"):
            if values.get(key) is None:
                values.pop(key, None)
            elif key in values:
                values[key] = str(values[key])

        return cls(**values)


@dataclass
class WidgetConfig:
    """One widget entry of the configuration file"""

    type: str
    title: str | None = None
    cache_duration: float | None = None
    collapse_after: int = 0
    # sonarr-releases / radarr-releases
    service: ServiceConfig | None = None
    # arr-releases
    sonarr: ServiceConfig | None = None
    radarr: ServiceConfig | None = None
    # freshrss
    freshrss_url: str = ""
    freshrss_user: str = ""
    freshrss_api_pass: str = ""
    skip_ssl: bool = False
    limit: int = 0
    style: str = "list"
    thumbnail_height: float = 0
    card_height: float = 0
    single_line_titles: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "WidgetConfig":
        if not isinstance(data, dict):
            raise ConfigError("widget configuration must be a mapping")

        data = normalize_keys(data)
        widget_type = data.pop("type", None)
        if widget_type not in WIDGET_TYPES:
            raise ConfigError(
                f"unknown widget type: {widget_type!r} "
                f"(expected one of {', '.join(WIDGET_TYPES)})"
            )

        values: dict[str, Any] = {"type": widget_type}
        if widget_type in ("sonarr-releases", "radarr-releases"):
            values["service"] = ServiceConfig.from_dict(
                data.pop("config", None), widget_type.split("-")[0]
            )
        elif widget_type == "arr-releases":
            for name in ("sonarr", "radarr"):
                section = data.pop(name, None)
                values[name] = (
                    ServiceConfig.from_dict(section, name)
                    if section is not None
                    else ServiceConfig(enable=False)
                )

        if "cache_duration" in data:
            values["cache_duration"] = parse_duration(data.pop("cache_duration"))

        known = _COMMON_WIDGET_OPTIONS | _WIDGET_OPTIONS.get(widget_type, set())
        for key, value in data.items():
            if key not in known:
                raise ConfigError(f"unknown {widget_type} option: {key}")
            values[key] = expand_env(value)

        for key in ("collapse_after", "limit"):
            if key in values:
                try:
                    values[key] = int(values[key] or 0)
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"{widget_type} {key} must be an integer") from e
        for key in ("thumbnail_height", "card_height"):
            if key in values:
                try:
                    values[key] = float(values[key] or 0)
                except (TypeError, ValueError) as e:
                    raise ConfigError(f"{widget_type} {key} must be a number") from e
        for key in ("skip_ssl", "single_line_titles"):
            if key in values:
                values[key] = parse_bool(values[key], f"{widget_type} {key}")

        return cls(**values)


@dataclass
class Config:
    """Application configuration"""

    widgets: list[WidgetConfig] = field(default_factory=list)
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict | None) -> "Config":
        data = normalize_keys(data or {})
        widgets = data.get("widgets") or []
        if not isinstance(widgets, list):
            raise ConfigError("widgets must be a list")

        return cls(
            widgets=[WidgetConfig.from_dict(w) for w in widgets],
            log_level=str(data.get("log_level", "INFO")),
        )

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """Load configuration from a YAML file"""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data)

    @classmethod
    def from_env_and_file(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file and/or environment variables"""
        config = cls()

        # Load from file if specified
        if config_path and config_path.exists():
            config = cls.from_file(config_path)

        # Environment variables describe a single arr-releases widget
        if not config.widgets:
            widget = arr_widget_from_values(
                os.getenv("SONARR_URL"),
                os.getenv("SONARR_API_KEY"),
                os.getenv("RADARR_URL"),
                os.getenv("RADARR_API_KEY"),
            )
            if widget:
                config.widgets.append(widget)

        if not config.widgets:
            raise ConfigError(
                "Incomplete configuration. At least one widget is required. "
                "Use a config file or environment variables."
            )

        return config

    def arr_widgets(self) -> list[WidgetConfig]:
        return [w for w in self.widgets if w.type != "freshrss"]


def arr_widget_from_values(
    sonarr_url: str | None,
    sonarr_api_key: str | None,
    radarr_url: str | None,
    radarr_api_key: str | None,
) -> WidgetConfig | None:
    """Build an arr-releases widget from plain URL/key pairs"""
    sonarr = ServiceConfig(
        internal_url=sonarr_url or "",
        api_key=sonarr_api_key or "",
        enable=bool(sonarr_url),
    )
    radarr = ServiceConfig(
        internal_url=radarr_url or "",
        api_key=radarr_api_key or "",
        enable=bool(radarr_url),
    )
    if not sonarr.enable and not radarr.enable:
        return None
    return WidgetConfig(type="arr-releases", sonarr=sonarr, radarr=radarr)


class ConfigSource(Protocol):
    """Anything able to produce a Config"""

    def load(self) -> Config: ...


class FileConfigSource:
    """Configuration read from a YAML file, with environment fallbacks"""

    def __init__(self, path: Path | None):
        self.path = path

    def load(self) -> Config:
        return Config.from_env_and_file(self.path)
