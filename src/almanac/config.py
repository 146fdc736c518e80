"""Configuration management for almanac."""

import logging
import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

ALMANAC_HOME = Path(os.environ.get("ALMANAC_HOME", Path.home() / "almanac"))
CONFIG_FILE = ALMANAC_HOME / "config" / "almanac.conf"


@dataclass
class Config:
    """almanac configuration."""

    api_base_url: str = "http://localhost:8080"
    # Zone used to pin floating and all-day calendar times to UTC
    timezone: str = "UTC"
    default_project_id: int = 1
    untitled_title: str = "Untitled event"

    def tzinfo(self) -> tzinfo:
        """Resolve the configured timezone, falling back to UTC."""
        if self.timezone.upper() in ("UTC", "Z", ""):
            return timezone.utc
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            logger.warning(f"Unknown timezone {self.timezone!r}, using UTC: {e}")
            return timezone.utc


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from almanac.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "api_base_url":
                config.api_base_url = value.rstrip("/")
            case "timezone":
                config.timezone = value
            case "default_project_id":
                try:
                    config.default_project_id = int(value)
                except ValueError:
                    logger.warning(f"Ignoring non-integer DEFAULT_PROJECT_ID: {value!r}")
            case "untitled_title":
                config.untitled_title = value

    return config
