"""Configuration management for jaap.

Loads configuration from config.toml in the XDG config directory
($XDG_CONFIG_HOME/jaap, falling back to ~/.config/jaap).
Priority chain: CLI flags > env vars > config file.
"""

import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .paths import get_config_dir

DEFAULT_CONFIG = """\
# jaap configuration

[remote]
# Backend service base URL (health check lives at <base_url>/health)
base_url = "http://localhost:8000"

# Prefix for resource endpoints (mantras, recitations)
api_prefix = "/api/v1"

# Request timeout in seconds
timeout = 10.0

[sync]
# Seconds between background drains of the pending queue
interval = 30.0

# Delivery attempts before a queued recitation is dropped
max_retries = 5

# Seconds to wait for a single delivery before counting it as failed
delivery_timeout = 15.0

# Identity sent with every recitation
user_id = "local-user"

[catalog]
# Hours a provider's catalog stays cached
cache_hours = 24

[sheets]
# Sheet tabs to read; an empty list reads every tab
sheet_names = []

# Credentials are read from environment variables, not this file:
#   JAAP_SHEETS_CLIENT_ID, JAAP_SHEETS_CLIENT_SECRET,
#   JAAP_SHEETS_API_KEY, JAAP_SHEET_ID       - Google Sheets catalog
#   JAAP_AIRTABLE_BASE_ID, JAAP_AIRTABLE_API_KEY - moderation submissions
"""


@dataclass(frozen=True)
class RemoteConfig:
    """Backend service configuration."""

    base_url: str
    api_prefix: str
    timeout: float


@dataclass(frozen=True)
class SyncConfig:
    """Sync queue configuration."""

    interval: float
    max_retries: int
    delivery_timeout: float
    user_id: str


@dataclass(frozen=True)
class CatalogConfig:
    """Catalog cache configuration."""

    cache_hours: float


@dataclass(frozen=True)
class SheetsConfig:
    """Google Sheets catalog configuration."""

    client_id: str | None
    client_secret: str | None
    api_key: str | None
    sheet_id: str | None
    sheet_names: tuple[str, ...] = ()

    @property
    def enabled(self) -> bool:
        """Spreadsheet mode is on only when client id, API key and sheet id are all set."""
        return bool(self.client_id and self.api_key and self.sheet_id)


@dataclass(frozen=True)
class ModerationConfig:
    """Moderation (Airtable) submission configuration."""

    base_id: str | None
    api_key: str | None

    @property
    def enabled(self) -> bool:
        return bool(self.base_id and self.api_key)


@dataclass(frozen=True)
class JaapConfig:
    """Top-level jaap configuration."""

    remote: RemoteConfig
    sync: SyncConfig
    catalog: CatalogConfig
    sheets: SheetsConfig
    moderation: ModerationConfig


_cached_config: JaapConfig | None = None


def get_config_path() -> Path:
    """Path of config.toml, next to the stored Google token."""
    return get_config_dir() / "config.toml"


def generate_config() -> Path:
    """Generate the default config file and return its path."""
    path = get_config_path()
    path.write_text(DEFAULT_CONFIG)
    return path


def parse_config(data: dict[str, Any]) -> JaapConfig:
    """Build a JaapConfig from parsed TOML data and the environment.

    Args:
        data: Parsed TOML document (may be partial)

    Returns:
        Config with defaults filled in and env overrides applied
    """
    remote = data.get("remote", {})
    sync = data.get("sync", {})
    catalog = data.get("catalog", {})
    sheets = data.get("sheets", {})

    interval_str = os.getenv("JAAP_SYNC_INTERVAL", str(sync.get("interval", 30.0)))

    return JaapConfig(
        remote=RemoteConfig(
            base_url=os.getenv(
                "JAAP_API_URL", remote.get("base_url", "http://localhost:8000")
            ).rstrip("/"),
            api_prefix=remote.get("api_prefix", "/api/v1"),
            timeout=float(remote.get("timeout", 10.0)),
        ),
        sync=SyncConfig(
            interval=float(interval_str),
            max_retries=int(sync.get("max_retries", 5)),
            delivery_timeout=float(sync.get("delivery_timeout", 15.0)),
            user_id=os.getenv("JAAP_USER_ID", sync.get("user_id", "local-user")),
        ),
        catalog=CatalogConfig(
            cache_hours=float(catalog.get("cache_hours", 24)),
        ),
        sheets=SheetsConfig(
            client_id=os.getenv("JAAP_SHEETS_CLIENT_ID"),
            client_secret=os.getenv("JAAP_SHEETS_CLIENT_SECRET"),
            api_key=os.getenv("JAAP_SHEETS_API_KEY"),
            sheet_id=os.getenv("JAAP_SHEET_ID"),
            sheet_names=tuple(sheets.get("sheet_names", [])),
        ),
        moderation=ModerationConfig(
            base_id=os.getenv("JAAP_AIRTABLE_BASE_ID"),
            api_key=os.getenv("JAAP_AIRTABLE_API_KEY"),
        ),
    )


def load_config() -> JaapConfig:
    """Load configuration from config file with env var overrides.

    On first run, generates the config file and exits so the user
    can review it before proceeding.

    Returns:
        Loaded and validated JaapConfig.

    Raises:
        SystemExit: If config is missing (after generating) or invalid.
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    config_path = get_config_path()
    if not config_path.exists():
        path = generate_config()
        print(
            f"No config found. Generated {path}, review it and run again.",
            file=sys.stderr,
        )
        raise SystemExit(1)

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        _cached_config = parse_config(data)
    except (tomllib.TOMLDecodeError, ValueError) as e:
        print(f"Invalid config: {e}", file=sys.stderr)
        print(f"Edit {config_path} or delete it to regenerate.", file=sys.stderr)
        raise SystemExit(1) from e

    return _cached_config
