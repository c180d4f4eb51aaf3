"""XDG-compliant directory paths for jaap data and configuration."""

import os
from pathlib import Path


def get_config_dir() -> Path:
    """Get XDG-compliant configuration directory.

    Priority:
    1. $XDG_CONFIG_HOME/jaap/
    2. ~/.config/jaap/

    Returns:
        Path to configuration directory
    """
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        path = Path(config_home) / "jaap"
    else:
        path = Path.home() / ".config" / "jaap"

    path.mkdir(parents=True, exist_ok=True, mode=0o700)
    return path


def get_data_dir() -> Path:
    """Get XDG-compliant data directory.

    Priority:
    1. $XDG_DATA_HOME/jaap/
    2. ~/.local/share/jaap/

    Returns:
        Path to data directory
    """
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        path = Path(data_home) / "jaap"
    else:
        path = Path.home() / ".local" / "share" / "jaap"

    path.mkdir(parents=True, exist_ok=True, mode=0o700)
    return path


def get_token_path() -> Path:
    """Get the path of the stored Google OAuth token.

    Returns:
        Path to the token JSON file inside the config directory
    """
    return get_config_dir() / "sheets-token.json"
