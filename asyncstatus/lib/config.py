"""
Configuration loader for asyncstatus.

Reads config.env from the config directory (~/.config/asyncstatus, or
$ASYNCSTATUS_CONFIG_DIR). A missing file means defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from . import envparse

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.env"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "asyncstatus"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """User configuration from config.env"""
    config_dir: Path
    store_dir: Path  # One JSON file per date lives here
    editor: str | None  # Preferred editor command, may include arguments
    log_level: str


def get_config_dir(environ: dict | None = None) -> Path:
    """Resolve the config directory, honouring ASYNCSTATUS_CONFIG_DIR."""
    environ = os.environ if environ is None else environ
    override = environ.get("ASYNCSTATUS_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_DIR


def load_config(config_dir: Path | None = None, environ: dict | None = None) -> Config:
    """Load config.env and return Config.

    Raises:
        ValueError: if config.env exists but is invalid
    """
    config_dir = config_dir or get_config_dir(environ)
    config_path = config_dir / CONFIG_FILENAME

    env = {}
    if config_path.exists():
        env = envparse.load_env(config_path)
    else:
        logger.debug(f"No config file at {config_path}, using defaults")

    log_level = env.get("LOG_LEVEL", "WARNING").upper()
    if log_level not in VALID_LOG_LEVELS:
        logger.warning(f"Unknown LOG_LEVEL '{log_level}' in {config_path}, using WARNING")
        log_level = "WARNING"

    store_dir = env.get("STORE_DIR")
    return Config(
        config_dir=config_dir,
        store_dir=Path(store_dir).expanduser() if store_dir else config_dir / "updates",
        editor=env.get("EDITOR") or None,
        log_level=log_level,
    )
