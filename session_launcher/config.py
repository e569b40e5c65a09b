"""
Launcher configuration.

Process-wide defaults for the launcher. Values come from environment
variables and may be overlaid by a JSON file; the launcher only reads them.
"""

import os
import json
from typing import Optional
from dataclasses import dataclass
import logging

from .models import DEFAULT_SESSION_NAME

logger = logging.getLogger(__name__)

ENV_PREFIX = "SESSION_LAUNCHER_"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.error(f"Invalid integer in {name}: {value!r}, using {default}")
        return default


@dataclass
class LauncherConfig:
    """Launcher defaults"""

    default_username: str = ""
    default_host: str = ""
    port: int = 22
    session_name: str = DEFAULT_SESSION_NAME
    log_level: str = "INFO"
    ping_count: int = 1

    @classmethod
    def from_env(cls) -> "LauncherConfig":
        """Build config from environment variables"""
        return cls(
            default_username=os.getenv(f"{ENV_PREFIX}USERNAME", ""),
            default_host=os.getenv(f"{ENV_PREFIX}HOST", ""),
            port=_env_int(f"{ENV_PREFIX}PORT", 22),
            session_name=os.getenv(f"{ENV_PREFIX}SESSION_NAME", DEFAULT_SESSION_NAME),
            log_level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO"),
            ping_count=_env_int(f"{ENV_PREFIX}PING_COUNT", 1),
        )

    @classmethod
    def from_file(cls, config_path: str) -> Optional["LauncherConfig"]:
        """Build config from env, then overlay keys from a JSON file"""
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read config file {config_path}: {e}")
            return None

        config = cls.from_env()
        for key in [
            "default_username",
            "default_host",
            "port",
            "session_name",
            "log_level",
            "ping_count",
        ]:
            if key in data:
                setattr(config, key, data[key])

        return config

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "LauncherConfig":
        """Load config from env, preferring the file when one is given and readable"""
        config_path = config_path or os.getenv(f"{ENV_PREFIX}CONFIG")
        config = cls.from_env()

        if config_path and os.path.exists(config_path):
            file_config = cls.from_file(config_path)
            if file_config:
                config = file_config

        logger.debug(f"Config loaded, log level: {config.log_level}")
        return config
