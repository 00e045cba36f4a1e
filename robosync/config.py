"""Configuration management for robosync.

Values are looked up in this order: environment variables, the user config
file (``~/.config/robosync/config``), built-in defaults.
"""

import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "192.168.10.124"
DEFAULT_PORT = 21
DEFAULT_TIMEOUT = 15.0
HINT_FILE_NAME = "ip.txt"

ENV_DEFAULT_ADDRESS = "ROBOSYNC_DEFAULT_ADDRESS"
ENV_KNOWN_ADDRESSES = "ROBOSYNC_KNOWN_ADDRESSES"
ENV_PORT = "ROBOSYNC_PORT"
ENV_TIMEOUT = "ROBOSYNC_TIMEOUT"


def _split_addresses(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Config:
    """Configuration for robosync."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_dir: Directory holding the config file
                (defaults to ~/.config/robosync)
        """
        self.config_dir = config_dir or Path.home() / ".config" / "robosync"
        self.config_file = self.config_dir / "config"
        self._values: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        """Load KEY=VALUE pairs from the config file if it exists."""
        self._values = {}
        if not self.config_file.exists():
            return

        try:
            content = self.config_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not read config file {self.config_file}: {e}")
            return

        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            self._values[key.strip()] = value.strip()

    def _get(self, key: str) -> Optional[str]:
        value = os.environ.get(key)
        if value:
            return value
        return self._values.get(key)

    @property
    def default_address(self) -> str:
        """Address offered as the pre-filled suggestion."""
        return self._get(ENV_DEFAULT_ADDRESS) or DEFAULT_ADDRESS

    @property
    def known_addresses(self) -> list[str]:
        """Additional addresses offered in the short-list selection."""
        value = self._get(ENV_KNOWN_ADDRESSES)
        return _split_addresses(value) if value else []

    @property
    def port(self) -> int:
        value = self._get(ENV_PORT)
        if not value:
            return DEFAULT_PORT
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Ignoring invalid port {value!r}")
            return DEFAULT_PORT

    @property
    def timeout(self) -> float:
        value = self._get(ENV_TIMEOUT)
        if not value:
            return DEFAULT_TIMEOUT
        try:
            return float(value)
        except ValueError:
            logger.warning(f"Ignoring invalid timeout {value!r}")
            return DEFAULT_TIMEOUT

    @property
    def hint_file_name(self) -> str:
        return HINT_FILE_NAME

    def is_configured(self) -> bool:
        """Check whether a config file with at least one value exists."""
        return bool(self._values)

    def get_config_path(self) -> Path:
        """Get the path to the config file."""
        return self.config_file

    def _save(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        lines = [f"{key}={value}" for key, value in sorted(self._values.items())]
        self.config_file.write_text("\n".join(lines) + "\n", encoding="utf-8")

    def save_default_address(self, address: str) -> None:
        """Persist the default address to the config file."""
        self._values[ENV_DEFAULT_ADDRESS] = address
        self._save()

    def save_known_addresses(self, addresses: list[str]) -> None:
        """Persist the list of known addresses to the config file."""
        unique = list(dict.fromkeys(addresses))
        if unique:
            self._values[ENV_KNOWN_ADDRESSES] = ",".join(unique)
        else:
            self._values.pop(ENV_KNOWN_ADDRESSES, None)
        self._save()

    def as_dict(self) -> dict:
        return {
            "config_file": str(self.config_file),
            "default_address": self.default_address,
            "known_addresses": self.known_addresses,
            "port": self.port,
            "timeout": self.timeout,
            "hint_file_name": self.hint_file_name,
        }


config = Config()
