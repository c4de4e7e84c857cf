"""Persistence for the layered configuration.

Resolution order is defaults, then the config file, then the invocation
layer. The file is kept in sync with the current defaults so that new
settings show up in it, while invocation overrides are never written back.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .merge import merge
from .schema import Config, ConfigLayer
from .validator import ConfigValidator

logger = logging.getLogger(__name__)

APP_NAME = "alors"
CONFIG_FILENAME = "config.json"


class ConfigIOError(Exception):
    """Raised when the config file or its directory cannot be read, written or created."""
    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        self.reason = reason or f"Config file I/O failed: {path}"
        super().__init__(self.reason)


class ConfigParseError(Exception):
    """Raised when the config file contents are not a valid config layer."""
    def __init__(self, path: Optional[Path], reason: str = ""):
        self.path = path
        self.reason = reason or f"Malformed config file: {path}"
        super().__init__(self.reason)


def config_dir() -> Path:
    """Per-user config directory, following XDG_CONFIG_HOME when set."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    # Relative values are invalid per the XDG spec
    if xdg and os.path.isabs(xdg):
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def default_config_path() -> Path:
    return config_dir() / CONFIG_FILENAME


def parse_layer(text: str, path: Optional[Path] = None) -> ConfigLayer:
    """Parse config file text into a layer, raising ConfigParseError."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError(path, f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigParseError(path, f"Invalid config in {path}: expected an object, got {type(data).__name__}")

    try:
        return ConfigLayer.model_validate(data)
    except ValidationError as e:
        details = "; ".join(ConfigValidator.format_errors(e))
        raise ConfigParseError(path, f"Invalid config in {path}: {details}") from e


def dump_config(config: Config) -> str:
    """Serialize a config to the on-disk text form."""
    data = config.model_dump(mode="json")
    # Written as "" so that a cleared prompt reads back as cleared
    if data["system_prompt"] is None:
        data["system_prompt"] = ""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class ConfigStore:
    """Loads, upgrades and resolves the persisted configuration."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else default_config_path()
        self.created = False

    def ensure_dir(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigIOError(self.path, f"Cannot create config directory {self.path.parent}: {e}") from e

    def read_text(self) -> Optional[str]:
        """Current file contents, or None if there is no file yet."""
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigIOError(self.path, f"Cannot read config file {self.path}: {e}") from e

    def write_text(self, text: str) -> None:
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise ConfigIOError(self.path, f"Cannot write config file {self.path}: {e}") from e

    def file_layer(self, text: Optional[str]) -> ConfigLayer:
        """Layer from the file text. A malformed file counts as an empty layer."""
        if text is None:
            return ConfigLayer()
        try:
            return parse_layer(text, self.path)
        except ConfigParseError as e:
            logger.warning(f"{e.reason}. Ignoring it and using defaults.")
            return ConfigLayer()

    def sync(self, disk_config: Config, old_text: Optional[str]) -> bool:
        """Rewrite the file if it differs from ``disk_config``. Returns True if written."""
        new_text = dump_config(disk_config)
        if new_text == old_text:
            return False

        self.write_text(new_text)
        if not old_text:
            self.created = True
            logger.info(f"Created default config at: {self.path}")
        else:
            logger.info(f"Updated config at: {self.path}")
        return True

    def load(self, invocation_layer: Optional[ConfigLayer] = None) -> Config:
        """Resolve defaults, the config file and ``invocation_layer``, in that order.

        Raises:
            ConfigIOError: the file or its directory cannot be read, written or created
        """
        self.ensure_dir()
        old_text = self.read_text()

        disk_config = merge(Config.default(), self.file_layer(old_text))
        self.sync(disk_config, old_text)

        return merge(disk_config, invocation_layer or ConfigLayer())


def load_config(invocation_layer: Optional[ConfigLayer] = None, path: Optional[Path] = None) -> Config:
    """Load the effective configuration for this process."""
    return ConfigStore(path).load(invocation_layer)
