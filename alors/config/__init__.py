"""Layered configuration.

Defaults, the persisted config file and per-invocation overrides are merged
into a single resolved ``Config``.
"""

from .merge import merge, merge_layers
from .prompt import DEFAULT_SYSTEM_PROMPT
from .schema import (
    Config,
    ConfigLayer,
    DEFAULT_ACCESSIBLE_PATHS,
    DEFAULT_ALLOWED_COMMAND_PREFIXES,
    DEFAULT_IGNORED_PATHS,
)
from .store import (
    ConfigIOError,
    ConfigParseError,
    ConfigStore,
    config_dir,
    default_config_path,
    dump_config,
    load_config,
    parse_layer,
)
from .validator import ConfigValidator

__all__ = [
    "Config",
    "ConfigLayer",
    "ConfigStore",
    "ConfigValidator",
    "ConfigIOError",
    "ConfigParseError",
    "merge",
    "merge_layers",
    "load_config",
    "parse_layer",
    "dump_config",
    "config_dir",
    "default_config_path",
    "DEFAULT_SYSTEM_PROMPT",
    "DEFAULT_ALLOWED_COMMAND_PREFIXES",
    "DEFAULT_IGNORED_PATHS",
    "DEFAULT_ACCESSIBLE_PATHS",
]
