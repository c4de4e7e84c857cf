"""Configuration validator utilities for alors.

Turns pydantic validation failures into readable messages and flags
settings that are valid but risky.
"""

from pathlib import Path
from typing import Any, Dict, List, Tuple

from pydantic import ValidationError

from .schema import Config, ConfigLayer, LIST_FIELDS


class ConfigValidator:
    """Utility class for validating alors configurations."""

    @staticmethod
    def format_errors(error: ValidationError) -> List[str]:
        """Flatten a ValidationError into ``field: message`` strings."""
        messages: List[str] = []
        for item in error.errors():
            field = '.'.join(str(x) for x in item['loc']) or "<root>"
            messages.append(f"{field}: {item['msg']}")
        return messages

    @staticmethod
    def validate_config(config_dict: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """Validate a configuration dictionary as read from the config file.

        Args:
            config_dict: Parsed contents of the config file

        Returns:
            Tuple of (is_valid, error_messages)
        """
        try:
            ConfigLayer.model_validate(config_dict)
            return True, []
        except ValidationError as e:
            return False, ConfigValidator.format_errors(e)

    @staticmethod
    def check_safety(config: Config) -> List[str]:
        """Warnings for settings that weaken the permission checks.

        The empty allow-list warnings only apply to configs built in code:
        merging never replaces a list with an empty one, so a resolved
        config loaded from file always keeps a non-empty allow-list. Use
        check_file_data for what the file itself asks for.
        """
        issues: List[str] = []

        if not config.allowed_command_prefixes:
            issues.append("Warning: allowed_command_prefixes is empty, so every shell command is allowed.")
            if config.auto_execute:
                issues.append("Warning: auto_execute is enabled with no command allow-list. This could be dangerous.")

        home = Path.home()
        for root in config.accessible_paths:
            expanded = Path(root).expanduser()
            if expanded == Path(expanded.anchor) and expanded.is_absolute():
                issues.append(f"Warning: accessible path '{root}' is a filesystem root.")
            elif expanded == home:
                issues.append(f"Warning: accessible path '{root}' is your entire home directory.")

        if config.timeout_seconds == 0:
            issues.append("Warning: timeout_seconds is 0, requests may fail immediately.")

        return issues

    @staticmethod
    def check_file_data(config_dict: Dict[str, Any]) -> List[str]:
        """Notes for values in the config file that have no effect.

        An empty list is read as "not set", so it cannot clear a list or
        disable the command allow-list.
        """
        issues: List[str] = []
        for name in LIST_FIELDS:
            if name in config_dict and not config_dict[name]:
                issues.append(
                    f"Warning: {name} is empty in the config file and is ignored; the default list applies."
                )
        if config_dict.get("auto_execute") and "allowed_command_prefixes" in config_dict \
                and not config_dict["allowed_command_prefixes"]:
            issues.append(
                "Warning: auto_execute is enabled and the file tries to clear the command allow-list. "
                "The default allow-list still applies."
            )
        return issues
