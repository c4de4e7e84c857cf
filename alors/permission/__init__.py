"""Permission checks for agent tool execution.

The agent must pass every filesystem path and shell command through these
checks before acting on it.
"""

from .permission import (
    AccessError,
    PathResolutionError,
    NoParentDirectoryError,
    PathNotAccessibleError,
    CommandDeniedError,
    canonicalize,
    check_path_access,
    is_path_accessible,
    check_command_allowed,
    is_command_allowed,
    EMPTY_ALLOWLIST_ALLOWS_ALL,
)

__all__ = [
    "AccessError",
    "PathResolutionError",
    "NoParentDirectoryError",
    "PathNotAccessibleError",
    "CommandDeniedError",
    "canonicalize",
    "check_path_access",
    "is_path_accessible",
    "check_command_allowed",
    "is_command_allowed",
    "EMPTY_ALLOWLIST_ALLOWS_ALL",
]
