"""Permission checks for filesystem paths and shell commands.

Enforcement is cooperative: tools call these before touching the filesystem
or running a command. Nothing here intercepts the real operation.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Sequence, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

# Open policy question: an empty allow-list currently disables the command
# gate. Set to False to make an empty list deny every command instead.
EMPTY_ALLOWLIST_ALLOWS_ALL = True


class AccessError(Exception):
    """Raised when an operation on a path is not permitted."""
    def __init__(self, path: PathLike, reason: str = ""):
        self.path = path
        self.reason = reason or f"Access denied: {path}"
        super().__init__(self.reason)


class PathResolutionError(AccessError):
    """Raised when the path, or its parent for new files, cannot be canonicalized."""
    def __init__(self, path: PathLike, cause: BaseException):
        self.cause = cause
        super().__init__(
            path,
            f"Failed to resolve path '{path}': {cause}. "
            "It might not exist or there's a permission issue.",
        )


class NoParentDirectoryError(AccessError):
    """Raised when a path that does not exist has no parent to check instead."""
    def __init__(self, path: PathLike):
        super().__init__(
            path,
            f"Cannot check accessibility for '{path}' because it has no parent directory.",
        )


class PathNotAccessibleError(AccessError):
    """Raised when a path resolves outside every accessible root."""
    def __init__(self, path: PathLike, accessible_paths: Sequence[str]):
        self.accessible_paths = list(accessible_paths)
        super().__init__(
            path,
            f"Operation on path '{path}' is not allowed. "
            f"It's not within any of the accessible paths: {self.accessible_paths}.",
        )


class CommandDeniedError(Exception):
    """Raised when a command matches none of the allowed prefixes."""
    def __init__(self, command: str, allowed_prefixes: Sequence[str], reason: str = ""):
        self.command = command
        self.allowed_prefixes = list(allowed_prefixes)
        self.reason = reason or (
            f"Command `{command}` is not allowed. "
            f"It does not start with any of the allowed prefixes: {self.allowed_prefixes}."
        )
        super().__init__(self.reason)


def canonicalize(path: PathLike) -> Path:
    """Absolute, symlink-free form of an existing path.

    Every path comparison in this module goes through here. Raises OSError
    (or RuntimeError for symlink loops on older Pythons) when the path
    cannot be resolved.
    """
    return Path(path).resolve(strict=True)


def _canonical_roots(
    accessible_paths: Sequence[str],
    resolve: Callable[[PathLike], Path],
) -> list[Path]:
    roots = []
    for root in accessible_paths:
        if not root:
            continue
        try:
            roots.append(resolve(Path(root).expanduser()))
        except (OSError, RuntimeError) as e:
            # An unreachable root grants nothing
            logger.debug(f"Skipping accessible path '{root}': {e}")
    return roots


def check_path_access(
    path: PathLike,
    accessible_paths: Sequence[str],
    *,
    canonicalize: Callable[[PathLike], Path] = canonicalize,
    exists: Callable[[PathLike], bool] = os.path.lexists,
) -> None:
    """Check that ``path`` lies inside one of ``accessible_paths``.

    Existing paths are checked directly. For a path that does not exist yet
    its parent directory is checked instead, so file creation can be
    permitted. A bare relative filename is checked against the current
    working directory.

    Args:
        path: The path the agent wants to operate on
        accessible_paths: Roots under which operations are permitted
        canonicalize: Resolver for existing paths (swappable in tests)
        exists: Existence test, not following the final symlink

    Raises:
        NoParentDirectoryError: ``path`` does not exist and has no parent
        PathResolutionError: ``path`` or its parent cannot be canonicalized
        PathNotAccessibleError: the canonical path is outside every root
    """
    if not os.fspath(path):
        raise NoParentDirectoryError(path)

    candidate = Path(path)
    if not exists(candidate):
        parent = candidate.parent
        if parent == candidate:
            raise NoParentDirectoryError(path)
        candidate = parent

    try:
        target = canonicalize(candidate)
    except (OSError, RuntimeError) as e:
        raise PathResolutionError(candidate, e) from e

    for root in _canonical_roots(accessible_paths, canonicalize):
        # Segment-wise, so /tmp/ab does not contain /tmp/abc
        if target.is_relative_to(root):
            return

    logger.debug(f"Denied path access: {target}")
    raise PathNotAccessibleError(path, accessible_paths)


def is_path_accessible(
    path: PathLike,
    accessible_paths: Sequence[str],
    **kwargs,
) -> tuple[bool, str]:
    """Check path access without raising.

    Returns:
        (is_accessible, reason)
    """
    try:
        check_path_access(path, accessible_paths, **kwargs)
    except AccessError as e:
        return (False, e.reason)
    return (True, "")


def check_command_allowed(command: str, allowed_prefixes: Sequence[str]) -> None:
    """Check ``command`` against a literal prefix allow-list.

    This is a coarse textual gate, not a shell parser: matching is an exact,
    case-sensitive ``startswith`` with no tokenization. An empty allow-list
    disables the gate (see EMPTY_ALLOWLIST_ALLOWS_ALL).

    Raises:
        CommandDeniedError: no prefix matches
    """
    if not allowed_prefixes:
        if EMPTY_ALLOWLIST_ALLOWS_ALL:
            logger.debug("Command allow-list is empty, allowing all commands")
            return
        raise CommandDeniedError(
            command,
            allowed_prefixes,
            f"Command `{command}` is not allowed. The command allow-list is empty.",
        )

    if any(command.startswith(prefix) for prefix in allowed_prefixes):
        return

    logger.debug(f"Denied command: {command}")
    raise CommandDeniedError(command, allowed_prefixes)


def is_command_allowed(command: str, allowed_prefixes: Sequence[str]) -> tuple[bool, str]:
    """Check a command without raising.

    Returns:
        (is_allowed, reason)
    """
    try:
        check_command_allowed(command, allowed_prefixes)
    except CommandDeniedError as e:
        return (False, e.reason)
    return (True, "")
