"""Configuration schemas using Pydantic"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from alors.backend import Backend
from .prompt import DEFAULT_SYSTEM_PROMPT

# Read-only tools only; nothing that mutates the tree
DEFAULT_ALLOWED_COMMAND_PREFIXES = ("ls", "cat", "echo", "pwd", "rg", "git diff")
DEFAULT_IGNORED_PATHS = (".git",)
DEFAULT_ACCESSIBLE_PATHS = (".",)

LIST_FIELDS = ("allowed_command_prefixes", "ignored_paths", "accessible_paths")


class ConfigLayer(BaseModel):
    """A single source of overrides: the config file or the command line.

    Every field is optional. ``None`` means "inherit from the previous layer",
    and so does an empty list for the list fields. The one exception is
    ``system_prompt``, where a blank string explicitly clears the prompt.
    """
    backend: Optional[Backend] = None
    model: Optional[str] = None
    system_prompt: Optional[str] = None
    timeout_seconds: Optional[int] = Field(default=None, ge=0)
    max_iterations: Optional[int] = Field(default=None, ge=0, le=255)
    max_read_lines: Optional[int] = Field(default=None, ge=0)
    allowed_command_prefixes: list[str] = Field(default_factory=list)
    ignored_paths: list[str] = Field(default_factory=list)
    accessible_paths: list[str] = Field(default_factory=list)
    terminal_bell: Optional[bool] = None
    show_system_prompt: Optional[bool] = None
    debug_tool_calls: Optional[bool] = None
    auto_execute: Optional[bool] = None
    print_messages: Optional[bool] = None
    base_url: Optional[str] = None

    @field_validator(*LIST_FIELDS, mode="before")
    @classmethod
    def _null_list_is_unset(cls, value):
        return [] if value is None else value


class Config(BaseModel):
    """Fully resolved configuration, immutable once built"""
    model_config = ConfigDict(frozen=True)

    backend: Backend = Field(default_factory=Backend.default)
    model: str = Backend.default().config().default_model
    system_prompt: Optional[str] = DEFAULT_SYSTEM_PROMPT
    timeout_seconds: int = Field(default=120, ge=0)
    max_iterations: int = Field(default=50, ge=0, le=255)
    max_read_lines: int = Field(default=1000, ge=0)
    # Tuples, so a resolved config cannot be edited through its lists
    allowed_command_prefixes: tuple[str, ...] = DEFAULT_ALLOWED_COMMAND_PREFIXES
    ignored_paths: tuple[str, ...] = DEFAULT_IGNORED_PATHS
    accessible_paths: tuple[str, ...] = DEFAULT_ACCESSIBLE_PATHS
    terminal_bell: bool = True
    show_system_prompt: bool = False
    debug_tool_calls: bool = False
    auto_execute: bool = False
    print_messages: bool = False
    base_url: str = Backend.default().config().base_url

    @classmethod
    def default(cls) -> "Config":
        """Built-in defaults, no external input needed."""
        return cls()
