"""alors CLI"""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from alors.backend import Backend, BACKEND_CONFIGS
from alors.config import (
    Config,
    ConfigIOError,
    ConfigLayer,
    ConfigParseError,
    ConfigStore,
    ConfigValidator,
    merge,
    parse_layer,
)
from alors.permission import AccessError, CommandDeniedError, check_command_allowed, check_path_access

app = typer.Typer(name="alors", help="Resolve configuration and check agent permissions")
config_app = typer.Typer(name="config", help="Inspect the configuration file")
check_app = typer.Typer(name="check", help="Test paths and commands against the permission rules")
app.add_typer(config_app, name="config")
app.add_typer(check_app, name="check")

console = Console()


def _split(values: Optional[List[str]]) -> List[str]:
    """Flatten repeated and comma separated option values."""
    if not values:
        return []
    return [item for value in values for item in value.split(",")]


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="Config file (default: per-user config dir)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    backend: Optional[Backend] = typer.Option(None, case_sensitive=False, help="The backend to use"),
    model: Optional[str] = typer.Option(None, help="The model to use for the agent"),
    system_prompt: Optional[str] = typer.Option(None, help="The system prompt (blank to disable)"),
    timeout_seconds: Optional[int] = typer.Option(None, min=0, help="Timeout for API requests in seconds"),
    max_iterations: Optional[int] = typer.Option(None, min=0, max=255, help="Maximum tool-use iterations"),
    max_read_lines: Optional[int] = typer.Option(None, min=0, help="Maximum lines to read from a file"),
    allowed_command_prefixes: Optional[List[str]] = typer.Option(
        None, help="Command prefixes the agent may execute (comma separated)"
    ),
    ignored_paths: Optional[List[str]] = typer.Option(None, help="Paths to ignore when listing or reading files"),
    accessible_paths: Optional[List[str]] = typer.Option(None, help="Paths the agent may access"),
    terminal_bell: Optional[bool] = typer.Option(None, "--terminal-bell/--no-terminal-bell"),
    show_system_prompt: Optional[bool] = typer.Option(None, "--show-system-prompt/--no-show-system-prompt"),
    debug_tool_calls: Optional[bool] = typer.Option(None, "--debug-tool-calls/--no-debug-tool-calls"),
    auto_execute: Optional[bool] = typer.Option(None, "--auto-execute/--no-auto-execute"),
    print_messages: Optional[bool] = typer.Option(None, "--print-messages/--no-print-messages"),
    base_url: Optional[str] = typer.Option(None, help="Base URL for the API client"),
):
    """Options given here override the config file for this run only."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    ctx.obj = {
        "config_path": config,
        "layer": ConfigLayer(
            backend=backend,
            model=model,
            system_prompt=system_prompt,
            timeout_seconds=timeout_seconds,
            max_iterations=max_iterations,
            max_read_lines=max_read_lines,
            allowed_command_prefixes=_split(allowed_command_prefixes),
            ignored_paths=_split(ignored_paths),
            accessible_paths=_split(accessible_paths),
            terminal_bell=terminal_bell,
            show_system_prompt=show_system_prompt,
            debug_tool_calls=debug_tool_calls,
            auto_execute=auto_execute,
            print_messages=print_messages,
            base_url=base_url,
        ),
    }


def _store(ctx: typer.Context) -> ConfigStore:
    return ConfigStore(ctx.obj["config_path"])


def _load(ctx: typer.Context) -> Config:
    store = _store(ctx)
    try:
        config = store.load(ctx.obj["layer"])
    except ConfigIOError as e:
        console.print(f"[red]Error: {escape(e.reason)}[/red]")
        raise typer.Exit(1)

    if store.created:
        console.print(f"[green]Created default config at: {escape(str(store.path))}[/green]")
    return config


def _preview(text: str, width: int = 60) -> str:
    first_line = text.strip().splitlines()[0]
    if len(first_line) > width or first_line != text.strip():
        return first_line[:width] + "..."
    return first_line


def _format_value(value) -> str:
    if value is None:
        return "[dim]none[/dim]"
    if isinstance(value, (list, tuple)):
        return escape(", ".join(value)) if value else "[dim]empty[/dim]"
    if isinstance(value, Backend):
        return value.value
    return escape(str(value))


@config_app.command("show")
def show_config(ctx: typer.Context):
    """Show the effective configuration"""
    config = _load(ctx)

    table = Table(title="Effective Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for name, value in config:
        if name == "system_prompt" and value and value.strip():
            value = _preview(value)
        table.add_row(name, _format_value(value))

    console.print(table)

    if config.show_system_prompt and config.system_prompt:
        console.print(Panel(escape(config.system_prompt), title="System Prompt"))


@config_app.command("path")
def show_path(ctx: typer.Context):
    """Print the location of the config file"""
    console.print(str(_store(ctx).path))


@config_app.command("validate")
def validate_config(ctx: typer.Context):
    """Validate the config file and warn about risky settings"""
    store = _store(ctx)
    try:
        text = store.read_text()
    except ConfigIOError as e:
        console.print(f"[red]Error: {escape(e.reason)}[/red]")
        raise typer.Exit(1)

    if text is None:
        console.print(f"[yellow]No config file at {escape(str(store.path))}. Defaults will be used.[/yellow]")
        return

    try:
        layer = parse_layer(text, store.path)
    except ConfigParseError as e:
        console.print(f"[red]INVALID[/red]: {escape(e.reason)}")
        raise typer.Exit(1)

    console.print(f"[green]VALID[/green]: {escape(str(store.path))}")
    issues = ConfigValidator.check_file_data(json.loads(text))
    issues += ConfigValidator.check_safety(merge(Config.default(), layer))
    for issue in issues:
        console.print(f"[yellow]{escape(issue)}[/yellow]")


@check_app.command("path")
def check_path(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Path to test"),
):
    """Test if a path is inside the accessible paths"""
    config = _load(ctx)
    try:
        check_path_access(path, config.accessible_paths)
    except AccessError as e:
        console.print(f"[red]DENIED[/red]: {escape(e.reason)}")
        raise typer.Exit(1)
    console.print("[green]ALLOWED[/green]")


@check_app.command("command")
def check_command(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Command to test"),
):
    """Test if a command matches the allowed prefixes"""
    config = _load(ctx)
    try:
        check_command_allowed(command, config.allowed_command_prefixes)
    except CommandDeniedError as e:
        console.print(f"[red]DENIED[/red]: {escape(e.reason)}")
        raise typer.Exit(1)
    console.print("[green]ALLOWED[/green]")


@app.command("backends")
def list_backends():
    """List supported backends"""
    table = Table(title="Backends")
    table.add_column("Name", style="cyan")
    table.add_column("Base URL", style="blue")
    table.add_column("Default Model", style="green")
    table.add_column("API Key Env", style="yellow")

    for backend, settings in BACKEND_CONFIGS.items():
        name = backend.value
        if backend == Backend.default():
            name += " (default)"
        table.add_row(name, settings.base_url, settings.default_model, settings.api_key_env or "[dim]none[/dim]")

    console.print(table)
