"""CLI commands for reading and writing setting values."""

from __future__ import annotations

import ast
from contextlib import contextmanager
from typing import Any, Generator, Optional

import typer
from rich.console import Console
from rich.table import Table
from typing_extensions import Annotated

from scoped_settings.manager.errors import SettingsError

settings_app = typer.Typer(no_args_is_help=True)
console = Console()

UserOption = Annotated[
    Optional[str],
    typer.Option("--user", "-u", help="Act on this user's settings instead of the global ones"),
]


@contextmanager
def _open_manager(user: str | None) -> Generator[tuple[Any, Any], None, None]:
    """Yield a connected manager and the principal for ``user``; exit 1 on settings errors."""
    from scoped_settings.config.loader import get_settings
    from scoped_settings.manager.identity import User, owner_of
    from scoped_settings.manager.settings_manager import SettingsManager
    from scoped_settings.storage.duckdb_store import DuckDBSettingStore
    from scoped_settings.utils.logging import owner_context

    principal = User(user) if user is not None else None
    try:
        owner_of(principal)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    settings = get_settings()
    store = DuckDBSettingStore(settings.storage.duckdb_path)

    with owner_context(user), store.connect():
        try:
            yield SettingsManager.from_settings(settings, store), principal
        except SettingsError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)


def _parse_value(raw: str) -> Any:
    """Interpret VALUE as a Python literal, falling back to the plain string."""
    try:
        return ast.literal_eval(raw)
    except (ValueError, SyntaxError):
        return raw


@settings_app.command("get")
def settings_get(
    name: Annotated[str, typer.Argument(help="Setting name")],
    user: UserOption = None,
) -> None:
    """Print the current value of a setting."""
    with _open_manager(user) as (manager, principal):
        value = manager.get(name, principal)
    typer.echo(repr(value))


@settings_app.command("set")
def settings_set(
    name: Annotated[str, typer.Argument(help="Setting name")],
    value: Annotated[str, typer.Argument(help="Value, parsed as a Python literal when possible")],
    user: UserOption = None,
) -> None:
    """Store a setting value."""
    parsed = _parse_value(value)
    with _open_manager(user) as (manager, principal):
        manager.set(name, parsed, principal)
    typer.echo(f"{name} = {parsed!r}")


@settings_app.command("clear")
def settings_clear(
    name: Annotated[str, typer.Argument(help="Setting name")],
    user: UserOption = None,
) -> None:
    """Reset a setting to None."""
    with _open_manager(user) as (manager, principal):
        manager.clear(name, principal)
    typer.echo(f"{name} cleared")


@settings_app.command("list")
def settings_list(user: UserOption = None) -> None:
    """Show every setting visible in the global or user scope."""
    with _open_manager(user) as (manager, principal):
        values = manager.all(principal)

    if not values:
        typer.echo("No settings configured for this scope. Add them under [settings] in config.toml.")
        return

    table = Table(title=f"Settings for {user}" if user else "Global settings", header_style="bold")
    table.add_column("Name")
    table.add_column("Value")
    for name, value in values.items():
        table.add_row(name, repr(value))
    console.print(table)


@settings_app.command("definitions")
def settings_definitions() -> None:
    """Show configured setting names, their scopes and the active codec."""
    from scoped_settings.config.loader import get_settings

    settings = get_settings()

    table = Table(
        title=f"Setting definitions (serialization: {settings.serialization})",
        header_style="bold",
    )
    table.add_column("Name")
    table.add_column("Scope")
    for name, definition in settings.settings.items():
        table.add_row(name, definition.scope.value)
    console.print(table)
