"""Root CLI application."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from scoped_settings.cli.db import db_app
from scoped_settings.cli.settings import settings_app

app = typer.Typer(
    name="scoped-settings",
    help="Read and write global and per-user settings.",
    no_args_is_help=True,
)

app.add_typer(settings_app, name="settings", help="Get, set and clear setting values")
app.add_typer(db_app, name="db", help="Manage the DuckDB settings database")


@app.callback()
def root(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="TOML config file (default: ./config.toml)"),
    ] = None,
) -> None:
    from scoped_settings.config.loader import get_settings, use_config_file
    from scoped_settings.utils.logging import setup_logging

    if config is not None:
        use_config_file(config)
    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.log_json)


def main() -> None:
    app()
