"""CLI commands for managing the DuckDB settings database."""

from __future__ import annotations

from typing import Optional

import polars as pl
import typer
from rich.console import Console
from rich.table import Table
from typing_extensions import Annotated

db_app = typer.Typer(no_args_is_help=True)
console = Console()


def _get_store():
    from scoped_settings.config.loader import get_settings
    from scoped_settings.storage.duckdb_store import DuckDBSettingStore

    settings = get_settings()
    return DuckDBSettingStore(settings.storage.duckdb_path)


@db_app.command("init")
def db_init() -> None:
    """Create the settings table if it does not exist."""
    store = _get_store()

    with store.connect():
        pass

    typer.echo(f"Settings database ready at {store.db_path}")


@db_app.command("info")
def db_info() -> None:
    """Show record counts per owner."""
    store = _get_store()

    with store.connect() as db:
        info = db.table_info()

    if not info:
        typer.echo("No settings stored yet.")
        return

    table = Table(title="Stored settings", show_header=True, header_style="bold")
    table.add_column("Owner")
    table.add_column("Records", justify="right")

    for row in info:
        table.add_row(row["owner"] or "<global>", f"{row['records']:,}")

    console.print(table)


@db_app.command("dump")
def db_dump(
    csv_out: Annotated[
        Optional[str], typer.Option("--csv", help="Export records to CSV file path")
    ] = None,
) -> None:
    """Print every stored record with its encoded value."""
    store = _get_store()

    with store.connect() as db:
        df = db.to_polars()

    if csv_out:
        df.write_csv(csv_out)
        typer.echo(f"Exported {len(df)} records to {csv_out}")
        return

    if df.is_empty():
        typer.echo("No settings stored yet.")
        return

    df = df.with_columns(pl.col("owner").fill_null("<global>"))
    table = Table(show_header=True, header_style="bold")
    for col in df.columns:
        table.add_column(col)
    for row in df.iter_rows():
        table.add_row(*[str(v) for v in row])
    console.print(table)
