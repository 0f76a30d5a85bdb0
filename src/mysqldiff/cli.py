"""
Click-based CLI for mysqldiff.
"""

import sys
from pathlib import Path

import click
from rich.console import Console

from . import __version__
from .commands import dump_snapshot, generate_migration
from .config import DEFAULT_CONFIG_PATH, TARGET_NAMES
from .domain.errors import MySQLDiffError

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="mysqldiff")
def cli() -> None:
    """mysqldiff: generate MySQL migrations from a development/production schema diff"""
    pass


@cli.command()
@click.argument("config_file", type=click.Path(), required=False, default=str(DEFAULT_CONFIG_PATH))
@click.argument("output_file", type=click.Path(), required=False)
@click.option(
    "--drop-tables/--keep-tables",
    default=None,
    help="Emit DROP TABLE for production-only tables (overrides config)",
)
@click.option(
    "--drop-columns/--keep-columns",
    default=None,
    help="Emit DROP COLUMN for production-only columns (overrides config)",
)
@click.option(
    "--compare-table-comment/--ignore-table-comment",
    default=None,
    help="Treat table comment differences as changes (overrides config)",
)
@click.option("--show-sql", is_flag=True, help="Print the generated SQL")
def diff(
    config_file: str,
    output_file: str | None,
    drop_tables: bool | None,
    drop_columns: bool | None,
    compare_table_comment: bool | None,
    show_sql: bool,
) -> None:
    """Compare development with production and write the migration SQL

    Examples:
        mysqldiff diff                              # ./config.json -> ./sql/<timestamp>.sql
        mysqldiff diff config.json out/release.sql
        mysqldiff diff --keep-tables --show-sql
    """
    overrides = {
        name: value
        for name, value in (
            ("drop_deleted_tables", drop_tables),
            ("drop_deleted_columns", drop_columns),
            ("compare_table_comment", compare_table_comment),
        )
        if value is not None
    }

    try:
        generate_migration(
            config_path=Path(config_file),
            output=Path(output_file) if output_file else None,
            policy_overrides=overrides,
            show_sql=show_sql,
        )
    except MySQLDiffError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        sys.exit(1)


@cli.command()
@click.argument("config_file", type=click.Path(), required=False, default=str(DEFAULT_CONFIG_PATH))
@click.option(
    "--target",
    "-t",
    type=click.Choice(TARGET_NAMES),
    default="production",
    show_default=True,
    help="Which configured database to dump",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    required=True,
    help="Snapshot file to write",
)
def snapshot(config_file: str, target: str, output: str) -> None:
    """Dump a configured database's schema metadata to a snapshot file"""
    try:
        dump_snapshot(config_path=Path(config_file), target=target, output=Path(output))
    except MySQLDiffError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
