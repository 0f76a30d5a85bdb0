"""
Diff Command - Generate a SQL migration between development and production

Fetches both snapshots concurrently, plans the migration, appends every
statement to the output file in order, and reports what changed.
"""

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from mysqldiff.config import ConnectionConfig, load_config
from mysqldiff.core.engine import MigrationPlan, plan_migration
from mysqldiff.core.metadata import load_snapshot
from mysqldiff.models import SchemaSnapshot
from mysqldiff.providers.mysql import MySQLMetadataProvider
from mysqldiff.storage import SqlFileSink, read_snapshot

console = Console()

SnapshotLoader = Callable[[ConnectionConfig], SchemaSnapshot]


def default_output_path(now: datetime | None = None) -> Path:
    """./sql/<UTC ISO-8601 basic timestamp>.sql"""
    timestamp = (now or datetime.now(UTC)).strftime("%Y%m%dT%H%M%SZ")
    return Path("sql") / f"{timestamp}.sql"


def resolve_snapshot(target: ConnectionConfig) -> SchemaSnapshot:
    """Load one side's snapshot from its snapshot file or live database"""
    if target.snapshot is not None:
        snapshot = read_snapshot(target.snapshot)
        if target.database:
            snapshot = snapshot.with_schema_name(target.database)
        return snapshot

    with MySQLMetadataProvider(target) as provider:
        return load_snapshot(provider, str(target.database))


def fetch_snapshots(
    development: ConnectionConfig,
    production: ConnectionConfig,
    loader: SnapshotLoader = resolve_snapshot,
) -> tuple[SchemaSnapshot, SchemaSnapshot]:
    """Fetch both snapshots in parallel; the first provider error propagates"""
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="mysqldiff-fetch") as pool:
        dev_future = pool.submit(loader, development)
        pro_future = pool.submit(loader, production)
        return dev_future.result(), pro_future.result()


def generate_migration(
    config_path: Path,
    output: Path | None = None,
    policy_overrides: dict[str, Any] | None = None,
    show_sql: bool = False,
    loader: SnapshotLoader = resolve_snapshot,
) -> MigrationPlan:
    """Generate a SQL migration file from the two configured databases

    Args:
        config_path: Path to the JSON config file
        output: SQL output path (default: ./sql/<timestamp>.sql)
        policy_overrides: DiffPolicy fields overriding the config options
        show_sql: Whether to print the generated SQL
        loader: Snapshot loader override for tests/injection

    Returns:
        The migration plan that was written

    Raises:
        ConfigError: If the config file is missing or invalid
        ProviderError: If metadata cannot be fetched
        SinkWriteError: If the SQL file cannot be written
    """
    config = load_config(config_path)
    policy = config.options
    if policy_overrides:
        policy = policy.model_copy(update=policy_overrides)

    console.print("[bold]Loading schema metadata...[/bold]")
    dev_snapshot, pro_snapshot = fetch_snapshots(config.development, config.production, loader)
    console.print(
        f"  [green]✓[/green] development: {config.development.describe()} "
        f"({len(dev_snapshot.table_names)} tables)"
    )
    console.print(
        f"  [green]✓[/green] production: {config.production.describe()} "
        f"({len(pro_snapshot.table_names)} tables)"
    )

    plan = plan_migration(dev_snapshot, pro_snapshot, policy)

    for warning in plan.warnings:
        console.print(f"[yellow]⚠ {warning}[/yellow]")

    if plan.is_empty:
        console.print("[green]✓[/green] No schema differences detected")
        return plan

    output_path = output or default_output_path()
    sink = SqlFileSink(output_path)
    for statement in plan.statements:
        sink.append(statement.sql)

    _report_tables(plan)
    _render_statements_table(plan)
    if show_sql:
        console.print(Syntax(plan.sql, "sql", theme="monokai", line_numbers=False))

    console.print(f"[green]✓[/green] {len(plan.statements)} statements written to {output_path}")
    return plan


def _report_tables(plan: MigrationPlan) -> None:
    if plan.deleted_tables:
        console.print(f"[yellow]The deleted table names are: {', '.join(plan.deleted_tables)}[/yellow]")
    if plan.new_tables:
        console.print(f"[yellow]The new table names are: {', '.join(plan.new_tables)}[/yellow]")
    if plan.altered_tables:
        console.print(
            f"[yellow]The altered table names are: {', '.join(plan.altered_tables)}[/yellow]"
        )


def _render_statements_table(plan: MigrationPlan) -> None:
    table = Table(title="Planned Statements", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("Statement", style="cyan")
    table.add_column("Table", style="green")
    for i, statement in enumerate(plan.statements, 1):
        table.add_row(str(i), statement.kind.value, statement.table)
    console.print(table)
