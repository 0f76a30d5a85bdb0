"""
Snapshot Command - Dump one configured database to a snapshot file

A snapshot file can later replace the live connection of that side
("snapshot" key in the config), which allows reviewing a diff offline.
"""

from pathlib import Path

from rich.console import Console

from mysqldiff.config import load_config
from mysqldiff.models import SchemaSnapshot
from mysqldiff.storage import write_snapshot

from .diff import SnapshotLoader, resolve_snapshot

console = Console()


def dump_snapshot(
    config_path: Path,
    target: str,
    output: Path,
    loader: SnapshotLoader = resolve_snapshot,
) -> SchemaSnapshot:
    """Fetch the `target` side's metadata and write it to `output`

    Raises:
        ConfigError: If the config file or target name is invalid
        ProviderError: If metadata cannot be fetched
        SinkWriteError: If the snapshot file cannot be written
    """
    config = load_config(config_path)
    connection = config.get_target(target)

    console.print(f"Reading [cyan]{target}[/cyan] from {connection.describe()}...")
    snapshot = loader(connection)
    write_snapshot(output, snapshot)

    console.print(
        f"[green]✓[/green] Snapshot of {snapshot.schema_name} "
        f"({len(snapshot.table_names)} tables) written to {output}"
    )
    for table_name, reason in snapshot.malformed.items():
        console.print(f"[yellow]⚠ {table_name}: {reason}[/yellow]")
    return snapshot
