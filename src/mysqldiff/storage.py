"""
Storage layer for SQL output files and schema snapshot files.
"""

import json
from pathlib import Path

from pydantic import ValidationError

from .domain.errors import ProviderError, SinkWriteError
from .models import SchemaSnapshot


class SqlFileSink:
    """Append-only SQL output file

    Each appended block is followed by a blank line. Parent directories are
    created on the first write. A failed write after earlier blocks leaves a
    partial file; the raised error says so.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self.blocks_written = 0

    def append(self, text: str) -> None:
        block = text.strip("\n")
        if not block:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(block + "\n\n")
        except OSError as err:
            message = f"Cannot write SQL to {self.path}: {err}"
            if self.blocks_written:
                message += (
                    f"\n{self.blocks_written} statement(s) were already written; "
                    f"{self.path} is incomplete and must be deleted before use"
                )
            raise SinkWriteError(message=message, code="sink_write_failed") from err
        self.blocks_written += 1


def read_snapshot(snapshot_path: Path) -> SchemaSnapshot:
    """Read a snapshot file written by write_snapshot()

    Raises:
        ProviderError: If the file is missing or does not hold a valid snapshot
    """
    if not snapshot_path.exists():
        raise ProviderError(
            message=f"Snapshot file not found: {snapshot_path}", code="snapshot_missing"
        )

    try:
        with open(snapshot_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return SchemaSnapshot.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as err:
        raise ProviderError(
            message=f"Invalid snapshot file {snapshot_path}: {err}", code="snapshot_invalid"
        ) from err


def write_snapshot(snapshot_path: Path, snapshot: SchemaSnapshot) -> None:
    """Write a snapshot file (overwrites)"""
    try:
        snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        with open(snapshot_path, "w", encoding="utf-8") as f:
            json.dump(snapshot.model_dump(mode="json", by_alias=True), f, indent=2)
            f.write("\n")
    except OSError as err:
        raise SinkWriteError(
            message=f"Cannot write snapshot to {snapshot_path}: {err}", code="snapshot_write_failed"
        ) from err
