"""
Base Metadata Provider Interface

Defines what the diff engine needs from a metadata source. Rows are plain
mappings keyed by INFORMATION_SCHEMA column names.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MetadataProvider(Protocol):
    """Supplies raw table/column/index metadata for a named schema."""

    def list_tables(self, schema_name: str) -> list[str]: ...

    def get_table(self, schema_name: str, table_name: str) -> dict[str, Any]: ...

    def get_columns(self, schema_name: str, table_name: str) -> list[dict[str, Any]]: ...

    def get_index_stats(self, schema_name: str, table_name: str) -> list[dict[str, Any]]: ...

    def close(self) -> None: ...
