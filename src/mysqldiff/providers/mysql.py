"""
MySQL Metadata Provider

Reads table, column and index metadata from INFORMATION_SCHEMA using
mysql-connector-python.
"""

from typing import Any

import mysql.connector

from mysqldiff.config import ConnectionConfig
from mysqldiff.domain.errors import ProviderError

_TABLES_SQL = (
    "SELECT TABLE_NAME AS TABLE_NAME, ENGINE AS ENGINE, TABLE_COLLATION AS TABLE_COLLATION, "
    "CREATE_OPTIONS AS CREATE_OPTIONS, TABLE_COMMENT AS TABLE_COMMENT "
    "FROM INFORMATION_SCHEMA.TABLES "
    "WHERE TABLE_SCHEMA = %s AND TABLE_TYPE = 'BASE TABLE'"
)

_COLUMNS_SQL = (
    "SELECT COLUMN_NAME AS COLUMN_NAME, ORDINAL_POSITION AS ORDINAL_POSITION, "
    "COLUMN_TYPE AS COLUMN_TYPE, DATA_TYPE AS DATA_TYPE, IS_NULLABLE AS IS_NULLABLE, "
    "COLUMN_DEFAULT AS COLUMN_DEFAULT, CHARACTER_SET_NAME AS CHARACTER_SET_NAME, "
    "COLLATION_NAME AS COLLATION_NAME, COLUMN_COMMENT AS COLUMN_COMMENT, EXTRA AS EXTRA "
    "FROM INFORMATION_SCHEMA.COLUMNS "
    "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s "
    "ORDER BY ORDINAL_POSITION"
)

_INDEX_STATS_SQL = (
    "SELECT INDEX_NAME AS INDEX_NAME, SEQ_IN_INDEX AS SEQ_IN_INDEX, "
    "COLUMN_NAME AS COLUMN_NAME, INDEX_TYPE AS INDEX_TYPE, NON_UNIQUE AS NON_UNIQUE, "
    "SUB_PART AS SUB_PART "
    "FROM INFORMATION_SCHEMA.STATISTICS "
    "WHERE TABLE_SCHEMA = %s AND TABLE_NAME = %s "
    "ORDER BY INDEX_NAME = 'PRIMARY' DESC, INDEX_NAME, SEQ_IN_INDEX"
)


class MySQLMetadataProvider:
    """Metadata provider backed by a live MySQL connection

    Usable as a context manager; the connection is opened lazily on the
    first query. Every driver error surfaces as ProviderError.

    Attributes:
        config: Connection settings for the database
    """

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._connection: Any = None

    def __enter__(self) -> "MySQLMetadataProvider":
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def connect(self) -> None:
        if self._connection is not None:
            return
        try:
            self._connection = mysql.connector.connect(**self.config.connect_params())
        except mysql.connector.Error as err:
            raise ProviderError(
                message=f"Cannot connect to {self.config.describe()}: {err}",
                code="provider_connect_failed",
            ) from err

    def close(self) -> None:
        if self._connection is None:
            return
        try:
            self._connection.close()
        finally:
            self._connection = None

    def _query(self, sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        self.connect()
        try:
            cursor = self._connection.cursor(dictionary=True)
            try:
                cursor.execute(sql, params)
                return list(cursor.fetchall())
            finally:
                cursor.close()
        except mysql.connector.Error as err:
            raise ProviderError(
                message=f"Metadata query failed on {self.config.describe()}: {err}",
                code="provider_query_failed",
            ) from err

    def list_tables(self, schema_name: str) -> list[str]:
        rows = self._query(_TABLES_SQL + " ORDER BY TABLE_NAME", (schema_name,))
        names = [row["TABLE_NAME"] for row in rows]
        return [name.decode("utf-8") if isinstance(name, bytes) else str(name) for name in names]

    def get_table(self, schema_name: str, table_name: str) -> dict[str, Any]:
        rows = self._query(_TABLES_SQL + " AND TABLE_NAME = %s", (schema_name, table_name))
        if not rows:
            raise ProviderError(
                message=f"Table '{schema_name}.{table_name}' not found",
                code="provider_table_missing",
            )
        return rows[0]

    def get_columns(self, schema_name: str, table_name: str) -> list[dict[str, Any]]:
        return self._query(_COLUMNS_SQL, (schema_name, table_name))

    def get_index_stats(self, schema_name: str, table_name: str) -> list[dict[str, Any]]:
        return self._query(_INDEX_STATS_SQL, (schema_name, table_name))
