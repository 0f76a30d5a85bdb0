"""Tests for the INFORMATION_SCHEMA metadata provider against a fake connection."""

from typing import Any

import mysql.connector
import pytest

from mysqldiff.config import ConnectionConfig
from mysqldiff.core.metadata import load_snapshot
from mysqldiff.domain.errors import ProviderError
from mysqldiff.providers import MetadataProvider, MySQLMetadataProvider
from tests.utils import column_row, index_rows, table_row


class _FakeCursor:
    def __init__(self, connection: "_FakeConnection") -> None:
        self._connection = connection
        self._rows: list[dict[str, Any]] = []

    def execute(self, sql: str, params: tuple[Any, ...]) -> None:
        self._connection.queries.append((sql, params))
        if self._connection.fail_with is not None:
            raise self._connection.fail_with
        self._rows = self._connection.responder(sql, params)

    def fetchall(self) -> list[dict[str, Any]]:
        return self._rows

    def close(self) -> None:
        self._connection.cursors_closed += 1


class _FakeConnection:
    def __init__(self, responder) -> None:
        self.responder = responder
        self.queries: list[tuple[str, tuple[Any, ...]]] = []
        self.fail_with: Exception | None = None
        self.cursors_closed = 0
        self.closed = False

    def cursor(self, dictionary: bool = False) -> _FakeCursor:
        assert dictionary is True
        return _FakeCursor(self)

    def close(self) -> None:
        self.closed = True


def _schema_responder(sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
    tables = {"users": table_row("users", comment="Accounts; InnoDB free: 4096 kB")}
    if "INFORMATION_SCHEMA.TABLES" in sql:
        if len(params) == 2:
            return [tables[params[1]]] if params[1] in tables else []
        return list(tables.values())
    if "INFORMATION_SCHEMA.COLUMNS" in sql:
        return [
            column_row("id", 1, nullable=False, extra="auto_increment"),
            column_row("email", 2, "varchar(255)"),
        ]
    if "INFORMATION_SCHEMA.STATISTICS" in sql:
        return index_rows("PRIMARY", ["id"])
    raise AssertionError(f"unexpected query: {sql}")


@pytest.fixture
def fake_connect(monkeypatch: pytest.MonkeyPatch):
    """Patch mysql.connector.connect and record the connect kwargs"""
    calls: list[dict[str, Any]] = []
    connection = _FakeConnection(_schema_responder)

    def _connect(**kwargs):
        calls.append(kwargs)
        return connection

    monkeypatch.setattr("mysql.connector.connect", _connect)
    return connection, calls


@pytest.fixture
def connection_config() -> ConnectionConfig:
    return ConnectionConfig(host="db", user="ro", password="secret", database="app")


def test_provider_satisfies_protocol(connection_config: ConnectionConfig) -> None:
    assert isinstance(MySQLMetadataProvider(connection_config), MetadataProvider)


def test_connects_lazily_with_config_params(fake_connect, connection_config) -> None:
    connection, calls = fake_connect
    provider = MySQLMetadataProvider(connection_config)

    assert calls == []
    assert provider.list_tables("app") == ["users"]
    assert calls == [
        {
            "host": "db",
            "port": 3306,
            "database": "app",
            "connection_timeout": 10,
            "user": "ro",
            "password": "secret",
        }
    ]
    provider.list_tables("app")
    assert len(calls) == 1
    assert connection.cursors_closed == 2


def test_queries_are_parameterized(fake_connect, connection_config) -> None:
    connection, _ = fake_connect

    with MySQLMetadataProvider(connection_config) as provider:
        provider.get_columns("app", "users")
        provider.get_index_stats("app", "users")

    assert [params for _, params in connection.queries] == [("app", "users"), ("app", "users")]
    assert all("'users'" not in sql for sql, _ in connection.queries)


def test_context_manager_closes_connection(fake_connect, connection_config) -> None:
    connection, _ = fake_connect

    with MySQLMetadataProvider(connection_config) as provider:
        provider.list_tables("app")

    assert connection.closed is True


def test_missing_table_raises(fake_connect, connection_config) -> None:
    with MySQLMetadataProvider(connection_config) as provider:
        with pytest.raises(ProviderError) as exc_info:
            provider.get_table("app", "ghost")

    assert exc_info.value.code == "provider_table_missing"


def test_connect_failure_becomes_provider_error(monkeypatch, connection_config) -> None:
    def _connect(**kwargs):
        raise mysql.connector.Error("Access denied for user 'ro'")

    monkeypatch.setattr("mysql.connector.connect", _connect)

    with pytest.raises(ProviderError) as exc_info:
        MySQLMetadataProvider(connection_config).list_tables("app")

    assert exc_info.value.code == "provider_connect_failed"
    assert "ro@db:3306/app" in exc_info.value.message
    assert "secret" not in exc_info.value.message


def test_query_failure_becomes_provider_error(fake_connect, connection_config) -> None:
    connection, _ = fake_connect
    connection.fail_with = mysql.connector.Error("Lost connection")

    with pytest.raises(ProviderError) as exc_info:
        MySQLMetadataProvider(connection_config).list_tables("app")

    assert exc_info.value.code == "provider_query_failed"
    assert connection.cursors_closed == 1


def test_load_snapshot_through_provider(fake_connect, connection_config) -> None:
    with MySQLMetadataProvider(connection_config) as provider:
        snapshot = load_snapshot(provider, "app")

    users = snapshot.get_table("users")
    assert snapshot.table_names == ("users",)
    assert users is not None
    assert users.comment == "Accounts"
    assert users.column_names == ["id", "email"]
    assert users.primary_key is not None
    assert users.primary_key.column_names == ["id"]
