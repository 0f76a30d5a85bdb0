import json
from pathlib import Path

import pytest

from mysqldiff.models import SchemaSnapshot
from tests.utils import column_row, index_rows, make_table, users_columns


@pytest.fixture
def temp_workspace(tmp_path):
    """Create a temporary working directory"""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def dev_users_table():
    """users table as it exists in development (id, name, email)"""
    return make_table(
        "users",
        users_columns(column_row("email", 3, "varchar(255)")),
        index_rows("PRIMARY", ["id"]),
    )


@pytest.fixture
def pro_users_table():
    """users table as it exists in production (id, name)"""
    return make_table("users", users_columns(), index_rows("PRIMARY", ["id"]))


@pytest.fixture
def dev_snapshot(dev_users_table):
    """Development snapshot: users (changed) + orders (new)"""
    orders = make_table(
        "orders",
        [
            column_row("id", 1, "bigint(20)", nullable=False, extra="auto_increment"),
            column_row("user_id", 2, "int(11)", nullable=False),
        ],
        [*index_rows("PRIMARY", ["id"]), *index_rows("idx_user", ["user_id"])],
    )
    return SchemaSnapshot(
        schema_name="app_dev",
        table_names=("users", "orders"),
        tables={"users": dev_users_table, "orders": orders},
    )


@pytest.fixture
def pro_snapshot(pro_users_table):
    """Production snapshot: users + legacy_logs (deleted in development)"""
    legacy_logs = make_table("legacy_logs", [column_row("id", 1, "int(11)", nullable=False)])
    return SchemaSnapshot(
        schema_name="app",
        table_names=("legacy_logs", "users"),
        tables={"legacy_logs": legacy_logs, "users": pro_users_table},
    )


@pytest.fixture
def write_config(temp_workspace):
    """Write a config.json into the workspace and return its path"""

    def _write(data: dict | None = None, name: str = "config.json") -> Path:
        payload = data or {
            "development": {"host": "dev-db", "user": "dev", "database": "app_dev"},
            "production": {"host": "pro-db", "user": "ro", "database": "app"},
        }
        path = temp_workspace / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
