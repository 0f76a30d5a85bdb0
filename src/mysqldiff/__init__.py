"""
mysqldiff

Compare the schemas of a development and a production MySQL database and
generate the CREATE / ALTER / DROP TABLE statements that align production.
"""

__version__ = "0.1.0"

from .core import (
    MigrationPlan,
    build_alter_table,
    build_create_table,
    build_drop_table,
    build_table_info,
    diff_schema,
    diff_table,
    load_snapshot,
    plan_migration,
    render_column,
    render_index,
)
from .models import (
    ColumnDefault,
    ColumnInfo,
    DiffPolicy,
    IndexInfo,
    IndexMember,
    SchemaSnapshot,
    TableInfo,
)
from .storage import SqlFileSink, read_snapshot, write_snapshot

__all__ = [
    "__version__",
    "ColumnDefault",
    "ColumnInfo",
    "IndexMember",
    "IndexInfo",
    "TableInfo",
    "SchemaSnapshot",
    "DiffPolicy",
    "build_table_info",
    "load_snapshot",
    "render_column",
    "render_index",
    "diff_table",
    "diff_schema",
    "build_create_table",
    "build_alter_table",
    "build_drop_table",
    "plan_migration",
    "MigrationPlan",
    "SqlFileSink",
    "read_snapshot",
    "write_snapshot",
]
