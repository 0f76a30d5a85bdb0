"""
mysqldiff core

Pure diff/render/build logic over immutable snapshots. Nothing in this
package prints or touches files; load_snapshot only drives a provider.
"""

from .engine import MigrationEngine, MigrationPlan, PlannedStatement, StatementKind, plan_migration
from .metadata import build_table_info, load_snapshot, normalize_comment
from .renderers import render_column, render_index, render_table_options
from .schema_differ import SchemaDiff, diff_schema
from .statements import build_alter_table, build_create_table, build_drop_table
from .table_differ import AlterClause, ClauseKind, DiffResult, TableDiffer, diff_table

__all__ = [
    "build_table_info",
    "load_snapshot",
    "normalize_comment",
    "render_column",
    "render_index",
    "render_table_options",
    "AlterClause",
    "ClauseKind",
    "DiffResult",
    "TableDiffer",
    "diff_table",
    "SchemaDiff",
    "diff_schema",
    "build_create_table",
    "build_drop_table",
    "build_alter_table",
    "MigrationEngine",
    "MigrationPlan",
    "PlannedStatement",
    "StatementKind",
    "plan_migration",
]
