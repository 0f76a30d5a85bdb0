"""
Migration Engine

Compares a development snapshot with a production snapshot and plans the
statements that bring production in line: DROP TABLE first, then CREATE
TABLE, then ALTER TABLE. All statements target the production schema.
"""

from enum import StrEnum

from pydantic import BaseModel

from mysqldiff.domain.errors import MySQLDiffError
from mysqldiff.models import DiffPolicy, SchemaSnapshot

from .schema_differ import diff_schema
from .statements import build_alter_table, build_create_table, build_drop_table
from .table_differ import diff_table


class StatementKind(StrEnum):
    DROP_TABLE = "drop_table"
    CREATE_TABLE = "create_table"
    ALTER_TABLE = "alter_table"


class PlannedStatement(BaseModel):
    """One generated statement"""

    kind: StatementKind
    table: str
    sql: str


class MigrationPlan(BaseModel):
    """Migration plan with statements in emission order"""

    dev_schema: str
    pro_schema: str
    statements: list[PlannedStatement] = []
    warnings: list[str] = []
    skipped_tables: list[str] = []

    def _tables_of_kind(self, kind: StatementKind) -> list[str]:
        return [statement.table for statement in self.statements if statement.kind == kind]

    @property
    def deleted_tables(self) -> list[str]:
        return self._tables_of_kind(StatementKind.DROP_TABLE)

    @property
    def new_tables(self) -> list[str]:
        return self._tables_of_kind(StatementKind.CREATE_TABLE)

    @property
    def altered_tables(self) -> list[str]:
        return self._tables_of_kind(StatementKind.ALTER_TABLE)

    @property
    def is_empty(self) -> bool:
        return not self.statements

    @property
    def sql(self) -> str:
        return "\n\n".join(statement.sql for statement in self.statements)


class MigrationEngine:
    """Plans a migration between two immutable snapshots

    Malformed tables and per-table diff failures become warnings; they never
    stop the rest of the comparison.
    """

    def __init__(
        self,
        dev_snapshot: SchemaSnapshot,
        pro_snapshot: SchemaSnapshot,
        policy: DiffPolicy | None = None,
    ) -> None:
        self.dev_snapshot = dev_snapshot
        self.pro_snapshot = pro_snapshot
        self.policy = policy or DiffPolicy()

    def plan(self) -> MigrationPlan:
        plan = MigrationPlan(
            dev_schema=self.dev_snapshot.schema_name,
            pro_schema=self.pro_snapshot.schema_name,
        )
        for reason in self._malformed_reasons():
            plan.warnings.append(reason)

        schema_diff = diff_schema(self.dev_snapshot.table_names, self.pro_snapshot.table_names)
        self._plan_deleted_tables(plan, schema_diff.deleted_tables)
        self._plan_new_tables(plan, schema_diff.new_tables)
        self._plan_common_tables(plan, schema_diff.common_tables)
        return plan

    def _malformed_reasons(self) -> list[str]:
        reasons = []
        for side, snapshot in (("development", self.dev_snapshot), ("production", self.pro_snapshot)):
            for table_name, reason in snapshot.malformed.items():
                reasons.append(f"Malformed metadata in {side} ({table_name}): {reason}")
        return reasons

    def _skip(self, plan: MigrationPlan, table_name: str, reason: str) -> None:
        plan.warnings.append(f"Skipping table '{table_name}': {reason}")
        if table_name not in plan.skipped_tables:
            plan.skipped_tables.append(table_name)

    def _plan_deleted_tables(self, plan: MigrationPlan, table_names: list[str]) -> None:
        for table_name in table_names:
            if not self.policy.drop_deleted_tables:
                plan.warnings.append(
                    f"Table '{table_name}' exists only in production; DROP TABLE skipped"
                )
                continue
            plan.statements.append(
                PlannedStatement(
                    kind=StatementKind.DROP_TABLE,
                    table=table_name,
                    sql=build_drop_table(self.pro_snapshot.schema_name, table_name),
                )
            )

    def _plan_new_tables(self, plan: MigrationPlan, table_names: list[str]) -> None:
        for table_name in table_names:
            table = self.dev_snapshot.get_table(table_name)
            if table is None:
                self._skip(plan, table_name, "development metadata is malformed")
                continue
            plan.statements.append(
                PlannedStatement(
                    kind=StatementKind.CREATE_TABLE,
                    table=table_name,
                    sql=build_create_table(self.pro_snapshot.schema_name, table),
                )
            )

    def _plan_common_tables(self, plan: MigrationPlan, table_names: list[str]) -> None:
        for table_name in table_names:
            dev_table = self.dev_snapshot.get_table(table_name)
            pro_table = self.pro_snapshot.get_table(table_name)
            if dev_table is None or pro_table is None:
                side = "development" if dev_table is None else "production"
                self._skip(plan, table_name, f"{side} metadata is malformed")
                continue

            try:
                result = diff_table(dev_table, pro_table, self.policy)
                sql = build_alter_table(
                    self.pro_snapshot.schema_name, table_name, result.clause_sql()
                )
            except MySQLDiffError as err:
                self._skip(plan, table_name, err.message)
                continue

            plan.warnings.extend(result.notes)
            if not sql:
                continue
            plan.statements.append(
                PlannedStatement(kind=StatementKind.ALTER_TABLE, table=table_name, sql=sql)
            )


def plan_migration(
    dev_snapshot: SchemaSnapshot,
    pro_snapshot: SchemaSnapshot,
    policy: DiffPolicy | None = None,
) -> MigrationPlan:
    """Plan the statements that migrate `pro_snapshot` to match `dev_snapshot`"""
    return MigrationEngine(dev_snapshot, pro_snapshot, policy).plan()
