"""
Table Differ

Compares the development and production definitions of one table and
produces the ordered ALTER TABLE clauses that bring production in line.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from mysqldiff.models import DiffPolicy, TableInfo

from .renderers import (
    quote_identifier,
    render_column,
    render_index,
    render_option_resets,
    render_table_options,
)


class ClauseKind(StrEnum):
    """ALTER TABLE clause categories, in emission order"""

    DROP_COLUMN = "drop_column"
    ADD_COLUMN = "add_column"
    CHANGE_COLUMN = "change_column"
    DROP_PRIMARY_KEY = "drop_primary_key"
    ADD_PRIMARY_KEY = "add_primary_key"
    DROP_INDEX = "drop_index"
    ADD_INDEX = "add_index"
    CHANGE_ENGINE_OR_COLLATION = "change_engine_or_collation"


class AlterClause(BaseModel):
    """One ALTER TABLE clause"""

    model_config = ConfigDict(frozen=True)

    kind: ClauseKind
    text: str  # rendered fragment, without position
    target: str | None = None  # column or index name
    position: str | None = None  # FIRST / AFTER `col` (added columns only)

    @property
    def sql(self) -> str:
        if self.position:
            return f"{self.text} {self.position}"
        return self.text


class DiffResult(BaseModel):
    """Ordered clauses for one table, plus notes about skipped changes"""

    table_name: str
    clauses: list[AlterClause] = []
    notes: list[str] = []

    @property
    def is_empty(self) -> bool:
        return not self.clauses

    def of_kind(self, kind: ClauseKind) -> list[AlterClause]:
        return [clause for clause in self.clauses if clause.kind == kind]

    def clause_sql(self) -> list[str]:
        return [clause.sql for clause in self.clauses]


class TableDiffer:
    """Table differ

    Emits clauses in a fixed category order (columns dropped, added, changed;
    primary key; indexes dropped, added, changed; table settings). Within a
    category, columns keep ordinal order and indexes keep first-seen order.
    A change is detected by comparing rendered fragments, so every rendered
    attribute takes part.
    """

    def __init__(
        self,
        dev_table: TableInfo,
        pro_table: TableInfo,
        policy: DiffPolicy | None = None,
    ) -> None:
        """Initialize table differ

        Args:
            dev_table: Development definition (desired)
            pro_table: Production definition (current)
            policy: Diff switches, defaults when omitted
        """
        self.dev_table = dev_table
        self.pro_table = pro_table
        self.policy = policy or DiffPolicy()

    def generate(self) -> DiffResult:
        result = DiffResult(table_name=self.dev_table.name)
        self._diff_dropped_columns(result)
        self._diff_added_columns(result)
        self._diff_changed_columns(result)
        self._diff_primary_key(result)
        self._diff_indexes(result)
        self._diff_table_options(result)
        return result

    def _diff_dropped_columns(self, result: DiffResult) -> None:
        dev_names = set(self.dev_table.column_names)
        for column in self.pro_table.columns:
            if column.name in dev_names:
                continue
            if not self.policy.drop_deleted_columns:
                result.notes.append(
                    f"Column {quote_identifier(self.pro_table.name)}."
                    f"{quote_identifier(column.name)} exists only in production; DROP skipped"
                )
                continue
            result.clauses.append(
                AlterClause(
                    kind=ClauseKind.DROP_COLUMN,
                    text=f"DROP COLUMN {quote_identifier(column.name)}",
                    target=column.name,
                )
            )

    def _diff_added_columns(self, result: DiffResult) -> None:
        pro_names = set(self.pro_table.column_names)
        for column in self.dev_table.columns:
            if column.name in pro_names:
                continue
            previous = self.dev_table.previous_column_name(column.name)
            position = "FIRST" if previous is None else f"AFTER {quote_identifier(previous)}"
            result.clauses.append(
                AlterClause(
                    kind=ClauseKind.ADD_COLUMN,
                    text=f"ADD COLUMN {render_column(column)}",
                    target=column.name,
                    position=position,
                )
            )

    def _diff_changed_columns(self, result: DiffResult) -> None:
        for column in self.dev_table.columns:
            pro_column = self.pro_table.get_column(column.name)
            if pro_column is None:
                continue
            dev_sql = render_column(column)
            if dev_sql != render_column(pro_column):
                result.clauses.append(
                    AlterClause(
                        kind=ClauseKind.CHANGE_COLUMN,
                        text=f"CHANGE COLUMN {quote_identifier(column.name)} {dev_sql}",
                        target=column.name,
                    )
                )

    def _diff_primary_key(self, result: DiffResult) -> None:
        dev_pk = self.dev_table.primary_key
        pro_pk = self.pro_table.primary_key
        dev_sql = render_index(dev_pk.name, dev_pk.members) if dev_pk else ""
        pro_sql = render_index(pro_pk.name, pro_pk.members) if pro_pk else ""
        if dev_sql == pro_sql:
            return

        if pro_sql:
            result.clauses.append(
                AlterClause(kind=ClauseKind.DROP_PRIMARY_KEY, text="DROP PRIMARY KEY")
            )
        if dev_sql:
            result.clauses.append(AlterClause(kind=ClauseKind.ADD_PRIMARY_KEY, text=f"ADD {dev_sql}"))

    def _diff_indexes(self, result: DiffResult) -> None:
        dev_indexes = self.dev_table.secondary_indexes
        pro_indexes = self.pro_table.secondary_indexes

        for name in pro_indexes:
            if name not in dev_indexes:
                result.clauses.append(self._drop_index_clause(name))

        for name, index in dev_indexes.items():
            if name not in pro_indexes:
                result.clauses.append(self._add_index_clause(name, render_index(name, index.members)))

        for name, index in pro_indexes.items():
            if name not in dev_indexes:
                continue
            dev_sql = render_index(name, dev_indexes[name].members)
            if dev_sql != render_index(name, index.members):
                result.clauses.append(self._drop_index_clause(name))
                result.clauses.append(self._add_index_clause(name, dev_sql))

    def _diff_table_options(self, result: DiffResult) -> None:
        include_comment = self.policy.compare_table_comment
        dev_sql = render_table_options(self.dev_table, include_comment=include_comment)
        pro_sql = render_table_options(self.pro_table, include_comment=include_comment)
        if dev_sql == pro_sql:
            return

        # Options production has and development lacks must be reset explicitly
        parts = [dev_sql] if dev_sql else []
        if include_comment and not self.dev_table.comment and self.pro_table.comment:
            parts.append("COMMENT=''")
        parts.extend(
            render_option_resets(self.dev_table.create_options, self.pro_table.create_options)
        )
        if parts:
            result.clauses.append(
                AlterClause(kind=ClauseKind.CHANGE_ENGINE_OR_COLLATION, text=" ".join(parts))
            )

    @staticmethod
    def _drop_index_clause(name: str) -> AlterClause:
        return AlterClause(
            kind=ClauseKind.DROP_INDEX, text=f"DROP KEY {quote_identifier(name)}", target=name
        )

    @staticmethod
    def _add_index_clause(name: str, index_sql: str) -> AlterClause:
        return AlterClause(kind=ClauseKind.ADD_INDEX, text=f"ADD {index_sql}", target=name)


def diff_table(
    dev_table: TableInfo, pro_table: TableInfo, policy: DiffPolicy | None = None
) -> DiffResult:
    """Compute the ALTER TABLE clauses turning `pro_table` into `dev_table`"""
    return TableDiffer(dev_table, pro_table, policy).generate()
