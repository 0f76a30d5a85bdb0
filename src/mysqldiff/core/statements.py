"""
Statement Builder

Assembles rendered fragments into complete CREATE / ALTER / DROP TABLE
statements. Every statement ends with a single semicolon and can be
appended to the SQL output on its own.
"""

from collections.abc import Sequence

from mysqldiff.models import TableInfo

from .renderers import qualified_table_name, render_column, render_index, render_table_options

INDENT = "  "


def build_create_table(schema_name: str, table: TableInfo) -> str:
    """
    Build CREATE TABLE for a table that only exists in development.

    Columns come first in ordinal order, then the primary key, then the other
    indexes in declaration order.
    """
    definitions = [render_column(column) for column in table.columns]

    primary_key = table.primary_key
    if primary_key is not None:
        definitions.append(render_index(primary_key.name, primary_key.members))
    for name, index in table.secondary_indexes.items():
        definitions.append(render_index(name, index.members))

    body = ",\n".join(f"{INDENT}{definition}" for definition in definitions if definition)
    options = render_table_options(table, include_comment=True)
    suffix = f") {options};" if options else ");"
    return f"CREATE TABLE {qualified_table_name(schema_name, table.name)}(\n{body}\n{suffix}"


def build_drop_table(schema_name: str, table_name: str) -> str:
    return f"DROP TABLE {qualified_table_name(schema_name, table_name)};"


def build_alter_table(schema_name: str, table_name: str, clauses: Sequence[str]) -> str:
    """
    Build ALTER TABLE from rendered clauses, one clause per line.

    Returns:
        The statement, or "" when there are no clauses
    """
    if not clauses:
        return ""
    body = f",\n{INDENT}".join(clauses)
    return f"ALTER TABLE {qualified_table_name(schema_name, table_name)} {body};"
