"""
Column / Index Renderers

Turn typed metadata into canonical MySQL DDL fragments. The rendered text
is used both for output and for change detection, so every function here
is deterministic and pure.
"""

from collections.abc import Sequence

from mysqldiff.models import (
    PRIMARY_KEY_NAME,
    ColumnInfo,
    DefaultKind,
    IndexMember,
    TableInfo,
)

# Data types whose literal DEFAULT must be emitted as a quoted string
QUOTED_DEFAULT_TYPES = frozenset(
    {
        "char",
        "varchar",
        "blob",
        "tinyblob",
        "mediumblob",
        "longblob",
        "tinytext",
        "text",
        "mediumtext",
        "longtext",
        "varbinary",
        "binary",
        "enum",
        "set",
        "date",
        "datetime",
        "time",
        "timestamp",
        "year",
    }
)

# Index types that are written as a prefix keyword instead of USING <algorithm>
_KEYWORD_INDEX_TYPES = frozenset({"FULLTEXT", "SPATIAL"})

_TIMESTAMP_KEYWORDS = ("CURRENT_TIMESTAMP", "LOCALTIME", "LOCALTIMESTAMP", "NOW(")

# Informational CREATE_OPTIONS tokens that are not valid table options
_IGNORED_CREATE_OPTIONS = frozenset({"partitioned"})

# Values that restore a table option to its default; others accept DEFAULT
_OPTION_RESET_VALUES = {
    "AVG_ROW_LENGTH": "0",
    "CHECKSUM": "0",
    "COMPRESSION": "'None'",
    "DELAY_KEY_WRITE": "0",
    "ENCRYPTION": "'N'",
    "KEY_BLOCK_SIZE": "0",
    "MAX_ROWS": "0",
    "MIN_ROWS": "0",
}


def quote_identifier(name: str) -> str:
    """Backtick-quote an identifier"""
    return "`" + name.replace("`", "``") + "`"


def quote_string(value: str) -> str:
    """Single-quote a string literal"""
    escaped = value.replace("\\", "\\\\").replace("'", "''")
    return f"'{escaped}'"


def qualified_table_name(schema_name: str, table_name: str) -> str:
    return f"{quote_identifier(schema_name)}.{quote_identifier(table_name)}"


def render_default(column: ColumnInfo) -> str | None:
    """Render the DEFAULT value of a column, None when it has no DEFAULT clause"""
    default = column.default
    if default.kind == DefaultKind.ABSENT:
        return None
    if default.kind == DefaultKind.NULL:
        return "NULL"
    value = default.value or ""
    if default.kind == DefaultKind.EXPRESSION:
        if value.upper().startswith(_TIMESTAMP_KEYWORDS) or value.startswith("("):
            return value
        return f"({value})"
    if column.data_type.lower() in QUOTED_DEFAULT_TYPES:
        return quote_string(value)
    return value


def render_column(column: ColumnInfo) -> str:
    """
    Render one column definition.

    Output grammar (parts omitted when absent):
        `name` type[ CHARACTER SET cs][ COLLATE coll][ NOT NULL][ DEFAULT d][ extra][ COMMENT 'c']

    Args:
        column: Column metadata

    Returns:
        Column DDL fragment
    """
    parts = [quote_identifier(column.name), column.column_type]
    if column.charset:
        parts.append(f"CHARACTER SET {column.charset}")
    if column.collation:
        parts.append(f"COLLATE {column.collation}")
    if not column.nullable:
        parts.append("NOT NULL")
    default_sql = render_default(column)
    if default_sql is not None:
        parts.append(f"DEFAULT {default_sql}")
    if column.extra:
        parts.append(column.extra)
    if column.comment:
        parts.append(f"COMMENT {quote_string(column.comment)}")
    return " ".join(parts)


def _render_member(member: IndexMember) -> str:
    if member.sub_part is not None:
        return f"{quote_identifier(member.column_name)}({member.sub_part})"
    return quote_identifier(member.column_name)


def render_index(index_name: str, members: Sequence[IndexMember]) -> str:
    """
    Render a PRIMARY KEY or INDEX clause.

    Members are rendered in the order given (index order). The algorithm and
    uniqueness come from the first member; they are constant across one index.

    Args:
        index_name: Index name, PRIMARY for the primary key
        members: Index members in SEQ_IN_INDEX order

    Returns:
        Index DDL fragment, or "" when there are no members
    """
    if not members:
        return ""

    column_list = ",".join(_render_member(member) for member in members)
    if index_name == PRIMARY_KEY_NAME:
        return f"PRIMARY KEY ({column_list})"

    first = members[0]
    algorithm = first.algorithm.upper()
    if algorithm in _KEYWORD_INDEX_TYPES:
        return f"{algorithm} INDEX {quote_identifier(index_name)} ({column_list})"

    prefix = "INDEX" if first.non_unique else "UNIQUE INDEX"
    return f"{prefix} {quote_identifier(index_name)} USING {algorithm} ({column_list})"


def parse_create_options(create_options: str) -> dict[str, str]:
    """Split CREATE_OPTIONS ("row_format=DYNAMIC partitioned") into KEY -> rendered option"""
    options: dict[str, str] = {}
    for token in create_options.split():
        if token.lower() in _IGNORED_CREATE_OPTIONS:
            continue
        key, sep, value = token.partition("=")
        options[key.upper()] = f"{key.upper()}={value}" if sep else token.upper()
    return options


def render_create_options(create_options: str) -> str:
    """Normalize CREATE_OPTIONS into table options"""
    return " ".join(parse_create_options(create_options).values())


def render_option_resets(dev_options: str, pro_options: str) -> list[str]:
    """Reset clauses for options production has set and development has not"""
    dev_keys = parse_create_options(dev_options)
    return [
        f"{key}={_OPTION_RESET_VALUES.get(key, 'DEFAULT')}"
        for key in parse_create_options(pro_options)
        if key not in dev_keys
    ]


def render_table_options(table: TableInfo, include_comment: bool = True) -> str:
    """
    Render engine, collation, comment and create options of a table.

    Used as the CREATE TABLE suffix and as the comparison key for table
    settings; the ALTER TABLE clause adds resets on top of it.
    """
    parts: list[str] = []
    if table.engine:
        parts.append(f"ENGINE={quote_identifier(table.engine)}")
    if table.collation:
        parts.append(f"COLLATE {table.collation}")
    if include_comment and table.comment:
        parts.append(f"COMMENT={quote_string(table.comment)}")
    create_options = render_create_options(table.create_options)
    if create_options:
        parts.append(create_options)
    return " ".join(parts)
