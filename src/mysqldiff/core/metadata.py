"""
Metadata Model builder

Turns raw INFORMATION_SCHEMA rows (TABLES, COLUMNS, STATISTICS) into the
immutable TableInfo / SchemaSnapshot models consumed by the differs.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from mysqldiff.domain.errors import MalformedMetadataError
from mysqldiff.models import (
    ColumnDefault,
    ColumnInfo,
    IndexInfo,
    IndexMember,
    SchemaSnapshot,
    TableInfo,
)
from mysqldiff.providers.base import MetadataProvider

RawRow = Mapping[str, Any]

_ON_UPDATE_RE = re.compile(r"on update (\S+)", re.IGNORECASE)

# MySQL 5.7 and MariaDB report CURRENT_TIMESTAMP defaults without DEFAULT_GENERATED
_TIMESTAMP_DEFAULT_RE = re.compile(
    r"^(current_timestamp|now|localtime|localtimestamp)\b", re.IGNORECASE
)
_TIMESTAMP_DATA_TYPES = frozenset({"timestamp", "datetime"})

# ValueError also covers pydantic's ValidationError and UnicodeDecodeError
_INVALID_ROW_ERRORS = (KeyError, TypeError, ValueError)


def _invalid_row(source: str, row: RawRow, err: Exception) -> MalformedMetadataError:
    name = row.get("COLUMN_NAME") or row.get("INDEX_NAME") or row.get("TABLE_NAME")
    return MalformedMetadataError(
        message=f"Invalid {source} row ({name!r}): {err}",
        code="invalid_metadata_row",
    )


def normalize_comment(comment: str | None) -> str:
    """Drop everything from the first ';' on (machine-appended annotations)."""
    if not comment:
        return ""
    return comment.split(";", 1)[0]


def _is_true_flag(value: Any) -> bool:
    if isinstance(value, bytes):
        value = value.decode()
    if isinstance(value, str):
        return value.strip().upper() in ("YES", "1", "TRUE")
    return bool(value)


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


def _normalize_extra(extra: str | None) -> str | None:
    """Keep the EXTRA markers that belong in a column definition."""
    if not extra:
        return None
    parts: list[str] = []
    if "auto_increment" in extra.lower():
        parts.append("AUTO_INCREMENT")
    match = _ON_UPDATE_RE.search(extra)
    if match:
        parts.append(f"ON UPDATE {match.group(1)}")
    return " ".join(parts) or None


def _build_default(row: RawRow, nullable: bool) -> ColumnDefault:
    raw_default = _text(row.get("COLUMN_DEFAULT"))
    extra = _text(row.get("EXTRA")) or ""
    data_type = (_text(row.get("DATA_TYPE")) or "").lower()
    if raw_default is not None:
        if "DEFAULT_GENERATED" in extra.upper():
            return ColumnDefault.expression(raw_default)
        if data_type in _TIMESTAMP_DATA_TYPES and _TIMESTAMP_DEFAULT_RE.match(raw_default):
            return ColumnDefault.expression(raw_default)
        return ColumnDefault.literal(raw_default)
    # MySQL reports NULL both for "no default" and "DEFAULT NULL"; only nullable
    # columns carry an implicit DEFAULT NULL.
    if nullable:
        return ColumnDefault.null()
    return ColumnDefault.absent()


def build_column_info(row: RawRow) -> ColumnInfo:
    """Build a ColumnInfo from one INFORMATION_SCHEMA.COLUMNS row

    Raises:
        MalformedMetadataError: If the row is missing fields or holds invalid values
    """
    try:
        nullable = _is_true_flag(row.get("IS_NULLABLE", "YES"))
        return ColumnInfo(
            name=_text(row["COLUMN_NAME"]),
            column_type=_text(row["COLUMN_TYPE"]),
            data_type=(_text(row.get("DATA_TYPE")) or "").lower(),
            nullable=nullable,
            default=_build_default(row, nullable),
            charset=_text(row.get("CHARACTER_SET_NAME")),
            collation=_text(row.get("COLLATION_NAME")),
            comment=_text(row.get("COLUMN_COMMENT")) or None,
            extra=_normalize_extra(_text(row.get("EXTRA"))),
            ordinal_position=int(row["ORDINAL_POSITION"]),
        )
    except _INVALID_ROW_ERRORS as err:
        raise _invalid_row("COLUMNS", row, err) from err


def _check_ordinals(table_name: str, columns: list[ColumnInfo]) -> None:
    positions = [column.ordinal_position for column in columns]
    if positions != list(range(1, len(columns) + 1)):
        raise MalformedMetadataError(
            message=(
                f"Table '{table_name}' has non-contiguous or duplicate column ordinal "
                f"positions: {positions}"
            ),
            code="invalid_ordinal_positions",
        )


def group_index_stats(table_name: str, raw_index_stats: Iterable[RawRow]) -> dict[str, IndexInfo]:
    """Group STATISTICS rows by index name, keeping first-seen index order

    Members of each index are ordered by SEQ_IN_INDEX.

    Raises:
        MalformedMetadataError: If a row is invalid, an index has a functional
            key part, or members of one index disagree on the algorithm
    """
    grouped: dict[str, list[IndexMember]] = {}
    for row in raw_index_stats:
        try:
            index_name = _text(row["INDEX_NAME"])
            if row.get("COLUMN_NAME") is None:
                # Functional key parts (MySQL 8.0.13+) have an EXPRESSION instead
                raise MalformedMetadataError(
                    message=(
                        f"Index '{index_name}' on table '{table_name}' has a functional "
                        "key part, which cannot be rendered from column metadata"
                    ),
                    code="functional_index_unsupported",
                )
            sub_part = row.get("SUB_PART")
            member = IndexMember(
                column_name=_text(row["COLUMN_NAME"]),
                seq_in_index=int(row["SEQ_IN_INDEX"]),
                algorithm=(_text(row.get("INDEX_TYPE")) or "BTREE").upper(),
                non_unique=_is_true_flag(row.get("NON_UNIQUE", 1)),
                sub_part=int(sub_part) if sub_part is not None else None,
            )
        except _INVALID_ROW_ERRORS as err:
            raise _invalid_row("STATISTICS", row, err) from err
        grouped.setdefault(index_name, []).append(member)

    indexes: dict[str, IndexInfo] = {}
    for index_name, members in grouped.items():
        algorithms = {member.algorithm for member in members}
        if len(algorithms) > 1:
            raise MalformedMetadataError(
                message=(
                    f"Index '{index_name}' on table '{table_name}' mixes algorithms: "
                    f"{', '.join(sorted(algorithms))}"
                ),
                code="inconsistent_index_algorithm",
            )
        members.sort(key=lambda member: member.seq_in_index)
        indexes[index_name] = IndexInfo(name=index_name, members=tuple(members))
    return indexes


def build_table_info(
    raw_columns: Iterable[RawRow],
    raw_index_stats: Iterable[RawRow],
    raw_table_row: RawRow,
) -> TableInfo:
    """Build a TableInfo from provider rows

    Args:
        raw_columns: INFORMATION_SCHEMA.COLUMNS rows of the table (any order)
        raw_index_stats: INFORMATION_SCHEMA.STATISTICS rows of the table
        raw_table_row: The table's INFORMATION_SCHEMA.TABLES row

    Returns:
        TableInfo with columns sorted by ordinal position

    Raises:
        MalformedMetadataError: If a row is invalid, the table has no columns, its
            ordinal positions are not 1..n, or an index cannot be rendered
    """
    try:
        table_name = _text(raw_table_row["TABLE_NAME"])
        settings = {
            "engine": _text(raw_table_row.get("ENGINE")),
            "collation": _text(raw_table_row.get("TABLE_COLLATION")),
            "create_options": _text(raw_table_row.get("CREATE_OPTIONS")) or "",
            "comment": normalize_comment(_text(raw_table_row.get("TABLE_COMMENT"))),
        }
    except _INVALID_ROW_ERRORS as err:
        raise _invalid_row("TABLES", raw_table_row, err) from err

    columns = sorted(
        (build_column_info(row) for row in raw_columns),
        key=lambda column: column.ordinal_position,
    )
    if not columns:
        raise MalformedMetadataError(
            message=f"Table '{table_name}' has no columns",
            code="table_without_columns",
        )
    _check_ordinals(table_name, columns)

    indexes = group_index_stats(table_name, raw_index_stats)
    try:
        return TableInfo(name=table_name, columns=tuple(columns), indexes=indexes, **settings)
    except ValidationError as err:
        raise _invalid_row("TABLES", raw_table_row, err) from err


def load_snapshot(provider: MetadataProvider, schema_name: str) -> SchemaSnapshot:
    """Fetch every table of `schema_name` from a provider and build its snapshot

    Malformed tables are recorded on the snapshot rather than raised, so one
    broken table never blocks the comparison of the others. Provider errors
    propagate unchanged.
    """
    table_names = provider.list_tables(schema_name)
    tables: dict[str, TableInfo] = {}
    malformed: dict[str, str] = {}

    for table_name in table_names:
        table_row = provider.get_table(schema_name, table_name)
        columns = provider.get_columns(schema_name, table_name)
        index_stats = provider.get_index_stats(schema_name, table_name)
        try:
            tables[table_name] = build_table_info(columns, index_stats, table_row)
        except MalformedMetadataError as err:
            malformed[table_name] = err.message

    return SchemaSnapshot(
        schema_name=schema_name,
        table_names=tuple(table_names),
        tables=tables,
        malformed=malformed,
    )
