"""
Metadata Models

Normalized, immutable representation of MySQL table metadata. One
SchemaSnapshot is built per source database (development / production)
and is never mutated afterwards.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

PRIMARY_KEY_NAME = "PRIMARY"


class DefaultKind(StrEnum):
    """How a column default was declared"""

    ABSENT = "absent"  # no DEFAULT clause at all
    NULL = "null"  # DEFAULT NULL
    LITERAL = "literal"  # DEFAULT 0 / DEFAULT 'abc'
    EXPRESSION = "expression"  # DEFAULT CURRENT_TIMESTAMP / DEFAULT (uuid())


class ColumnDefault(BaseModel):
    """Column default value, keeping "no default" apart from "DEFAULT NULL"."""

    model_config = ConfigDict(frozen=True)

    kind: DefaultKind = DefaultKind.ABSENT
    value: str | None = None

    @model_validator(mode="after")
    def _check_value(self) -> "ColumnDefault":
        needs_value = self.kind in (DefaultKind.LITERAL, DefaultKind.EXPRESSION)
        if needs_value and self.value is None:
            raise ValueError(f"{self.kind} default requires a value")
        if not needs_value and self.value is not None:
            raise ValueError(f"{self.kind} default cannot carry a value")
        return self

    @classmethod
    def absent(cls) -> "ColumnDefault":
        return cls()

    @classmethod
    def null(cls) -> "ColumnDefault":
        return cls(kind=DefaultKind.NULL)

    @classmethod
    def literal(cls, value: str) -> "ColumnDefault":
        return cls(kind=DefaultKind.LITERAL, value=value)

    @classmethod
    def expression(cls, value: str) -> "ColumnDefault":
        return cls(kind=DefaultKind.EXPRESSION, value=value)

    @property
    def is_present(self) -> bool:
        return self.kind != DefaultKind.ABSENT


class ColumnInfo(BaseModel):
    """Column definition"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    column_type: str = Field(alias="columnType")  # e.g. varchar(255)
    data_type: str = Field(alias="dataType")  # e.g. varchar, decides default quoting
    nullable: bool = True
    default: ColumnDefault = Field(default_factory=ColumnDefault)
    charset: str | None = None
    collation: str | None = None
    comment: str | None = None
    extra: str | None = None  # AUTO_INCREMENT / ON UPDATE ...
    ordinal_position: int = Field(alias="ordinalPosition", ge=1)


class IndexMember(BaseModel):
    """One column of a named index"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    column_name: str = Field(alias="columnName")
    seq_in_index: int = Field(alias="seqInIndex", ge=1)
    algorithm: str = "BTREE"
    non_unique: bool = Field(True, alias="nonUnique")
    sub_part: int | None = Field(None, alias="subPart")  # prefix length


class IndexInfo(BaseModel):
    """Named index (or the primary key) with its members in index order"""

    model_config = ConfigDict(frozen=True)

    name: str
    members: tuple[IndexMember, ...]

    @property
    def is_primary(self) -> bool:
        return self.name == PRIMARY_KEY_NAME

    @property
    def algorithm(self) -> str:
        return self.members[0].algorithm if self.members else ""

    @property
    def is_unique(self) -> bool:
        return bool(self.members) and not self.members[0].non_unique

    @property
    def column_names(self) -> list[str]:
        return [member.column_name for member in self.members]


class TableInfo(BaseModel):
    """Table definition: settings, ordered columns and named indexes"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    engine: str | None = None
    collation: str | None = None
    create_options: str = Field("", alias="createOptions")
    comment: str = ""
    columns: tuple[ColumnInfo, ...]
    indexes: dict[str, IndexInfo] = Field(default_factory=dict)

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def get_column(self, name: str) -> ColumnInfo | None:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def previous_column_name(self, name: str) -> str | None:
        """Name of the column declared right before `name`, None if it is first."""
        names = self.column_names
        index = names.index(name)
        return names[index - 1] if index > 0 else None

    @property
    def primary_key(self) -> IndexInfo | None:
        return self.indexes.get(PRIMARY_KEY_NAME)

    @property
    def secondary_indexes(self) -> dict[str, IndexInfo]:
        return {name: index for name, index in self.indexes.items() if name != PRIMARY_KEY_NAME}


class SchemaSnapshot(BaseModel):
    """Fully materialized metadata for one database at one point in time

    `table_names` lists every table the provider reported, in provider order.
    Tables whose metadata could not be normalized are listed in `malformed`
    (name -> reason) instead of `tables`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_name: str = Field(alias="schemaName")
    table_names: tuple[str, ...] = Field((), alias="tableNames")
    tables: dict[str, TableInfo] = Field(default_factory=dict)
    malformed: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _default_table_names(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "table_names" in data or "tableNames" in data:
            return data
        names = [*data.get("tables", {}), *data.get("malformed", {})]
        return {**data, "table_names": tuple(dict.fromkeys(names))}

    @model_validator(mode="after")
    def _check_table_names(self) -> "SchemaSnapshot":
        unknown = [
            name for name in [*self.tables, *self.malformed] if name not in self.table_names
        ]
        if unknown:
            raise ValueError(f"Tables missing from table_names: {', '.join(unknown)}")
        return self

    def get_table(self, name: str) -> TableInfo | None:
        return self.tables.get(name)

    def with_schema_name(self, schema_name: str) -> "SchemaSnapshot":
        return self.model_copy(update={"schema_name": schema_name})


class DiffPolicy(BaseModel):
    """Switches that select between the legacy diff behaviours"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    drop_deleted_tables: bool = Field(True, alias="dropDeletedTables")
    drop_deleted_columns: bool = Field(True, alias="dropDeletedColumns")
    # MySQL appends its own annotations to table comments, so they are ignored by default
    compare_table_comment: bool = Field(False, alias="compareTableComment")
