"""Schema Differ: splits two table-name sets into new, deleted and common tables."""

from collections.abc import Iterable

from pydantic import BaseModel


class SchemaDiff(BaseModel):
    """Disjoint table-name groups

    new_tables and common_tables keep development order, deleted_tables keeps
    production order.
    """

    new_tables: list[str] = []
    deleted_tables: list[str] = []
    common_tables: list[str] = []


def diff_schema(dev_table_names: Iterable[str], pro_table_names: Iterable[str]) -> SchemaDiff:
    dev_names = list(dict.fromkeys(dev_table_names))
    pro_names = list(dict.fromkeys(pro_table_names))
    dev_set = set(dev_names)
    pro_set = set(pro_names)

    return SchemaDiff(
        new_tables=[name for name in dev_names if name not in pro_set],
        deleted_tables=[name for name in pro_names if name not in dev_set],
        common_tables=[name for name in dev_names if name in pro_set],
    )
