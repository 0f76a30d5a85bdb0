from .metadata_builders import column_row, index_rows, make_table, table_row, users_columns

__all__ = ["column_row", "index_rows", "make_table", "table_row", "users_columns"]
