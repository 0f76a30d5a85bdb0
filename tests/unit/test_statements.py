"""
Unit tests for CREATE / ALTER / DROP TABLE statement building
"""

from mysqldiff.core.statements import build_alter_table, build_create_table, build_drop_table
from tests.utils import column_row, index_rows, make_table


class TestBuildCreateTable:
    def test_columns_primary_key_then_indexes(self) -> None:
        table = make_table(
            "orders",
            [
                column_row("id", 1, "bigint(20)", nullable=False, extra="auto_increment"),
                column_row("user_id", 2, nullable=False),
                column_row("note", 3, "varchar(255)", comment="Free text"),
            ],
            [
                *index_rows("idx_user", ["user_id"]),
                *index_rows("PRIMARY", ["id"]),
                *index_rows("uniq_note", ["note"], unique=True, sub_parts={"note": 50}),
            ],
            comment="Customer orders",
        )

        sql = build_create_table("app", table)

        assert sql == (
            "CREATE TABLE `app`.`orders`(\n"
            "  `id` bigint(20) NOT NULL AUTO_INCREMENT,\n"
            "  `user_id` int(11) NOT NULL,\n"
            "  `note` varchar(255) DEFAULT NULL COMMENT 'Free text',\n"
            "  PRIMARY KEY (`id`),\n"
            "  INDEX `idx_user` USING BTREE (`user_id`),\n"
            "  UNIQUE INDEX `uniq_note` USING BTREE (`note`(50))\n"
            ") ENGINE=`InnoDB` COLLATE utf8mb4_general_ci COMMENT='Customer orders';"
        )

    def test_table_without_indexes(self) -> None:
        table = make_table("log", [column_row("msg", 1, "text")])

        assert build_create_table("app", table) == (
            "CREATE TABLE `app`.`log`(\n"
            "  `msg` text DEFAULT NULL\n"
            ") ENGINE=`InnoDB` COLLATE utf8mb4_general_ci;"
        )

    def test_table_without_options(self) -> None:
        table = make_table("bare", [column_row("id", 1, nullable=False)], engine="", collation="")

        assert build_create_table("app", table) == "CREATE TABLE `app`.`bare`(\n  `id` int(11) NOT NULL\n);"

    def test_create_options_are_appended(self) -> None:
        table = make_table("t", [column_row("id", 1)], create_options="row_format=COMPRESSED")

        assert build_create_table("s", table).endswith(
            ") ENGINE=`InnoDB` COLLATE utf8mb4_general_ci ROW_FORMAT=COMPRESSED;"
        )


class TestBuildDropTable:
    def test_drop_table(self) -> None:
        assert build_drop_table("app", "legacy_logs") == "DROP TABLE `app`.`legacy_logs`;"

    def test_identifiers_are_quoted(self) -> None:
        assert build_drop_table("my`db", "t") == "DROP TABLE `my``db`.`t`;"


class TestBuildAlterTable:
    def test_single_clause(self) -> None:
        assert build_alter_table("app", "users", ["DROP COLUMN `email`"]) == (
            "ALTER TABLE `app`.`users` DROP COLUMN `email`;"
        )

    def test_multiple_clauses_one_per_line(self) -> None:
        sql = build_alter_table(
            "app", "users", ["DROP PRIMARY KEY", "ADD PRIMARY KEY (`id`)", "DROP KEY `idx_a`"]
        )

        assert sql == (
            "ALTER TABLE `app`.`users` DROP PRIMARY KEY,\n"
            "  ADD PRIMARY KEY (`id`),\n"
            "  DROP KEY `idx_a`;"
        )

    def test_no_clauses_builds_nothing(self) -> None:
        assert build_alter_table("app", "users", []) == ""
