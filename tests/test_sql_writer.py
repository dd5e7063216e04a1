"""
Tests for MySQL script rendering.
"""

import pytest

from seed_migration.errors import InvalidIdentifierError
from seed_migration.extraction.schema_extractor import ExtractedTable, infer_schema
from seed_migration.generation.sql_writer import (
    OUTPUT_HEADER,
    render_combined,
    render_insert,
    render_schema,
    render_value,
    validate_identifier,
)


class TestRenderValue:

    @pytest.mark.parametrize("value,expected", [
        (None, "NULL"),
        (True, "1"),
        (False, "0"),
        (42, "42"),
        (-3, "-3"),
        (2.5, "2.5"),
        ("plain", "'plain'"),
        ("it's", "'it''s'"),
        ("", "''"),
    ])
    def test_scalars(self, value, expected):
        assert render_value(value) == expected

    def test_nested_object_is_compact_json(self):
        assert render_value({"region": "north", "n": [1, 2]}) == \
            """'{"region":"north","n":[1,2]}'"""

    def test_nested_quotes_are_doubled(self):
        assert render_value({"note": "it's"}) == """'{"note":"it''s"}'"""

    def test_non_ascii_kept(self):
        assert render_value(["café"]) == """'["café"]'"""


class TestRenderSchema:

    def test_create_table(self):
        schema = infer_schema("tasks", [{"id": "a", "n": 1}, {"id": "b", "n": 2, "flag": True}])
        assert render_schema(schema) == (
            "DROP TABLE IF EXISTS `tasks`;\n"
            "CREATE TABLE `tasks` (\n"
            "  `id` VARCHAR(100) PRIMARY KEY,\n"
            "  `n` BIGINT,\n"
            "  `flag` TINYINT(1)\n"
            ");\n\n"
        )

    def test_synthesized_id_is_last(self):
        schema = infer_schema("notes", [{"body": "x", "meta": {}}])
        assert render_schema(schema).splitlines()[2:5] == [
            "  `body` TEXT,",
            "  `meta` JSON,",
            "  `id` VARCHAR(100) PRIMARY KEY",
        ]


class TestRenderInsert:

    def test_only_own_fields(self):
        assert render_insert("tasks", {"id": "a", "n": 1}) == \
            "INSERT INTO `tasks` (`id`,`n`) VALUES ('a',1);\n"

    def test_record_order_is_used(self):
        assert render_insert("t", {"b": None, "a": False}) == \
            "INSERT INTO `t` (`b`,`a`) VALUES (NULL,0);\n"

    def test_quote_escaping(self):
        line = render_insert("t", {"title": "Review last season's report"})
        assert "'Review last season''s report'" in line


class TestRenderCombined:

    def _table(self, name, records):
        return ExtractedTable(schema=infer_schema(name, records), records=records)

    def test_empty_batch_is_header_only(self):
        schema_sql, inserts_sql = render_combined([])
        assert schema_sql == OUTPUT_HEADER
        assert inserts_sql == OUTPUT_HEADER

    def test_blocks_are_separated_by_blank_line(self):
        schema_sql, inserts_sql = render_combined([
            self._table("a", [{"id": 1}, {"id": 2}]),
            self._table("b", [{"id": 3}]),
        ])
        assert inserts_sql == OUTPUT_HEADER + (
            "INSERT INTO `a` (`id`) VALUES (1);\n"
            "INSERT INTO `a` (`id`) VALUES (2);\n"
            "\n"
            "INSERT INTO `b` (`id`) VALUES (3);\n"
            "\n"
        )
        assert schema_sql.count("CREATE TABLE") == 2
        assert schema_sql.index("`a`") < schema_sql.index("`b`")


class TestValidateIdentifier:

    @pytest.mark.parametrize("name", ["tasksData", "_private", "col_2", "a" * 64])
    def test_valid(self, name):
        assert validate_identifier(name, "column") == name

    @pytest.mark.parametrize("name", ["", "2fast", "due date", "a-b", "a`b", "a" * 65])
    def test_invalid(self, name):
        with pytest.raises(InvalidIdentifierError):
            validate_identifier(name, "column")

    @pytest.mark.parametrize("name", ["order", "KEY", "Select", "desc"])
    def test_reserved(self, name):
        with pytest.raises(InvalidIdentifierError, match="reserved"):
            validate_identifier(name, "table")

    def test_reserved_allowed(self):
        assert validate_identifier("order", "column", reject_reserved=False) == "order"
