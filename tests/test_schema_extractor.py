"""
Tests for schema inference from TypeScript data files.
"""

import pytest

from seed_migration.errors import InvalidIdentifierError, MalformedSourceError, MigrationIOError
from seed_migration.extraction.schema_extractor import (
    SchemaExtractor,
    SqlType,
    infer_schema,
    sql_type_for_value,
)
from tests import write_source


class TestSqlTypeForValue:

    @pytest.mark.parametrize("value,expected", [
        (None, SqlType.TEXT),
        (True, SqlType.BOOLEAN),
        (False, SqlType.BOOLEAN),
        (3, SqlType.BIGINT),
        (2.5, SqlType.DOUBLE),
        ({"a": 1}, SqlType.JSON),
        ([1, 2], SqlType.JSON),
        ("text", SqlType.TEXT),
    ])
    def test_mapping(self, value, expected):
        assert sql_type_for_value(value) == expected


class TestInferSchema:

    def test_first_seen_order_and_types(self):
        schema = infer_schema("t", [
            {"id": "a", "n": 1},
            {"id": "b", "n": "later text", "flag": True},
        ])
        assert schema.column_names == ["id", "n", "flag"]
        assert schema.get_column("n").sql_type == SqlType.BIGINT
        assert schema.get_column("flag").sql_type == SqlType.BOOLEAN

    def test_explicit_id_keeps_position_and_is_primary_key(self):
        schema = infer_schema("t", [{"name": "x", "id": 7}])
        assert schema.column_names == ["name", "id"]
        id_column = schema.get_column("id")
        assert id_column.is_primary_key
        assert id_column.sql_type == SqlType.KEY

    def test_missing_id_is_appended_last(self):
        schema = infer_schema("t", [{"name": "x"}, {"count": 2}])
        assert schema.column_names == ["name", "count", "id"]
        assert schema.get_column("id").sql_type == SqlType.KEY
        assert schema.get_column("id").is_primary_key

    def test_id_found_in_later_record(self):
        schema = infer_schema("t", [{"name": "x"}, {"id": "b", "name": "y"}])
        assert schema.column_names == ["name", "id"]

    def test_column_count_property(self):
        records = [{"a": 1}, {"b": 2, "a": 3}, {"c": None}]
        schema = infer_schema("t", records)
        distinct = {k for r in records for k in r}
        assert len(schema.columns) == len(distinct) + 1

    def test_null_first_value_gives_text(self):
        schema = infer_schema("t", [{"id": "a", "note": None}, {"id": "b", "note": 5}])
        assert schema.get_column("note").sql_type == SqlType.TEXT

    def test_only_id_is_primary_key(self):
        schema = infer_schema("t", [{"id": 1, "a": 2}])
        assert [c.name for c in schema.columns if c.is_primary_key] == ["id"]

    def test_empty_collection(self):
        schema = infer_schema("t", [])
        assert schema.column_names == ["id"]
        assert schema.record_count == 0


class TestSchemaExtractor:

    def test_plot_survey_scenario(self, tmp_path):
        path = write_source(
            tmp_path, "surveys.ts",
            "[{ id: 1, name: 'Plot Survey', active: true, meta: { region: 'north' } }]",
        )
        table = SchemaExtractor().extract_file(path)

        schema = table.schema
        assert schema.table_name == "surveys"
        assert schema.source_file == str(path)
        assert [(c.name, c.sql_type) for c in schema.columns] == [
            ("id", SqlType.KEY),
            ("name", SqlType.TEXT),
            ("active", SqlType.BOOLEAN),
            ("meta", SqlType.JSON),
        ]
        assert table.records == [
            {"id": 1, "name": "Plot Survey", "active": True, "meta": {"region": "north"}},
        ]

    def test_missing_declaration(self, tmp_path):
        path = tmp_path / "broken.ts"
        path.write_text("const rows = [];\n")

        with pytest.raises(MalformedSourceError) as exc_info:
            SchemaExtractor().extract_file(path)
        assert exc_info.value.file_name == "broken.ts"
        assert "No exported array" in str(exc_info.value)

    def test_parse_error_carries_location(self, tmp_path):
        path = write_source(tmp_path, "broken.ts", "[\n  { status: Status.Done },\n]")

        with pytest.raises(MalformedSourceError) as exc_info:
            SchemaExtractor().extract_file(path)
        error = exc_info.value
        assert error.line == 2
        assert "line 2" in str(error)
        assert isinstance(error, ValueError)

    def test_non_object_record(self, tmp_path):
        path = write_source(tmp_path, "tags.ts", "['a', 'b']")

        with pytest.raises(MalformedSourceError, match="record 0 is a str"):
            SchemaExtractor().extract_file(path)

    def test_invalid_table_name(self, tmp_path):
        path = write_source(tmp_path, "task-list.ts", "[{ id: 1 }]")

        with pytest.raises(InvalidIdentifierError) as exc_info:
            SchemaExtractor().extract_file(path)
        assert exc_info.value.kind == "table"
        assert exc_info.value.identifier == "task-list"

    def test_reserved_column_name(self, tmp_path):
        path = write_source(tmp_path, "steps.ts", "[{ id: 1, order: 2 }]")

        with pytest.raises(InvalidIdentifierError) as exc_info:
            SchemaExtractor().extract_file(path)
        assert exc_info.value.kind == "column"

    def test_reserved_words_allowed_when_disabled(self, tmp_path):
        path = write_source(tmp_path, "steps.ts", "[{ id: 1, order: 2 }]")

        table = SchemaExtractor(reject_reserved_words=False).extract_file(path)
        assert table.schema.column_names == ["id", "order"]

    def test_quoted_key_with_space_rejected(self, tmp_path):
        path = write_source(tmp_path, "rows.ts", "[{ id: 1, 'due date': 'x' }]")

        with pytest.raises(InvalidIdentifierError, match="due date"):
            SchemaExtractor().extract_file(path)

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(MigrationIOError):
            SchemaExtractor().extract_file(tmp_path / "missing.ts")

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin.ts"
        path.write_bytes(b"export const rows = [{ id: '\xe9' }];")

        with pytest.raises(MalformedSourceError, match="UTF-8"):
            SchemaExtractor().extract_file(path)
