"""
Schema Extractor for TypeScript Data Files

Reads `export const xxx = [...]` data files and infers a MySQL table schema
from the records they declare, so the data can be seeded into the database
behind the dashboard API.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import MalformedSourceError, MigrationIOError
from .literal_parser import LiteralSyntaxError, extract_collection

logger = logging.getLogger(__name__)

ID_COLUMN = "id"


class SqlType(str, Enum):
    """MySQL column types the extractor can infer."""
    TEXT = "TEXT"
    BIGINT = "BIGINT"
    DOUBLE = "DOUBLE"
    BOOLEAN = "TINYINT(1)"
    JSON = "JSON"
    KEY = "VARCHAR(100)"  # primary key; TEXT cannot be indexed without a length


@dataclass
class ColumnDef:
    """Definition of a single column."""
    name: str
    sql_type: SqlType
    is_primary_key: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "sql_type": self.sql_type.value,
            "is_primary_key": self.is_primary_key,
        }


@dataclass
class TableSchema:
    """Schema inferred for one source declaration file."""
    table_name: str
    columns: List[ColumnDef] = field(default_factory=list)
    source_file: Optional[str] = None
    record_count: int = 0

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def get_column(self, name: str) -> Optional[ColumnDef]:
        return next((c for c in self.columns if c.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table_name": self.table_name,
            "source_file": self.source_file,
            "record_count": self.record_count,
            "columns": [c.to_dict() for c in self.columns],
        }


@dataclass
class ExtractedTable:
    """An inferred schema together with the records it was inferred from."""
    schema: TableSchema
    records: List[Dict[str, Any]] = field(default_factory=list)


def sql_type_for_value(value: Any) -> SqlType:
    """Map a parsed literal value to the column type it implies."""
    if value is None:
        return SqlType.TEXT
    if isinstance(value, bool):
        return SqlType.BOOLEAN
    if isinstance(value, int):
        return SqlType.BIGINT
    if isinstance(value, float):
        return SqlType.DOUBLE
    if isinstance(value, (dict, list)):
        return SqlType.JSON
    return SqlType.TEXT


def infer_schema(table_name: str, records: List[Dict[str, Any]]) -> TableSchema:
    """
    Infer columns from records.

    Columns appear in first-seen order across all records and take the type of
    the first value seen for them. The `id` column is always the primary key:
    it keeps its natural position when any record has one, otherwise it is
    appended last.
    """
    columns: Dict[str, ColumnDef] = {}

    for record in records:
        for key, value in record.items():
            if key not in columns:
                columns[key] = ColumnDef(name=key, sql_type=sql_type_for_value(value))

    if ID_COLUMN not in columns:
        columns[ID_COLUMN] = ColumnDef(name=ID_COLUMN, sql_type=SqlType.KEY)

    id_column = columns[ID_COLUMN]
    id_column.sql_type = SqlType.KEY
    id_column.is_primary_key = True

    return TableSchema(
        table_name=table_name,
        columns=list(columns.values()),
        record_count=len(records),
    )


class SchemaExtractor:
    """
    Extract table schemas and records from TypeScript data files.

    The table name is the file name without its extension; column names are
    the record keys. Both are validated before a schema is returned.
    """

    def __init__(self, reject_reserved_words: bool = True):
        self.reject_reserved_words = reject_reserved_words

    def extract_file(self, path: Union[str, Path]) -> ExtractedTable:
        """Read, parse and infer the schema of one source declaration file."""
        path = Path(path)

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MalformedSourceError(path.name, f"not valid UTF-8 ({e})") from e
        except OSError as e:
            raise MigrationIOError(path, e) from e

        table = self.extract_text(text, path.stem, file_name=path.name)
        table.schema.source_file = str(path)
        return table

    def extract_text(self, text: str, table_name: str, file_name: Optional[str] = None) -> ExtractedTable:
        """Same as extract_file, for source text already in memory."""
        from ..generation.sql_writer import validate_identifier

        file_name = file_name or table_name

        try:
            export_name, records = extract_collection(text)
        except LiteralSyntaxError as e:
            raise MalformedSourceError(file_name, e.message, e.line, e.column) from e

        for index, record in enumerate(records):
            if not isinstance(record, dict):
                raise MalformedSourceError(
                    file_name,
                    f"record {index} is a {type(record).__name__}, expected an object",
                )

        validate_identifier(table_name, "table", self.reject_reserved_words)

        schema = infer_schema(table_name, records)
        for column in schema.columns:
            validate_identifier(column.name, "column", self.reject_reserved_words)

        logger.info(
            f"Extracted {file_name}: export '{export_name}', "
            f"{len(records)} records, {len(schema.columns)} columns"
        )
        return ExtractedTable(schema=schema, records=records)


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2:
        print("Usage: python -m seed_migration.extraction.schema_extractor <path_to_ts_file>")
        sys.exit(1)

    import json

    extractor = SchemaExtractor()
    table = extractor.extract_file(sys.argv[1])
    print(json.dumps(table.schema.to_dict(), indent=2))
