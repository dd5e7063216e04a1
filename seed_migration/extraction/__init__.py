"""Schema extraction from TypeScript data files."""

from .literal_parser import LiteralParser, LiteralSyntaxError, extract_collection
from .schema_extractor import (
    SchemaExtractor,
    SqlType,
    ColumnDef,
    TableSchema,
    ExtractedTable,
    infer_schema,
)

__all__ = [
    "LiteralParser",
    "LiteralSyntaxError",
    "extract_collection",
    "SchemaExtractor",
    "SqlType",
    "ColumnDef",
    "TableSchema",
    "ExtractedTable",
    "infer_schema",
]
