"""
MySQL Script Writer

Renders inferred table schemas and their records as `schema.sql` and
`inserts.sql` text. Identifiers are validated before they are quoted so the
generated scripts never contain names MySQL would reject.
"""

import json
import re
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from ..errors import InvalidIdentifierError
from ..extraction.schema_extractor import ExtractedTable, TableSchema

OUTPUT_HEADER = "-- Generated by seed-migrate. Do not edit.\n\n"

MAX_IDENTIFIER_LENGTH = 64

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# MySQL 8.0 reserved words (the subset that can look like a field name)
MYSQL_RESERVED_WORDS = frozenset({
    "ACCESSIBLE", "ADD", "ALL", "ALTER", "ANALYZE", "AND", "AS", "ASC",
    "BEFORE", "BETWEEN", "BIGINT", "BINARY", "BLOB", "BOTH", "BY", "CALL",
    "CASCADE", "CASE", "CHANGE", "CHAR", "CHARACTER", "CHECK", "COLLATE",
    "COLUMN", "CONDITION", "CONSTRAINT", "CONTINUE", "CONVERT", "CREATE",
    "CROSS", "CUBE", "CURRENT_DATE", "CURRENT_TIME", "CURRENT_TIMESTAMP",
    "CURRENT_USER", "CURSOR", "DATABASE", "DATABASES", "DEC", "DECIMAL",
    "DECLARE", "DEFAULT", "DELAYED", "DELETE", "DESC", "DESCRIBE",
    "DETERMINISTIC", "DISTINCT", "DIV", "DOUBLE", "DROP", "DUAL", "EACH",
    "ELSE", "ELSEIF", "ENCLOSED", "ESCAPED", "EXCEPT", "EXISTS", "EXIT",
    "EXPLAIN", "FALSE", "FETCH", "FLOAT", "FOR", "FORCE", "FOREIGN", "FROM",
    "FULLTEXT", "FUNCTION", "GENERATED", "GET", "GRANT", "GROUP", "GROUPS",
    "HAVING", "IF", "IGNORE", "IN", "INDEX", "INFILE", "INNER", "INOUT",
    "INSERT", "INT", "INTEGER", "INTERVAL", "INTO", "IS", "ITERATE", "JOIN",
    "KEY", "KEYS", "KILL", "LATERAL", "LEADING", "LEAVE", "LEFT", "LIKE",
    "LIMIT", "LINES", "LOAD", "LOCK", "LONG", "LOOP", "MATCH", "MOD",
    "NATURAL", "NOT", "NULL", "NUMERIC", "OF", "ON", "OPTION", "OR", "ORDER",
    "OUT", "OUTER", "OVER", "PARTITION", "PRECISION", "PRIMARY", "PROCEDURE",
    "PURGE", "RANGE", "RANK", "READ", "REAL", "RECURSIVE", "REFERENCES",
    "REGEXP", "RELEASE", "RENAME", "REPEAT", "REPLACE", "REQUIRE", "RESTRICT",
    "RETURN", "REVOKE", "RIGHT", "RLIKE", "ROW", "ROWS", "SCHEMA", "SCHEMAS",
    "SELECT", "SET", "SHOW", "SIGNAL", "SMALLINT", "SPATIAL", "SQL",
    "STARTING", "SYSTEM", "TABLE", "TERMINATED", "THEN", "TO", "TRAILING",
    "TRIGGER", "TRUE", "UNDO", "UNION", "UNIQUE", "UNLOCK", "UNSIGNED",
    "UPDATE", "USAGE", "USE", "USING", "VALUES", "VARCHAR", "VARYING",
    "WHEN", "WHERE", "WHILE", "WINDOW", "WITH", "WRITE", "XOR", "ZEROFILL",
})


def validate_identifier(name: str, kind: str, reject_reserved: bool = True) -> str:
    """Check that `name` can be used verbatim as a MySQL table/column name."""
    if not name:
        raise InvalidIdentifierError(name, kind, "name is empty")
    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise InvalidIdentifierError(
            name, kind, f"longer than {MAX_IDENTIFIER_LENGTH} characters"
        )
    if not IDENTIFIER_RE.match(name):
        raise InvalidIdentifierError(
            name, kind, "only letters, digits and underscores are allowed, "
            "and it must not start with a digit"
        )
    if reject_reserved and name.upper() in MYSQL_RESERVED_WORDS:
        raise InvalidIdentifierError(name, kind, "MySQL reserved word")
    return name


def quote_identifier(name: str) -> str:
    return f"`{name}`"


def _quote_text(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def render_value(value: Any) -> str:
    """Render one field value as a SQL literal."""
    if value is None:
        return "NULL"
    # bool before int: True is an int in Python
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (dict, list)):
        return _quote_text(json.dumps(value, separators=(",", ":"), ensure_ascii=False))
    return _quote_text(str(value))


def render_schema(schema: TableSchema) -> str:
    """Render DROP TABLE IF EXISTS + CREATE TABLE for one table."""
    column_lines = []
    for column in schema.columns:
        line = f"  {quote_identifier(column.name)} {column.sql_type.value}"
        if column.is_primary_key:
            line += " PRIMARY KEY"
        column_lines.append(line)

    table = quote_identifier(schema.table_name)
    return (
        f"DROP TABLE IF EXISTS {table};\n"
        f"CREATE TABLE {table} (\n"
        + ",\n".join(column_lines)
        + "\n);\n\n"
    )


def render_insert(table_name: str, record: Dict[str, Any]) -> str:
    """One INSERT covering exactly the record's own fields, in its own order."""
    columns = ",".join(quote_identifier(key) for key in record)
    values = ",".join(render_value(value) for value in record.values())
    return f"INSERT INTO {quote_identifier(table_name)} ({columns}) VALUES ({values});\n"


def render_inserts(table_name: str, records: Iterable[Dict[str, Any]]) -> str:
    return "".join(render_insert(table_name, record) for record in records)


def render_combined(tables: Sequence[ExtractedTable]) -> Tuple[str, str]:
    """
    Build the combined schema and insert scripts for a batch.

    Insert blocks are separated by one blank line per file.
    """
    schema_parts: List[str] = [OUTPUT_HEADER]
    insert_parts: List[str] = [OUTPUT_HEADER]

    for table in tables:
        schema_parts.append(render_schema(table.schema))
        insert_parts.append(render_inserts(table.schema.table_name, table.records) + "\n")

    return "".join(schema_parts), "".join(insert_parts)
