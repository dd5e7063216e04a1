"""MySQL script generation."""

from .sql_writer import (
    render_combined,
    render_insert,
    render_schema,
    render_value,
    validate_identifier,
)

__all__ = [
    "render_combined",
    "render_insert",
    "render_schema",
    "render_value",
    "validate_identifier",
]
