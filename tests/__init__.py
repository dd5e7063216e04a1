"""Test suite for Seed Migration."""

from pathlib import Path


def write_source(directory: Path, name: str, body: str, export_name: str = "data") -> Path:
    """Helper: write `export const <export_name> = <body>;` to directory/name."""
    path = directory / name
    path.write_text(f"export const {export_name} = {body};\n", encoding="utf-8")
    return path


def insert_lines(sql: str):
    """Helper: the INSERT statements of a generated script, in order."""
    return [line for line in sql.splitlines() if line.startswith("INSERT INTO")]
