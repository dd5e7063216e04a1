"""
Error types raised by the seed migration tool.

Every deliberate failure derives from MigrationError so the CLI can report it
with a single handler. Each class also derives from the closest builtin so
callers that only know about FileNotFoundError / ValueError / OSError still
catch them.
"""

from pathlib import Path
from typing import Optional, Union


class MigrationError(Exception):
    """Base class for all seed migration errors."""


class DirectoryNotFoundError(MigrationError, FileNotFoundError):
    """The input directory does not exist or is not a directory."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Input directory not found: {self.path}")

    def __str__(self) -> str:
        return self.args[0]


class MalformedSourceError(MigrationError, ValueError):
    """A source declaration file could not be turned into records."""

    def __init__(
        self,
        file_name: str,
        cause: Union[str, Exception],
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.file_name = file_name
        self.cause = cause
        self.line = line
        self.column = column

        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"{file_name}{location}: {cause}")


class InvalidIdentifierError(MigrationError, ValueError):
    """A table or column name cannot be used as a SQL identifier."""

    def __init__(self, identifier: str, kind: str, reason: str):
        self.identifier = identifier
        self.kind = kind  # 'table' or 'column'
        self.reason = reason
        super().__init__(f"Invalid {kind} name {identifier!r}: {reason}")


class MigrationIOError(MigrationError, OSError):
    """A source file could not be read or an output could not be written."""

    def __init__(self, path: Union[str, Path], cause: Exception):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"I/O error on {self.path}: {cause}")

    def __str__(self) -> str:
        return self.args[0]
