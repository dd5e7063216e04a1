"""
Migration Runner

Turns a directory of TypeScript data files into one combined `schema.sql`
and one combined `inserts.sql`. Everything is rendered in memory first; the
output files are only touched once the whole batch has been converted.
"""

import errno
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .config_loader import MigrationConfig
from .errors import DirectoryNotFoundError, MigrationError, MigrationIOError
from .extraction.schema_extractor import ExtractedTable, SchemaExtractor, TableSchema
from .generation.sql_writer import render_combined

logger = logging.getLogger(__name__)


@dataclass
class FileFailure:
    """A source file left out of the output in skip mode."""
    file_name: str
    error: MigrationError

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass
class MigrationResult:
    """Outcome of one migration run."""
    tables: List[ExtractedTable] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)
    schema_path: Optional[Path] = None
    inserts_path: Optional[Path] = None

    @property
    def files_processed(self) -> int:
        return len(self.tables) + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> Dict[str, Any]:
        return {
            "files_processed": self.files_processed,
            "tables": [t.schema.table_name for t in self.tables],
            "records": sum(t.schema.record_count for t in self.tables),
            "failures": {f.file_name: f.message for f in self.failures},
            "schema_path": str(self.schema_path) if self.schema_path else None,
            "inserts_path": str(self.inserts_path) if self.inserts_path else None,
        }


def locate_inputs(input_dir: Union[str, Path], extension: str) -> List[Path]:
    """
    List the source files in `input_dir` (top level only).

    Files are returned sorted by name so repeated runs emit tables in the
    same order.
    """
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        raise DirectoryNotFoundError(input_dir)

    try:
        entries = list(input_dir.iterdir())
    except OSError as e:
        raise MigrationIOError(input_dir, e) from e

    return sorted(
        (p for p in entries if p.name.endswith(extension) and p.is_file()),
        key=lambda p: p.name,
    )


def _stage(path: Path, content: str) -> str:
    """Write `content` to a temp file next to `path` and return its name."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)
    except Exception:
        os.unlink(tmp_name)
        raise
    return tmp_name


def write_outputs(config: MigrationConfig, schema_sql: str, inserts_sql: str):
    """
    Create the output directory if needed and write both scripts.

    Both scripts are staged as temp files first; the real outputs are only
    replaced once both have been written and both targets are replaceable.
    """
    try:
        config.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MigrationIOError(config.output_dir, e) from e

    outputs = ((config.schema_path, schema_sql), (config.inserts_path, inserts_sql))
    staged: List[Tuple[str, Path]] = []
    path = config.output_dir
    try:
        for path, content in outputs:
            if path.is_dir():
                raise IsADirectoryError(errno.EISDIR, "Output path is a directory", str(path))
            staged.append((_stage(path, content), path))

        for tmp_name, path in staged:
            os.replace(tmp_name, path)
    except (OSError, UnicodeError) as e:
        raise MigrationIOError(path, e) from e
    finally:
        for tmp_name, _ in staged:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)


def run_migration(
    config: Optional[MigrationConfig] = None,
    progress: Optional[Callable[[Path], None]] = None,
) -> MigrationResult:
    """
    Convert every source file in `config.input_dir` and write the scripts.

    `progress` is called with each source path just before it is converted.

    With `on_error="fail_fast"` the first error propagates and no output is
    written. With `on_error="skip"` failing files are recorded in the result
    and the remaining files are still written.
    """
    config = config or MigrationConfig()
    extractor = SchemaExtractor(reject_reserved_words=config.reject_reserved_words)

    logger.info(f"Reading {config.file_extension} files from: {config.input_dir}")
    files = locate_inputs(config.input_dir, config.file_extension)

    result = MigrationResult()
    for path in files:
        logger.info(f"Processing: {path.name}")
        if progress:
            progress(path)
        try:
            result.tables.append(extractor.extract_file(path))
        except MigrationError as e:
            if config.on_error == "fail_fast":
                raise
            logger.warning(f"Skipping {path.name}: {e}")
            result.failures.append(FileFailure(file_name=path.name, error=e))

    schema_sql, inserts_sql = render_combined(result.tables)
    write_outputs(config, schema_sql, inserts_sql)

    result.schema_path = config.schema_path
    result.inserts_path = config.inserts_path

    logger.info(
        f"Migration complete: {len(result.tables)} tables, "
        f"{len(result.failures)} skipped -> {config.output_dir}"
    )
    return result


def inspect_file(path: Union[str, Path], config: Optional[MigrationConfig] = None) -> TableSchema:
    """Infer the schema of a single file without writing anything."""
    config = config or MigrationConfig()
    extractor = SchemaExtractor(reject_reserved_words=config.reject_reserved_words)
    return extractor.extract_file(path).schema
