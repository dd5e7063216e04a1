"""
Configuration Loader

Loads migration settings from `config/migration_config.yaml`. Every setting
has a default, so the file (and each key in it) is optional.
"""

import yaml
from dataclasses import dataclass, fields, replace, asdict
from pathlib import Path
from typing import Any, Dict, Optional

ON_ERROR_POLICIES = ("fail_fast", "skip")


@dataclass
class MigrationConfig:
    """Settings for one migration run."""

    # Directory scanned (non-recursively) for source declaration files.
    # Relative paths resolve against the working directory.
    input_dir: Path = Path("samples") / "data"

    # Directory the two generated scripts are written to; created if missing
    output_dir: Path = Path("output")

    # Only files whose name ends with this are processed
    file_extension: str = ".ts"

    schema_file: str = "schema.sql"
    inserts_file: str = "inserts.sql"

    # fail_fast: first bad file aborts the run and nothing is written
    # skip: bad files are reported and left out, the rest are written
    on_error: str = "fail_fast"

    # Reject table/column names that are MySQL reserved words
    reject_reserved_words: bool = True

    def __post_init__(self):
        self.input_dir = Path(self.input_dir)
        self.output_dir = Path(self.output_dir)
        self.validate()

    def validate(self):
        if self.on_error not in ON_ERROR_POLICIES:
            raise ValueError(
                f"on_error must be one of {', '.join(ON_ERROR_POLICIES)}, got {self.on_error!r}"
            )
        if not self.file_extension.startswith(".") or len(self.file_extension) < 2:
            raise ValueError(f"file_extension must look like '.ts', got {self.file_extension!r}")
        for name in (self.schema_file, self.inserts_file):
            if not name or Path(name).name != name:
                raise ValueError(f"Output file names must be plain file names, got {name!r}")
        if self.schema_file == self.inserts_file:
            raise ValueError("schema_file and inserts_file must differ")

    @property
    def schema_path(self) -> Path:
        return self.output_dir / self.schema_file

    @property
    def inserts_path(self) -> Path:
        return self.output_dir / self.inserts_file

    def with_overrides(self, **overrides: Any) -> "MigrationConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["input_dir"] = str(self.input_dir)
        data["output_dir"] = str(self.output_dir)
        return data


class ConfigLoader:
    """
    Loads and manages migration configuration.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize with optional custom config directory (default `./config`)."""
        if config_dir is None:
            config_dir = Path("config")
        self.config_dir = Path(config_dir)

    def load_config(self, config_file: str = "migration_config.yaml") -> MigrationConfig:
        """
        Load the configuration file, falling back to defaults.

        Relative paths in the file are resolved against the directory that
        contains the config directory, so `input_dir: samples/data` means the
        same thing wherever the tool is run from.
        """
        config_path = self.config_dir / config_file

        if not config_path.exists():
            return MigrationConfig()

        with open(config_path) as f:
            raw_config = yaml.safe_load(f) or {}

        if not isinstance(raw_config, dict):
            raise ValueError(f"{config_path} must contain a mapping at the top level")

        settings = dict(raw_config.get("migration", raw_config) or {})
        known = {f.name for f in fields(MigrationConfig)}
        unknown = sorted(set(settings) - known)
        if unknown:
            raise ValueError(f"Unknown settings in {config_path}: {', '.join(unknown)}")

        base_dir = self.config_dir.resolve().parent
        for key in ("input_dir", "output_dir"):
            if key in settings and settings[key] is not None:
                path = Path(settings[key]).expanduser()
                settings[key] = path if path.is_absolute() else base_dir / path

        return MigrationConfig(**settings)
