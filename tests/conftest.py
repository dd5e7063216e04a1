"""
Shared test fixtures for Seed Migration.

Provides temporary input/output directories and the bundled sample data.
"""

import sys
from pathlib import Path

import pytest

# Ensure the project root is importable
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from seed_migration.config_loader import MigrationConfig

# Bundled sample data files
SAMPLE_DATA_DIR = PROJECT_ROOT / "samples" / "data"


@pytest.fixture
def input_dir(tmp_path) -> Path:
    """Empty directory for source data files."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path) -> Path:
    """Output directory (not created up front)."""
    return tmp_path / "output"


@pytest.fixture
def config(input_dir, output_dir) -> MigrationConfig:
    """Default configuration pointed at the temporary directories."""
    return MigrationConfig(input_dir=input_dir, output_dir=output_dir)


@pytest.fixture(scope="session")
def sample_data_dir() -> Path:
    """Path to the bundled sample data files."""
    assert SAMPLE_DATA_DIR.is_dir(), f"Sample data not found at {SAMPLE_DATA_DIR}"
    return SAMPLE_DATA_DIR
