"""Pytest configuration and fixtures."""

import sys

import pytest

from hless.config.loader import load_config_from_string
from hless.config.schema import Config
from hless.core.formatter import Formatter

# Stand-in pagers: small Python programs with the same stdin contract as less
COPY_PAGER = (
    "import shutil, sys; f = open(sys.argv[1], 'wb'); "
    "shutil.copyfileobj(sys.stdin.buffer, f); f.close()"
)
QUIT_EARLY_PAGER = "import sys; sys.stdin.buffer.readline()"


@pytest.fixture
def sample_config() -> Config:
    """Sample configuration for testing."""
    yaml_content = """
foreground:
  ERROR: "#ff0000"
  WARNING: "#ffff00"
  both: "#010203"
background:
  both: "#0a0b0c"
  HIGHLIGHT: "#000080"
aliases:
  info: INFO
  warn: WARNING
"""
    return load_config_from_string(yaml_content)


@pytest.fixture
def empty_config() -> Config:
    """Empty configuration for testing."""
    return Config()


@pytest.fixture
def formatter(sample_config) -> Formatter:
    return Formatter.from_config(sample_config)


@pytest.fixture
def copy_pager(tmp_path):
    """Pager that copies its stdin into a file; returns (command, output path)."""
    output = tmp_path / "paged.out"
    return [sys.executable, "-c", COPY_PAGER, str(output)], output


@pytest.fixture
def quit_early_pager():
    """Pager that exits after reading a single line."""
    return [sys.executable, "-c", QUIT_EARLY_PAGER]


@pytest.fixture
def failing_pager():
    """Pager that exits with status 3 without reading anything."""
    return [sys.executable, "-c", "import sys; sys.exit(3)"]


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point $HLESS_CONFIG at a file in a temporary directory (not created)."""
    path = tmp_path / "hless" / "default"
    monkeypatch.setenv("HLESS_CONFIG", str(path))
    return path


