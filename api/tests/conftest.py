"""
Pytest configuration and shared fixtures.

Provides:
- An in-memory store that can be disconnected to simulate outages
- A playground whose load path is a per-test temporary directory
- A helper for writing YAML definition units into that directory
"""

from collections.abc import Callable
from pathlib import Path
from textwrap import dedent

import pytest

from experiment_playground.playground import Playground
from experiment_playground.store import MemoryStore


@pytest.fixture
def store() -> MemoryStore:
    """Connected in-memory store."""
    return MemoryStore()


@pytest.fixture
def units_dir(tmp_path: Path) -> Path:
    """Directory holding definition units for the test."""
    path = tmp_path / "experiments"
    path.mkdir()
    return path


@pytest.fixture
def playground(store: MemoryStore, units_dir: Path) -> Playground:
    """Playground over the memory store, loading from units_dir."""
    return Playground(store, namespace="test", load_path=units_dir)


@pytest.fixture
def write_unit(units_dir: Path) -> Callable[[str, str], Path]:
    """Write a definition unit into units_dir.

    Usage:
        def test_something(write_unit):
            path = write_unit("signup_button.yaml", '''
                name: Signup Button
                type: ab_test
            ''')
    """

    def write(filename: str, content: str) -> Path:
        path = units_dir / filename
        path.write_text(dedent(content))
        return path

    return write
