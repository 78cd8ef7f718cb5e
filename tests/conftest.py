"""Shared test fixtures for dualmod."""

import shutil
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def profiler_source(tmp_path):
    """A writable copy of the ESM source fixture."""
    target = tmp_path / "cpu_profiler.ts"
    shutil.copy(FIXTURES / "cpu_profiler.ts", target)
    return target
