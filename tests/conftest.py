"""
Pytest configuration and shared fixtures for cbmt tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_merges = importlib.import_module("fixtures.merges")

SubtractMerge = _merges.SubtractMerge
CountingMerge = _merges.CountingMerge
make_digest_leaves = _merges.make_digest_leaves

from cbmt.merkle import CBMT, Sha256Merge


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _clean_hash_env(monkeypatch):
    """Keep the default digest strategy independent of the developer's shell."""
    for name in ("CBMT_HASH_ALGORITHM", "CBMT_DIGEST_SIZE", "CBMT_BLAKE2B_PERSON"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def int_cbmt():
    """CBMT over integers with merge(left, right) = right - left."""
    return CBMT(SubtractMerge())


@pytest.fixture
def sha_cbmt():
    return CBMT(Sha256Merge())


@pytest.fixture
def six_items():
    """The six-leaf scenario list."""
    return [2, 3, 5, 7, 11, 13]


@pytest.fixture
def digest_leaves():
    """Seven SHA-256 leaves."""
    return make_digest_leaves(7)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
