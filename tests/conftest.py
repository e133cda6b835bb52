"""
Pytest configuration and shared fixtures for distribution engine tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

# Import fixture modules
_common = importlib.import_module("fixtures.common")
_ledger = importlib.import_module("fixtures.ledger_fixtures")

# Extract factory functions
make_manifest = _common.make_manifest
make_balance_entries = _common.make_balance_entries
make_ledger = _ledger.make_ledger


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def balance_entries():
    """Provide the two-account balance set (ALICE=100, BOB=200)."""
    return make_balance_entries({_common.ALICE: 100, _common.BOB: 200})


@pytest.fixture
def manifest():
    """Provide the manifest built from the two-account balance set."""
    return make_manifest()


@pytest.fixture
def ledger(manifest):
    """Provide a ledger whose active root is the two-account manifest root."""
    return make_ledger(manifest)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep DISTRIBUTOR_* variables from the developer's shell out of tests."""
    import os
    from distributor_core.config import runtime

    for name in list(os.environ):
        if name.startswith("DISTRIBUTOR_"):
            monkeypatch.delenv(name, raising=False)
    # The process default is read from the environment on first use
    monkeypatch.setattr(runtime, "_default_config", None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert checks[0].ok, f"Check '{check_id}' failed: {checks[0].message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not checks[0].ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
