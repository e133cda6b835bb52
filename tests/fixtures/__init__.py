"""
Test fixtures package for distribution engine tests.

This package provides factory functions for creating test objects.
Organized into layers:
- common.py: addresses, balance entries and manifests
- ledger_fixtures.py: ledgers and claim scenarios

Usage:
    from fixtures import make_address, make_manifest

    def test_something():
        manifest = make_manifest({ALICE: 100, BOB: 200})
"""

from .common import (
    ALICE,
    BOB,
    CAROL,
    TOKEN_A,
    TOKEN_B,
    make_address,
    make_balance_entries,
    make_manifest,
    make_hash,
)

from .ledger_fixtures import (
    SCALE,
    make_ledger,
    claim_from_manifest,
)

__all__ = [
    # Common
    "ALICE",
    "BOB",
    "CAROL",
    "TOKEN_A",
    "TOKEN_B",
    "make_address",
    "make_balance_entries",
    "make_manifest",
    "make_hash",
    # Ledger
    "SCALE",
    "make_ledger",
    "claim_from_manifest",
]
