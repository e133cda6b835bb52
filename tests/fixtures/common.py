"""
Common test fixtures shared by all modules.

Provides factory functions for:
- Checksummed addresses
- Raw balance entries
- Built DistributionManifests

These are the foundational building blocks used by higher-level fixtures.
"""

from typing import Any, Optional

from distributor_core.crypto.hashing import keccak256, normalize_address
from distributor_core.distribution import BalanceSetBuilder, DistributionManifest


# =============================================================================
# Addresses
# =============================================================================

def make_address(index: int) -> str:
    """Deterministic checksummed address for a small integer."""
    return normalize_address("0x" + f"{index:040x}")


def make_hash(label: str) -> bytes:
    """Deterministic 32-byte node hash for a label."""
    return keccak256(label.encode("utf-8"))


ALICE = make_address(0xA11CE)
BOB = make_address(0xB0B)
CAROL = make_address(0xCA201)

TOKEN_A = make_address(0x7A)
TOKEN_B = make_address(0x7B)


# =============================================================================
# Balances and Manifests
# =============================================================================

def make_balance_entries(
    amounts: dict[str, int],
    token: str = TOKEN_A,
) -> list[dict[str, Any]]:
    """
    Create raw balance entries for one token.

    Args:
        amounts: account -> cumulative amount
        token: Reward token for every entry
    """
    return [
        {"account": account, "token": token, "amount": amount}
        for account, amount in amounts.items()
    ]


def make_manifest(
    amounts: Optional[dict[str, int]] = None,
    token: str = TOKEN_A,
    extra_entries: Optional[list[dict[str, Any]]] = None,
) -> DistributionManifest:
    """
    Build a manifest from per-account amounts.

    Defaults to the two-account set ALICE=100, BOB=200.
    """
    if amounts is None:
        amounts = {ALICE: 100, BOB: 200}
    entries = make_balance_entries(amounts, token=token) + list(extra_entries or [])
    return BalanceSetBuilder().build(entries)
