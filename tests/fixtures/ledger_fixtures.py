"""
Ledger fixtures.

Provides factory functions for:
- ClaimLedgers pointed at a manifest root
- Submitting a manifest entry as a claim
"""

from typing import Optional

from distributor_core.config import DEFAULT_SCALE, LedgerConfig
from distributor_core.distribution import DistributionManifest
from distributor_core.ledger import ClaimLedger

from .common import TOKEN_A


SCALE = DEFAULT_SCALE


def make_ledger(
    manifest: Optional[DistributionManifest] = None,
    enforce_supply_conservation: bool = True,
    scale: int = SCALE,
) -> ClaimLedger:
    """Create a ledger whose active root is the manifest root (or the zero hash)."""
    config = LedgerConfig(scale=scale, enforce_supply_conservation=enforce_supply_conservation)
    if manifest is None:
        return ClaimLedger(config=config)
    return ClaimLedger(manifest.merkle_root, config=config)


def claim_from_manifest(
    ledger: ClaimLedger,
    manifest: DistributionManifest,
    account: str,
    token: str = TOKEN_A,
) -> int:
    """Submit the manifest's claim for (account, token) to the ledger."""
    return ledger.claim_request(account, manifest.claim_request(account, token))
