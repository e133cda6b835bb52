"""
Claim ledger: active root, claimed amounts and the claim transition.
"""

from distributor_core.ledger.claim_ledger import ClaimLedger, ClaimListener
from distributor_core.ledger.state import (
    ClaimLedgerState,
    ClaimOutcome,
    apply_claim,
    apply_root_update,
    compute_claim,
)

__all__ = [
    "ClaimLedger",
    "ClaimListener",
    "ClaimLedgerState",
    "ClaimOutcome",
    "apply_claim",
    "apply_root_update",
    "compute_claim",
]
