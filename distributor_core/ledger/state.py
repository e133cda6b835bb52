"""
Module 05 - Claim Ledger
File: state.py

Purpose: Explicit ledger state and the claim transition function.

State:
    active_root  root that proofs are verified against
    claimed      (account, token) -> cumulative amount claimed so far

The zero-address key of a token holds the running total of everything
claimed for that token. Both keys change together in apply_claim, so
claimed[(ZERO, token)] always equals the sum over accounts.

compute_claim never mutates; apply_claim commits only after every check
has passed. Serialization of concurrent callers is the caller's job
(see ClaimLedger).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Sequence

from distributor_core.crypto.hashing import (
    MAX_UINT256,
    ZERO_ADDRESS,
    ZERO_HASH,
    hash_leaf,
    normalize_address,
    to_hash32,
    to_hex,
)
from distributor_core.merkle.merkle_tree import verify_proof
from distributor_core.schemas.errors import (
    InvalidAddressError,
    InvalidProofError,
    NothingToClaimError,
    SupplyConservationError,
    ZeroAggregateDeltaError,
)


@dataclass
class ClaimLedgerState:
    """Mutable ledger state; grows monotonically per key."""
    active_root: bytes = ZERO_HASH
    claimed: dict[tuple[str, str], int] = field(default_factory=dict)
    epoch: int = 0

    def get_claimed(self, account: str, token: str) -> int:
        return self.claimed.get((normalize_address(account), normalize_address(token)), 0)

    def copy(self) -> "ClaimLedgerState":
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        claimed: dict[str, dict[str, str]] = {}
        for (account, token), amount in sorted(self.claimed.items()):
            claimed.setdefault(token, {})[account] = str(amount)
        return {
            "activeRoot": to_hex(self.active_root),
            "epoch": self.epoch,
            "claimed": claimed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClaimLedgerState":
        claimed = {
            (normalize_address(account), normalize_address(token)): int(amount)
            for token, accounts in data.get("claimed", {}).items()
            for account, amount in accounts.items()
        }
        return cls(
            active_root=to_hash32(data.get("activeRoot", to_hex(ZERO_HASH))),
            claimed=claimed,
            epoch=int(data.get("epoch", 0)),
        )


@dataclass(frozen=True)
class ClaimOutcome:
    """Result of a validated claim, before or after commit."""
    account: str
    token: str
    amount_delta: int
    entitlement_delta: int
    account_claimed: int
    aggregate_claimed: int


def _leaf_verifies(
    account: str,
    token: str,
    amount: Any,
    proof: Sequence[bytes | str],
    root: bytes,
) -> bool:
    # Amounts outside uint256 cannot be a leaf of any tree
    if isinstance(amount, bool) or not isinstance(amount, int):
        return False
    if amount < 0 or amount > MAX_UINT256:
        return False
    try:
        nodes = [to_hash32(node) for node in proof]
    except (TypeError, ValueError):
        return False
    return verify_proof(hash_leaf(account, token, amount), nodes, root)


def compute_claim(
    state: ClaimLedgerState,
    account: str,
    token: str,
    cumulative_amount: int,
    aggregate_cumulative_amount: int,
    proof: Sequence[bytes | str],
    aggregate_proof: Sequence[bytes | str],
    *,
    scale: int,
    enforce_supply_conservation: bool = True,
) -> ClaimOutcome:
    """
    Validate a claim against ``state`` and compute its outcome.

    Raises:
        InvalidAddressError: Malformed account/token, or a zero-address claimant.
        InvalidProofError: Account or aggregate proof does not verify.
        NothingToClaimError: Nothing new since the last claim.
        ZeroAggregateDeltaError: Aggregate delta is zero or negative.
        SupplyConservationError: Account delta exceeds aggregate delta
            (only with enforce_supply_conservation).
    """
    account = normalize_address(account)
    token = normalize_address(token)
    if account == ZERO_ADDRESS:
        raise InvalidAddressError("The zero address cannot claim", account=account, token=token)

    root = state.active_root
    if not _leaf_verifies(account, token, cumulative_amount, proof, root):
        raise InvalidProofError(
            "Invalid account proof",
            details={"account": account, "token": token, "root": to_hex(root)},
        )
    if not _leaf_verifies(ZERO_ADDRESS, token, aggregate_cumulative_amount, aggregate_proof, root):
        raise InvalidProofError(
            "Invalid aggregate proof",
            details={"account": account, "token": token, "root": to_hex(root)},
        )

    already_claimed = state.claimed.get((account, token), 0)
    aggregate_already_claimed = state.claimed.get((ZERO_ADDRESS, token), 0)

    if cumulative_amount <= already_claimed:
        raise NothingToClaimError(
            "Nothing to claim",
            details={
                "account": account,
                "token": token,
                "cumulative_amount": str(cumulative_amount),
                "already_claimed": str(already_claimed),
            },
        )

    delta = cumulative_amount - already_claimed
    aggregate_delta = aggregate_cumulative_amount - aggregate_already_claimed
    if aggregate_delta <= 0:
        raise ZeroAggregateDeltaError(
            "Aggregate delta must be positive",
            details={
                "token": token,
                "aggregate_cumulative_amount": str(aggregate_cumulative_amount),
                "aggregate_already_claimed": str(aggregate_already_claimed),
            },
        )
    if enforce_supply_conservation and delta > aggregate_delta:
        raise SupplyConservationError(
            "Claim exceeds the unclaimed aggregate",
            details={
                "account": account,
                "token": token,
                "delta": str(delta),
                "aggregate_delta": str(aggregate_delta),
            },
        )

    return ClaimOutcome(
        account=account,
        token=token,
        amount_delta=delta,
        entitlement_delta=delta * scale // aggregate_delta,
        account_claimed=cumulative_amount,
        aggregate_claimed=aggregate_already_claimed + delta,
    )


def apply_claim(
    state: ClaimLedgerState,
    account: str,
    token: str,
    cumulative_amount: int,
    aggregate_cumulative_amount: int,
    proof: Sequence[bytes | str],
    aggregate_proof: Sequence[bytes | str],
    *,
    scale: int,
    enforce_supply_conservation: bool = True,
) -> ClaimOutcome:
    """Validate a claim and commit it to ``state``; mutates nothing on failure."""
    outcome = compute_claim(
        state,
        account,
        token,
        cumulative_amount,
        aggregate_cumulative_amount,
        proof,
        aggregate_proof,
        scale=scale,
        enforce_supply_conservation=enforce_supply_conservation,
    )
    state.claimed[(outcome.account, outcome.token)] = outcome.account_claimed
    state.claimed[(ZERO_ADDRESS, outcome.token)] = outcome.aggregate_claimed
    return outcome


def apply_root_update(state: ClaimLedgerState, new_root: bytes | str) -> bytes:
    """Replace the active root; claimed totals carry over. Returns the old root."""
    root = to_hash32(new_root)
    previous = state.active_root
    state.active_root = root
    state.epoch += 1
    return previous


__all__ = [
    "ClaimLedgerState",
    "ClaimOutcome",
    "compute_claim",
    "apply_claim",
    "apply_root_update",
]
