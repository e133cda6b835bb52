"""
Module 04 - Balance Sets & Manifests
File: builder.py

Purpose: Turn a raw balance list into a published DistributionManifest.

Build rules:
1. Every account and token must be a well-formed address; results are
   EIP-55 checksummed
2. Every cumulative amount must be in 1..2**256-1
3. Each (account, token) pair appears at most once
4. One aggregate leaf per token, under the zero address, carrying the sum
   of that token's individual amounts
5. All leaves are sorted by leaf hash before the tree is built, so the
   root does not depend on input order
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable

from pydantic import ValidationError

from distributor_core.crypto.hashing import (
    MAX_UINT256,
    ZERO_ADDRESS,
    normalize_address,
)
from distributor_core.distribution.manifest import (
    BalanceEntry,
    DistributionManifest,
    ManifestClaim,
    ValidatedEntry,
)
from distributor_core.merkle.balance_tree import BalanceTree
from distributor_core.schemas.errors import (
    AggregateOverflowError,
    AmountOverflowError,
    BalanceValidationException,
    DuplicateAccountError,
    InvalidAddressError,
    NonPositiveAmountError,
)


logger = logging.getLogger(__name__)


def _as_entry(raw: Any) -> BalanceEntry:
    if isinstance(raw, BalanceEntry):
        return raw
    try:
        if isinstance(raw, dict):
            return BalanceEntry.model_validate(raw)
        if isinstance(raw, (tuple, list)) and len(raw) == 3:
            account, token, amount = raw
            return BalanceEntry(account=account, token=token, amount=amount)
    except ValidationError as e:
        raise BalanceValidationException(
            f"Invalid balance entry: {e.errors()[0]['msg']}",
            details={"entry": repr(raw)},
        ) from e
    raise BalanceValidationException(
        f"Cannot read a balance entry from {type(raw).__name__}",
        details={"entry": repr(raw)},
    )


class BalanceSetBuilder:
    """
    Validates balance sets and builds distribution manifests.

    Usage:
        builder = BalanceSetBuilder()
        manifest = builder.build([
            {"account": alice, "token": token, "amount": 100},
            {"account": bob, "token": token, "amount": 200},
        ])
    """

    def validate(self, entries: Iterable[Any]) -> list[ValidatedEntry]:
        """
        Validate raw entries and return normalized copies, in input order.

        Raises:
            InvalidAddressError: Malformed account or token, or the zero
                address used as an account.
            NonPositiveAmountError: Cumulative amount <= 0.
            AmountOverflowError: Cumulative amount above 2**256-1.
            DuplicateAccountError: Same (account, token) pair twice.
        """
        validated: list[ValidatedEntry] = []
        seen: set[tuple[str, str]] = set()

        for raw in entries:
            entry = _as_entry(raw)

            try:
                account = normalize_address(entry.account)
            except InvalidAddressError:
                raise InvalidAddressError(
                    f"Found invalid account address: {entry.account}",
                    account=entry.account,
                ) from None
            try:
                token = normalize_address(entry.token)
            except InvalidAddressError:
                raise InvalidAddressError(
                    f"Found invalid token address: {entry.token}",
                    account=entry.account,
                    token=entry.token,
                ) from None

            if account == ZERO_ADDRESS:
                raise InvalidAddressError(
                    "The zero address is reserved for the aggregate leaf",
                    account=account,
                    token=token,
                )

            if entry.amount <= 0:
                raise NonPositiveAmountError(
                    f"Invalid amount for account: {account}",
                    account=account,
                    token=token,
                    details={"amount": entry.amount},
                )
            if entry.amount > MAX_UINT256:
                raise AmountOverflowError(
                    f"Amount for account {account} exceeds uint256",
                    account=account,
                    token=token,
                )

            key = (account, token)
            if key in seen:
                raise DuplicateAccountError(
                    f"Duplicate account: {account}",
                    account=account,
                    token=token,
                )
            seen.add(key)

            validated.append(ValidatedEntry(account=account, token=token, amount=entry.amount))

        return validated

    @staticmethod
    def aggregate_entries(entries: Iterable[ValidatedEntry]) -> list[ValidatedEntry]:
        """
        Synthesize one aggregate entry per token, sorted by token.

        Raises:
            AggregateOverflowError: If a token's sum exceeds 2**256-1.
        """
        totals: dict[str, int] = defaultdict(int)
        for entry in entries:
            totals[entry.token] += entry.amount

        aggregates: list[ValidatedEntry] = []
        for token in sorted(totals):
            if totals[token] > MAX_UINT256:
                raise AggregateOverflowError(
                    f"Aggregate amount for token {token} exceeds uint256",
                    token=token,
                    details={"total": str(totals[token])},
                )
            aggregates.append(ValidatedEntry(account=ZERO_ADDRESS, token=token, amount=totals[token]))
        return aggregates

    def build_tree(self, entries: Iterable[Any]) -> tuple[BalanceTree, list[ValidatedEntry]]:
        """
        Validate entries and build the balance tree.

        Returns:
            (tree, leaf entries) where leaf entries include the aggregates
        """
        validated = self.validate(entries)
        leaf_entries = validated + self.aggregate_entries(validated)
        tree = BalanceTree((e.account, e.token, e.amount) for e in leaf_entries)
        return tree, leaf_entries

    def build(self, entries: Iterable[Any]) -> DistributionManifest:
        """
        Build the distribution manifest for a balance set.

        Input order never affects the result; building twice from the same
        entries yields an identical manifest.
        """
        tree, leaf_entries = self.build_tree(entries)

        claims: dict[str, dict[str, ManifestClaim]] = {}
        for entry in sorted(leaf_entries, key=lambda e: (e.token, e.account)):
            claims.setdefault(entry.token, {})[entry.account] = ManifestClaim(
                amount=entry.amount,
                proof=tree.get_hex_proof(entry.account, entry.token, entry.amount),
            )

        manifest = DistributionManifest(merkle_root=tree.hex_root, claims=claims)
        logger.info(
            f"Built manifest root={manifest.merkle_root} leaves={len(tree)} tokens={len(claims)}"
        )
        return manifest


def parse_balance_map(entries: Iterable[Any]) -> DistributionManifest:
    """Build a manifest from raw balance entries."""
    return BalanceSetBuilder().build(entries)


__all__ = [
    "BalanceSetBuilder",
    "parse_balance_map",
]
