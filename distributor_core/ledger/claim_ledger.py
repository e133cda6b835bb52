"""
Module 05 - Claim Ledger
File: claim_ledger.py

Purpose: Stateful claim ledger holding the active root and the cumulative
amounts claimed per (account, token).

Claims and root updates are serialized by one lock, so a claim never
observes a half-applied update and two claims for the same token never
read the same aggregate counter.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable, Optional, Sequence

from distributor_core.config.runtime import LedgerConfig, get_default_config
from distributor_core.crypto.hashing import ZERO_HASH, to_hash32, to_hex
from distributor_core.ledger.state import (
    ClaimLedgerState,
    apply_claim,
    apply_root_update,
)
from distributor_core.schemas.claims import ClaimEvent, ClaimRequest
from distributor_core.schemas.errors import DistributorException, InvalidProofError


logger = logging.getLogger(__name__)

ClaimListener = Callable[[ClaimEvent], None]


class ClaimLedger:
    """
    Verifies cumulative claims against the active Merkle root.

    Usage:
        ledger = ClaimLedger(manifest.merkle_root)
        share = ledger.claim_request(account, manifest.claim_request(account, token))
    """

    def __init__(
        self,
        merkle_root: bytes | str = ZERO_HASH,
        *,
        config: Optional[LedgerConfig] = None,
        state: Optional[ClaimLedgerState] = None,
    ) -> None:
        self.config = config or get_default_config().ledger
        self._lock = threading.RLock()
        self._state = state.copy() if state is not None else ClaimLedgerState(active_root=to_hash32(merkle_root))
        self._events: deque[ClaimEvent] = deque(maxlen=self.config.max_events)
        self._listeners: list[ClaimListener] = []

    @property
    def active_root(self) -> bytes:
        with self._lock:
            return self._state.active_root

    @property
    def hex_root(self) -> str:
        return to_hex(self.active_root)

    @property
    def epoch(self) -> int:
        """Number of root updates applied so far."""
        with self._lock:
            return self._state.epoch

    @property
    def scale(self) -> int:
        return self.config.scale

    @property
    def events(self) -> list[ClaimEvent]:
        """The most recent claim events, oldest first (at most config.max_events)."""
        with self._lock:
            return list(self._events)

    def get_claimed(self, account: str, token: str) -> int:
        """Cumulative amount claimed so far; the zero address gives the token total."""
        with self._lock:
            return self._state.get_claimed(account, token)

    def snapshot(self) -> ClaimLedgerState:
        """Independent copy of the current state."""
        with self._lock:
            return self._state.copy()

    def subscribe(self, listener: ClaimListener) -> Callable[[], None]:
        """
        Register a callback for successful claims.

        Returns:
            A function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def update_root(self, new_root: bytes | str) -> None:
        """
        Publish a new root. Claimed amounts carry over unchanged.

        Raises:
            InvalidProofError: If new_root is not a 32-byte hash.
        """
        try:
            root = to_hash32(new_root)
        except ValueError as e:
            raise InvalidProofError(f"Invalid merkle root: {e}") from e

        with self._lock:
            previous = apply_root_update(self._state, root)
            epoch = self._state.epoch

        logger.info(f"Root updated {to_hex(previous)} -> {to_hex(root)} (epoch {epoch})")

    def claim(
        self,
        account: str,
        token: str,
        cumulative_amount: int,
        aggregate_cumulative_amount: int,
        proof: Sequence[bytes | str],
        aggregate_proof: Sequence[bytes | str],
    ) -> int:
        """
        Claim everything accrued for (account, token) since the last claim.

        Returns:
            The entitlement delta: the claimed share of newly distributed
            value, scaled so that ``scale`` means 100%.

        Raises:
            InvalidAddressError, InvalidProofError, NothingToClaimError,
            ZeroAggregateDeltaError, SupplyConservationError.
            State is unchanged whenever an exception is raised.
        """
        with self._lock:
            try:
                outcome = apply_claim(
                    self._state,
                    account,
                    token,
                    cumulative_amount,
                    aggregate_cumulative_amount,
                    proof,
                    aggregate_proof,
                    scale=self.config.scale,
                    enforce_supply_conservation=self.config.enforce_supply_conservation,
                )
            except DistributorException as e:
                logger.warning(f"Claim rejected for {account} / {token}: [{e.code}] {e.message}")
                raise

            event = ClaimEvent(
                account=outcome.account,
                token=outcome.token,
                entitlement_delta=outcome.entitlement_delta,
                amount_delta=outcome.amount_delta,
                merkle_root=to_hex(self._state.active_root),
            )
            self._events.append(event)
            listeners = list(self._listeners)

        logger.info(
            f"Claimed {outcome.amount_delta} of {outcome.token} for {outcome.account} "
            f"(entitlement {outcome.entitlement_delta}/{self.config.scale})"
        )
        self._notify(listeners, event)
        return outcome.entitlement_delta

    def claim_request(self, account: str, request: ClaimRequest) -> int:
        """Submit a claim built from a manifest entry."""
        return self.claim(
            account,
            request.token,
            request.cumulative_amount,
            request.aggregate_cumulative_amount,
            request.proof,
            request.aggregate_proof,
        )

    @staticmethod
    def _notify(listeners: list[ClaimListener], event: ClaimEvent) -> None:
        # The claim is already committed; a failing listener cannot undo it
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Claim listener {listener!r} failed for {event.account}")


__all__ = [
    "ClaimLedger",
    "ClaimListener",
]
