"""
Module 01 - Schemas & Canonicalization
File: claims.py

Purpose: Wire models for claim requests submitted to the ledger and the
claim events the ledger emits.

Amounts accept ints, decimal strings or 0x hex quantities (the manifest
publishes hex). Proof elements accept raw bytes or 0x hex and are kept as
0x hex strings.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_quantity(value: Any) -> int:
    """
    Parse an integer amount given as int, decimal string or 0x hex string.

    Raises:
        ValueError: If the value cannot be read as an integer.
    """
    if isinstance(value, bool):
        raise ValueError("Boolean is not a valid amount")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.startswith(("0x", "0X")):
            return int(text, 16)
        return int(text, 10)
    raise ValueError(f"Cannot parse amount of type {type(value).__name__}")


def _coerce_proof(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [
            "0x" + bytes(node).hex() if isinstance(node, (bytes, bytearray)) else node
            for node in value
        ]
    return value


class ClaimRequest(BaseModel):
    """
    A claim as submitted by an account.

    The claiming account is not part of the request: it is the caller's
    identity, supplied separately to ClaimLedger.claim_request.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    token: str = Field(
        ...,
        description="Reward token address",
    )
    cumulative_amount: int = Field(
        ...,
        ge=0,
        description="Cumulative amount of the account leaf",
    )
    aggregate_cumulative_amount: int = Field(
        ...,
        ge=0,
        description="Cumulative amount of the aggregate (zero address) leaf",
    )
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling hashes for the account leaf, leaf to root",
    )
    aggregate_proof: list[str] = Field(
        default_factory=list,
        description="Sibling hashes for the aggregate leaf, leaf to root",
    )

    @field_validator("cumulative_amount", "aggregate_cumulative_amount", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> Any:
        return parse_quantity(value)

    @field_validator("proof", "aggregate_proof", mode="before")
    @classmethod
    def _parse_proof(cls, value: Any) -> Any:
        return _coerce_proof(value)


class ClaimEvent(BaseModel):
    """
    Record of a successful claim.

    Downstream systems (token transfer, indexers) treat this as the
    authoritative record of what was entitled.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    account: str = Field(..., description="Checksummed claiming account")
    token: str = Field(..., description="Checksummed reward token")
    entitlement_delta: int = Field(
        ...,
        ge=0,
        description="Proportional share of the pool, scaled by the ledger scale",
    )
    amount_delta: int = Field(
        default=0,
        ge=0,
        description="Increase of the account's cumulative claimed amount",
    )
    merkle_root: str | None = Field(
        default=None,
        description="Root the claim was verified against (0x hex)",
    )


__all__ = [
    "parse_quantity",
    "ClaimRequest",
    "ClaimEvent",
]
