"""
Module 04 - Balance Sets & Manifests
File: manifest.py

Purpose: Input records of a balance set and the published distribution
manifest.

The manifest is completely sufficient for recreating the entire tree:
anyone can check that every entitlement is included and that the tree
carries no additional distributions.

Wire format:
    {
      "merkleRoot": "0x<64 hex>",
      "claims": {
        "<checksummed token>": {
          "<checksummed account>": {"amount": "0x<hex>", "proof": ["0x<64 hex>", ...]},
          "0x0000000000000000000000000000000000000000": {...aggregate...}
        }
      }
    }
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from distributor_core.crypto.hashing import (
    ZERO_ADDRESS,
    from_hex,
    hash_leaf,
    normalize_address,
    parse_quantity,
    to_hex_quantity,
)
from distributor_core.schemas.canonical import dumps_canonical
from distributor_core.schemas.claims import ClaimRequest

_ROOT_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


class BalanceEntry(BaseModel):
    """
    One raw (account, token, cumulative amount) record, before validation.

    Amounts may be given as ints, decimal strings or 0x hex quantities.
    ``points`` is accepted as an alias of ``amount``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    account: str = Field(..., description="Account address")
    token: str = Field(..., description="Reward token address")
    amount: int = Field(
        ...,
        validation_alias=AliasChoices("amount", "points"),
        description="Cumulative amount granted to the account",
    )

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value: Any) -> Any:
        return parse_quantity(value)


class ValidatedEntry(BaseModel):
    """A balance record that passed validation; addresses are checksummed."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    account: str
    token: str
    amount: int

    @property
    def leaf(self) -> bytes:
        return hash_leaf(self.account, self.token, self.amount)


@dataclass
class ManifestClaim:
    """Entry describing one leaf of the published tree."""
    amount: int
    proof: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "amount": to_hex_quantity(self.amount),
            "proof": list(self.proof),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ManifestClaim":
        amount = data.get("amount", data.get("points"))
        if amount is None:
            raise ValueError("Manifest claim is missing 'amount'")
        return cls(
            amount=parse_quantity(amount),
            proof=[str(node) for node in data.get("proof", [])],
        )

    @property
    def proof_bytes(self) -> list[bytes]:
        return [from_hex(node) for node in self.proof]


@dataclass
class DistributionManifest:
    """Published artifact: Merkle root plus every claim and its proof."""
    merkle_root: str
    claims: dict[str, dict[str, ManifestClaim]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not _ROOT_PATTERN.match(self.merkle_root):
            raise ValueError(f"merkleRoot must be 0x followed by 64 hex chars, got {self.merkle_root!r}")
        self.merkle_root = self.merkle_root.lower()

    @property
    def root_bytes(self) -> bytes:
        return from_hex(self.merkle_root)

    @property
    def tokens(self) -> list[str]:
        return sorted(self.claims)

    def accounts(self, token: str) -> list[str]:
        """Accounts with a claim for ``token``, excluding the aggregate entry."""
        token_claims = self.claims.get(normalize_address(token), {})
        return sorted(account for account in token_claims if account != ZERO_ADDRESS)

    def get_claim(self, account: str, token: str) -> ManifestClaim | None:
        """Get the claim of an account for a token."""
        token_claims = self.claims.get(normalize_address(token), {})
        return token_claims.get(normalize_address(account))

    def aggregate_claim(self, token: str) -> ManifestClaim | None:
        """Get the aggregate (zero address) claim for a token."""
        return self.get_claim(ZERO_ADDRESS, token)

    def claim_request(self, account: str, token: str) -> ClaimRequest:
        """
        Assemble the ledger request for an account's current entitlement.

        Raises:
            KeyError: If the account or the aggregate has no claim for token.
        """
        claim = self.get_claim(account, token)
        aggregate = self.aggregate_claim(token)
        if claim is None:
            raise KeyError(f"No claim for account {account} and token {token}")
        if aggregate is None:
            raise KeyError(f"No aggregate claim for token {token}")
        return ClaimRequest(
            token=normalize_address(token),
            cumulative_amount=claim.amount,
            aggregate_cumulative_amount=aggregate.amount,
            proof=claim.proof,
            aggregate_proof=aggregate.proof,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "merkleRoot": self.merkle_root,
            "claims": {
                token: {account: claim.to_dict() for account, claim in token_claims.items()}
                for token, token_claims in self.claims.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DistributionManifest":
        if "merkleRoot" not in data:
            raise ValueError("Manifest is missing 'merkleRoot'")
        claims: dict[str, dict[str, ManifestClaim]] = {}
        for token, token_claims in data.get("claims", {}).items():
            claims[normalize_address(token)] = {
                normalize_address(account): ManifestClaim.from_dict(entry)
                for account, entry in token_claims.items()
            }
        return cls(merkle_root=data["merkleRoot"], claims=claims)

    def to_json(self, indent: int | None = None) -> str:
        """
        Serialize to JSON.

        With no indent the output is canonical (sorted keys, no whitespace)
        and suitable for content hashing.
        """
        if indent is None:
            return dumps_canonical(self.to_dict())
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_json(cls, text: str) -> "DistributionManifest":
        return cls.from_dict(json.loads(text))


__all__ = [
    "BalanceEntry",
    "ValidatedEntry",
    "ManifestClaim",
    "DistributionManifest",
]
