"""
Module 03 - Balance Tree
Thin wrapper around MerkleTree keyed by (account, token, amount) records.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides a record-level interface:
- BalanceTree: build a tree from balance records, look up proofs by record
- BalanceTree.verify_proof: verify a record against a root without a tree

The wrapper sorts leaves by hash before building, so the root does not
depend on the order in which records were supplied.
"""
from __future__ import annotations

from typing import Any, Iterable, Sequence

from distributor_core.crypto.hashing import hash_leaf, to_hex
from distributor_core.merkle.merkle_tree import MerkleTree, verify_proof


class BalanceTree:
    """
    Merkle tree over balance records.

    Example:
        >>> tree = BalanceTree([(alice, token, 100), (bob, token, 200)])
        >>> proof = tree.get_proof(alice, token, 100)
        >>> BalanceTree.verify_proof(alice, token, 100, proof, tree.root)
        True
    """

    def __init__(self, balances: Iterable[tuple[Any, Any, int]]) -> None:
        leaves = [hash_leaf(account, token, amount) for account, token, amount in balances]
        self._tree = MerkleTree.build(sorted(leaves))

    @staticmethod
    def to_node(account: Any, token: Any, amount: int) -> bytes:
        """Leaf hash for a balance record."""
        return hash_leaf(account, token, amount)

    @staticmethod
    def verify_proof(
        account: Any,
        token: Any,
        amount: int,
        proof: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """Verify a balance record is included under ``root``."""
        return verify_proof(hash_leaf(account, token, amount), proof, root)

    @property
    def tree(self) -> MerkleTree:
        return self._tree

    @property
    def root(self) -> bytes:
        return self._tree.root

    @property
    def hex_root(self) -> str:
        return to_hex(self._tree.root)

    def __len__(self) -> int:
        return len(self._tree)

    def get_proof(self, account: Any, token: Any, amount: int) -> list[bytes]:
        """
        Proof for a balance record.

        Raises:
            LeafNotFoundError: If the record is not in the tree.
        """
        return self._tree.get_proof(hash_leaf(account, token, amount))

    def get_hex_proof(self, account: Any, token: Any, amount: int) -> list[str]:
        """Proof for a balance record as 0x hex strings."""
        return self._tree.get_hex_proof(hash_leaf(account, token, amount))


__all__ = [
    "BalanceTree",
]
