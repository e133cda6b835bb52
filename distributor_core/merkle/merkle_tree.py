"""
Module 03 - Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

Owner: Protocol/Crypto Engineer
Module ID: M03

Canonical Commitment Rules (Hard Contracts):
1. Leaves are supplied already hashed (see crypto.hashing.hash_leaf)
2. Parent hashing: parent = keccak256(min(a, b) + max(a, b))
3. Odd node rule: an unpaired trailing node is carried up to the next
   level unchanged. It is NEVER duplicated, which rules out the
   duplicate-last-leaf forgery class.
4. Empty leaves: rejected with EmptyInputError
5. Single leaf: root = leaf, proof = []

Determinism Notes:
- No randomness; the tree trusts its input order
- Callers that need order-independent roots sort leaves first
  (the balance builder sorts by leaf hash)
"""
from __future__ import annotations

from typing import Sequence

from distributor_core.crypto.hashing import hash_pair, to_hex
from distributor_core.schemas.errors import (
    DuplicateLeafError,
    EmptyInputError,
    LeafNotFoundError,
)


def build_layers(leaves: Sequence[bytes]) -> list[list[bytes]]:
    """
    Build every level of the tree, from leaves (index 0) up to the root.

    Algorithm:
    - Pair adjacent nodes and hash each pair with hash_pair
    - If a level has an odd node count, the last node moves up unpaired

    Example: [a, b, c] -> [[a, b, c], [ab, c], [abc]]
    """
    if len(leaves) == 0:
        raise EmptyInputError("Cannot build a Merkle tree with no leaves")

    layers: list[list[bytes]] = [list(leaves)]
    while len(layers[-1]) > 1:
        current = layers[-1]
        next_level: list[bytes] = []
        for i in range(0, len(current), 2):
            if i + 1 < len(current):
                next_level.append(hash_pair(current[i], current[i + 1]))
            else:
                next_level.append(current[i])
        layers.append(next_level)
    return layers


def proof_for_index(layers: Sequence[Sequence[bytes]], index: int) -> list[bytes]:
    """
    Collect the sibling path for the leaf at ``index``.

    Levels where the node was carried up unpaired contribute no sibling.
    """
    proof: list[bytes] = []
    for level in layers[:-1]:
        sibling_index = index ^ 1
        if sibling_index < len(level):
            proof.append(level[sibling_index])
        index //= 2
    return proof


def verify_proof(leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
    """
    Verify that ``leaf`` is committed under ``root``.

    Folds hash_pair(current, sibling) over the proof in order. Because
    hash_pair sorts its inputs, no position information is needed.
    Never allocates a tree.
    """
    current = leaf
    for sibling in proof:
        current = hash_pair(current, sibling)
    return current == root


class MerkleTree:
    """
    Immutable binary hash tree over pre-hashed leaves.

    The proof table is computed once at construction. Rebuilding with
    new balances means constructing a new tree.

    Example:
        >>> tree = MerkleTree.build(leaves)
        >>> proof = tree.get_proof(leaves[1])
        >>> MerkleTree.verify(leaves[1], proof, tree.root)
        True
    """

    def __init__(self, leaves: Sequence[bytes]) -> None:
        self._leaves: tuple[bytes, ...] = tuple(bytes(leaf) for leaf in leaves)
        self._layers = build_layers(self._leaves)

        self._positions: dict[bytes, int] = {}
        for index, leaf in enumerate(self._leaves):
            if leaf in self._positions:
                raise DuplicateLeafError(
                    f"Duplicate leaf {to_hex(leaf)} at indexes "
                    f"{self._positions[leaf]} and {index}",
                    details={"leaf": to_hex(leaf)},
                )
            self._positions[leaf] = index

        self._proofs: dict[bytes, tuple[bytes, ...]] = {
            leaf: tuple(proof_for_index(self._layers, index))
            for leaf, index in self._positions.items()
        }

    @classmethod
    def build(cls, leaves: Sequence[bytes]) -> "MerkleTree":
        """Build a tree from an ordered sequence of leaf hashes."""
        return cls(leaves)

    @property
    def root(self) -> bytes:
        return self._layers[-1][0]

    @property
    def hex_root(self) -> str:
        return to_hex(self.root)

    @property
    def leaves(self) -> tuple[bytes, ...]:
        return self._leaves

    @property
    def layers(self) -> list[list[bytes]]:
        return [list(level) for level in self._layers]

    @property
    def depth(self) -> int:
        """Number of levels from leaves to root inclusive."""
        return len(self._layers)

    def __len__(self) -> int:
        return len(self._leaves)

    def __contains__(self, leaf: object) -> bool:
        return leaf in self._positions

    def index_of(self, leaf: bytes) -> int:
        """Position of a leaf in the input order."""
        try:
            return self._positions[leaf]
        except KeyError:
            raise LeafNotFoundError(
                f"Leaf {to_hex(leaf)} is not part of this tree",
                details={"leaf": to_hex(leaf)},
            ) from None

    def get_proof(self, leaf: bytes) -> list[bytes]:
        """
        Return the sibling path for a leaf, ordered from leaf level to root.

        Raises:
            LeafNotFoundError: If the leaf was not part of the built set.
        """
        try:
            return list(self._proofs[leaf])
        except KeyError:
            raise LeafNotFoundError(
                f"Leaf {to_hex(leaf)} is not part of this tree",
                details={"leaf": to_hex(leaf)},
            ) from None

    def get_hex_proof(self, leaf: bytes) -> list[str]:
        """Return the proof for a leaf as 0x hex strings."""
        return [to_hex(node) for node in self.get_proof(leaf)]

    @staticmethod
    def verify(leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
        """Verify a proof without a tree instance."""
        return verify_proof(leaf, proof, root)


__all__ = [
    "MerkleTree",
    "build_layers",
    "proof_for_index",
    "verify_proof",
]
