"""
Module 03 - Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification.

Owner: Protocol/Crypto Engineer
Module ID: M03

This module provides:
- MerkleTree: immutable tree with a per-leaf proof table
- verify_proof: stateless proof verification against a root
- BalanceTree: record-level wrapper over MerkleTree

Canonical Commitment Rules:
1. Leaf hashing: keccak256(abi.encodePacked(account, token, amount))
2. Parent hashing: keccak256(sorted(a, b))
3. Odd node: carried up unchanged, never duplicated
4. Empty tree: rejected
5. Single leaf: root = leaf

Usage:
    from distributor_core.merkle import MerkleTree
    from distributor_core.crypto import hash_leaf

    leaves = sorted(hash_leaf(a, t, n) for a, t, n in records)
    tree = MerkleTree.build(leaves)
    proof = tree.get_proof(leaves[2])
    assert MerkleTree.verify(leaves[2], proof, tree.root)
"""
from .merkle_tree import (
    MerkleTree,
    build_layers,
    proof_for_index,
    verify_proof,
)

from .balance_tree import BalanceTree


__all__ = [
    "MerkleTree",
    "build_layers",
    "proof_for_index",
    "verify_proof",
    "BalanceTree",
]
