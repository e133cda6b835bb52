"""
Core cryptographic utilities.

Module 02 provides the hash primitive used by every Merkle commitment.
"""
from .hashing import (
    HASH_LENGTH,
    ZERO_ADDRESS,
    ZERO_HASH,
    MAX_UINT256,
    keccak256,
    normalize_address,
    is_zero_address,
    address_to_bytes,
    encode_leaf,
    hash_leaf,
    hash_pair,
    to_hex,
    from_hex,
    to_hash32,
    to_hex_quantity,
    parse_quantity,
)

__all__ = [
    "HASH_LENGTH",
    "ZERO_ADDRESS",
    "ZERO_HASH",
    "MAX_UINT256",
    "keccak256",
    "normalize_address",
    "is_zero_address",
    "address_to_bytes",
    "encode_leaf",
    "hash_leaf",
    "hash_pair",
    "to_hex",
    "from_hex",
    "to_hash32",
    "to_hex_quantity",
    "parse_quantity",
]
