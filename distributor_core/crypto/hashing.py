"""
Module 02 - Hashing Utilities
Hash primitive and canonical leaf encoding for balance commitments.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- keccak256 hashing for raw bytes
- Leaf hashing: keccak256(abi.encodePacked(address account, address token, uint256 amount))
- Pair hashing with sorted children
- Address normalization (EIP-55 checksum)
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Leaf encoding is tight (20 + 20 + 32 bytes), identical to Solidity's
  abi.encodePacked, so roots are recomputable by any EVM tooling
- hash_pair sorts its inputs, so a verifier never needs to know on which
  side a sibling sits
- All operations are deterministic
"""
from __future__ import annotations

from typing import Any

from eth_abi.packed import encode_packed
from eth_utils import (
    is_address,
    is_checksum_address,
    keccak,
    to_canonical_address,
    to_checksum_address,
)

from distributor_core.schemas.claims import parse_quantity
from distributor_core.schemas.errors import InvalidAddressError


HASH_LENGTH = 32

ZERO_ADDRESS: str = "0x" + "00" * 20

# The zero hash is never a valid root: no keccak256 output is known to be zero.
ZERO_HASH: bytes = b"\x00" * HASH_LENGTH

MAX_UINT256: int = 2**256 - 1


def keccak256(data: bytes) -> bytes:
    """
    Compute the keccak256 hash of raw bytes.

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


# =============================================================================
# Addresses
# =============================================================================

def normalize_address(address: Any) -> str:
    """
    Return the EIP-55 checksummed form of an address.

    Accepts 0x-prefixed hex strings (any valid casing) or 20 raw bytes.

    Raises:
        InvalidAddressError: If the value is not a well-formed address or
            carries mixed casing with a bad checksum.
    """
    if isinstance(address, (bytes, bytearray)):
        if len(address) != 20:
            raise InvalidAddressError(
                f"Address must be 20 bytes, got {len(address)}",
                account=bytes(address).hex(),
            )
        return to_checksum_address(bytes(address))

    if not isinstance(address, str) or not is_address(address):
        raise InvalidAddressError(
            f"Found invalid address: {address!r}",
            account=str(address),
        )

    # Mixed casing is a checksum claim and must be a correct one
    body = address[2:] if address.startswith(("0x", "0X")) else address
    if body != body.lower() and body != body.upper() and not is_checksum_address(address):
        raise InvalidAddressError(
            f"Bad address checksum: {address!r}",
            account=address,
        )
    return to_checksum_address(address)


def is_zero_address(address: Any) -> bool:
    """Check whether an address is the zero address (the aggregate account)."""
    return normalize_address(address) == ZERO_ADDRESS


def address_to_bytes(address: Any) -> bytes:
    """Convert an address to its 20 canonical bytes."""
    return to_canonical_address(normalize_address(address))


# =============================================================================
# Leaf and pair hashing
# =============================================================================

def encode_leaf(account: Any, token: Any, amount: int) -> bytes:
    """
    Tightly encode a balance record, as abi.encodePacked(address, address, uint256).

    Raises:
        InvalidAddressError: If account or token is malformed.
        ValueError: If amount is outside the uint256 range.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Amount must be an integer, got {type(amount).__name__}")
    if amount < 0 or amount > MAX_UINT256:
        raise ValueError(f"Amount {amount} is outside the uint256 range")
    return encode_packed(
        ["address", "address", "uint256"],
        [address_to_bytes(account), address_to_bytes(token), amount],
    )


def hash_leaf(account: Any, token: Any, amount: int) -> bytes:
    """
    Compute the leaf hash for one entitlement record.

    Rule: leaf = keccak256(abi.encodePacked(account, token, amount))

    Returns:
        32-byte leaf hash
    """
    return keccak256(encode_leaf(account, token, amount))


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two sibling nodes into their parent.

    The children are sorted ascending by byte value before concatenation,
    making the parent independent of left/right placement.
    """
    if a <= b:
        return keccak256(a + b)
    return keccak256(b + a)


# =============================================================================
# Hex helpers
# =============================================================================

def to_hex(data: bytes) -> str:
    """
    Convert bytes to a hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a 0x-prefixed hexadecimal string to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith(("0x", "0X")):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def to_hash32(value: bytes | str) -> bytes:
    """
    Coerce a node hash given as bytes or 0x hex into 32 raw bytes.

    Raises:
        ValueError: If the value is not bytes or hex, or not exactly 32 bytes long.
    """
    if isinstance(value, str):
        data = from_hex(value)
    elif isinstance(value, (bytes, bytearray)):
        data = bytes(value)
    else:
        raise ValueError(f"Expected a hash as bytes or 0x hex, got {type(value).__name__}")
    if len(data) != HASH_LENGTH:
        raise ValueError(f"Expected a {HASH_LENGTH}-byte hash, got {len(data)} bytes")
    return data


def to_hex_quantity(value: int) -> str:
    """
    Format an unsigned integer as an even-length 0x hex quantity.

    Example:
        >>> to_hex_quantity(300)
        '0x012c'
    """
    if value < 0:
        raise ValueError(f"Quantity must be non-negative, got {value}")
    digits = format(value, "x")
    if len(digits) % 2:
        digits = "0" + digits
    return "0x" + digits


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
