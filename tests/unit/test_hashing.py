"""
Module 02 - Hashing Unit Tests
Tests for distributor_core/crypto/hashing.py

Tests:
- keccak256 known value
- address normalization and rejection
- tight leaf encoding layout
- hash_pair order independence
- hex and quantity helpers
"""
import pytest

from distributor_core.crypto.hashing import (
    MAX_UINT256,
    ZERO_ADDRESS,
    address_to_bytes,
    encode_leaf,
    from_hex,
    hash_leaf,
    hash_pair,
    is_zero_address,
    keccak256,
    normalize_address,
    parse_quantity,
    to_hash32,
    to_hex,
    to_hex_quantity,
)
from distributor_core.schemas import claims
from distributor_core.schemas.errors import InvalidAddressError

from fixtures import ALICE, BOB, TOKEN_A, make_hash


class TestKeccak256:
    """Tests for keccak256()."""

    def test_empty_input_known_value(self):
        """keccak256 of empty bytes matches the well-known Ethereum value."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_output_length(self):
        assert len(keccak256(b"anything")) == 32

    def test_different_inputs_different_outputs(self):
        assert keccak256(b"input1") != keccak256(b"input2")


class TestAddresses:
    """Tests for address normalization."""

    def test_lowercase_is_checksummed(self):
        checksummed = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        assert normalize_address(checksummed.lower()) == checksummed

    def test_checksummed_is_unchanged(self):
        checksummed = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        assert normalize_address(checksummed) == checksummed

    def test_raw_bytes_accepted(self):
        raw = bytes.fromhex("5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
        assert normalize_address(raw) == "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

    @pytest.mark.parametrize("value", [
        "0x1234",
        "not an address",
        "0x" + "zz" * 20,
        "0x5AAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",  # bad checksum
        12345,
        None,
    ])
    def test_invalid_addresses_rejected(self, value):
        with pytest.raises(InvalidAddressError):
            normalize_address(value)

    def test_bad_checksum_message(self):
        with pytest.raises(InvalidAddressError, match="checksum"):
            normalize_address("0x5AAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")

    def test_all_uppercase_is_checksummed(self):
        checksummed = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        assert normalize_address("0x" + checksummed[2:].upper()) == checksummed

    def test_short_bytes_rejected(self):
        with pytest.raises(InvalidAddressError, match="20 bytes"):
            normalize_address(b"\x01" * 19)

    def test_zero_address(self):
        assert is_zero_address(ZERO_ADDRESS)
        assert is_zero_address(b"\x00" * 20)
        assert not is_zero_address(ALICE)

    def test_address_to_bytes(self):
        assert address_to_bytes(ALICE) == bytes.fromhex(ALICE[2:].lower())


class TestLeafEncoding:
    """Tests for encode_leaf() and hash_leaf()."""

    def test_encoding_is_tightly_packed(self):
        """account (20) + token (20) + amount (32, big-endian)."""
        encoded = encode_leaf(ALICE, TOKEN_A, 300)

        assert len(encoded) == 72
        assert encoded[:20] == address_to_bytes(ALICE)
        assert encoded[20:40] == address_to_bytes(TOKEN_A)
        assert encoded[40:] == (300).to_bytes(32, "big")

    def test_hash_leaf_is_keccak_of_encoding(self):
        assert hash_leaf(ALICE, TOKEN_A, 100) == keccak256(encode_leaf(ALICE, TOKEN_A, 100))

    def test_address_casing_does_not_change_leaf(self):
        assert hash_leaf(ALICE.lower(), TOKEN_A, 100) == hash_leaf(ALICE, TOKEN_A.lower(), 100)

    def test_every_field_changes_the_leaf(self):
        base = hash_leaf(ALICE, TOKEN_A, 100)
        assert hash_leaf(BOB, TOKEN_A, 100) != base
        assert hash_leaf(ALICE, BOB, 100) != base
        assert hash_leaf(ALICE, TOKEN_A, 101) != base

    def test_max_uint256_accepted(self):
        assert len(encode_leaf(ALICE, TOKEN_A, MAX_UINT256)) == 72

    @pytest.mark.parametrize("amount", [-1, MAX_UINT256 + 1])
    def test_out_of_range_amount_rejected(self, amount):
        with pytest.raises(ValueError, match="uint256"):
            encode_leaf(ALICE, TOKEN_A, amount)

    @pytest.mark.parametrize("amount", ["100", 1.5, True])
    def test_non_integer_amount_rejected(self, amount):
        with pytest.raises(ValueError, match="integer"):
            encode_leaf(ALICE, TOKEN_A, amount)

    def test_invalid_account_rejected(self):
        with pytest.raises(InvalidAddressError):
            hash_leaf("0xdead", TOKEN_A, 1)


class TestHashPair:
    """Tests for hash_pair()."""

    def test_order_independent(self):
        a, b = make_hash("a"), make_hash("b")
        assert hash_pair(a, b) == hash_pair(b, a)

    def test_sorts_before_hashing(self):
        a, b = make_hash("a"), make_hash("b")
        low, high = sorted([a, b])
        assert hash_pair(a, b) == keccak256(low + high)

    def test_equal_children(self):
        a = make_hash("same")
        assert hash_pair(a, a) == keccak256(a + a)


class TestHexHelpers:
    """Tests for hex and quantity helpers."""

    def test_to_hex_from_hex(self):
        data = bytes.fromhex("deadbeef")
        assert to_hex(data) == "0xdeadbeef"
        assert from_hex("0xdeadbeef") == data
        assert from_hex("0XDEADBEEF") == data

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_chars(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")

    def test_to_hash32_accepts_bytes_and_hex(self):
        node = make_hash("node")
        assert to_hash32(node) == node
        assert to_hash32(to_hex(node)) == node

    @pytest.mark.parametrize("value", [b"\x01" * 31, "0x" + "ab" * 33])
    def test_to_hash32_rejects_wrong_length(self, value):
        with pytest.raises(ValueError, match="32-byte"):
            to_hash32(value)

    @pytest.mark.parametrize("value", [None, 32, [0] * 32, 1.0])
    def test_to_hash32_rejects_other_types(self, value):
        with pytest.raises(ValueError, match="bytes or 0x hex"):
            to_hash32(value)

    def test_to_hash32_accepts_bytearray(self):
        node = make_hash("node")
        assert to_hash32(bytearray(node)) == node

    @pytest.mark.parametrize("value,expected", [
        (0, "0x00"),
        (100, "0x64"),
        (300, "0x012c"),
        (2**64, "0x010000000000000000"),
    ])
    def test_to_hex_quantity(self, value, expected):
        assert to_hex_quantity(value) == expected

    def test_to_hex_quantity_negative(self):
        with pytest.raises(ValueError):
            to_hex_quantity(-1)

    @pytest.mark.parametrize("value,expected", [
        (300, 300),
        ("300", 300),
        ("0x012c", 300),
        (" 0x64 ", 100),
    ])
    def test_parse_quantity(self, value, expected):
        assert parse_quantity(value) == expected

    @pytest.mark.parametrize("value", [True, 1.5, None, "abc"])
    def test_parse_quantity_rejects(self, value):
        with pytest.raises(ValueError):
            parse_quantity(value)

    def test_parse_quantity_shared_with_claim_models(self):
        assert parse_quantity is claims.parse_quantity
