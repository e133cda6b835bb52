"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
This package must not import from crypto, merkle or distribution, which
all depend on it.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    AggregateOverflowError,
    AmountOverflowError,
    BalanceValidationException,
    CanonicalizationException,
    DistributorError,
    DistributorException,
    DuplicateAccountError,
    DuplicateLeafError,
    EmptyInputError,
    ErrorCodes,
    InvalidAddressError,
    InvalidProofError,
    LeafNotFoundError,
    ManifestIOError,
    NonPositiveAmountError,
    NothingToClaimError,
    SupplyConservationError,
    ZeroAggregateDeltaError,
)

# Claims
from .claims import ClaimEvent, ClaimRequest

# Verification results
from .verification import CheckResult, CheckSeverity, VerificationResult


__all__ = [
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "AggregateOverflowError",
    "AmountOverflowError",
    "BalanceValidationException",
    "CanonicalizationException",
    "DistributorError",
    "DistributorException",
    "DuplicateAccountError",
    "DuplicateLeafError",
    "EmptyInputError",
    "ErrorCodes",
    "InvalidAddressError",
    "InvalidProofError",
    "LeafNotFoundError",
    "ManifestIOError",
    "NonPositiveAmountError",
    "NothingToClaimError",
    "SupplyConservationError",
    "ZeroAggregateDeltaError",
    "ClaimEvent",
    "ClaimRequest",
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
