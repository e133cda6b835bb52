"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for the distribution engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Families:
- Input validation (raised while building a manifest, never during claims)
- Proof errors (raised during claim verification)
- State errors (expected, user-facing)
- Invariant violations (builder or caller bugs, never retried silently)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Serialization Errors
    SCHEMA_VALIDATION_ERROR = "SCHEMA_VALIDATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    MANIFEST_IO_ERROR = "MANIFEST_IO_ERROR"

    # Balance Input Errors
    INVALID_ADDRESS = "INVALID_ADDRESS"
    NON_POSITIVE_AMOUNT = "NON_POSITIVE_AMOUNT"
    AMOUNT_OVERFLOW = "AMOUNT_OVERFLOW"
    DUPLICATE_ACCOUNT = "DUPLICATE_ACCOUNT"
    AGGREGATE_OVERFLOW = "AGGREGATE_OVERFLOW"

    # Merkle Tree Errors
    EMPTY_INPUT = "EMPTY_INPUT"
    DUPLICATE_LEAF = "DUPLICATE_LEAF"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"

    # Claim Errors
    INVALID_PROOF = "INVALID_PROOF"
    NOTHING_TO_CLAIM = "NOTHING_TO_CLAIM"
    ARITHMETIC_ERROR = "ARITHMETIC_ERROR"
    SUPPLY_CONSERVATION_VIOLATION = "SUPPLY_CONSERVATION_VIOLATION"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class DistributorError(BaseModel):
    """
    Base error model for structured error communication.

    Used to hand errors to off-chain clients (JSON reports, CLI output)
    without raising.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_PROOF],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class DistributorException(Exception):
    """
    Base exception for all distribution engine errors.

    Carries structured error information and can be converted
    to a DistributorError model.
    """

    code_default = "DISTRIBUTOR_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code or self.code_default
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> DistributorError:
        """Convert this exception to a DistributorError model."""
        return DistributorError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(DistributorException):
    """Exception raised when canonical serialization fails."""

    code_default = ErrorCodes.CANONICALIZATION_ERROR


class ManifestIOError(DistributorException):
    """Exception raised when a manifest or balance file cannot be read or written."""

    code_default = ErrorCodes.MANIFEST_IO_ERROR

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(message=message, details=full_details)


# -----------------------------------------------------------------------------
# Input validation
# -----------------------------------------------------------------------------

class BalanceValidationException(DistributorException):
    """Base class for balance-set input errors."""

    code_default = ErrorCodes.SCHEMA_VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        account: str | None = None,
        token: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if account is not None:
            full_details["account"] = account
        if token is not None:
            full_details["token"] = token
        super().__init__(message=message, details=full_details)


class InvalidAddressError(BalanceValidationException):
    """An account or token is not a well-formed 20-byte address."""

    code_default = ErrorCodes.INVALID_ADDRESS


class NonPositiveAmountError(BalanceValidationException):
    """A cumulative amount is zero or negative."""

    code_default = ErrorCodes.NON_POSITIVE_AMOUNT


class AmountOverflowError(BalanceValidationException):
    """A cumulative amount does not fit in 256 bits."""

    code_default = ErrorCodes.AMOUNT_OVERFLOW


class DuplicateAccountError(BalanceValidationException):
    """The same (account, token) pair appears more than once."""

    code_default = ErrorCodes.DUPLICATE_ACCOUNT


class AggregateOverflowError(BalanceValidationException):
    """The per-token sum of cumulative amounts does not fit in 256 bits."""

    code_default = ErrorCodes.AGGREGATE_OVERFLOW


# -----------------------------------------------------------------------------
# Merkle tree invariants
# -----------------------------------------------------------------------------

class EmptyInputError(DistributorException):
    """A Merkle tree was requested over zero leaves."""

    code_default = ErrorCodes.EMPTY_INPUT


class DuplicateLeafError(DistributorException):
    """The same leaf hash was supplied twice to a Merkle tree."""

    code_default = ErrorCodes.DUPLICATE_LEAF


class LeafNotFoundError(DistributorException):
    """A proof was requested for a leaf that is not part of the tree."""

    code_default = ErrorCodes.LEAF_NOT_FOUND


# -----------------------------------------------------------------------------
# Claims
# -----------------------------------------------------------------------------

class InvalidProofError(DistributorException):
    """
    A submitted proof does not verify against the active root.

    Retryable in the sense that the client should refetch the current
    manifest and resubmit with a fresh proof.
    """

    code_default = ErrorCodes.INVALID_PROOF

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, details=details, retryable=True)


class NothingToClaimError(DistributorException):
    """The account has already claimed up to the submitted cumulative amount."""

    code_default = ErrorCodes.NOTHING_TO_CLAIM


class ZeroAggregateDeltaError(DistributorException, ArithmeticError):
    """The aggregate delta is not positive, so no share can be computed."""

    code_default = ErrorCodes.ARITHMETIC_ERROR


class SupplyConservationError(DistributorException):
    """An account delta exceeds the remaining aggregate for its token."""

    code_default = ErrorCodes.SUPPLY_CONSERVATION_VIOLATION


__all__ = [
    "ErrorCodes",
    "DistributorError",
    "DistributorException",
    "CanonicalizationException",
    "ManifestIOError",
    "BalanceValidationException",
    "InvalidAddressError",
    "NonPositiveAmountError",
    "AmountOverflowError",
    "DuplicateAccountError",
    "AggregateOverflowError",
    "EmptyInputError",
    "DuplicateLeafError",
    "LeafNotFoundError",
    "InvalidProofError",
    "NothingToClaimError",
    "ZeroAggregateDeltaError",
    "SupplyConservationError",
]
