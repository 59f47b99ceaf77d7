"""
Ledger-specific exception hierarchy for SportZchain contracts.

Every rejected contract call raises one of these typed exceptions. A raised
exception means the call had no effect on contract state.
"""

from __future__ import annotations
from typing import Optional, Any, Dict


class LedgerError(Exception):
    """Base exception for all contract call failures.

    Attributes:
        message: Human-readable error description (revert reason)
        details: Additional context about the rejected call
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ==================== Authorization Errors ====================


class UnauthorizedError(LedgerError):
    """Raised when the caller lacks the required role or ownership."""
    pass


# ==================== Accounting Errors ====================


class InsufficientBalanceError(LedgerError):
    """Raised when an account lacks sufficient balance for an operation."""
    pass


class InsufficientAllowanceError(LedgerError):
    """Raised when a spender's allowance does not cover a transferFrom."""
    pass


class InvalidAllowanceError(LedgerError):
    """Raised when an allowance decrease would go below zero."""
    pass


class SupplyCapExceededError(LedgerError):
    """Raised when minting would push total supply above the supply cap."""
    pass


# ==================== State Errors ====================


class ContractPausedError(LedgerError):
    """Raised when a balance-mutating call is made while the token is paused."""
    pass


class AlreadyInStateError(LedgerError):
    """Raised when pausing a paused token or unpausing an unpaused one."""
    pass


# ==================== Vesting Errors ====================


class VestingError(LedgerError):
    """Base class for vesting contract failures."""
    pass


class InsufficientFundingError(VestingError):
    """Raised when the vesting contract's balance cannot back its allocations."""
    pass


class NothingToReleaseError(VestingError):
    """Raised when a release finds no vested-but-unreleased tokens."""
    pass


class TransferFailedError(VestingError):
    """Raised when the token transfer behind a vesting payout is rejected.

    The underlying ledger error is chained as ``__cause__``.
    """
    pass


class ScheduleNotFoundError(VestingError):
    """Raised when no vesting schedule exists for a beneficiary."""
    pass


# ==================== Validation Errors ====================


class ValidationError(LedgerError):
    """Raised when call arguments fail validation."""
    pass


class InvalidAddressError(ValidationError):
    """Raised for empty or zero-address arguments where a real account is required."""
    pass


class InvalidAmountError(ValidationError):
    """Raised for negative, non-integer, or out-of-range amounts."""
    pass


class InvalidScheduleError(ValidationError):
    """Raised when vesting schedule parameters are inconsistent."""
    pass


# ==================== Deployment Errors ====================


class ContractNotFoundError(LedgerError):
    """Raised when a contract address is not known to the factory."""
    pass


__all__ = [
    "LedgerError",
    "UnauthorizedError",
    "InsufficientBalanceError",
    "InsufficientAllowanceError",
    "InvalidAllowanceError",
    "SupplyCapExceededError",
    "ContractPausedError",
    "AlreadyInStateError",
    "VestingError",
    "InsufficientFundingError",
    "NothingToReleaseError",
    "TransferFailedError",
    "ScheduleNotFoundError",
    "ValidationError",
    "InvalidAddressError",
    "InvalidAmountError",
    "InvalidScheduleError",
    "ContractNotFoundError",
]
