"""
Exception hierarchy for the pair swap core.

Provides specific exception types for the error categories of the swap
flow. Only PreconditionError and the submission failures (TransactionError
and NetworkError) ever reach the user; the rest are absorbed by the session.
"""

from typing import Any, Dict, Optional

DEFAULT_SWAP_ERROR_MESSAGE = "An error occurred while trying to execute the swap"


class SwapError(Exception):
    """Base exception for all pair swap related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(SwapError):
    """Raised when there are configuration-related issues."""

    pass


class ValidationError(SwapError):
    """Raised when user input cannot be accepted as an amount."""

    pass


class StaleDataError(SwapError):
    """Raised when reserves or balances are not loaded yet."""

    pass


class PricingError(SwapError):
    """Raised when the quote pricer fails or returns an unusable result."""

    def __init__(
        self,
        message: str,
        input_amount: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.input_amount = input_amount


class PreconditionError(SwapError):
    """Raised when a swap is requested but cannot be submitted."""

    pass


class NetworkError(SwapError):
    """Raised when network or connectivity issues occur."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class TransactionError(SwapError):
    """Raised when submitting a transaction fails."""

    def __init__(
        self,
        message: str,
        intent: Optional[Any] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.intent = intent
        self.tx_hash = tx_hash


class UserRejectedError(TransactionError):
    """Raised when the wallet owner declines to sign."""

    pass


class ContractRevertError(TransactionError):
    """Raised when a mined transaction reverted."""

    pass


def describe_error(error: BaseException) -> str:
    """Human-readable text for a failed swap notification."""
    message = str(error).strip()
    return message or DEFAULT_SWAP_ERROR_MESSAGE
