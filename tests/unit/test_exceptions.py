"""Tests for the exceptions module."""

from pair_swap.exceptions import (
    DEFAULT_SWAP_ERROR_MESSAGE,
    ConfigurationError,
    ContractRevertError,
    NetworkError,
    PreconditionError,
    PricingError,
    StaleDataError,
    SwapError,
    TransactionError,
    UserRejectedError,
    ValidationError,
    describe_error,
)


def test_base_exception():
    """Test the base exception class."""
    error = SwapError("Test error")
    assert str(error) == "Test error"
    assert error.details == {}

    error_with_details = SwapError("Test error", {"key": "value"})
    assert error_with_details.details == {"key": "value"}


def test_configuration_error():
    """Test configuration error."""
    error = ConfigurationError("Config error", {"config_file": "swap.yaml"})
    assert str(error) == "Config error"
    assert error.details["config_file"] == "swap.yaml"
    assert isinstance(error, SwapError)


def test_silent_errors():
    """Test the errors the session absorbs."""
    for cls in (ValidationError, StaleDataError, PreconditionError):
        error = cls("message")
        assert isinstance(error, SwapError)


def test_pricing_error():
    """Test pricing error."""
    error = PricingError("Pricer failed", input_amount=1000)
    assert error.input_amount == 1000
    assert isinstance(error, SwapError)


def test_network_error():
    """Test network error."""
    error = NetworkError("Timeout", endpoint="http://rpc", status_code=504)
    assert error.endpoint == "http://rpc"
    assert error.status_code == 504
    assert isinstance(error, SwapError)


def test_transaction_errors():
    """Test transaction error and its subclasses."""
    error = TransactionError("Failed", intent="approve(1)", tx_hash="0xabc")
    assert error.intent == "approve(1)"
    assert error.tx_hash == "0xabc"

    assert isinstance(UserRejectedError("Rejected"), TransactionError)
    assert isinstance(ContractRevertError("Reverted"), TransactionError)


def test_describe_error():
    """Test notification text for failures."""
    assert describe_error(TransactionError("Transaction reverted")) == (
        "Transaction reverted"
    )
    assert describe_error(TransactionError("  ")) == DEFAULT_SWAP_ERROR_MESSAGE
    assert describe_error(RuntimeError()) == DEFAULT_SWAP_ERROR_MESSAGE


def test_exception_inheritance():
    """Test that all exceptions inherit from the base exception."""
    exceptions = [
        ConfigurationError("test"),
        ValidationError("test"),
        StaleDataError("test"),
        PricingError("test"),
        PreconditionError("test"),
        NetworkError("test"),
        TransactionError("test"),
    ]

    for exc in exceptions:
        assert isinstance(exc, SwapError)
        assert isinstance(exc, Exception)
