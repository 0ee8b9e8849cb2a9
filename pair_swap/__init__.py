"""
Pair Swap.

Quoting and swap execution for a single native/token constant-product pool:
amount conversion and sanitizing, reactive quoting with stale-result
suppression, direction toggling and the approve-then-swap flow.
"""

PROJECT_NAME = "pair-swap"

from pair_swap.version import __version__ as VERSION

# Export main components for easier imports
from pair_swap.direction import Direction, Side, SwapDirectionController
from pair_swap.exceptions import (
    ConfigurationError,
    NetworkError,
    PreconditionError,
    PricingError,
    StaleDataError,
    SwapError,
    TransactionError,
    ValidationError,
)
from pair_swap.quote_engine import QuoteEngine
from pair_swap.sanitizer import AmountInputSanitizer, KeyPress
from pair_swap.session import SwapSession, SwapState
from pair_swap.units import from_base_units, to_base_units

__all__ = [
    "PROJECT_NAME",
    "VERSION",
    "AmountInputSanitizer",
    "ConfigurationError",
    "Direction",
    "KeyPress",
    "NetworkError",
    "PreconditionError",
    "PricingError",
    "QuoteEngine",
    "Side",
    "StaleDataError",
    "SwapDirectionController",
    "SwapError",
    "SwapSession",
    "SwapState",
    "TransactionError",
    "ValidationError",
    "from_base_units",
    "to_base_units",
]
