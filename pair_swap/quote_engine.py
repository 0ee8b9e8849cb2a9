"""
Quote engine: derives the counter-amount of a swap from pool reserves.

The constant-product arithmetic (fee included) belongs to the QuotePricer;
this module only decides when a pricer call is warranted and how its result
is shown. Recompute policy:
- non-positive input      -> derived side is "0", pricer not called
- reserves not loaded yet -> derived side keeps its current value
- pricer failure          -> derived side keeps its current value
- otherwise               -> exact output rendered, cut to display precision
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import MAX_INPUT_DECIMALS, ZERO_AMOUNT
from .exceptions import PricingError
from .interfaces import QuotePricer
from .types import ReservePair
from .units import (
    from_base_units,
    is_positive_amount,
    strip_trailing_zeros,
    to_base_units,
    truncate_decimals,
)
from .utils import get_logger

logger = get_logger(__name__)


class QuoteAction(Enum):
    """What a recompute should do with the derived field."""

    ZERO = "zero"
    KEEP = "keep"
    PRICE = "price"


@dataclass(frozen=True)
class QuotePlan:
    """Decision for one recompute, made without any I/O."""

    action: QuoteAction
    input_amount: int = 0
    reserves: Optional[ReservePair] = None


class QuoteEngine:
    """
    Computes derived swap amounts through a QuotePricer.

    Attributes:
        pricer: Authoritative pricing collaborator
        display_decimals: Fractional digits kept in the derived field
    """

    def __init__(
        self, pricer: QuotePricer, display_decimals: int = MAX_INPUT_DECIMALS
    ):
        self.pricer = pricer
        self.display_decimals = display_decimals

    def plan(
        self, input_value: str, input_decimals: int, reserves: ReservePair
    ) -> QuotePlan:
        """
        Decide how the derived side reacts to the current inputs.

        Args:
            input_value: Active field contents (sanitized decimal string)
            input_decimals: Decimals of the asset being sold
            reserves: Pool reserves ordered by direction

        Returns:
            QuotePlan; PRICE plans carry the base-unit input amount
        """
        if not is_positive_amount(input_value):
            return QuotePlan(QuoteAction.ZERO)

        input_amount = to_base_units(input_value, input_decimals)
        if input_amount <= 0:
            # Positive on paper but below one base unit
            return QuotePlan(QuoteAction.ZERO)

        if not reserves.is_known:
            logger.debug("Reserves not loaded yet, keeping derived amount")
            return QuotePlan(QuoteAction.KEEP, input_amount, reserves)

        return QuotePlan(QuoteAction.PRICE, input_amount, reserves)

    async def quote(
        self, input_amount: int, input_reserve: int, output_reserve: int
    ) -> int:
        """
        Output amount in base units for input_amount.

        A non-positive input short-circuits to 0 without calling the pricer.

        Raises:
            PricingError: If the pricer fails or returns a negative amount
        """
        if input_amount <= 0:
            return 0

        logger.debug(
            f"Pricing swap: input={input_amount} "
            f"input_reserve={input_reserve} output_reserve={output_reserve}"
        )
        try:
            output_amount = await self.pricer.price_swap(
                input_amount, input_reserve, output_reserve
            )
        except PricingError:
            raise
        except Exception as e:
            raise PricingError(
                f"Pricer failed: {e}", input_amount=input_amount
            ) from e

        if output_amount is None or int(output_amount) < 0:
            raise PricingError(
                f"Pricer returned invalid amount: {output_amount}",
                input_amount=input_amount,
            )
        return int(output_amount)

    def render(self, output_amount: int, output_decimals: int) -> str:
        """Derived field text for an output amount (truncated, never rounded)."""
        if output_amount <= 0:
            return ZERO_AMOUNT
        exact = from_base_units(output_amount, output_decimals)
        return strip_trailing_zeros(truncate_decimals(exact, self.display_decimals))
