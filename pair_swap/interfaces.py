"""
Collaborator interfaces consumed by the swap core.

The core never talks to a chain, a wallet or a UI directly; it is handed
objects satisfying these protocols. Production implementations live in the
dex package; tests use in-memory fakes.
"""

from typing import Optional, Protocol, runtime_checkable

from .execution_types import SwapIntent, TransactionResult
from .notifications import Severity
from .types import Balance


@runtime_checkable
class ChainReader(Protocol):
    """Read-only chain access. Absence (None) means unknown, not zero."""

    async def read_balance(
        self, address: str, token: Optional[str] = None
    ) -> Optional[Balance]:
        """Native balance of address, or its token balance if token is set."""
        ...

    async def read_reserve(
        self, pool_address: str, token: Optional[str] = None
    ) -> Optional[int]:
        """Native reserve of the pool, or its token reserve if token is set."""
        ...

    async def read_decimals(self, token: str) -> Optional[int]:
        """decimals() of the token."""
        ...

    async def read_symbol(self, token: str) -> Optional[str]:
        """symbol() of the token."""
        ...


@runtime_checkable
class QuotePricer(Protocol):
    """Authoritative constant-product pricing (fee included)."""

    async def price_swap(
        self, input_amount: int, input_reserve: int, output_reserve: int
    ) -> int:
        """Output amount in base units for input_amount."""
        ...


@runtime_checkable
class TransactionSubmitter(Protocol):
    """Signs, sends and confirms transactions."""

    async def submit(self, intent: SwapIntent) -> TransactionResult:
        """
        Submit an intent and return once it is mined.

        Raises:
            UserRejectedError: The wallet owner declined
            ContractRevertError: The transaction reverted
            NetworkError: The transport failed
        """
        ...


@runtime_checkable
class NotificationSink(Protocol):
    """Fire-and-forget user notifications."""

    def notify(self, message: str, severity: Severity) -> None:
        ...
