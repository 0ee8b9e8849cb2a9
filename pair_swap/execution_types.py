"""
Type definitions for swap submission.
Contains the intents the session builds and the results submitters return.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class IntentKind(Enum):
    """
    Kinds of transactions the swap flow can request.

    Values:
        SWAP_NATIVE_FOR_TOKEN: Payable swap sending native coin to the pool
        APPROVE: ERC-20 allowance for the pool to pull the token
        SWAP_TOKEN_FOR_NATIVE: Swap pulling an approved token amount
    """

    SWAP_NATIVE_FOR_TOKEN = "swap_native_for_token"
    APPROVE = "approve"
    SWAP_TOKEN_FOR_NATIVE = "swap_token_for_native"


@dataclass(frozen=True)
class SwapIntent:
    """What the session wants submitted; the submitter decides how."""

    kind: IntentKind
    amount: int  # base units of the asset being sent or approved
    sender: str
    spender: Optional[str] = None  # approvals only

    def describe(self) -> str:
        return f"{self.kind.value}({self.amount})"


@dataclass
class TransactionResult:
    """
    Outcome of a submitted intent.

    Attributes:
        intent: The intent that was submitted
        tx_hash: Transaction hash (synthetic in dry-run mode)
        confirmed: True once the transaction is mined with success status
        block_number: Block the transaction was included in
        gas_used: Gas consumed
        dry_run: True if nothing was broadcast
    """

    intent: SwapIntent
    tx_hash: str
    confirmed: bool = False
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    dry_run: bool = False
