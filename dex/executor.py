"""
Transaction submission for the native/token pool.

Handles:
- Transaction building for approve / swapEthTotoken / swapTokenToEth
- Signing with a local account and direct submission
- Waiting for the receipt, so callers only see mined transactions
- Dry-run mode that never broadcasts
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.exceptions import ContractLogicError, TransactionNotFound
from web3.types import TxParams

from pair_swap.config_schema import SwapConfig
from pair_swap.exceptions import (
    ContractRevertError,
    NetworkError,
    SwapError,
    TransactionError,
    UserRejectedError,
)
from pair_swap.execution_types import IntentKind, SwapIntent, TransactionResult
from pair_swap.utils import get_logger, short_address

from .abi import ERC20_ABI, PAIR_DEX_ABI

logger = get_logger(__name__)

DRY_RUN_TX_HASH = "0xDRYRUN"

# EIP-1193 "User Rejected Request"
USER_REJECTED_CODE = 4001


@dataclass
class ExecutionConfig:
    """
    Configuration for transaction submission.

    Attributes:
        dex_address: Pool contract address
        token_address: ERC-20 token address
        gas_limit: Gas limit set on every transaction
        max_gas_price_gwei: Maximum gas price willing to pay
        confirmation_timeout_sec: How long to wait for a receipt
        receipt_poll_sec: Delay between receipt polls
        dry_run: If True, log intents but don't submit transactions
    """

    dex_address: str
    token_address: str
    gas_limit: int = 200_000
    max_gas_price_gwei: float = 50.0
    confirmation_timeout_sec: float = 120.0
    receipt_poll_sec: float = 1.0
    dry_run: bool = True

    @classmethod
    def from_swap_config(cls, config: SwapConfig) -> "ExecutionConfig":
        return cls(
            dex_address=config.dex_address,
            token_address=config.token_address,
            gas_limit=config.gas_limit,
            max_gas_price_gwei=config.max_gas_price_gwei,
            confirmation_timeout_sec=config.confirmation_timeout_sec,
            dry_run=config.dry_run,
        )


def _error_code(error: Exception) -> Optional[int]:
    code = getattr(error, "code", None)
    if code is None and error.args and isinstance(error.args[0], dict):
        code = error.args[0].get("code")
    return code


def classify_submit_error(error: Exception, intent: SwapIntent) -> SwapError:
    """
    Map a provider/wallet exception to the swap error taxonomy.

    Returns:
        UserRejectedError, ContractRevertError or NetworkError
    """
    message = str(error)
    lowered = message.lower()

    if (
        _error_code(error) == USER_REJECTED_CODE
        or "user rejected" in lowered
        or "user denied" in lowered
    ):
        return UserRejectedError(
            "Transaction was rejected in the wallet", intent=intent
        )

    if isinstance(error, ContractLogicError) or "execution reverted" in lowered:
        return ContractRevertError(f"Transaction reverted: {message}", intent=intent)

    return NetworkError(f"Failed to submit {intent.describe()}: {message}")


class Web3TransactionSubmitter:
    """
    Submits swap intents with a local signing account.

    Each submit() returns only after the transaction is mined, so an
    approval is always confirmed before the swap that depends on it.
    """

    def __init__(
        self,
        web3: Web3,
        config: ExecutionConfig,
        private_key: Optional[str] = None,
    ):
        """
        Initialize submitter.

        Args:
            web3: Web3 instance
            config: Execution configuration
            private_key: Key for signing (not needed in dry-run mode)
        """
        self.web3 = web3
        self.config = config

        self.account: Optional[LocalAccount] = None
        if private_key:
            try:
                self.account = Account.from_key(private_key)
                logger.info(f"Loaded account: {short_address(self.account.address)}")
            except Exception as e:
                logger.error(f"Failed to load private key: {e}")
                raise

        self.dex = web3.eth.contract(
            address=Web3.to_checksum_address(config.dex_address), abi=PAIR_DEX_ABI
        )
        self.token = web3.eth.contract(
            address=Web3.to_checksum_address(config.token_address), abi=ERC20_ABI
        )

        self.submissions_attempted = 0
        self.submissions_confirmed = 0

    @property
    def address(self) -> Optional[str]:
        return self.account.address if self.account else None

    async def _run(self, fn: Callable[..., Any], *args) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn, *args)

    async def submit(self, intent: SwapIntent) -> TransactionResult:
        """
        Build, sign, send and confirm one intent.

        Raises:
            UserRejectedError: The signer declined
            ContractRevertError: The transaction reverted
            NetworkError: Submission or receipt polling failed
            TransactionError: No signer, or no receipt before the timeout
        """
        self.submissions_attempted += 1

        if self.config.dry_run:
            logger.info(f"[DRY RUN] Would submit {intent.describe()}")
            return TransactionResult(
                intent=intent, tx_hash=DRY_RUN_TX_HASH, confirmed=True, dry_run=True
            )

        if self.account is None:
            raise TransactionError("No signing account loaded", intent=intent)
        if intent.sender.lower() != self.account.address.lower():
            raise TransactionError(
                f"Intent sender {short_address(intent.sender)} is not the signer",
                intent=intent,
            )

        try:
            tx_params = await self._run(self.build_transaction, intent)
            signed_tx = self.account.sign_transaction(tx_params)
            tx_hash = await self._run(
                self.web3.eth.send_raw_transaction, signed_tx.raw_transaction
            )
        except TransactionError:
            raise
        except Exception as e:
            raise classify_submit_error(e, intent) from e

        tx_hex = self.web3.to_hex(tx_hash)
        logger.info(f"Waiting for tx {tx_hex}...")
        receipt = await self._wait_for_receipt(tx_hex, intent)

        if receipt["status"] != 1:
            raise ContractRevertError(
                f"Transaction {tx_hex} reverted", intent=intent, tx_hash=tx_hex
            )

        self.submissions_confirmed += 1
        return TransactionResult(
            intent=intent,
            tx_hash=tx_hex,
            confirmed=True,
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
        )

    def build_transaction(self, intent: SwapIntent) -> TxParams:
        """
        Transaction parameters for an intent.

        Args:
            intent: Intent to encode

        Returns:
            Unsigned transaction
        """
        sender = self.account.address
        params: TxParams = {
            "from": sender,
            "gas": self.config.gas_limit,
            "gasPrice": self._gas_price(),
            "nonce": self.web3.eth.get_transaction_count(sender),
            "chainId": self.web3.eth.chain_id,
        }

        if intent.kind is IntentKind.SWAP_NATIVE_FOR_TOKEN:
            params["value"] = intent.amount
            call = self.dex.functions.swapEthTotoken()
        elif intent.kind is IntentKind.APPROVE:
            spender = intent.spender or self.config.dex_address
            call = self.token.functions.approve(
                Web3.to_checksum_address(spender), intent.amount
            )
        else:
            call = self.dex.functions.swapTokenToEth(intent.amount)

        return call.build_transaction(params)

    def _gas_price(self) -> int:
        """Get current gas price with ceiling."""
        current_gas_price = self.web3.eth.gas_price
        max_gas_price = Web3.to_wei(self.config.max_gas_price_gwei, "gwei")
        return min(current_gas_price, max_gas_price)

    async def _wait_for_receipt(self, tx_hash: str, intent: SwapIntent) -> Dict:
        """
        Wait for transaction confirmation.

        Raises:
            TransactionError: If not confirmed within the timeout
            NetworkError: If receipt polling fails
        """
        timeout = self.config.confirmation_timeout_sec
        start = time.time()

        while time.time() - start < timeout:
            try:
                receipt = await self._run(
                    self.web3.eth.get_transaction_receipt, tx_hash
                )
            except TransactionNotFound:
                receipt = None
            except Exception as e:
                raise NetworkError(f"Failed to poll receipt for {tx_hash}: {e}") from e
            if receipt:
                return receipt

            await asyncio.sleep(self.config.receipt_poll_sec)

        raise TransactionError(
            f"Transaction {tx_hash} not confirmed after {timeout}s",
            intent=intent,
            tx_hash=tx_hash,
        )

    def get_stats(self) -> Dict:
        """Get submission statistics."""
        return {
            "submissions_attempted": self.submissions_attempted,
            "submissions_confirmed": self.submissions_confirmed,
        }
