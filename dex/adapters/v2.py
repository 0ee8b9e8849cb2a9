"""
Constant-product pool adapter for a single native/token pair.

Implements the chain reads and the pricing the swap session consumes:
- Web3ChainReader: balances, reserves and token metadata over web3
- ContractQuotePricer: the pool contract's own getAmountOfTokens view
- ConstantProductPricer: local integer mirror of that view (x*y=k with the
  fee taken from the input)
"""

import asyncio
from typing import Any, Callable, Dict, Optional

from web3 import Web3

from pair_swap.constants import BPS_DENOMINATOR, DEFAULT_FEE_BPS, NATIVE_DECIMALS
from pair_swap.exceptions import NetworkError, PricingError
from pair_swap.types import Balance
from pair_swap.units import from_base_units, resolve_decimals
from pair_swap.utils import get_logger

from ..abi import ERC20_ABI, PAIR_DEX_ABI

logger = get_logger(__name__)


def is_rate_limit_error(error_msg: str) -> bool:
    """Check for rate limit errors (common provider patterns)."""
    return (
        "429" in error_msg
        or "Too Many Requests" in error_msg
        or "-32005" in error_msg
        or "limit exceeded" in error_msg.lower()
    )


def get_amount_out(
    amount_in: int, reserve_in: int, reserve_out: int, fee_bps: int = DEFAULT_FEE_BPS
) -> int:
    """
    Calculate output amount for a swap using the constant-product formula.

    Formula (with fee embedded, integer division as on chain):
        amountInWithFee = amountIn * (10000 - fee_bps)
        amountOut = (amountInWithFee * reserveOut)
                    // (reserveIn * 10000 + amountInWithFee)

    Args:
        amount_in: Input amount in base units
        reserve_in: Reserve of input asset in base units
        reserve_out: Reserve of output asset in base units
        fee_bps: Fee in basis points (100 = 1%)

    Returns:
        Output amount in base units

    Raises:
        ValueError: If inputs are invalid (negative, zero reserves, etc.)
    """
    if amount_in < 0:
        raise ValueError(f"amount_in must be non-negative: {amount_in}")
    if reserve_in <= 0 or reserve_out < 0:
        raise ValueError(
            f"Reserves must be positive: in={reserve_in}, out={reserve_out}"
        )
    if fee_bps < 0 or fee_bps >= BPS_DENOMINATOR:
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}): {fee_bps}")

    amount_in_with_fee = amount_in * (BPS_DENOMINATOR - fee_bps)
    numerator = amount_in_with_fee * reserve_out
    denominator = reserve_in * BPS_DENOMINATOR + amount_in_with_fee
    return numerator // denominator


class ConstantProductPricer:
    """Prices swaps locally with get_amount_out()."""

    def __init__(self, fee_bps: int = DEFAULT_FEE_BPS):
        self.fee_bps = fee_bps

    async def price_swap(
        self, input_amount: int, input_reserve: int, output_reserve: int
    ) -> int:
        try:
            return get_amount_out(
                input_amount, input_reserve, output_reserve, self.fee_bps
            )
        except ValueError as e:
            raise PricingError(str(e), input_amount=input_amount) from e


class ContractQuotePricer:
    """Prices swaps with the pool contract's getAmountOfTokens view."""

    def __init__(self, web3: Web3, dex_address: str):
        self.web3 = web3
        self.contract = web3.eth.contract(
            address=Web3.to_checksum_address(dex_address), abi=PAIR_DEX_ABI
        )

    async def price_swap(
        self, input_amount: int, input_reserve: int, output_reserve: int
    ) -> int:
        call = self.contract.functions.getAmountOfTokens(
            input_amount, input_reserve, output_reserve
        ).call
        try:
            loop = asyncio.get_running_loop()
            amount = await loop.run_in_executor(None, call)
        except Exception as e:
            raise PricingError(
                f"getAmountOfTokens failed: {e}", input_amount=input_amount
            ) from e
        return int(amount)


class Web3ChainReader:
    """
    Chain reads for the swap session.

    Runs the synchronous web3 calls in the default executor to avoid blocking
    the event loop. Rate-limit errors are retried with exponential backoff;
    anything else surfaces as NetworkError.

    Attributes:
        web3: Web3 instance connected to the chain
        max_retries: Maximum number of attempts per read
        backoff_sec: Base delay of the exponential backoff
    """

    def __init__(self, web3: Web3, max_retries: int = 3, backoff_sec: float = 2.0):
        self.web3 = web3
        self.max_retries = max_retries
        self.backoff_sec = backoff_sec
        self._tokens: Dict[str, Any] = {}
        self._decimals: Dict[str, int] = {}
        self._symbols: Dict[str, str] = {}

    @property
    def endpoint(self) -> Optional[str]:
        return getattr(self.web3.provider, "endpoint_uri", None)

    def _token(self, token: str):
        address = Web3.to_checksum_address(token)
        if address not in self._tokens:
            self._tokens[address] = self.web3.eth.contract(
                address=address, abi=ERC20_ABI
            )
        return self._tokens[address]

    async def _call(self, label: str, fn: Callable[..., Any], *args) -> Any:
        loop = asyncio.get_running_loop()
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                return await loop.run_in_executor(None, fn, *args)
            except Exception as e:
                last_error = e
                if is_rate_limit_error(str(e)) and attempt < self.max_retries - 1:
                    # Exponential backoff: 1x, 2x, 4x base delay
                    wait_time = self.backoff_sec * (2**attempt)
                    logger.debug(f"Rate limited reading {label}, retry in {wait_time}s")
                    await asyncio.sleep(wait_time)
                    continue
                raise NetworkError(
                    f"Failed to read {label}: {e}", endpoint=self.endpoint
                ) from e

        raise NetworkError(
            f"Failed to read {label} after {self.max_retries} retries: {last_error}",
            endpoint=self.endpoint,
        ) from last_error

    async def _raw_balance(self, address: str, token: Optional[str]) -> int:
        owner = Web3.to_checksum_address(address)
        if token is None:
            balance = await self._call(
                "native balance", self.web3.eth.get_balance, owner
            )
            return int(balance)
        call = self._token(token).functions.balanceOf(owner).call
        return int(await self._call("token balance", call))

    async def read_balance(self, address: str, token: Optional[str] = None) -> Balance:
        raw = await self._raw_balance(address, token)
        if token is None:
            decimals = NATIVE_DECIMALS
        else:
            decimals = resolve_decimals(await self.read_decimals(token))
        return Balance(raw=raw, display=from_base_units(raw, decimals))

    async def read_reserve(self, pool_address: str, token: Optional[str] = None) -> int:
        return await self._raw_balance(pool_address, token)

    async def read_decimals(self, token: str) -> int:
        address = Web3.to_checksum_address(token)
        if address not in self._decimals:
            call = self._token(address).functions.decimals().call
            self._decimals[address] = int(await self._call("token decimals", call))
        return self._decimals[address]

    async def read_symbol(self, token: str) -> str:
        address = Web3.to_checksum_address(token)
        if address not in self._symbols:
            call = self._token(address).functions.symbol().call
            self._symbols[address] = str(await self._call("token symbol", call))
        return self._symbols[address]
