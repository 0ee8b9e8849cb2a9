"""
Command line entry point.

Usage:
  # Quote 0.5 ETH -> token against the configured pool
  pair-swap quote --config configs/pair_swap.example.yaml --amount 0.5

  # Quote token -> ETH
  pair-swap quote --config configs/pair_swap.example.yaml --amount 120 --from token

  # Dry-run a swap for an address (nothing is broadcast)
  pair-swap swap --config configs/pair_swap.example.yaml --amount 0.5 --account 0x...

  # Live swap (DANGEROUS - requires private key)
  export PAIR_SWAP_PRIVATE_KEY="0x..."
  pair-swap swap --config configs/pair_swap.example.yaml --amount 0.5 --live
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from web3 import Web3

from dex.adapters.v2 import ConstantProductPricer, ContractQuotePricer, Web3ChainReader
from dex.executor import ExecutionConfig, Web3TransactionSubmitter

from . import logging_config
from .config_loader import load_config, read_private_key
from .config_schema import SwapConfig
from .direction import Direction, Side
from .exceptions import ConfigurationError, NetworkError, ValidationError
from .notifications import LoggingNotificationSink
from .sanitizer import AmountInputSanitizer
from .session import SwapSession
from .units import format_display_balance
from .utils import get_logger

logger = get_logger(__name__)


def check_chain_id(web3: Web3, expected: int) -> int:
    """
    Verify the RPC endpoint serves the configured chain.

    Raises:
        NetworkError: If the chain id cannot be read
        ConfigurationError: If the endpoint reports another chain
    """
    try:
        chain_id = web3.eth.chain_id
    except Exception as e:
        raise NetworkError(f"Could not read chain id: {e}") from e

    if chain_id != expected:
        raise ConfigurationError(
            f"RPC endpoint is on chain {chain_id}, config expects {expected}",
            details={"chain_id": chain_id, "expected": expected},
        )
    logger.info(f"Connected to chain {chain_id}")
    return chain_id


def build_session(
    config: SwapConfig, private_key: Optional[str] = None, live: bool = False
) -> SwapSession:
    """
    Wire the web3 collaborators into a session.

    When the config pins a chain id, the endpoint is checked first and
    check_chain_id's errors propagate.
    """
    web3 = Web3(Web3.HTTPProvider(config.rpc_url))
    if config.chain_id is not None:
        check_chain_id(web3, config.chain_id)

    if config.pricer == "local":
        pricer = ConstantProductPricer(config.fee_bps)
    else:
        pricer = ContractQuotePricer(web3, config.dex_address)

    execution_config = ExecutionConfig.from_swap_config(config)
    if live:
        execution_config.dry_run = False

    return SwapSession(
        config=config,
        reader=Web3ChainReader(web3),
        pricer=pricer,
        submitter=Web3TransactionSubmitter(web3, execution_config, private_key),
        notifier=LoggingNotificationSink(duration=config.notification_duration_sec),
    )


def _symbols(session: SwapSession):
    native, token = session.config.native_symbol, session.token_symbol
    if session.direction is Direction.NATIVE_TO_TOKEN:
        return native, token
    return token, native


async def run_quote(session: SwapSession, amount: str, side: Side) -> str:
    """Refresh reserves once and return the derived amount for `amount`."""
    try:
        await session.refresh()
        if session.direction is not Direction.from_side(side):
            session.toggle_direction()
        session.edit_input(amount)
        derived = await session.settle()
        sold, bought = _symbols(session)
        print(f"{session.controller.input_value} {sold} -> {derived} {bought}")
        return derived
    finally:
        await session.close()


async def run_swap(session: SwapSession, amount: str, side: Side, account: str) -> bool:
    """Connect, quote and submit one swap. Returns True on success."""
    try:
        await session.connect(account)
        if session.direction is not Direction.from_side(side):
            session.toggle_direction()
        sold, bought = _symbols(session)
        balance = session.max_amount(side)
        if balance is not None:
            print(f"Balance: {format_display_balance(balance)} {sold}")

        session.edit_input(amount)
        derived = await session.settle()
        amount_in = session.controller.input_value
        print(f"Swapping {amount_in} {sold} for ~{derived} {bought}")

        results = await session.execute_swap()
        if results is None:
            return False
        for result in results:
            label = "dry run" if result.dry_run else f"block {result.block_number}"
            print(f"  {result.intent.describe()}: {result.tx_hash} ({label})")
        return True
    finally:
        await session.close()


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Native/token constant-product pool swaps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("quote", "Print the output amount for an input amount"),
        ("swap", "Submit a swap (dry run unless --live)"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--config", required=True, help="Path to config YAML")
        sub.add_argument("--amount", required=True, help="Input amount (decimal)")
        sub.add_argument(
            "--from",
            dest="side",
            choices=[s.value for s in Side],
            default=Side.NATIVE.value,
            help="Asset being sold (default: native)",
        )
        if name == "swap":
            sub.add_argument(
                "--account", help="Sender address (dry run without a private key)"
            )
            sub.add_argument(
                "--live",
                action="store_true",
                help="Broadcast transactions (requires PAIR_SWAP_PRIVATE_KEY)",
            )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    if args.verbose:
        logging_config.setup_debug()
    else:
        logging_config.setup()

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        logger.error(f"{e}")
        for error in e.details.get("errors", []):
            logger.error(f"  {'.'.join(str(p) for p in error['loc'])}: {error['msg']}")
        return 2

    try:
        amount = AmountInputSanitizer(config.max_input_decimals).validate(args.amount)
    except ValidationError as e:
        logger.error(f"{e}")
        return 2

    side = Side(args.side)

    if args.command == "quote":
        try:
            session = build_session(config)
        except (ConfigurationError, NetworkError) as e:
            logger.error(f"{e}")
            return 2
        asyncio.run(run_quote(session, amount, side))
        return 0

    private_key = read_private_key()
    if args.live and not private_key:
        logger.error("--live requires PAIR_SWAP_PRIVATE_KEY to be set")
        return 2

    try:
        session = build_session(config, private_key=private_key, live=args.live)
    except (ConfigurationError, NetworkError) as e:
        logger.error(f"{e}")
        return 2
    account = args.account or session.submitter.address
    if not account:
        logger.error("Pass --account or set PAIR_SWAP_PRIVATE_KEY")
        return 2

    ok = asyncio.run(run_swap(session, amount, side, account))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
