"""
Swap session: the reactive state behind a native/token swap form.

Each piece of state has a single writer:
- field values      -> edit_input() / use_max() / toggle_direction() and the
                       quote recompute (derived side only)
- reserves/balances -> refresh()
- submitting flag   -> execute_swap()

Any change to the input amount, the direction or the reserves schedules a
recompute of the derived side on the running event loop. Recomputes are
numbered; a pricer result whose number is no longer the latest is dropped,
so a slow quote can never overwrite a fresher one.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional

from .config_schema import SwapConfig
from .constants import ZERO_AMOUNT
from .direction import Direction, Side, SwapDirectionController
from .exceptions import (
    NetworkError,
    PreconditionError,
    PricingError,
    StaleDataError,
    TransactionError,
    describe_error,
)
from .execution_types import IntentKind, SwapIntent, TransactionResult
from .interfaces import (
    ChainReader,
    NotificationSink,
    QuotePricer,
    TransactionSubmitter,
)
from .notifications import Severity
from .quote_engine import QuoteAction, QuoteEngine
from .sanitizer import AmountInputSanitizer
from .types import Balance, ReservePair
from .units import (
    from_base_units,
    is_positive_amount,
    resolve_decimals,
    to_base_units,
)
from .utils import get_logger, short_address

logger = get_logger(__name__)

SWAP_SUCCESS_MESSAGE = "Swap executed successfully!"
CONNECT_WALLET_MESSAGE = "Please connect your wallet first"
ENTER_AMOUNT_MESSAGE = "Enter an amount to swap"
SWAP_IN_PROGRESS_MESSAGE = "A swap is already in progress"


@dataclass(frozen=True)
class SwapState:
    """Immutable snapshot handed to listeners."""

    direction: Direction
    native_value: str
    token_value: str
    native_reserve: Optional[int]
    token_reserve: Optional[int]
    native_balance: Optional[Balance]
    token_balance: Optional[Balance]
    token_decimals: int
    token_symbol: str
    account: Optional[str]
    submitting: bool

    @property
    def has_amount(self) -> bool:
        return is_positive_amount(self.native_value) or is_positive_amount(
            self.token_value
        )

    @property
    def can_submit(self) -> bool:
        """Whether the swap button would be enabled."""
        return bool(self.account) and not self.submitting and self.has_amount


Listener = Callable[[SwapState], None]


class SwapSession:
    """
    Coordinates the swap form state with its collaborators.

    Args:
        config: Validated swap configuration
        reader: Chain reads (reserves, balances, token metadata)
        pricer: Authoritative quote pricing
        submitter: Transaction submission
        notifier: User notifications
        sanitizer: Amount field sanitizer (defaults to the config's precision)
    """

    def __init__(
        self,
        config: SwapConfig,
        reader: ChainReader,
        pricer: QuotePricer,
        submitter: TransactionSubmitter,
        notifier: NotificationSink,
        sanitizer: Optional[AmountInputSanitizer] = None,
    ):
        self.config = config
        self.reader = reader
        self.submitter = submitter
        self.notifier = notifier
        self.engine = QuoteEngine(
            pricer, display_decimals=config.max_input_decimals
        )
        self.sanitizer = sanitizer or AmountInputSanitizer(config.max_input_decimals)
        self.controller = SwapDirectionController()

        self.account: Optional[str] = None
        self.native_reserve: Optional[int] = None
        self.token_reserve: Optional[int] = None
        self.native_balance: Optional[Balance] = None
        self.token_balance: Optional[Balance] = None
        self.submitting = False
        self._token_decimals: Optional[int] = None
        self._token_symbol: Optional[str] = None

        self._listeners: List[Listener] = []
        self._quote_seq = 0
        self._refresh_seq = 0
        self._quote_task: Optional[asyncio.Task] = None
        self._recompute_deferred = False
        self._poll_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------

    @property
    def token_decimals(self) -> int:
        return resolve_decimals(
            self._token_decimals, self.config.default_token_decimals
        )

    @property
    def token_symbol(self) -> str:
        return self._token_symbol or self.config.token_symbol

    @property
    def direction(self) -> Direction:
        return self.controller.direction

    def decimals_of(self, side: Side) -> int:
        if Side(side) is Side.NATIVE:
            return self.config.native_decimals
        return self.token_decimals

    def reserves_for(self, direction: Direction) -> ReservePair:
        """Reserves ordered as (sold asset, bought asset)."""
        if direction is Direction.NATIVE_TO_TOKEN:
            return ReservePair(self.native_reserve, self.token_reserve)
        return ReservePair(self.token_reserve, self.native_reserve)

    def balance_of(self, side: Side) -> Optional[Balance]:
        if Side(side) is Side.NATIVE:
            return self.native_balance
        return self.token_balance

    def max_amount(self, side: Side) -> Optional[str]:
        """Exact balance of side as a decimal string (from raw base units)."""
        balance = self.balance_of(side)
        if balance is None:
            return None
        return from_base_units(balance.raw, self.decimals_of(side))

    @property
    def state(self) -> SwapState:
        return SwapState(
            direction=self.controller.direction,
            native_value=self.controller.native_value,
            token_value=self.controller.token_value,
            native_reserve=self.native_reserve,
            token_reserve=self.token_reserve,
            native_balance=self.native_balance,
            token_balance=self.token_balance,
            token_decimals=self.token_decimals,
            token_symbol=self.token_symbol,
            account=self.account,
            submitting=self.submitting,
        )

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for state snapshots.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception(f"State listener {listener!r} failed")

    # ------------------------------------------------------------------
    # Field edits
    # ------------------------------------------------------------------

    def edit_input(self, raw: str, side: Optional[Side] = None) -> str:
        """
        Apply a raw edit to the active field.

        Args:
            raw: Full field value after the edit
            side: Field being edited; edits to the derived field are ignored

        Returns:
            The active field's value after the edit
        """
        if side is not None and not self.controller.is_editable(side):
            logger.debug(f"Ignoring edit on read-only {Side(side).value} field")
            return self.controller.input_value

        value = self.sanitizer.sanitize(raw)
        if value != self.controller.input_value:
            self.controller.set_input(value)
            self._emit()
            self._schedule_recompute()
        return value

    def use_max(self) -> str:
        """Seed the active field with the active side's full balance."""
        side = self.controller.active_side
        value = self.sanitizer.finalize_max(self.max_amount(side))
        self.controller.set_input(value)
        self._emit()
        self._schedule_recompute()
        return value

    def toggle_direction(self) -> Direction:
        """Flip the direction, exchanging the field contents."""
        direction = self.controller.toggle()
        logger.debug(f"Direction toggled to {direction.value}")
        self._emit()
        self._schedule_recompute()
        return direction

    # ------------------------------------------------------------------
    # Quote recompute
    # ------------------------------------------------------------------

    def _schedule_recompute(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Synchronous caller; settle() picks it up
            self._recompute_deferred = True
            return

        if self._quote_task is not None and not self._quote_task.done():
            self._quote_task.cancel()
        self._recompute_deferred = False
        self._quote_task = loop.create_task(self.recompute())

    async def recompute(self) -> str:
        """
        Recompute the derived field from the latest inputs.

        Returns:
            The derived field's value afterwards
        """
        self._quote_seq += 1
        seq = self._quote_seq

        direction = self.controller.direction
        output_decimals = self.decimals_of(direction.output_side)
        plan = self.engine.plan(
            self.controller.input_value,
            self.decimals_of(direction.input_side),
            self.reserves_for(direction),
        )

        if plan.action is QuoteAction.ZERO:
            self._set_derived(ZERO_AMOUNT)
            return self.controller.derived_value
        if plan.action is QuoteAction.KEEP:
            return self.controller.derived_value

        try:
            output_amount = await self.engine.quote(
                plan.input_amount,
                plan.reserves.input_reserve,
                plan.reserves.output_reserve,
            )
        except PricingError as e:
            logger.warning(f"Quote failed, keeping previous amount: {e}")
            return self.controller.derived_value

        if seq != self._quote_seq:
            logger.debug(
                f"Discarding stale quote #{seq} (latest #{self._quote_seq})"
            )
            return self.controller.derived_value

        self._set_derived(self.engine.render(output_amount, output_decimals))
        return self.controller.derived_value

    def _set_derived(self, value: str) -> None:
        if value != self.controller.derived_value:
            self.controller.set_derived(value)
            self._emit()

    async def settle(self) -> str:
        """Wait until the latest scheduled recompute has finished."""
        if self._recompute_deferred:
            self._recompute_deferred = False
            await self.recompute()

        while self._quote_task is not None:
            task = self._quote_task
            await asyncio.wait({task})
            if task is self._quote_task:
                break
        return self.controller.derived_value

    # ------------------------------------------------------------------
    # Chain refresh and polling
    # ------------------------------------------------------------------

    async def _read(self, label: str, read: Awaitable[Any], previous: Any) -> Any:
        try:
            value = await read
        except (NetworkError, StaleDataError) as e:
            logger.warning(f"Failed to read {label}, keeping previous value: {e}")
            return previous
        if value is None:
            logger.debug(f"{label} not available yet")
            return previous
        return value

    async def refresh(self) -> None:
        """
        Re-read reserves, balances and (once) token metadata.

        Failed reads keep the previous value; unknown stays unknown. When
        refreshes overlap, only the most recently started one is applied.
        """
        self._refresh_seq += 1
        seq = self._refresh_seq
        pool = self.config.dex_address
        token = self.config.token_address

        if self._token_decimals is None or self._token_symbol is None:
            decimals, symbol = await asyncio.gather(
                self._read(
                    "token decimals",
                    self.reader.read_decimals(token),
                    self._token_decimals,
                ),
                self._read(
                    "token symbol", self.reader.read_symbol(token), self._token_symbol
                ),
            )
        else:
            decimals, symbol = self._token_decimals, self._token_symbol

        native_reserve, token_reserve = await asyncio.gather(
            self._read(
                "pool native reserve",
                self.reader.read_reserve(pool),
                self.native_reserve,
            ),
            self._read(
                "pool token reserve",
                self.reader.read_reserve(pool, token),
                self.token_reserve,
            ),
        )

        native_balance, token_balance = self.native_balance, self.token_balance
        account = self.account
        if account:
            native_balance, token_balance = await asyncio.gather(
                self._read(
                    "native balance",
                    self.reader.read_balance(account),
                    self.native_balance,
                ),
                self._read(
                    "token balance",
                    self.reader.read_balance(account, token),
                    self.token_balance,
                ),
            )
            if account != self.account:
                # Disconnected or switched while reading
                native_balance, token_balance = self.native_balance, self.token_balance

        if seq != self._refresh_seq:
            logger.debug(
                f"Discarding stale refresh #{seq} (latest #{self._refresh_seq})"
            )
            return

        quote_inputs_changed = (
            native_reserve != self.native_reserve
            or token_reserve != self.token_reserve
            or decimals != self._token_decimals
        )
        changed = quote_inputs_changed or (
            symbol != self._token_symbol
            or native_balance != self.native_balance
            or token_balance != self.token_balance
        )

        if decimals is not None and decimals != self._token_decimals:
            logger.debug(f"Token decimals: {decimals}")
        self._token_decimals = decimals
        self._token_symbol = symbol
        self.native_reserve = native_reserve
        self.token_reserve = token_reserve
        self.native_balance = native_balance
        self.token_balance = token_balance

        logger.debug(
            f"Refreshed pool {short_address(pool)}: "
            f"native_reserve={native_reserve} token_reserve={token_reserve}"
        )

        if changed:
            self._emit()
        if quote_inputs_changed:
            self._schedule_recompute()

    async def connect(self, address: str) -> None:
        """Attach an account, load its balances and start polling."""
        self.account = address
        logger.info(f"Connected account {short_address(address)}")
        self._emit()
        await self.refresh()
        self._start_polling()

    def _start_polling(self) -> None:
        if self._poll_task is not None and not self._poll_task.done():
            return
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_loop())

    async def _poll_loop(self) -> None:
        interval = self.config.refresh_interval_sec
        while True:
            await asyncio.sleep(interval)
            # Awaited in-line: the next tick cannot start before this one ends
            try:
                await self.refresh()
            except Exception:
                logger.exception("Periodic refresh failed")

    async def _stop_polling(self) -> None:
        task, self._poll_task = self._poll_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    async def disconnect(self) -> None:
        """Stop polling and forget the account's balances."""
        await self._stop_polling()
        if self.account is not None:
            logger.info(f"Disconnected account {short_address(self.account)}")
        self.account = None
        self.native_balance = None
        self.token_balance = None
        self._emit()

    async def close(self) -> None:
        """Tear the session down: polling and any in-flight quote."""
        await self._stop_polling()
        task, self._quote_task = self._quote_task, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def build_intents(self) -> List[SwapIntent]:
        """
        Intents for swapping the current input amount.

        Raises:
            PreconditionError: If a swap is in flight, nothing is entered,
                or no account is connected
        """
        if self.submitting:
            raise PreconditionError(SWAP_IN_PROGRESS_MESSAGE)
        if not self.state.has_amount:
            raise PreconditionError(ENTER_AMOUNT_MESSAGE)
        if not self.account:
            raise PreconditionError(CONNECT_WALLET_MESSAGE)

        direction = self.controller.direction
        amount = to_base_units(
            self.controller.input_value, self.decimals_of(direction.input_side)
        )
        if amount <= 0:
            raise PreconditionError(ENTER_AMOUNT_MESSAGE)

        if direction is Direction.NATIVE_TO_TOKEN:
            return [SwapIntent(IntentKind.SWAP_NATIVE_FOR_TOKEN, amount, self.account)]

        if self._token_decimals is None:
            logger.warning(
                f"Token decimals unknown, submitting with {self.token_decimals}"
            )
        return [
            SwapIntent(
                IntentKind.APPROVE,
                amount,
                self.account,
                spender=self.config.dex_address,
            ),
            SwapIntent(IntentKind.SWAP_TOKEN_FOR_NATIVE, amount, self.account),
        ]

    async def execute_swap(self) -> Optional[List[TransactionResult]]:
        """
        Submit the swap for the current input amount.

        Each intent must be confirmed before the next one is sent, so the
        token swap never races its approval. Outcomes are reported through
        the notifier; on failure the field values are left untouched.

        Returns:
            Results of the submitted intents, or None if nothing completed
        """
        try:
            intents = self.build_intents()
        except PreconditionError as e:
            self.notifier.notify(str(e), Severity.INFO)
            return None

        self.submitting = True
        self._emit()
        results: List[TransactionResult] = []
        try:
            for intent in intents:
                logger.info(f"Submitting {intent.describe()}")
                result = await self.submitter.submit(intent)
                if not result.confirmed:
                    raise TransactionError(
                        f"Transaction {result.tx_hash} was not confirmed",
                        intent=intent,
                        tx_hash=result.tx_hash,
                    )
                results.append(result)
        except (TransactionError, NetworkError) as e:
            logger.error(f"Swap failed: {e}")
            self.notifier.notify(describe_error(e), Severity.ERROR)
            return None
        finally:
            self.submitting = False
            self._emit()

        self.controller.reset_values()
        self._emit()
        self._schedule_recompute()
        self.notifier.notify(SWAP_SUCCESS_MESSAGE, Severity.SUCCESS)
        if self.account:
            await self.refresh()
        return results
