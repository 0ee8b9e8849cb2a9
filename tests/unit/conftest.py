"""
Shared in-memory collaborators for the swap session tests.
"""

import asyncio

import pytest

from dex.adapters.v2 import get_amount_out
from pair_swap.config_loader import build_config
from pair_swap.exceptions import NetworkError
from pair_swap.execution_types import TransactionResult
from pair_swap.notifications import NotificationCenter
from pair_swap.session import SwapSession
from pair_swap.types import Balance
from pair_swap.units import from_base_units

TOKEN_ADDRESS = "0x1111111111111111111111111111111111111111"
DEX_ADDRESS = "0x2222222222222222222222222222222222222222"
ACCOUNT = "0x3333333333333333333333333333333333333333"

ONE = 10**18


class FakeChainReader:
    """
    Chain reads backed by attributes; set fail to simulate an outage.

    gates maps the index of a native reserve read to an asyncio.Event the
    read waits on; the value is taken before waiting.
    """

    def __init__(
        self,
        native_reserve=None,
        token_reserve=None,
        native_balance=None,
        token_balance=None,
        decimals=18,
        symbol="TKN",
    ):
        self.native_reserve = native_reserve
        self.token_reserve = token_reserve
        self.native_balance = native_balance
        self.token_balance = token_balance
        self.decimals = decimals
        self.symbol = symbol
        self.fail = False
        self.reserve_reads = 0
        self.gates = {}

    def _check(self):
        if self.fail:
            raise NetworkError("rpc unavailable", endpoint="http://fake")

    async def read_balance(self, address, token=None):
        self._check()
        raw = self.token_balance if token else self.native_balance
        if raw is None:
            return None
        decimals = self.decimals if token else 18
        return Balance(raw=raw, display=from_base_units(raw, decimals))

    async def read_reserve(self, pool_address, token=None):
        self._check()
        if token is None:
            index = self.reserve_reads
            self.reserve_reads += 1
            value = self.native_reserve
            gate = self.gates.get(index)
            if gate is not None:
                await gate.wait()
            return value
        return self.token_reserve

    async def read_decimals(self, token):
        self._check()
        return self.decimals

    async def read_symbol(self, token):
        self._check()
        return self.symbol


class FakePricer:
    """
    Fee-less constant-product pricer that records its calls.

    gates maps a call index to an asyncio.Event the call waits on.
    """

    def __init__(self, error=None):
        self.error = error
        self.calls = []
        self.gates = {}

    async def price_swap(self, input_amount, input_reserve, output_reserve):
        index = len(self.calls)
        self.calls.append((input_amount, input_reserve, output_reserve))
        gate = self.gates.get(index)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error
        return get_amount_out(input_amount, input_reserve, output_reserve, fee_bps=0)


class FakeSubmitter:
    """Records intents; error is raised for intents of kind fail_on (or all)."""

    def __init__(self):
        self.submitted = []
        self.error = None
        self.fail_on = None
        self.confirmed = True

    async def submit(self, intent):
        self.submitted.append(intent)
        await asyncio.sleep(0)
        if self.error is not None and self.fail_on in (None, intent.kind):
            raise self.error
        return TransactionResult(
            intent=intent,
            tx_hash="0x" + format(len(self.submitted), "064x"),
            confirmed=self.confirmed,
            block_number=100 + len(self.submitted),
        )


def make_config(**overrides):
    config = {
        "rpc_url": "http://localhost:8545",
        "token_address": TOKEN_ADDRESS,
        "dex_address": DEX_ADDRESS,
        "refresh_interval_sec": 0.01,
    }
    config.update(overrides)
    return build_config(config)


@pytest.fixture
def reader():
    return FakeChainReader(
        native_reserve=10 * ONE,
        token_reserve=20 * ONE,
        native_balance=5 * ONE,
        token_balance=7 * ONE,
    )


@pytest.fixture
def pricer():
    return FakePricer()


@pytest.fixture
def submitter():
    return FakeSubmitter()


@pytest.fixture
def notifier():
    return NotificationCenter()


@pytest.fixture
def session(reader, pricer, submitter, notifier):
    return SwapSession(make_config(), reader, pricer, submitter, notifier)


@pytest.fixture
def swap_config_factory():
    return make_config
