"""Test configuration and fixtures."""

import random
from collections import Counter
from typing import Any

import pytest
from solders.signature import Signature

from app.cache.memory import MemoryCacheBackend
from app.core.provider import RpcConnection
from app.services.explorer import ExplorerService
from app.services.registry import NetworkRegistry

USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
SYSTEM_PROGRAM = "11111111111111111111111111111111"
TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
SIGNER = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


def make_signature(seed: int) -> str:
    """A valid base58 signature (87 characters for a non-zero leading byte)."""
    return str(Signature(bytes([seed] * 64)))


def make_raw_transaction(
    fee: int = 5000,
    err: Any = None,
    slot: int = 250_000_000,
    block_time: int | None = 1_700_000_000,
    logs: list[str] | None = None,
) -> dict[str, Any]:
    """A getTransaction result in the shape the RPC returns with json encoding."""
    return {
        "slot": slot,
        "blockTime": block_time,
        "meta": {
            "err": err,
            "fee": fee,
            "logMessages": logs if logs is not None else ["Program log: hello"],
            "preBalances": [10_000_000, 0],
            "postBalances": [9_995_000, 0],
        },
        "transaction": {
            "signatures": ["placeholder"],
            "message": {
                "accountKeys": [SIGNER, SYSTEM_PROGRAM],
                "instructions": [
                    {"programIdIndex": 1, "accounts": [0], "data": "3Bxs4h24hBtQy9rw"},
                    {"programIdIndex": 1, "accounts": [0], "data": "3Bxs4h24hBtQy9rw"},
                ],
                "recentBlockhash": "EkSnNWid2cvwEVnVx9aBqawnmiCNiDgp3gUdkDPTKN1N",
            },
        },
        "version": 0,
    }


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeConnection(RpcConnection):
    """In-memory RPC connection counting every call."""

    def __init__(self, network: str = "testnet") -> None:
        self._network = network
        self.calls: Counter[str] = Counter()
        self.errors: dict[str, Exception] = {}
        self.transactions: dict[str, dict[str, Any]] = {}
        self.balances: dict[str, int] = {}
        self.accounts: dict[str, dict[str, Any]] = {}
        self.blocks: dict[int, dict[str, Any] | Exception] = {}
        self.slot = 300_000_000
        self.version = {"solana-core": "1.18.22", "feature-set": 3241752014}
        self.epoch_info = {
            "absoluteSlot": self.slot,
            "blockHeight": 280_000_000,
            "epoch": 694,
            "slotIndex": 192_000,
            "slotsInEpoch": 432_000,
            "transactionCount": None,
        }
        self.blockhash = "EkSnNWid2cvwEVnVx9aBqawnmiCNiDgp3gUdkDPTKN1N"
        self.closed = False

    @property
    def network(self) -> str:
        return self._network

    @property
    def endpoint(self) -> str:
        return f"https://fake.{self._network}.solana"

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())

    def _record(self, method: str) -> None:
        self.calls[method] += 1
        if method in self.errors:
            raise self.errors[method]

    async def get_transaction(self, signature: str) -> dict[str, Any] | None:
        self._record("get_transaction")
        return self.transactions.get(signature)

    async def get_balance(self, address: str) -> int:
        self._record("get_balance")
        return self.balances.get(address, 0)

    async def get_account_info(self, address: str) -> dict[str, Any] | None:
        self._record("get_account_info")
        return self.accounts.get(address)

    async def get_slot(self) -> int:
        self._record("get_slot")
        return self.slot

    async def get_block_signatures(self, slot: int) -> dict[str, Any] | None:
        self._record("get_block_signatures")
        block = self.blocks.get(slot)
        if isinstance(block, Exception):
            raise block
        return block

    async def get_version(self) -> dict[str, Any]:
        self._record("get_version")
        return self.version

    async def get_epoch_info(self) -> dict[str, Any]:
        self._record("get_epoch_info")
        return self.epoch_info

    async def get_latest_blockhash(self) -> dict[str, Any]:
        self._record("get_latest_blockhash")
        return {"blockhash": self.blockhash, "lastValidBlockHeight": 280_000_150}

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCacheBackend:
    """Provide a memory cache with the production TTL and capacity."""
    return MemoryCacheBackend(ttl=30.0, max_entries=100, clock=clock)


@pytest.fixture
def connections() -> dict[str, FakeConnection]:
    return {name: FakeConnection(name) for name in ("mainnet", "testnet", "devnet")}


@pytest.fixture
def registry(connections: dict[str, FakeConnection]) -> NetworkRegistry:
    return NetworkRegistry(connections, default_network="testnet")


@pytest.fixture
def explorer(registry: NetworkRegistry, cache: MemoryCacheBackend) -> ExplorerService:
    """Provide an explorer service backed by fake connections."""
    return ExplorerService(registry, cache, rng=random.Random(42))
