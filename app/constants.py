"""Application constants and network definitions."""

from enum import Enum


class Network(str, Enum):
    """Supported Solana clusters."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
    DEVNET = "devnet"


NETWORK_NAMES: tuple[str, ...] = tuple(n.value for n in Network)
DEFAULT_NETWORK = Network.TESTNET.value

# Lowest commitment accepted by getTransaction and getBlock
HISTORY_COMMITMENT = "confirmed"

# 1 SOL = 10^9 lamports
LAMPORTS_PER_SOL = 1_000_000_000

# Base58 signatures are usually 87-88 characters, addresses 32-44
SIGNATURE_LENGTH_RANGE: tuple[int, int] = (80, 90)
ADDRESS_LENGTH_RANGE: tuple[int, int] = (32, 44)

# Recent transactions
RECENT_DEFAULT_LIMIT = 10
RECENT_SIGNATURES_PER_BLOCK = 2
NOMINAL_FEE_SOL = 0.000005

# Placeholder signatures use a base58-like alphabet (no 0, O, I, l, i, o)
PLACEHOLDER_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz123456789"
PLACEHOLDER_SIGNATURE_LENGTH = 88
# (slot offset, seconds ago, fee in SOL)
PLACEHOLDER_TEMPLATE: tuple[tuple[int, int, float], ...] = (
    (1, 30, 0.000005),
    (2, 60, 0.000008),
    (3, 90, 0.000005),
)


class TransactionStatus(str, Enum):
    """Execution outcome of a transaction."""

    SUCCESS = "success"
    FAILED = "failed"


class LookupKind(str, Enum):
    """What a free-form search query resolved to."""

    TRANSACTION = "transaction"
    ACCOUNT = "account"
    NOT_FOUND = "not_found"
