"""Resolver service: validate, fetch, normalize and cache explorer lookups."""

import asyncio
import base64
import logging
import random
import time
from typing import Any

from solders.pubkey import Pubkey
from solders.signature import Signature

from app.constants import (
    ADDRESS_LENGTH_RANGE,
    LAMPORTS_PER_SOL,
    PLACEHOLDER_ALPHABET,
    PLACEHOLDER_SIGNATURE_LENGTH,
    PLACEHOLDER_TEMPLATE,
    RECENT_DEFAULT_LIMIT,
    SIGNATURE_LENGTH_RANGE,
    LookupKind,
    TransactionStatus,
)
from app.core.cache import CacheBackend
from app.core.exceptions import (
    NotFoundError,
    RemoteFetchError,
    ValidationError,
)
from app.models.blockchain import (
    AccountResult,
    LookupResult,
    NetworkInfo,
    RecentTransaction,
    TransactionDetails,
    TransactionResult,
)
from app.services.block_walk import walk_recent_blocks
from app.services.registry import NetworkRegistry

logger = logging.getLogger(__name__)


def lamports_to_sol(lamports: int) -> float:
    """Convert lamports to SOL."""
    return lamports / LAMPORTS_PER_SOL


def _in_range(value: int, bounds: tuple[int, int]) -> bool:
    low, high = bounds
    return low <= value <= high


def validate_signature(signature: str) -> Signature:
    """
    Check that a string is a plausible base58 transaction signature.

    Raises:
        ValidationError: On a length outside the signature band or a string
            that doesn't decode to a 64-byte signature.
    """
    if not signature or not _in_range(len(signature), SIGNATURE_LENGTH_RANGE):
        raise ValidationError(
            "Invalid transaction signature format. Signatures should be 88 characters long.",
            signature,
        )
    try:
        return Signature.from_string(signature)
    except ValueError:
        raise ValidationError(
            "Invalid transaction signature format. Please check the signature and try again.",
            signature,
        ) from None


def parse_address(address: str) -> Pubkey:
    """
    Parse an account address into a public key.

    Raises:
        ValidationError: On a length outside the address band or an
            unparseable public key.
    """
    if not address or not _in_range(len(address), ADDRESS_LENGTH_RANGE):
        raise ValidationError(
            "Invalid account address format. Please check the address and try again.",
            address,
        )
    try:
        return Pubkey.from_string(address)
    except ValueError:
        raise ValidationError(
            "Invalid public key format. Please check the address and try again.",
            address,
        ) from None


class ExplorerService:
    """
    Resolves transactions and accounts against the configured networks.

    One instance is created at startup and shared by every request. Cache
    operations are synchronous; every RPC call is awaited.
    """

    def __init__(
        self,
        registry: NetworkRegistry,
        cache: CacheBackend,
        block_depth: int = 10,
        max_recent: int = 20,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the explorer service.

        Args:
            registry: Connections per network.
            cache: Cache for transaction and account lookups.
            block_depth: Slots walked back for the recent transactions feed.
            max_recent: Upper bound for the recent transactions limit.
            rng: Random source for placeholder signatures.
        """
        self._registry = registry
        self._cache = cache
        self._block_depth = block_depth
        self._max_recent = max_recent
        self._rng = rng or random.Random()

    @property
    def registry(self) -> NetworkRegistry:
        return self._registry

    @property
    def cache(self) -> CacheBackend:
        return self._cache

    async def resolve_transaction(self, signature: str, network: str) -> TransactionResult:
        """
        Fetch a transaction by signature.

        Raises:
            UnsupportedNetworkError: Unknown network.
            ValidationError: Malformed signature.
            NotFoundError: No such transaction on the network.
            RemoteFetchError: RPC failure.
        """
        connection = self._registry.connection_for(network)
        validate_signature(signature)

        cache_key = self._cache.transaction_key(signature, network)
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for transaction: {signature} on {network}")
            return cached

        logger.info(f"Fetching transaction: {signature} on {network}")
        raw = await connection.get_transaction(signature)
        if not raw:
            raise NotFoundError(signature, network, "Transaction")

        result = self._normalize_transaction(
            signature, network, raw, connection.history_commitment
        )
        logger.debug(f"Transaction found in slot {result.slot}")
        self._cache.set(cache_key, result)
        return result

    def _normalize_transaction(
        self,
        signature: str,
        network: str,
        raw: dict[str, Any],
        confirmation_status: str,
    ) -> TransactionResult:
        try:
            meta = raw.get("meta") or {}
            message = raw["transaction"]["message"]
            account_keys = message.get("accountKeys") or []
            return TransactionResult(
                signature=signature,
                slot=raw["slot"],
                block_time=raw.get("blockTime"),
                confirmation_status=confirmation_status,
                fee=lamports_to_sol(meta.get("fee", 0)),
                status=(
                    TransactionStatus.FAILED if meta.get("err") is not None
                    else TransactionStatus.SUCCESS
                ),
                network=network,
                details=TransactionDetails(
                    signer=str(account_keys[0]) if account_keys else "",
                    instructions=len(message.get("instructions") or []),
                    logs=tuple(meta.get("logMessages") or ()),
                ),
            )
        except (KeyError, TypeError) as e:
            raise RemoteFetchError(
                f"Unexpected getTransaction response: {e!r}", network
            ) from e

    async def resolve_account(self, address: str, network: str) -> AccountResult:
        """
        Fetch balance and metadata of an account.

        Raises:
            UnsupportedNetworkError: Unknown network.
            ValidationError: Malformed address.
            RemoteFetchError: Either RPC read failed.
        """
        connection = self._registry.connection_for(network)
        pubkey = parse_address(address)

        cache_key = self._cache.account_key(address, network)
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for account: {address} on {network}")
            return cached

        logger.info(f"Fetching account: {address} on {network}")
        try:
            balance, info = await asyncio.gather(
                connection.get_balance(str(pubkey)),
                connection.get_account_info(str(pubkey)),
            )
        except RemoteFetchError as e:
            raise RemoteFetchError(
                f"Failed to fetch account: {e.message}", network, e.rpc_code
            ) from e

        result = AccountResult(
            address=address,
            balance=lamports_to_sol(balance),
            executable=bool(info.get("executable")) if info else False,
            owner=str(info.get("owner") or "") if info else "",
            data_size=self._data_size(info),
            network=network,
        )
        self._cache.set(cache_key, result)
        return result

    @staticmethod
    def _data_size(info: dict[str, Any] | None) -> int:
        """Account data length in bytes."""
        if not info:
            return 0
        if info.get("space") is not None:
            return int(info["space"])
        data = info.get("data")
        # base64 encoding returns [payload, "base64"]
        if isinstance(data, list) and data:
            return len(base64.b64decode(data[0]))
        return 0

    async def resolve_recent_transactions(
        self, network: str, limit: int = RECENT_DEFAULT_LIMIT
    ) -> list[RecentTransaction]:
        """
        Recent transaction signatures from the latest blocks, never cached.

        Falls back to placeholder entries when the walk finds nothing so the
        feed is never empty on quiet clusters.
        """
        connection = self._registry.connection_for(network)
        if limit < 1:
            limit = RECENT_DEFAULT_LIMIT
        limit = min(limit, self._max_recent)

        slot = await connection.get_slot()
        walk = await walk_recent_blocks(
            connection, slot, limit, depth=self._block_depth
        )
        if walk.skip_count:
            logger.debug(
                f"[{network}] Block walk skipped {walk.skip_count}/{walk.slots_visited} slots"
            )

        if walk.transactions:
            return walk.transactions[:limit]

        logger.info(
            f"[{network}] No transactions in the last {walk.slots_visited} slots, "
            "returning placeholders"
        )
        return self.placeholder_transactions(slot, network, limit)

    def placeholder_transactions(
        self, slot: int, network: str, limit: int
    ) -> list[RecentTransaction]:
        """Synthesize up to three sample entries; the last one is marked failed."""
        now = int(time.time())
        template = PLACEHOLDER_TEMPLATE[:limit]
        return [
            RecentTransaction(
                signature=self._random_signature(),
                slot=slot - slot_offset,
                block_time=now - seconds_ago,
                confirmation_status="confirmed",
                status=(
                    TransactionStatus.FAILED if i == len(template) - 1
                    else TransactionStatus.SUCCESS
                ),
                fee=fee,
                network=network,
                placeholder=True,
            )
            for i, (slot_offset, seconds_ago, fee) in enumerate(template)
        ]

    def _random_signature(self) -> str:
        return "".join(
            self._rng.choice(PLACEHOLDER_ALPHABET)
            for _ in range(PLACEHOLDER_SIGNATURE_LENGTH)
        )

    async def network_info(self, network: str) -> NetworkInfo:
        """Version, current slot and epoch position of a network."""
        connection = self._registry.connection_for(network)
        version, slot, epoch_info = await asyncio.gather(
            connection.get_version(),
            connection.get_slot(),
            connection.get_epoch_info(),
        )
        return NetworkInfo(
            version=version.get("solana-core", "unknown"),
            current_slot=slot,
            epoch=epoch_info["epoch"],
            slot_index=epoch_info["slotIndex"],
            slots_in_epoch=epoch_info["slotsInEpoch"],
            network=network,
        )

    async def node_version(self, network: str | None = None) -> str:
        """``solana-core`` version of a network (default network if omitted)."""
        connection = self._registry.connection_for(network or self._registry.default_network)
        version = await connection.get_version()
        return version.get("solana-core", "unknown")

    async def latest_blockhash(self, network: str) -> str:
        connection = self._registry.connection_for(network)
        result = await connection.get_latest_blockhash()
        return result["blockhash"]

    async def lookup(self, query: str, network: str) -> LookupResult:
        """
        Classify a free-form query and resolve it in one call.

        Signature-length queries resolve as transactions, address-length
        queries as accounts. Malformed or unknown identifiers produce a
        ``not_found`` result; network and RPC errors propagate.
        """
        self._registry.connection_for(network)
        query = query.strip()
        not_found = LookupResult(kind=LookupKind.NOT_FOUND, query=query, network=network)

        if _in_range(len(query), SIGNATURE_LENGTH_RANGE):
            try:
                transaction = await self.resolve_transaction(query, network)
            except (ValidationError, NotFoundError) as e:
                logger.info(f"Lookup {query} on {network}: {e.message}")
                return not_found
            return LookupResult(
                kind=LookupKind.TRANSACTION,
                query=query,
                network=network,
                transaction=transaction,
            )

        if _in_range(len(query), ADDRESS_LENGTH_RANGE):
            try:
                account = await self.resolve_account(query, network)
            except ValidationError as e:
                logger.info(f"Lookup {query} on {network}: {e.message}")
                return not_found
            return LookupResult(
                kind=LookupKind.ACCOUNT,
                query=query,
                network=network,
                account=account,
            )

        return not_found

    async def close(self) -> None:
        """Close all network connections and drop cached entries."""
        await self._registry.close()
        self._cache.clear()
