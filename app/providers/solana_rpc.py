"""Solana JSON-RPC connection over httpx."""

import asyncio
import logging
from itertools import count
from typing import Any

import httpx

from app.constants import HISTORY_COMMITMENT
from app.core.exceptions import RemoteFetchError
from app.core.provider import RpcConnection

logger = logging.getLogger(__name__)


class SolanaRpcConnection(RpcConnection):
    """
    JSON-RPC client for a single Solana cluster.

    Features:
    - Lazily created, reused ``httpx.AsyncClient``
    - Default commitment applied to every read that accepts one
    - Retry with exponential backoff on HTTP 429 only
    - Every failure surfaces as ``RemoteFetchError``
    """

    def __init__(
        self,
        network: str,
        endpoint: str,
        commitment: str = "processed",
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_delay: float = 0.5,
        user_agent: str = "SolanaExplorer/1.0.0",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the connection.

        Args:
            network: Network name (mainnet, testnet, devnet).
            endpoint: RPC endpoint URL.
            commitment: Default commitment level for reads.
            timeout: Per-request timeout in seconds.
            max_retries: Attempts made when the node answers 429.
            retry_delay: Base delay between 429 retries.
            user_agent: ``User-Agent`` header sent with every request.
            transport: Optional httpx transport (used by tests).
        """
        self._network = network
        self._endpoint = endpoint
        self._commitment = commitment
        self._timeout = timeout
        self._max_retries = max(1, max_retries)
        self._retry_delay = retry_delay
        self._user_agent = user_agent
        self._transport = transport
        self._ids = count(1)
        self._request_count = 0
        self._client: httpx.AsyncClient | None = None

    @property
    def network(self) -> str:
        return self._network

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def commitment(self) -> str:
        return self._commitment

    @property
    def history_commitment(self) -> str:
        """Commitment for getTransaction/getBlock, which reject ``processed``."""
        return HISTORY_COMMITMENT if self._commitment == "processed" else self._commitment

    @property
    def request_count(self) -> int:
        return self._request_count

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": self._user_agent,
                },
                transport=self._transport,
            )
        return self._client

    async def _call(self, method: str, params: list[Any] | None = None) -> Any:
        """
        Perform a JSON-RPC call and return its ``result``.

        Raises:
            RemoteFetchError: On transport errors, timeouts, non-2xx responses
                or a JSON-RPC error object.
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        client = await self._get_client()
        logger.debug(f"[{self._network}] RPC {method} {params}")

        for attempt in range(self._max_retries):
            self._request_count += 1
            try:
                response = await client.post(self._endpoint, json=payload)
            except httpx.TimeoutException as e:
                logger.warning(f"[{self._network}] {method} timed out after {self._timeout}s")
                raise RemoteFetchError(
                    f"{method} timed out after {self._timeout}s", self._network
                ) from e
            except httpx.HTTPError as e:
                logger.warning(f"[{self._network}] {method} transport error: {e}")
                raise RemoteFetchError(f"{method} failed: {e}", self._network) from e

            if response.status_code == 429:
                if attempt < self._max_retries - 1:
                    wait_time = self._retry_delay * (2**attempt)
                    logger.info(
                        f"[{self._network}] Rate limited (429), retrying in {wait_time:.2f}s "
                        f"({attempt + 2}/{self._max_retries})"
                    )
                    await asyncio.sleep(wait_time)
                    continue
                raise RemoteFetchError(
                    f"{method} rate limited after {self._max_retries} attempts",
                    self._network,
                )

            if response.status_code >= 400:
                raise RemoteFetchError(
                    f"{method} failed with HTTP {response.status_code}: {response.text[:200]}",
                    self._network,
                )

            try:
                body = response.json()
            except ValueError as e:
                raise RemoteFetchError(f"{method} returned invalid JSON", self._network) from e

            error = body.get("error")
            if error:
                message = error.get("message", "unknown error") if isinstance(error, dict) else str(error)
                code = error.get("code") if isinstance(error, dict) else None
                raise RemoteFetchError(f"{method}: {message}", self._network, code)

            return body.get("result")

        raise RemoteFetchError(f"{method} failed", self._network)

    async def get_transaction(self, signature: str) -> dict[str, Any] | None:
        return await self._call(
            "getTransaction",
            [
                signature,
                {
                    "encoding": "json",
                    "commitment": self.history_commitment,
                    "maxSupportedTransactionVersion": 0,
                },
            ],
        )

    async def get_balance(self, address: str) -> int:
        result = await self._call("getBalance", [address, {"commitment": self._commitment}])
        if not result or result.get("value") is None:
            raise RemoteFetchError("getBalance returned no value", self._network)
        return int(result["value"])

    async def get_account_info(self, address: str) -> dict[str, Any] | None:
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": self._commitment}],
        )
        return result["value"] if result else None

    async def get_slot(self) -> int:
        return int(await self._call("getSlot", [{"commitment": self._commitment}]))

    async def get_block_signatures(self, slot: int) -> dict[str, Any] | None:
        return await self._call(
            "getBlock",
            [
                slot,
                {
                    "commitment": self.history_commitment,
                    "maxSupportedTransactionVersion": 0,
                    "transactionDetails": "signatures",
                    "rewards": False,
                },
            ],
        )

    async def get_version(self) -> dict[str, Any]:
        return await self._call("getVersion")

    async def get_epoch_info(self) -> dict[str, Any]:
        return await self._call("getEpochInfo", [{"commitment": self._commitment}])

    async def get_latest_blockhash(self) -> dict[str, Any]:
        result = await self._call("getLatestBlockhash", [{"commitment": self._commitment}])
        return result["value"]

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
