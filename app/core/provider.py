"""Abstract RPC connection interface."""

from abc import ABC, abstractmethod
from typing import Any

from app.constants import HISTORY_COMMITMENT


class RpcConnection(ABC):
    """
    One connection to one Solana cluster.

    Methods return the JSON-RPC ``result`` payloads (plain dicts/ints) so the
    resolver can normalize them without knowing the transport.
    """

    @property
    @abstractmethod
    def network(self) -> str:
        """Network name this connection serves."""
        ...

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """RPC endpoint URL."""
        ...

    @property
    def history_commitment(self) -> str:
        """Commitment used for getTransaction and getBlock."""
        return HISTORY_COMMITMENT

    @abstractmethod
    async def get_transaction(self, signature: str) -> dict[str, Any] | None:
        """
        Fetch a confirmed transaction.

        Args:
            signature: Base58 transaction signature.

        Returns:
            The ``getTransaction`` result, or None if the cluster has no record.

        Raises:
            RemoteFetchError: If the call fails or times out.
        """
        ...

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """Return the account balance in lamports."""
        ...

    @abstractmethod
    async def get_account_info(self, address: str) -> dict[str, Any] | None:
        """Return the account metadata, or None for an account that doesn't exist."""
        ...

    @abstractmethod
    async def get_slot(self) -> int:
        """Return the current slot."""
        ...

    @abstractmethod
    async def get_block_signatures(self, slot: int) -> dict[str, Any] | None:
        """
        Load the transaction signatures of a block.

        Returns:
            ``{"blockTime": int | None, "signatures": [str, ...]}`` or None
            for a skipped slot.
        """
        ...

    @abstractmethod
    async def get_version(self) -> dict[str, Any]:
        """Return the node version (``{"solana-core": ...}``)."""
        ...

    @abstractmethod
    async def get_epoch_info(self) -> dict[str, Any]:
        """Return the current epoch info."""
        ...

    @abstractmethod
    async def get_latest_blockhash(self) -> dict[str, Any]:
        """Return ``{"blockhash": ..., "lastValidBlockHeight": ...}``."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the connection and release resources."""
        ...
