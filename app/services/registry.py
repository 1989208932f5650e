"""Registry of one RPC connection per supported network."""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from app.config import Settings
from app.constants import DEFAULT_NETWORK
from app.core.exceptions import UnsupportedNetworkError
from app.core.provider import RpcConnection
from app.providers.solana_rpc import SolanaRpcConnection

logger = logging.getLogger(__name__)


class NetworkRegistry:
    """Immutable network name -> connection mapping, built once at startup."""

    def __init__(
        self,
        connections: Mapping[str, RpcConnection],
        default_network: str = DEFAULT_NETWORK,
    ) -> None:
        if not connections:
            raise ValueError("NetworkRegistry needs at least one connection")
        if default_network not in connections:
            raise ValueError(f"Default network {default_network} is not configured")
        self._connections = MappingProxyType(dict(connections))
        self._default_network = default_network

    @classmethod
    def from_settings(cls, settings: Settings) -> "NetworkRegistry":
        """Create one Solana RPC connection per configured endpoint."""
        connections = {
            name: SolanaRpcConnection(
                network=name,
                endpoint=url,
                commitment=settings.rpc_commitment,
                timeout=settings.rpc_timeout_seconds,
                max_retries=settings.rpc_max_retries,
                retry_delay=settings.rpc_retry_delay,
                user_agent=settings.rpc_user_agent,
            )
            for name, url in settings.network_endpoints().items()
        }
        for name, conn in connections.items():
            logger.info(f"Network {name}: {conn.endpoint} (commitment={settings.rpc_commitment})")
        return cls(connections, default_network=settings.default_network)

    @property
    def names(self) -> list[str]:
        return list(self._connections)

    @property
    def default_network(self) -> str:
        return self._default_network

    def endpoints(self) -> dict[str, str]:
        return {name: conn.endpoint for name, conn in self._connections.items()}

    def connection_for(self, network: str) -> RpcConnection:
        """
        Look up the connection for a network.

        Raises:
            UnsupportedNetworkError: If the network isn't configured.
        """
        try:
            return self._connections[network]
        except KeyError:
            raise UnsupportedNetworkError(network, self.names) from None

    def __contains__(self, network: object) -> bool:
        return network in self._connections

    async def close(self) -> None:
        """Close every connection."""
        for conn in self._connections.values():
            await conn.close()
