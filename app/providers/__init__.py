"""RPC connection implementations package."""

from app.providers.solana_rpc import SolanaRpcConnection

__all__ = [
    "SolanaRpcConnection",
]
