"""Core module for base interfaces and abstractions."""

from app.core.cache import CacheBackend
from app.core.exceptions import (
    ExplorerError,
    NotFoundError,
    RemoteFetchError,
    UnsupportedNetworkError,
    ValidationError,
)
from app.core.provider import RpcConnection

__all__ = [
    "CacheBackend",
    "ExplorerError",
    "NotFoundError",
    "RemoteFetchError",
    "RpcConnection",
    "UnsupportedNetworkError",
    "ValidationError",
]
