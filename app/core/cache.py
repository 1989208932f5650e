"""Abstract cache backend interface."""

from abc import ABC, abstractmethod
from typing import Any


class CacheBackend(ABC):
    """Abstract base class for synchronous in-process caches."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """
        Retrieve a value from the cache.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached value if present and fresh, None otherwise.
        """
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """
        Store a value in the cache, replacing any previous entry.

        Args:
            key: The cache key.
            value: The value to store.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key. Returns False if it didn't exist."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""
        ...

    @abstractmethod
    def __len__(self) -> int:
        ...

    def _make_key(self, namespace: str, *parts: str) -> str:
        """
        Create a namespaced cache key.

        Args:
            namespace: The key namespace.
            parts: Additional key parts.

        Returns:
            A formatted cache key.
        """
        return f"{namespace}:{':'.join(parts)}"

    def transaction_key(self, signature: str, network: str) -> str:
        """Generate cache key for a transaction lookup."""
        return self._make_key("tx", signature, network)

    def account_key(self, address: str, network: str) -> str:
        """Generate cache key for an account lookup."""
        return self._make_key("acc", address, network)
