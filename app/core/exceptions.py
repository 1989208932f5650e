"""Custom exceptions for the explorer API."""

from collections.abc import Iterable


class ExplorerError(Exception):
    """Base exception for all explorer errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or "EXPLORER_ERROR"
        super().__init__(self.message)


class ValidationError(ExplorerError):
    """Raised when a signature or address is malformed. Never reaches the network."""

    def __init__(self, message: str, identifier: str | None = None) -> None:
        self.identifier = identifier
        super().__init__(message, "INVALID_INPUT")


class UnsupportedNetworkError(ExplorerError):
    """Raised when an unknown network name is requested."""

    def __init__(self, network: str, supported: Iterable[str]) -> None:
        self.network = network
        self.supported = list(supported)
        super().__init__(
            f"Unsupported network: {network}. "
            f"Supported networks: {', '.join(self.supported)}",
            "UNSUPPORTED_NETWORK",
        )


class NotFoundError(ExplorerError):
    """Raised when a well-formed identifier has no matching record."""

    def __init__(self, identifier: str, network: str, kind: str = "Transaction") -> None:
        self.identifier = identifier
        self.network = network
        super().__init__(f"{kind} not found on {network}", "NOT_FOUND")


class RemoteFetchError(ExplorerError):
    """Raised when an RPC call fails, times out or returns an error object."""

    def __init__(
        self,
        message: str,
        network: str | None = None,
        rpc_code: int | None = None,
    ) -> None:
        self.network = network
        self.rpc_code = rpc_code
        super().__init__(message, "REMOTE_FETCH_ERROR")
