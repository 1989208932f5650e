"""Domain models package."""

from app.models.blockchain import (
    AccountResult,
    LookupResult,
    NetworkInfo,
    RecentTransaction,
    TransactionDetails,
    TransactionResult,
)
from app.models.responses import (
    ConnectionTestResponse,
    HealthResponse,
    NetworksResponse,
    RateLimitInfo,
    RecentTransactionsResponse,
)

__all__ = [
    "AccountResult",
    "ConnectionTestResponse",
    "HealthResponse",
    "LookupResult",
    "NetworkInfo",
    "NetworksResponse",
    "RateLimitInfo",
    "RecentTransaction",
    "RecentTransactionsResponse",
    "TransactionDetails",
    "TransactionResult",
]
