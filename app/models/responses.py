"""API response models."""

from typing import Literal

from pydantic import BaseModel, Field

from app.models.blockchain import RecentTransaction


class RecentTransactionsResponse(BaseModel):
    """Response model for the recent transactions feed."""

    transactions: list[RecentTransaction]
    network: str
    count: int


class NetworksResponse(BaseModel):
    """Configured networks and the default one."""

    networks: list[str]
    default: str


class HealthResponse(BaseModel):
    """Health check response model."""

    status: Literal["healthy", "unhealthy"]
    network: str
    version: str | None = None
    error: str | None = None


class ConnectionTestResponse(BaseModel):
    """Latest blockhash proving the RPC connection works."""

    status: Literal["connected"] = "connected"
    blockhash: str
    network: str


class RateLimitInfo(BaseModel):
    """Rate limit status for a client."""

    requests_made: int
    requests_limit: int
    window_seconds: int
    retry_after: int = Field(default=0, description="Seconds until the window resets")

    @property
    def requests_remaining(self) -> int:
        return max(0, self.requests_limit - self.requests_made)
