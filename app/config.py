"""Application configuration and settings."""

import os
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.constants import DEFAULT_NETWORK, NETWORK_NAMES


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Solana Explorer API"
    app_version: str = "1.0.0"
    debug: bool = False
    port: int = Field(default=5001, description="Server port ($PORT wins)")

    # RPC endpoints
    mainnet_rpc_url: str = "https://api.mainnet-beta.solana.com"
    testnet_rpc_url: str = "https://api.testnet.solana.com"
    devnet_rpc_url: str = "https://api.devnet.solana.com"
    default_network: str = DEFAULT_NETWORK

    # RPC client
    rpc_commitment: str = "processed"
    rpc_timeout_seconds: float = 30.0
    rpc_max_retries: int = 3
    rpc_retry_delay: float = 0.5
    rpc_user_agent: str = "SolanaExplorer/1.0.0"

    # Cache
    cache_ttl_seconds: float = 30.0
    cache_max_entries: int = 100

    # Rate limiting (per client IP)
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60

    # Recent transactions
    recent_block_depth: int = 10
    recent_max_limit: int = 20

    # CORS Configuration
    allowed_origins: str = Field(
        default="",
        description="Comma-separated list of allowed origins for CORS"
    )

    @field_validator("default_network")
    @classmethod
    def check_default_network(cls, v: str) -> str:
        """Default network must be one of the configured networks."""
        if v not in NETWORK_NAMES:
            raise ValueError(
                f"default_network must be one of {', '.join(NETWORK_NAMES)}"
            )
        return v

    @field_validator("rpc_commitment")
    @classmethod
    def check_commitment(cls, v: str) -> str:
        if v not in ("processed", "confirmed", "finalized"):
            raise ValueError("rpc_commitment must be processed, confirmed or finalized")
        return v

    @field_validator("port")
    @classmethod
    def set_port(cls, v: int) -> int:
        """Use PORT from the environment if available."""
        return int(os.getenv("PORT", v))

    def network_endpoints(self) -> dict[str, str]:
        """Ordered mapping of network name to RPC endpoint URL."""
        return {
            "mainnet": self.mainnet_rpc_url,
            "testnet": self.testnet_rpc_url,
            "devnet": self.devnet_rpc_url,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
