"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Query, Request

from app.cache.memory import MemoryCacheBackend
from app.config import Settings
from app.services.explorer import ExplorerService
from app.services.registry import NetworkRegistry


def build_explorer_service(settings: Settings) -> ExplorerService:
    """Build the explorer service and its network connections from settings."""
    return ExplorerService(
        registry=NetworkRegistry.from_settings(settings),
        cache=MemoryCacheBackend(
            ttl=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        ),
        block_depth=settings.recent_block_depth,
        max_recent=settings.recent_max_limit,
    )


def get_explorer_service(request: Request) -> ExplorerService:
    """Explorer service created by the application lifespan."""
    return request.app.state.explorer


def get_network(
    request: Request,
    network: Annotated[
        str | None, Query(description="Network name: mainnet, testnet or devnet")
    ] = None,
) -> str:
    """Requested network, or the registry default when omitted."""
    if network:
        return network
    return request.app.state.explorer.registry.default_network
