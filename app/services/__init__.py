"""Business logic services package."""

from app.services.block_walk import BlockWalkResult, SkippedSlot, walk_recent_blocks
from app.services.explorer import ExplorerService
from app.services.rate_limit_service import RateLimitService
from app.services.registry import NetworkRegistry

__all__ = [
    "BlockWalkResult",
    "ExplorerService",
    "NetworkRegistry",
    "RateLimitService",
    "SkippedSlot",
    "walk_recent_blocks",
]
