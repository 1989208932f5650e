"""Best-effort walk over recent blocks collecting transaction signatures."""

import logging
from dataclasses import dataclass, field

from app.constants import NOMINAL_FEE_SOL, RECENT_SIGNATURES_PER_BLOCK
from app.core.exceptions import ExplorerError
from app.core.provider import RpcConnection
from app.models.blockchain import RecentTransaction

logger = logging.getLogger(__name__)


@dataclass
class SkippedSlot:
    """A slot whose block could not be used."""

    slot: int
    reason: str


@dataclass
class BlockWalkResult:
    """Signatures collected from recent blocks plus the slots that were skipped."""

    transactions: list[RecentTransaction] = field(default_factory=list)
    skipped: list[SkippedSlot] = field(default_factory=list)
    slots_visited: int = 0

    @property
    def skip_count(self) -> int:
        return len(self.skipped)


async def walk_recent_blocks(
    connection: RpcConnection,
    start_slot: int,
    limit: int,
    depth: int = 10,
    per_block: int = RECENT_SIGNATURES_PER_BLOCK,
) -> BlockWalkResult:
    """
    Collect up to ``limit`` signatures walking back from ``start_slot``.

    At most ``depth`` slots are tried and at most ``per_block`` signatures are
    taken from each block. A block that fails to load, is missing or is empty
    is recorded in ``skipped`` and the walk moves on; explorer errors from
    ``get_block_signatures`` never escape.
    """
    result = BlockWalkResult()

    for offset in range(depth):
        if len(result.transactions) >= limit:
            break
        slot = start_slot - offset
        if slot < 0:
            break
        result.slots_visited += 1

        try:
            block = await connection.get_block_signatures(slot)
        except ExplorerError as e:
            logger.debug(f"[{connection.network}] Skipping slot {slot}: {e.message}")
            result.skipped.append(SkippedSlot(slot, e.message))
            continue

        signatures = (block or {}).get("signatures") or []
        if not signatures:
            result.skipped.append(SkippedSlot(slot, "no transactions"))
            continue

        take = min(per_block, limit - len(result.transactions))
        for signature in signatures[:take]:
            result.transactions.append(
                RecentTransaction(
                    signature=signature,
                    slot=slot,
                    block_time=block.get("blockTime"),
                    confirmation_status="confirmed",
                    fee=NOMINAL_FEE_SOL,
                    network=connection.network,
                )
            )

    return result
