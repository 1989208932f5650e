"""Normalized Solana lookup results."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from app.constants import LookupKind, TransactionStatus


class ExplorerModel(BaseModel):
    """Immutable model serialized with camelCase field names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class TransactionDetails(ExplorerModel):
    """Signer, instruction count and program logs of a transaction."""

    signer: str
    instructions: int
    logs: tuple[str, ...] = ()


class TransactionResult(ExplorerModel):
    """A transaction as returned by ``/api/transaction/{signature}``."""

    signature: str
    slot: int
    block_time: int | None = Field(default=None, alias="blockTime")
    confirmation_status: str = Field(alias="confirmationStatus")
    fee: float = Field(description="Fee in SOL")
    status: TransactionStatus
    network: str
    details: TransactionDetails


class AccountResult(ExplorerModel):
    """An account as returned by ``/api/account/{address}``."""

    address: str
    balance: float = Field(description="Balance in SOL")
    executable: bool = False
    owner: str = ""
    data_size: int = Field(default=0, alias="dataSize")
    network: str


class RecentTransaction(ExplorerModel):
    """Entry of the recent transactions feed."""

    signature: str
    slot: int
    block_time: int | None = Field(default=None, alias="blockTime")
    confirmation_status: str = Field(default="confirmed", alias="confirmationStatus")
    err: str | None = None
    status: TransactionStatus = TransactionStatus.SUCCESS
    fee: float
    network: str
    placeholder: bool = Field(
        default=False,
        exclude=True,
        description="Synthesized when no real transactions were found",
    )


class NetworkInfo(ExplorerModel):
    """Cluster version, slot and epoch position."""

    version: str
    current_slot: int = Field(alias="currentSlot")
    epoch: int
    slot_index: int = Field(alias="slotIndex")
    slots_in_epoch: int = Field(alias="slotsInEpoch")
    network: str


class LookupResult(ExplorerModel):
    """Tagged result of classifying and resolving a free-form query."""

    kind: LookupKind
    query: str
    network: str
    transaction: TransactionResult | None = None
    account: AccountResult | None = None

    @model_serializer(mode="wrap")
    def drop_empty_payloads(self, handler) -> dict[str, Any]:
        # Only the unused top-level slot is dropped; nested nulls stay
        data = handler(self)
        for key in ("transaction", "account"):
            if data.get(key) is None:
                data.pop(key, None)
        return data
