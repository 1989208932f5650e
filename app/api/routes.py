"""API route definitions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_explorer_service, get_network
from app.constants import RECENT_DEFAULT_LIMIT
from app.core.exceptions import (
    ExplorerError,
    NotFoundError,
    RemoteFetchError,
    UnsupportedNetworkError,
    ValidationError,
)
from app.models.blockchain import (
    AccountResult,
    LookupResult,
    NetworkInfo,
    TransactionResult,
)
from app.models.responses import (
    ConnectionTestResponse,
    HealthResponse,
    NetworksResponse,
    RecentTransactionsResponse,
)
from app.services.explorer import ExplorerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["explorer"])

Explorer = Annotated[ExplorerService, Depends(get_explorer_service)]
NetworkName = Annotated[str, Depends(get_network)]


def _to_http_error(e: ExplorerError, action: str) -> HTTPException:
    """Map an explorer error onto the matching HTTP status."""
    if isinstance(e, (ValidationError, UnsupportedNetworkError)):
        logger.warning(f"Rejected request to {action}: {e.message}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    if isinstance(e, NotFoundError):
        logger.info(e.message)
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, RemoteFetchError):
        logger.error(f"Error trying to {action}: {e.message}")
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}: {e.message}",
        )
    logger.error(f"Explorer error trying to {action}: {e.message}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message
    )


def _unexpected(e: Exception, action: str) -> HTTPException:
    logger.exception(f"Unexpected error trying to {action}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    )


@router.get(
    "/transaction/{signature}",
    response_model=TransactionResult,
    summary="Get Transaction",
    description="Look up a transaction by its base58 signature.",
)
async def get_transaction(
    signature: str,
    explorer: Explorer,
    network: NetworkName,
) -> TransactionResult:
    """
    Fetch a transaction.

    - **signature**: Base58 transaction signature (usually 88 characters)
    - **network**: mainnet, testnet or devnet (default: testnet)
    """
    try:
        return await explorer.resolve_transaction(signature, network)
    except ExplorerError as e:
        raise _to_http_error(e, "fetch transaction")
    except Exception as e:
        raise _unexpected(e, "fetch transaction")


@router.get(
    "/account/{address}",
    response_model=AccountResult,
    summary="Get Account",
    description="Look up the balance and metadata of an account.",
)
async def get_account(
    address: str,
    explorer: Explorer,
    network: NetworkName,
) -> AccountResult:
    """
    Fetch an account.

    - **address**: Base58 public key (32-44 characters)
    - **network**: mainnet, testnet or devnet (default: testnet)
    """
    try:
        return await explorer.resolve_account(address, network)
    except ExplorerError as e:
        raise _to_http_error(e, "fetch account")
    except Exception as e:
        raise _unexpected(e, "fetch account")


@router.get(
    "/search/{query}",
    response_model=LookupResult,
    summary="Search",
    description="Resolve a query as a transaction or an account in one call.",
)
async def search(
    query: str,
    explorer: Explorer,
    network: NetworkName,
) -> LookupResult:
    """Classify a signature or address and return the matching record."""
    try:
        return await explorer.lookup(query, network)
    except ExplorerError as e:
        raise _to_http_error(e, "search")
    except Exception as e:
        raise _unexpected(e, "search")


@router.get(
    "/network-info",
    response_model=NetworkInfo,
    summary="Network Info",
    description="Node version, current slot and epoch of a network.",
)
async def network_info(explorer: Explorer, network: NetworkName) -> NetworkInfo:
    """Get network version, slot and epoch information."""
    try:
        return await explorer.network_info(network)
    except ExplorerError as e:
        raise _to_http_error(e, "fetch network info")
    except Exception as e:
        raise _unexpected(e, "fetch network info")


@router.get(
    "/recent-transactions",
    response_model=RecentTransactionsResponse,
    summary="Recent Transactions",
    description="Signatures from the most recent blocks of a network.",
)
async def recent_transactions(
    explorer: Explorer,
    network: NetworkName,
    limit: Annotated[
        int, Query(description="Number of transactions (capped at 20)")
    ] = RECENT_DEFAULT_LIMIT,
) -> RecentTransactionsResponse:
    """List recent transactions, falling back to sample data on quiet networks."""
    try:
        transactions = await explorer.resolve_recent_transactions(network, limit)
    except ExplorerError as e:
        raise _to_http_error(e, "fetch recent transactions")
    except Exception as e:
        raise _unexpected(e, "fetch recent transactions")

    return RecentTransactionsResponse(
        transactions=transactions,
        network=network,
        count=len(transactions),
    )


@router.get(
    "/networks",
    response_model=NetworksResponse,
    summary="List Networks",
    description="Get the list of supported networks and the default one.",
)
async def list_networks(explorer: Explorer) -> NetworksResponse:
    """List all supported networks."""
    return NetworksResponse(
        networks=explorer.registry.names,
        default=explorer.registry.default_network,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    summary="Health Check",
    description="Check connectivity to the default network.",
    responses={500: {"model": HealthResponse}},
)
async def health_check(explorer: Explorer) -> HealthResponse | JSONResponse:
    """Check API health by asking the default network for its version."""
    network = explorer.registry.default_network
    try:
        version = await explorer.node_version(network)
    except ExplorerError as e:
        logger.error(f"Health check failed: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=HealthResponse(
                status="unhealthy", network=network, error=e.message
            ).model_dump(exclude_none=True),
        )

    return HealthResponse(status="healthy", network=network, version=version)


@router.get(
    "/test-connection",
    response_model=ConnectionTestResponse,
    summary="Connection Test",
    description="Fetch the latest blockhash to prove the RPC connection works.",
)
async def connection_test(
    explorer: Explorer, network: NetworkName
) -> ConnectionTestResponse:
    """Verify the backend can reach a network."""
    try:
        blockhash = await explorer.latest_blockhash(network)
    except ExplorerError as e:
        raise _to_http_error(e, "reach network")
    except Exception as e:
        raise _unexpected(e, "reach network")

    return ConnectionTestResponse(blockhash=blockhash, network=network)
