"""Tests for API endpoints."""

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.core.exceptions import RemoteFetchError
from app.main import create_app
from app.services.explorer import ExplorerService
from tests.conftest import (
    SIGNER,
    USDC_MINT,
    FakeConnection,
    make_raw_transaction,
    make_signature,
)


@pytest.fixture
def client(explorer: ExplorerService) -> Iterator[TestClient]:
    """Provide a test client backed by fake connections."""
    app = create_app(settings=Settings(), explorer=explorer)
    with TestClient(app) as test_client:
        yield test_client


class TestRootEndpoint:

    def test_api_info(self, client: TestClient) -> None:
        response = client.get("/api")

        assert response.status_code == 200
        data = response.json()
        assert data["health"] == "/api/health"
        assert "version" in data

    def test_security_headers(self, client: TestClient) -> None:
        response = client.get("/api/networks")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert response.headers["X-Response-Time"].endswith("ms")
        assert response.headers["X-RateLimit-Limit"] == "100"


class TestTransactionEndpoint:

    def test_success(self, client: TestClient, connections: dict[str, FakeConnection]) -> None:
        signature = make_signature(21)
        connections["testnet"].transactions[signature] = make_raw_transaction(
            fee=5000, err={"InstructionError": [0, "Custom"]}, logs=["log 1"]
        )

        response = client.get(f"/api/transaction/{signature}")

        assert response.status_code == 200
        assert response.json() == {
            "signature": signature,
            "slot": 250_000_000,
            "blockTime": 1_700_000_000,
            "confirmationStatus": "confirmed",
            "fee": 0.000005,
            "status": "failed",
            "network": "testnet",
            "details": {"signer": SIGNER, "instructions": 2, "logs": ["log 1"]},
        }

    def test_network_param(self, client: TestClient, connections: dict[str, FakeConnection]) -> None:
        signature = make_signature(22)
        connections["devnet"].transactions[signature] = make_raw_transaction()

        response = client.get(f"/api/transaction/{signature}", params={"network": "devnet"})

        assert response.status_code == 200
        assert response.json()["network"] == "devnet"

    def test_invalid_format(self, client: TestClient, connections: dict[str, FakeConnection]) -> None:
        response = client.get("/api/transaction/tooshort")

        assert response.status_code == 400
        assert "Invalid transaction signature format" in response.json()["detail"]
        assert connections["testnet"].calls["get_transaction"] == 0

    def test_not_found(self, client: TestClient) -> None:
        response = client.get(f"/api/transaction/{make_signature(23)}", params={"network": "mainnet"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Transaction not found on mainnet"

    def test_unsupported_network(self, client: TestClient) -> None:
        response = client.get(f"/api/transaction/{make_signature(24)}", params={"network": "localnet"})

        assert response.status_code == 400
        assert "Supported networks: mainnet, testnet, devnet" in response.json()["detail"]

    def test_fetch_error(self, client: TestClient, connections: dict[str, FakeConnection]) -> None:
        connections["testnet"].errors["get_transaction"] = RemoteFetchError("node down", "testnet")

        response = client.get(f"/api/transaction/{make_signature(25)}")

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch transaction: node down"


class TestAccountEndpoint:

    def test_success(self, client: TestClient, connections: dict[str, FakeConnection]) -> None:
        connections["devnet"].balances[USDC_MINT] = 2_500_000_000

        response = client.get(f"/api/account/{USDC_MINT}", params={"network": "devnet"})

        assert response.status_code == 200
        assert response.json() == {
            "address": USDC_MINT,
            "balance": 2.5,
            "executable": False,
            "owner": "",
            "dataSize": 0,
            "network": "devnet",
        }

    def test_invalid_public_key(self, client: TestClient) -> None:
        response = client.get(f"/api/account/{'0' * 40}")

        assert response.status_code == 400
        assert "Invalid public key format" in response.json()["detail"]

    def test_fetch_error(self, client: TestClient, connections: dict[str, FakeConnection]) -> None:
        connections["testnet"].errors["get_account_info"] = RemoteFetchError("boom", "testnet")

        response = client.get(f"/api/account/{USDC_MINT}")

        assert response.status_code == 500


class TestSearchEndpoint:

    def test_transaction_keeps_null_block_time(
        self, client: TestClient, connections: dict[str, FakeConnection]
    ) -> None:
        signature = make_signature(26)
        connections["testnet"].transactions[signature] = make_raw_transaction(block_time=None)

        searched = client.get(f"/api/search/{signature}").json()
        direct = client.get(f"/api/transaction/{signature}").json()

        assert searched["kind"] == "transaction"
        assert "account" not in searched
        assert "blockTime" in searched["transaction"]
        assert searched["transaction"]["blockTime"] is None
        assert searched["transaction"] == direct

    def test_account(self, client: TestClient) -> None:
        response = client.get(f"/api/search/{USDC_MINT}")

        assert response.status_code == 200
        data = response.json()
        assert data["kind"] == "account"
        assert data["account"]["address"] == USDC_MINT
        assert "transaction" not in data

    def test_not_found(self, client: TestClient) -> None:
        response = client.get("/api/search/nothing-here")

        assert response.status_code == 200
        assert response.json() == {
            "kind": "not_found",
            "query": "nothing-here",
            "network": "testnet",
        }


class TestNetworkEndpoints:

    def test_networks(self, client: TestClient) -> None:
        response = client.get("/api/networks")

        assert response.status_code == 200
        assert response.json() == {
            "networks": ["mainnet", "testnet", "devnet"],
            "default": "testnet",
        }

    def test_network_info(self, client: TestClient) -> None:
        response = client.get("/api/network-info", params={"network": "mainnet"})

        assert response.status_code == 200
        assert response.json() == {
            "version": "1.18.22",
            "currentSlot": 300_000_000,
            "epoch": 694,
            "slotIndex": 192_000,
            "slotsInEpoch": 432_000,
            "network": "mainnet",
        }

    def test_network_info_error(self, client: TestClient, connections: dict[str, FakeConnection]) -> None:
        connections["testnet"].errors["get_epoch_info"] = RemoteFetchError("x", "testnet")

        response = client.get("/api/network-info")

        assert response.status_code == 500

    def test_connection_test(self, client: TestClient) -> None:
        response = client.get("/api/test-connection", params={"network": "devnet"})

        assert response.status_code == 200
        assert response.json()["status"] == "connected"
        assert response.json()["network"] == "devnet"


class TestRecentTransactionsEndpoint:

    def test_real_blocks(self, client: TestClient, connections: dict[str, FakeConnection]) -> None:
        conn = connections["testnet"]
        conn.blocks[conn.slot] = {"blockTime": 10, "signatures": ["sigA", "sigB"]}

        response = client.get("/api/recent-transactions", params={"limit": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert data["network"] == "testnet"
        assert data["transactions"][0] == {
            "signature": "sigA",
            "slot": conn.slot,
            "blockTime": 10,
            "confirmationStatus": "confirmed",
            "err": None,
            "status": "success",
            "fee": 0.000005,
            "network": "testnet",
        }

    def test_placeholders(self, client: TestClient) -> None:
        response = client.get("/api/recent-transactions", params={"network": "devnet"})

        data = response.json()
        assert data["count"] == 3
        assert [t["status"] for t in data["transactions"]] == ["success", "success", "failed"]
        assert all(len(t["signature"]) == 88 for t in data["transactions"])

    def test_slot_error(self, client: TestClient, connections: dict[str, FakeConnection]) -> None:
        connections["testnet"].errors["get_slot"] = RemoteFetchError("x", "testnet")

        response = client.get("/api/recent-transactions")

        assert response.status_code == 500


class TestHealthEndpoint:

    def test_healthy(self, client: TestClient) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "network": "testnet",
            "version": "1.18.22",
        }

    def test_unhealthy(self, client: TestClient, connections: dict[str, FakeConnection]) -> None:
        connections["testnet"].errors["get_version"] = RemoteFetchError("getVersion timed out", "testnet")

        response = client.get("/api/health")

        assert response.status_code == 500
        assert response.json() == {
            "status": "unhealthy",
            "network": "testnet",
            "error": "getVersion timed out",
        }


class TestRateLimit:

    def test_rejects_after_budget(self, explorer: ExplorerService) -> None:
        app = create_app(settings=Settings(rate_limit_requests=2), explorer=explorer)

        with TestClient(app) as client:
            assert client.get("/api/networks").status_code == 200
            assert client.get("/api/networks").status_code == 200
            response = client.get("/api/networks")

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) > 0
