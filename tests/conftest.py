"""Pytest configuration and fixtures."""

import json
import os
from decimal import Decimal
from typing import Callable
from unittest.mock import AsyncMock

import base58
import httpx
import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ.pop("EMBEDDED_WALLET_SECRET", None)

from goldium.chain.rpc import SolanaRPC
from goldium.config import Settings
from goldium.services.balance_resolver import BalanceResolver
from goldium.signing.embedded import EmbeddedSigningAgent

TREASURY = base58.b58encode(bytes([7]) * 32).decode()
BLOCKHASH = base58.b58encode(bytes([9]) * 32).decode()
SEED_HEX = "01" * 32


def make_address(n: int) -> str:
    """Deterministic valid base58 address."""
    return base58.b58encode(bytes([n]) * 32).decode()


def rpc_from_handler(handler: Callable[[str, list], object], url: str = "https://rpc.test") -> SolanaRPC:
    """Build a SolanaRPC backed by an in-process JSON-RPC handler.

    The handler receives (method, params) and returns either a result
    value, an httpx.Response, or raises an httpx error.
    """

    def transport_handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        outcome = handler(payload["method"], payload["params"])
        if isinstance(outcome, httpx.Response):
            return outcome
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": outcome})

    client = httpx.AsyncClient(transport=httpx.MockTransport(transport_handler))
    return SolanaRPC(url, client=client)


def balance_result(lamports: int) -> dict:
    return {"context": {"slot": 1}, "value": lamports}


@pytest.fixture
def settings() -> Settings:
    """Settings with fast confirmation polling."""
    return Settings(
        _env_file=None,
        treasury_address=TREASURY,
        sol_to_gold_rate=Decimal("21486.893"),
        gold_to_sol_rate=Decimal("0.0000465"),
        fee_buffer_sol=Decimal("0.001"),
        default_sol_balance=Decimal("0.032454"),
        confirm_timeout_seconds=0.05,
        confirm_poll_interval_seconds=0.01,
        max_swap_history=20,
    )


@pytest.fixture
def mock_resolver() -> AsyncMock:
    """Resolver stub; set .resolve.return_value per test."""
    return AsyncMock(spec=BalanceResolver)


@pytest.fixture
def embedded_agent(mock_resolver) -> EmbeddedSigningAgent:
    """Embedded agent with a fixed key."""
    return EmbeddedSigningAgent(mock_resolver, secret=SEED_HEX)


@pytest.fixture
def mock_rpc() -> AsyncMock:
    """RPC stub that confirms every broadcast."""
    rpc = AsyncMock(spec=SolanaRPC)
    rpc.get_latest_blockhash.return_value = BLOCKHASH
    rpc.send_transaction.return_value = "5igSig"
    rpc.confirm_transaction.return_value = True
    return rpc
