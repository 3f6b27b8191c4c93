"""Pytest configuration and fixtures for vault-helper-evm tests."""

import os
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from web3 import AsyncWeb3

# Well-formed addresses made of decimal digits only, so checksumming leaves them unchanged
OWNER = "0x" + "1" * 40
HELPER = "0x5AACD0D03096039aC4381CD814637e9FB7C34a6f"


def make_addresses(count: int) -> list[str]:
    """Build ``count`` distinct digit-only addresses."""
    return [f"0x{i + 1:040d}" for i in range(count)]


def balance_row(token: str, index: int) -> tuple:
    """Positional tokensBalances tuple: (address, priceUsdc, balance, balanceUsdc)."""
    return (token, 1_000_000, index, index * 1_000_000)


def make_sync_balances_contract() -> MagicMock:
    """Mock Helper contract whose tokensBalances echoes one row per token."""
    contract = MagicMock()
    calls: list[list[str]] = []

    def tokens_balances(owner, batch):
        calls.append(list(batch))
        rows = [balance_row(token, int(token[2:])) for token in batch]
        return MagicMock(call=MagicMock(return_value=rows))

    contract.functions.tokensBalances.side_effect = tokens_balances
    contract.balance_calls = calls
    return contract


def make_async_balances_contract() -> MagicMock:
    """Async flavour of make_sync_balances_contract."""
    contract = MagicMock()
    calls: list[list[str]] = []

    def tokens_balances(owner, batch):
        calls.append(list(batch))
        rows = [balance_row(token, int(token[2:])) for token in batch]
        return MagicMock(call=AsyncMock(return_value=rows))

    contract.functions.tokensBalances.side_effect = tokens_balances
    contract.balance_calls = calls
    return contract


@pytest.fixture
def owner():
    """Account whose balances are read."""
    return OWNER


@pytest.fixture
def rpc_url():
    """
    Live RPC endpoint for integration tests (Ethereum mainnet).

    Skips unless HELPER_RPC_URL is set.
    """
    url = os.environ.get("HELPER_RPC_URL")
    if not url:
        pytest.skip("HELPER_RPC_URL not set")
    return url


@asynccontextmanager
async def async_w3(rpc_url: str):
    """Context manager for AsyncWeb3 that properly closes the session."""
    w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
    try:
        yield w3
    finally:
        await w3.provider.disconnect()
