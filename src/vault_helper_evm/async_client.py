"""Async high-level client for vault-helper-evm SDK."""

from web3 import AsyncWeb3
from web3.types import BlockIdentifier

from .async_helpers import (
    get_asset_strategies_addresses as _get_asset_strategies_addresses,
)
from .async_helpers import (
    get_token_allowances as _get_token_allowances,
)
from .async_helpers import (
    get_token_balances as _get_token_balances,
)
from .async_helpers import (
    get_token_prices as _get_token_prices,
)
from .async_helpers import (
    get_tokens as _get_tokens,
)
from .batching import DEFAULT_BATCH_SIZE
from .constants import get_helper_address
from .types import ERC20, TokenAllowance, TokenBalance, TokenPrice


class AsyncHelperClient:
    """
    Async high-level client for the Helper lens contract.

    Example:
        >>> import asyncio
        >>> from vault_helper_evm import AsyncHelperClient
        >>>
        >>> async def main():
        ...     async with AsyncHelperClient(rpc_url="https://rpc.ftm.tools", chain_id=250) as client:
        ...         prices = await client.token_prices(["0xTokenA...", "0xTokenB..."])
        ...         for price in prices:
        ...             print(price.address, price.price_usdc)
        >>>
        >>> asyncio.run(main())
    """

    def __init__(
        self,
        rpc_url: str,
        chain_id: int = 1,
        helper_address: str | None = None,
    ) -> None:
        """
        Initialize the async Helper client.

        Args:
            rpc_url: RPC endpoint URL
            chain_id: Chain ID (1 Ethereum, 250 Fantom, 42161 Arbitrum One)
            helper_address: Custom Helper address (uses default if not provided)

        Raises:
            UnsupportedNetworkError: If chain_id has no Helper and no helper_address given
        """
        self.chain_id = chain_id
        self.helper_address = AsyncWeb3.to_checksum_address(helper_address or get_helper_address(chain_id))
        self.w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.w3.provider.disconnect()

    async def __aenter__(self) -> "AsyncHelperClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager and close session."""
        await self.close()

    async def tokens(
        self,
        addresses: list[str],
        block_identifier: BlockIdentifier | None = None,
    ) -> list[ERC20]:
        """Get ERC20 metadata for a list of token addresses."""
        return await _get_tokens(self.w3, self.helper_address, addresses, block_identifier)

    async def token_prices(
        self,
        addresses: list[str],
        block_identifier: BlockIdentifier | None = None,
    ) -> list[TokenPrice]:
        """Get USDC prices for a list of token addresses."""
        return await _get_token_prices(self.w3, self.helper_address, addresses, block_identifier)

    async def token_balances(
        self,
        address: str,
        tokens: list[str],
        batch_size: int = DEFAULT_BATCH_SIZE,
        block_identifier: BlockIdentifier | None = None,
    ) -> list[TokenBalance]:
        """
        Get balances of ``address`` for a list of tokens.

        Tokens are queried concurrently in batches of ``batch_size``.
        """
        return await _get_token_balances(
            self.w3,
            self.helper_address,
            address,
            tokens,
            batch_size=batch_size,
            block_identifier=block_identifier,
        )

    async def token_allowances(
        self,
        address: str,
        tokens: list[str],
        spenders: list[str],
        block_identifier: BlockIdentifier | None = None,
    ) -> list[TokenAllowance]:
        """Get allowances granted by ``address`` for each token and spender."""
        return await _get_token_allowances(self.w3, self.helper_address, address, tokens, spenders, block_identifier)

    async def asset_strategies_addresses(
        self,
        address: str,
        block_identifier: BlockIdentifier | None = None,
    ) -> list[str]:
        """Get the strategy addresses of an asset."""
        return await _get_asset_strategies_addresses(self.w3, self.helper_address, address, block_identifier)
