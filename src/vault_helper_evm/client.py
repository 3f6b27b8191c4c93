"""High-level client for vault-helper-evm SDK."""

import os

from web3 import Web3
from web3.types import BlockIdentifier

from ._exceptions import ConfigurationError
from .batching import DEFAULT_BATCH_SIZE
from .constants import get_helper_address
from .helpers import (
    get_asset_strategies_addresses as _get_asset_strategies_addresses,
)
from .helpers import (
    get_token_allowances as _get_token_allowances,
)
from .helpers import (
    get_token_balances as _get_token_balances,
)
from .helpers import (
    get_token_prices as _get_token_prices,
)
from .helpers import (
    get_tokens as _get_tokens,
)
from .types import ERC20, TokenAllowance, TokenBalance, TokenPrice


class HelperClient:
    """
    High-level client for the Helper lens contract.

    Example:
        >>> from vault_helper_evm import HelperClient
        >>>
        >>> client = HelperClient(rpc_url="https://eth.llamarpc.com")
        >>>
        >>> balances = client.token_balances(
        ...     "0xAccount...",
        ...     ["0xTokenA...", "0xTokenB..."],
        ... )
        >>> for balance in balances:
        ...     print(balance.address, balance.balance_usdc)
    """

    def __init__(
        self,
        rpc_url: str | None = None,
        chain_id: int = 1,
        helper_address: str | None = None,
    ) -> None:
        """
        Initialize the Helper client.

        Args:
            rpc_url: RPC endpoint URL. Falls back to HELPER_RPC_URL env var.
            chain_id: Chain ID (1 Ethereum, 250 Fantom, 42161 Arbitrum One)
            helper_address: Custom Helper address (uses default if not provided)

        Raises:
            ConfigurationError: If rpc_url not provided
            UnsupportedNetworkError: If chain_id has no Helper and no helper_address given
        """
        resolved_rpc = rpc_url or os.environ.get("HELPER_RPC_URL")
        if not resolved_rpc:
            raise ConfigurationError("rpc_url required (or set HELPER_RPC_URL)")

        self.chain_id = chain_id
        self.helper_address = Web3.to_checksum_address(helper_address or get_helper_address(chain_id))
        self.w3 = Web3(Web3.HTTPProvider(resolved_rpc))

    def tokens(
        self,
        addresses: list[str],
        block_identifier: BlockIdentifier | None = None,
    ) -> list[ERC20]:
        """Get ERC20 metadata for a list of token addresses."""
        return _get_tokens(self.w3, self.helper_address, addresses, block_identifier)

    def token_prices(
        self,
        addresses: list[str],
        block_identifier: BlockIdentifier | None = None,
    ) -> list[TokenPrice]:
        """Get USDC prices for a list of token addresses."""
        return _get_token_prices(self.w3, self.helper_address, addresses, block_identifier)

    def token_balances(
        self,
        address: str,
        tokens: list[str],
        batch_size: int = DEFAULT_BATCH_SIZE,
        block_identifier: BlockIdentifier | None = None,
    ) -> list[TokenBalance]:
        """Get balances of ``address`` for a list of tokens, batched."""
        return _get_token_balances(
            self.w3,
            self.helper_address,
            address,
            tokens,
            batch_size=batch_size,
            block_identifier=block_identifier,
        )

    def token_allowances(
        self,
        address: str,
        tokens: list[str],
        spenders: list[str],
        block_identifier: BlockIdentifier | None = None,
    ) -> list[TokenAllowance]:
        """Get allowances granted by ``address`` for each token and spender."""
        return _get_token_allowances(self.w3, self.helper_address, address, tokens, spenders, block_identifier)

    def asset_strategies_addresses(
        self,
        address: str,
        block_identifier: BlockIdentifier | None = None,
    ) -> list[str]:
        """Get the strategy addresses of an asset."""
        return _get_asset_strategies_addresses(self.w3, self.helper_address, address, block_identifier)
