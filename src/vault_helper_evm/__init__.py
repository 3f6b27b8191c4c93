# Suppress websockets deprecation warning from web3.py (ethereum/web3.py#3530)
# web3.py unconditionally imports LegacyWebSocketProvider even for HTTP-only usage.
# This will be fixed in web3.py v8. Remove this filter after upgrading.
import warnings

warnings.filterwarnings(
    "ignore",
    message="websockets.legacy is deprecated",
    category=DeprecationWarning,
    module=r"websockets\.legacy",
)

"""
Vault Helper EVM SDK

Read-only access to the Helper lens contract: token metadata, prices,
balances, allowances and asset strategies, with large token lists split
into concurrent batches.

Usage (async - recommended):
    import asyncio
    from vault_helper_evm import AsyncHelperClient

    async def main():
        async with AsyncHelperClient(rpc_url="https://eth.llamarpc.com") as client:
            balances = await client.token_balances("0xAccount...", tokens)

    asyncio.run(main())

Usage (sync):
    from vault_helper_evm import HelperClient

    client = HelperClient(rpc_url="https://eth.llamarpc.com")
    balances = client.token_balances("0xAccount...", tokens)

Batching your own queries:
    from vault_helper_evm import execute_batched

    results = await execute_batched(subjects, 30, query_fn)
"""

# Async helpers (for use with AsyncWeb3)
from . import async_helpers
from ._exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    QueryFailure,
    UnsupportedNetworkError,
    VaultHelperError,
)
from ._version import __version__

# ABI (for advanced usage)
from .abi import HELPER_ABI

# Async client (recommended)
from .async_client import AsyncHelperClient

# Batching
from .batching import DEFAULT_BATCH_SIZE, chunk, execute_batched, execute_batched_sync

# Sync client (for simple scripts)
from .client import HelperClient

# Constants
from .constants import (
    ETH_ADDRESS,
    HELPER_ADDRESSES,
    SUPPORTED_CHAIN_IDS,
    WETH_ADDRESS,
    ZERO_ADDRESS,
    ChainAddressResolver,
    get_helper_address,
    is_supported_chain,
)

# Sync helpers (for use with sync Web3)
from .helpers import (
    decode_struct,
    decode_structs,
    get_asset_strategies_addresses,
    get_token_allowances,
    get_token_balances,
    get_token_prices,
    get_tokens,
    to_usdc,
)

# Types
from .types import ERC20, TokenAllowance, TokenBalance, TokenPrice

__all__ = [
    # Version
    "__version__",
    # Clients
    "AsyncHelperClient",
    "HelperClient",
    # Batching
    "DEFAULT_BATCH_SIZE",
    "chunk",
    "execute_batched",
    "execute_batched_sync",
    # Types
    "ERC20",
    "TokenPrice",
    "TokenBalance",
    "TokenAllowance",
    # Constants
    "HELPER_ADDRESSES",
    "SUPPORTED_CHAIN_IDS",
    "ZERO_ADDRESS",
    "ETH_ADDRESS",
    "WETH_ADDRESS",
    "ChainAddressResolver",
    "get_helper_address",
    "is_supported_chain",
    # Helpers
    "to_usdc",
    "decode_struct",
    "decode_structs",
    "get_tokens",
    "get_token_prices",
    "get_token_balances",
    "get_token_allowances",
    "get_asset_strategies_addresses",
    # ABI
    "HELPER_ABI",
    # Async helpers module
    "async_helpers",
    # Exceptions
    "VaultHelperError",
    "ConfigurationError",
    "UnsupportedNetworkError",
    "InvalidArgumentError",
    "QueryFailure",
]
