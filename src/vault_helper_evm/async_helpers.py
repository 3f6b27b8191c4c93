"""Async helper functions for vault-helper-evm SDK."""

from web3 import AsyncWeb3
from web3.contract import AsyncContract
from web3.types import BlockIdentifier

from .abi import HELPER_ABI
from .batching import DEFAULT_BATCH_SIZE, execute_batched
from .helpers import decode_structs, to_usdc
from .types import ERC20, TokenAllowance, TokenBalance, TokenPrice

__all__ = [
    "get_asset_strategies_addresses",
    "get_helper_contract",
    "get_token_allowances",
    "get_token_balances",
    "get_token_prices",
    "get_tokens",
    "to_usdc",
]


def get_helper_contract(w3: AsyncWeb3, helper_address: str) -> AsyncContract:
    """Get an async contract instance for the Helper at helper_address."""
    return w3.eth.contract(
        address=AsyncWeb3.to_checksum_address(helper_address),
        abi=HELPER_ABI,
    )


async def get_tokens(
    w3: AsyncWeb3,
    helper_address: str,
    addresses: list[str],
    block_identifier: BlockIdentifier | None = None,
) -> list[ERC20]:
    """Get ERC20 metadata for a list of token addresses."""
    contract = get_helper_contract(w3, helper_address)
    tokens = [AsyncWeb3.to_checksum_address(a) for a in addresses]
    rows = await contract.functions.tokensMetadata(tokens).call(block_identifier=block_identifier)
    return decode_structs(ERC20, rows)


async def get_token_prices(
    w3: AsyncWeb3,
    helper_address: str,
    addresses: list[str],
    block_identifier: BlockIdentifier | None = None,
) -> list[TokenPrice]:
    """Get USDC prices for a list of token addresses."""
    contract = get_helper_contract(w3, helper_address)
    tokens = [AsyncWeb3.to_checksum_address(a) for a in addresses]
    rows = await contract.functions.tokensPrices(tokens).call(block_identifier=block_identifier)
    return decode_structs(TokenPrice, rows)


async def get_token_balances(
    w3: AsyncWeb3,
    helper_address: str,
    owner: str,
    tokens: list[str],
    batch_size: int = DEFAULT_BATCH_SIZE,
    block_identifier: BlockIdentifier | None = None,
) -> list[TokenBalance]:
    """
    Get the balances of ``owner`` for a list of tokens.

    Tokens are split into batches of ``batch_size`` and all batches are
    queried concurrently. Results keep the order of ``tokens``.

    Args:
        w3: AsyncWeb3 instance
        helper_address: The Helper contract address
        owner: Account whose balances are read
        tokens: Token addresses
        batch_size: Maximum tokens per contract call
        block_identifier: Block to read at (defaults to latest)

    Returns:
        List of TokenBalance, one per token

    Raises:
        InvalidArgumentError: If batch_size is less than 1
        QueryFailure: If any batch call fails
    """
    contract = get_helper_contract(w3, helper_address)
    owner = AsyncWeb3.to_checksum_address(owner)

    async def query(batch: list[str]) -> list[TokenBalance]:
        rows = await contract.functions.tokensBalances(owner, batch).call(block_identifier=block_identifier)
        return decode_structs(TokenBalance, rows)

    return await execute_batched(
        [AsyncWeb3.to_checksum_address(t) for t in tokens],
        batch_size,
        query,
    )


async def get_token_allowances(
    w3: AsyncWeb3,
    helper_address: str,
    owner: str,
    tokens: list[str],
    spenders: list[str],
    block_identifier: BlockIdentifier | None = None,
) -> list[TokenAllowance]:
    """Get allowances granted by ``owner`` for each token and spender."""
    contract = get_helper_contract(w3, helper_address)
    rows = await contract.functions.allowances(
        AsyncWeb3.to_checksum_address(owner),
        [AsyncWeb3.to_checksum_address(t) for t in tokens],
        [AsyncWeb3.to_checksum_address(s) for s in spenders],
    ).call(block_identifier=block_identifier)
    return decode_structs(TokenAllowance, rows)


async def get_asset_strategies_addresses(
    w3: AsyncWeb3,
    helper_address: str,
    asset: str,
    block_identifier: BlockIdentifier | None = None,
) -> list[str]:
    """Get the strategy addresses attached to an asset (vault)."""
    contract = get_helper_contract(w3, helper_address)
    strategies = await contract.functions.assetStrategiesAddresses(AsyncWeb3.to_checksum_address(asset)).call(
        block_identifier=block_identifier
    )
    return list(strategies)
