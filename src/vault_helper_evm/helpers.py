"""Helper functions for vault-helper-evm SDK."""

from collections.abc import Iterable, Sequence
from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Any, TypeVar

from pydantic import BaseModel
from web3 import Web3
from web3.contract import Contract
from web3.types import BlockIdentifier

from ._exceptions import InvalidArgumentError
from .abi import HELPER_ABI
from .batching import DEFAULT_BATCH_SIZE, execute_batched_sync
from .types import ERC20, TokenAllowance, TokenBalance, TokenPrice

M = TypeVar("M", bound=BaseModel)

USDC_DECIMALS = 6


def to_usdc(usd: int | float | str | Decimal) -> int:
    """
    Convert a USD amount to USDC units (6 decimals), rounding down.

    Example:
        >>> to_usdc("12.3456789")
        12345678

    Raises:
        InvalidArgumentError: If usd is not a finite number or numeric string
    """
    if isinstance(usd, bool) or not isinstance(usd, (int, float, str, Decimal)):
        raise InvalidArgumentError(f"USD amount must be numeric, got {type(usd).__name__}")

    try:
        value = Decimal(str(usd))
    except InvalidOperation:
        raise InvalidArgumentError(f"USD amount must be numeric, got {usd!r}") from None

    if not value.is_finite():
        raise InvalidArgumentError(f"USD amount must be finite, got {usd!r}")

    return int((value * 10**USDC_DECIMALS).to_integral_value(rounding=ROUND_FLOOR))


def decode_struct(model: type[M], row: Sequence[Any]) -> M:
    """
    Build a model from a positional tuple returned by a contract call.

    Tuple elements are matched to the model's fields in declaration order.
    """
    fields = list(model.model_fields)
    if len(row) != len(fields):
        raise InvalidArgumentError(f"{model.__name__} expects {len(fields)} values, got {len(row)}")
    return model(**dict(zip(fields, row)))


def decode_structs(model: type[M], rows: Iterable[Sequence[Any]]) -> list[M]:
    """Decode a list of positional tuples into models."""
    return [decode_struct(model, row) for row in rows]


def get_helper_contract(w3: Web3, helper_address: str) -> Contract:
    """Get a contract instance for the Helper at helper_address."""
    return w3.eth.contract(
        address=Web3.to_checksum_address(helper_address),
        abi=HELPER_ABI,
    )


def get_tokens(
    w3: Web3,
    helper_address: str,
    addresses: list[str],
    block_identifier: BlockIdentifier | None = None,
) -> list[ERC20]:
    """Get ERC20 metadata for a list of token addresses."""
    contract = get_helper_contract(w3, helper_address)
    tokens = [Web3.to_checksum_address(a) for a in addresses]
    rows = contract.functions.tokensMetadata(tokens).call(block_identifier=block_identifier)
    return decode_structs(ERC20, rows)


def get_token_prices(
    w3: Web3,
    helper_address: str,
    addresses: list[str],
    block_identifier: BlockIdentifier | None = None,
) -> list[TokenPrice]:
    """Get USDC prices for a list of token addresses."""
    contract = get_helper_contract(w3, helper_address)
    tokens = [Web3.to_checksum_address(a) for a in addresses]
    rows = contract.functions.tokensPrices(tokens).call(block_identifier=block_identifier)
    return decode_structs(TokenPrice, rows)


def get_token_balances(
    w3: Web3,
    helper_address: str,
    owner: str,
    tokens: list[str],
    batch_size: int = DEFAULT_BATCH_SIZE,
    block_identifier: BlockIdentifier | None = None,
) -> list[TokenBalance]:
    """
    Get the balances of ``owner`` for a list of tokens.

    Tokens are queried in batches of ``batch_size`` on a thread pool and the
    results are returned in the same order as ``tokens``.

    Args:
        w3: Web3 instance
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
    owner = Web3.to_checksum_address(owner)

    def query(batch: list[str]) -> list[TokenBalance]:
        rows = contract.functions.tokensBalances(owner, batch).call(block_identifier=block_identifier)
        return decode_structs(TokenBalance, rows)

    return execute_batched_sync(
        [Web3.to_checksum_address(t) for t in tokens],
        batch_size,
        query,
    )


def get_token_allowances(
    w3: Web3,
    helper_address: str,
    owner: str,
    tokens: list[str],
    spenders: list[str],
    block_identifier: BlockIdentifier | None = None,
) -> list[TokenAllowance]:
    """Get allowances granted by ``owner`` for each token and spender."""
    contract = get_helper_contract(w3, helper_address)
    rows = contract.functions.allowances(
        Web3.to_checksum_address(owner),
        [Web3.to_checksum_address(t) for t in tokens],
        [Web3.to_checksum_address(s) for s in spenders],
    ).call(block_identifier=block_identifier)
    return decode_structs(TokenAllowance, rows)


def get_asset_strategies_addresses(
    w3: Web3,
    helper_address: str,
    asset: str,
    block_identifier: BlockIdentifier | None = None,
) -> list[str]:
    """Get the strategy addresses attached to an asset (vault)."""
    contract = get_helper_contract(w3, helper_address)
    return list(
        contract.functions.assetStrategiesAddresses(Web3.to_checksum_address(asset)).call(
            block_identifier=block_identifier
        )
    )
