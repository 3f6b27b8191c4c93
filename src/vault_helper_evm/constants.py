"""Contract addresses and chain constants for vault-helper-evm SDK."""

from collections.abc import Mapping
from types import MappingProxyType

from ._exceptions import UnsupportedNetworkError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
# Sentinel used by aggregators for native ETH
ETH_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
WETH_ADDRESS = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"

# Deployed Helper contract addresses per chain.
HELPER_ADDRESSES: Mapping[int, str] = MappingProxyType(
    {
        1: "0x5AACD0D03096039aC4381CD814637e9FB7C34a6f",  # Ethereum mainnet
        1337: "0x5AACD0D03096039aC4381CD814637e9FB7C34a6f",  # Local mainnet fork
        250: "0xE55Dd55b3355c261A048B3f310706C7478657d74",  # Fantom Opera
        42161: "0xE55Dd55b3355c261A048B3f310706C7478657d74",  # Arbitrum One
    }
)

# Supported chain IDs
SUPPORTED_CHAIN_IDS: list[int] = list(HELPER_ADDRESSES)


class ChainAddressResolver:
    """
    Read-only lookup from chain ID to a deployed contract address.

    The table is copied on construction and never mutated afterwards,
    so one resolver can be shared freely between threads and tasks.

    Example:
        >>> resolver = ChainAddressResolver({1: "0xA...", 250: "0xB..."})
        >>> resolver.resolve(250)
        '0xB...'
        >>> resolver.resolve(9999)
        Traceback (most recent call last):
        ...
        UnsupportedNetworkError: Chain 9999 is not supported
    """

    def __init__(self, addresses: Mapping[int, str]) -> None:
        self._addresses: Mapping[int, str] = MappingProxyType(dict(addresses))

    def resolve(self, chain_id: int) -> str:
        """Get the address configured for a chain ID."""
        address = self._addresses.get(chain_id)
        if not address:
            raise UnsupportedNetworkError(chain_id)
        return address

    def is_supported(self, chain_id: int) -> bool:
        """Check if a chain has a configured address."""
        return chain_id in self._addresses

    @property
    def supported_chain_ids(self) -> list[int]:
        return list(self._addresses)


_helper_resolver = ChainAddressResolver(HELPER_ADDRESSES)


def get_helper_address(chain_id: int) -> str:
    """Get the Helper contract address for a given chain ID."""
    return _helper_resolver.resolve(chain_id)


def is_supported_chain(chain_id: int) -> bool:
    """Check if a chain is supported."""
    return _helper_resolver.is_supported(chain_id)
