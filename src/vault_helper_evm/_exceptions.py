"""Custom exceptions for vault-helper-evm SDK."""


class VaultHelperError(Exception):
    """Base exception for vault-helper-evm."""


class ConfigurationError(VaultHelperError):
    """Invalid configuration (missing RPC URL, etc.)."""


class UnsupportedNetworkError(VaultHelperError):
    """No Helper contract is configured for the chain ID."""

    def __init__(self, chain_id: int) -> None:
        super().__init__(f"Chain {chain_id} is not supported")
        self.chain_id = chain_id


class InvalidArgumentError(VaultHelperError, ValueError):
    """An argument failed validation (batch size, USD amount, etc.)."""


class QueryFailure(VaultHelperError):
    """
    A batched query failed.

    The original exception, if any, is available as ``__cause__``.
    """

    def __init__(self, batch_index: int, start: int, stop: int, reason: str) -> None:
        super().__init__(f"Batch {batch_index} (subjects[{start}:{stop}]) failed: {reason}")
        self.batch_index = batch_index
        self.start = start
        self.stop = stop
        self.reason = reason
