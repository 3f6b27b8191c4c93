"""
Contract ABI for the Helper lens contract.

Only the read functions used by the SDK are included.
"""

_TOKEN_COMPONENTS = [
    {"name": "id", "type": "address"},
    {"name": "name", "type": "string"},
    {"name": "symbol", "type": "string"},
    {"name": "decimals", "type": "uint8"},
]

_TOKEN_PRICE_COMPONENTS = [
    {"name": "address", "type": "address"},
    {"name": "priceUsdc", "type": "uint256"},
]

_TOKEN_BALANCE_COMPONENTS = [
    {"name": "address", "type": "address"},
    {"name": "priceUsdc", "type": "uint256"},
    {"name": "balance", "type": "uint256"},
    {"name": "balanceUsdc", "type": "uint256"},
]

_ALLOWANCE_COMPONENTS = [
    {"name": "owner", "type": "address"},
    {"name": "spender", "type": "address"},
    {"name": "amount", "type": "uint256"},
    {"name": "token", "type": "address"},
]

# Helper ABI
HELPER_ABI = [
    {
        "type": "function",
        "name": "tokensMetadata",
        "inputs": [{"name": "tokensAddresses", "type": "address[]"}],
        "outputs": [{"type": "tuple[]", "components": _TOKEN_COMPONENTS}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "tokensPrices",
        "inputs": [{"name": "tokensAddresses", "type": "address[]"}],
        "outputs": [{"type": "tuple[]", "components": _TOKEN_PRICE_COMPONENTS}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "tokensBalances",
        "inputs": [
            {"name": "accountAddress", "type": "address"},
            {"name": "tokensAddresses", "type": "address[]"},
        ],
        "outputs": [{"type": "tuple[]", "components": _TOKEN_BALANCE_COMPONENTS}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "allowances",
        "inputs": [
            {"name": "ownerAddress", "type": "address"},
            {"name": "tokensAddresses", "type": "address[]"},
            {"name": "spenderAddresses", "type": "address[]"},
        ],
        "outputs": [{"type": "tuple[]", "components": _ALLOWANCE_COMPONENTS}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "assetStrategiesAddresses",
        "inputs": [{"name": "assetAddress", "type": "address"}],
        "outputs": [{"type": "address[]"}],
        "stateMutability": "view",
    },
]
