"""Type definitions for vault-helper-evm SDK."""

from pydantic import BaseModel, Field


class ERC20(BaseModel):
    """Token metadata as returned by the Helper."""

    address: str
    name: str
    symbol: str
    decimals: int = Field(ge=0, le=255)

    model_config = {"frozen": True}


class TokenPrice(BaseModel):
    """
    Price of a token in USDC.

    price_usdc carries 6 decimals (1_000_000 == $1).
    """

    address: str
    price_usdc: int = Field(ge=0)

    model_config = {"frozen": True}


class TokenBalance(BaseModel):
    """Balance of a token held by an account, with its USDC valuation."""

    address: str
    price_usdc: int = Field(ge=0)
    balance: int = Field(ge=0)
    balance_usdc: int = Field(ge=0)

    model_config = {"frozen": True}


class TokenAllowance(BaseModel):
    """Amount of ``token`` that ``spender`` may transfer on behalf of ``owner``."""

    owner: str
    spender: str
    amount: int = Field(ge=0)
    token: str

    model_config = {"frozen": True}
