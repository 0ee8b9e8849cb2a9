"""
Configuration schema validation using Pydantic
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from web3 import Web3

from .constants import (
    DEFAULT_FEE_BPS,
    DEFAULT_TOKEN_DECIMALS,
    MAX_INPUT_DECIMALS,
    NATIVE_DECIMALS,
    NOTIFICATION_DURATION_SEC,
    REFRESH_INTERVAL_SEC,
)


class SwapConfig(BaseModel):
    """Configuration for one native/token pool swap session"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    rpc_url: str = Field(description="HTTP(S) RPC endpoint")
    chain_id: Optional[int] = Field(default=None, ge=1)
    token_address: str = Field(description="ERC-20 token traded against the coin")
    dex_address: str = Field(description="Pool contract holding both reserves")

    native_symbol: str = "ETH"
    token_symbol: str = Field(
        default="TOKEN", description="Shown until symbol() has been read"
    )
    native_decimals: int = Field(ge=0, le=77, default=NATIVE_DECIMALS)
    default_token_decimals: int = Field(
        ge=0,
        le=77,
        default=DEFAULT_TOKEN_DECIMALS,
        description="Used until decimals() has been read",
    )
    max_input_decimals: int = Field(ge=0, le=18, default=MAX_INPUT_DECIMALS)

    refresh_interval_sec: float = Field(gt=0, le=3600, default=REFRESH_INTERVAL_SEC)
    notification_duration_sec: float = Field(
        gt=0, le=60, default=NOTIFICATION_DURATION_SEC
    )

    pricer: Literal["contract", "local"] = "contract"
    fee_bps: int = Field(ge=0, lt=10000, default=DEFAULT_FEE_BPS)

    gas_limit: int = Field(gt=21000, le=10_000_000, default=200_000)
    max_gas_price_gwei: float = Field(gt=0, le=10_000, default=50.0)
    confirmation_timeout_sec: float = Field(gt=0, le=3600, default=120.0)
    dry_run: bool = True

    @field_validator("rpc_url")
    @classmethod
    def validate_rpc_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"rpc_url must be an http(s) URL: {v}")
        return v

    @field_validator("token_address", "dex_address")
    @classmethod
    def validate_address(cls, v):
        if not Web3.is_address(v):
            raise ValueError(f"Invalid address: {v}")
        return Web3.to_checksum_address(v)


def validate_swap_config(config_dict: Dict) -> SwapConfig:
    """
    Validate a swap configuration dictionary

    Args:
        config_dict: Dictionary representation of swap config

    Returns:
        Validated SwapConfig object

    Raises:
        pydantic.ValidationError: If configuration is invalid
    """
    return SwapConfig(**config_dict)
