"""
DEX adapter modules for different AMM types.
"""

from .v2 import (
    ConstantProductPricer,
    ContractQuotePricer,
    Web3ChainReader,
    get_amount_out,
)

__all__ = [
    "ConstantProductPricer",
    "ContractQuotePricer",
    "Web3ChainReader",
    "get_amount_out",
]
