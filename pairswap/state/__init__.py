"""
State containers for the pairswap exchange
"""

from .balances import BalanceTable, U128_MAX
from .pairs import Pair, PairKey, PairView
from .positions import ProviderPosition, ProviderTable

__all__ = [
    "BalanceTable",
    "U128_MAX",
    "Pair",
    "PairKey",
    "PairView",
    "ProviderPosition",
    "ProviderTable",
]
