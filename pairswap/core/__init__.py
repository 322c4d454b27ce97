"""
Core exchange logic
"""

from .cpmm import SwapDirection, plan_add_liquidity, plan_remove_liquidity, plan_swap
from .custody import InMemoryLedger, TokenLedger, Transfer
from .errors import DexError, ErrorCode, InsufficientFundsError, InvariantViolation
from .exchange import Exchange
from .registry import PairRegistry
from .results import OpResult
from .settlement import SettlementEngine

__all__ = [
    "SwapDirection",
    "plan_add_liquidity",
    "plan_remove_liquidity",
    "plan_swap",
    "InMemoryLedger",
    "TokenLedger",
    "Transfer",
    "DexError",
    "ErrorCode",
    "InsufficientFundsError",
    "InvariantViolation",
    "Exchange",
    "PairRegistry",
    "OpResult",
    "SettlementEngine",
]
