"""
pairswap: two-asset constant-product exchange engine.

Public API:
- `Exchange(config)` operation + query interface
- `EngineConfig`, `load_engine_config(path)`
- `apply_block(exchange, transactions)` ordered transaction application
"""

from .config import EngineConfig, ProtocolFeeConfig, load_engine_config
from .core import DexError, ErrorCode, Exchange, InMemoryLedger, OpResult, SwapDirection
from .integration.engine import BlockResult, Receipt, apply_block
from .integration.snapshot import exchange_from_snapshot, snapshot_from_exchange

__all__ = [
    "EngineConfig",
    "ProtocolFeeConfig",
    "load_engine_config",
    "DexError",
    "ErrorCode",
    "Exchange",
    "InMemoryLedger",
    "OpResult",
    "SwapDirection",
    "BlockResult",
    "Receipt",
    "apply_block",
    "exchange_from_snapshot",
    "snapshot_from_exchange",
]
