"""
Block application: an externally ordered batch of transactions applied one
at a time against an `Exchange`.

Each transaction succeeds or fails on its own. A malformed transaction gets a
receipt with `error` set and leaves state untouched, the same as an economic
rejection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import structlog

from ..core.exchange import Exchange
from ..core.results import OpResult
from .operations import Operation, apply_operation, parse_operation

logger = structlog.get_logger()


@dataclass(frozen=True)
class BlockConfig:
    # DoS limit, checked before parsing anything.
    max_transactions: int = 1024

    def __post_init__(self) -> None:
        if not isinstance(self.max_transactions, int) or isinstance(self.max_transactions, bool):
            raise TypeError("max_transactions must be an int")
        if self.max_transactions <= 0:
            raise ValueError("max_transactions must be positive")


@dataclass(frozen=True)
class Receipt:
    index: int
    operation: Optional[Operation] = None
    result: Optional[OpResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None and self.result.ok

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"index": self.index}
        if self.operation is not None:
            out["method"] = self.operation.method.value
            out["sender"] = self.operation.sender
        if self.result is not None:
            out["result"] = self.result.to_response()
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class BlockResult:
    ok: bool
    receipts: List[Receipt] = field(default_factory=list)
    error: Optional[str] = None


def _clean_error(s: object, *, max_len: int = 200) -> str:
    out = " ".join(str(s).strip().split())
    return out if len(out) <= max_len else out[:max_len]


def apply_transaction(exchange: Exchange, tx: Any, *, index: int = 0) -> Receipt:
    try:
        op = parse_operation(tx)
    except ValueError as exc:
        logger.info("transaction_invalid", index=index, error=_clean_error(exc))
        return Receipt(index=index, error=f"invalid transaction: {_clean_error(exc)}")
    try:
        result = apply_operation(exchange, op)
    except ValueError as exc:
        logger.info("transaction_invalid", index=index, error=_clean_error(exc))
        return Receipt(index=index, operation=op, error=f"invalid transaction: {_clean_error(exc)}")
    return Receipt(index=index, operation=op, result=result)


def apply_block(
    exchange: Exchange,
    transactions: Sequence[Any],
    *,
    config: BlockConfig = BlockConfig(),
) -> BlockResult:
    """
    Apply `transactions` in order.

    `BlockResult.ok` is False only when the block itself is rejected (wrong
    shape or too many transactions); individual failures live in the receipts.
    """
    if not isinstance(transactions, (list, tuple)):
        return BlockResult(ok=False, error="transactions must be a list")
    if len(transactions) > config.max_transactions:
        return BlockResult(
            ok=False,
            error=f"too many transactions: {len(transactions)} > {config.max_transactions}",
        )

    receipts = [apply_transaction(exchange, tx, index=i) for i, tx in enumerate(transactions)]
    logger.debug(
        "block_applied",
        transactions=len(receipts),
        succeeded=sum(1 for r in receipts if r.ok),
    )
    return BlockResult(ok=True, receipts=receipts)
