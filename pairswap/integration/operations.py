"""
Transaction parsing for the exchange.

A transaction is a JSON-style object:

    {"method": "swap-a-for-b", "sender": "user1",
     "args": {"token-a": "...", "token-b": "...", "amount-in": 1000, "min-amount-out": 900}}

`parse_operation` turns it into a typed `Operation`; `apply_operation`
dispatches it to an `Exchange`.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from ..core.exchange import Exchange
from ..core.results import OpResult
from ..state.balances import U128_MAX


class Method(Enum):
    CREATE_PAIR = "create-pair"
    ADD_LIQUIDITY = "add-liquidity"
    SWAP_A_FOR_B = "swap-a-for-b"
    SWAP_B_FOR_A = "swap-b-for-a"
    REMOVE_LIQUIDITY = "remove-liquidity"
    SET_PROTOCOL_FEE_PERCENT = "set-protocol-fee-percent"


# Argument names per method, in call order. Types: "token" or "uint".
_SIGNATURES: Dict[Method, Tuple[Tuple[str, str], ...]] = {
    Method.CREATE_PAIR: (("token-a", "token"), ("token-b", "token")),
    Method.ADD_LIQUIDITY: (
        ("token-a", "token"),
        ("token-b", "token"),
        ("amount-a", "uint"),
        ("amount-b", "uint"),
        ("min-liquidity", "uint"),
    ),
    Method.SWAP_A_FOR_B: (
        ("token-a", "token"),
        ("token-b", "token"),
        ("amount-in", "uint"),
        ("min-amount-out", "uint"),
    ),
    Method.SWAP_B_FOR_A: (
        ("token-a", "token"),
        ("token-b", "token"),
        ("amount-in", "uint"),
        ("min-amount-out", "uint"),
    ),
    Method.REMOVE_LIQUIDITY: (
        ("token-a", "token"),
        ("token-b", "token"),
        ("liquidity-amount", "uint"),
        ("min-amount-a", "uint"),
        ("min-amount-b", "uint"),
    ),
    Method.SET_PROTOCOL_FEE_PERCENT: (("new-fee", "uint"),),
}


def _require_str(value: Any, *, name: str, non_empty: bool = True, max_len: int = 256) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    if non_empty and not value:
        raise ValueError(f"{name} must be non-empty")
    if max_len > 0 and len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_uint(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    if value > U128_MAX:
        raise ValueError(f"{name} exceeds u128")
    return int(value)


@dataclass(frozen=True)
class Operation:
    method: Method
    sender: str
    args: Tuple[Any, ...]

    def to_dict(self) -> Dict[str, Any]:
        names = [name for name, _ in _SIGNATURES[self.method]]
        return {
            "method": self.method.value,
            "sender": self.sender,
            "args": dict(zip(names, self.args)),
        }


def parse_operation(tx: Any) -> Operation:
    """
    Parse a single transaction object.

    Raises:
        ValueError: If the structure, method or any argument is invalid
    """
    if not isinstance(tx, Mapping):
        raise ValueError(f"transaction must be an object, got {type(tx)}")
    for field in ("method", "sender", "args"):
        if field not in tx:
            raise ValueError(f"Missing required field: {field}")

    method_raw = _require_str(tx.get("method"), name="method", max_len=64)
    try:
        method = Method(method_raw)
    except ValueError as e:
        raise ValueError(f"Invalid method: {method_raw}") from e

    sender = _require_str(tx.get("sender"), name="sender")

    raw_args = tx.get("args")
    if not isinstance(raw_args, Mapping):
        raise ValueError("args must be an object")
    signature = _SIGNATURES[method]
    expected = {name for name, _ in signature}
    unknown = sorted(k for k in raw_args if k not in expected)
    if unknown:
        raise ValueError(f"unexpected args for {method.value}: {', '.join(map(str, unknown))}")

    args = []
    for name, kind in signature:
        if name not in raw_args:
            raise ValueError(f"Missing required arg for {method.value}: {name}")
        if kind == "token":
            args.append(_require_str(raw_args[name], name=name))
        else:
            args.append(_require_uint(raw_args[name], name=name))
    return Operation(method=method, sender=sender, args=tuple(args))


def apply_operation(exchange: Exchange, op: Operation) -> OpResult:
    """Dispatch a parsed operation to the matching `Exchange` method."""
    if op.method is Method.CREATE_PAIR:
        return exchange.create_pair(*op.args)
    if op.method is Method.ADD_LIQUIDITY:
        return exchange.add_liquidity(*op.args, sender=op.sender)
    if op.method is Method.SWAP_A_FOR_B:
        return exchange.swap_a_for_b(*op.args, sender=op.sender)
    if op.method is Method.SWAP_B_FOR_A:
        return exchange.swap_b_for_a(*op.args, sender=op.sender)
    if op.method is Method.REMOVE_LIQUIDITY:
        return exchange.remove_liquidity(*op.args, sender=op.sender)
    if op.method is Method.SET_PROTOCOL_FEE_PERCENT:
        return exchange.set_protocol_fee_percent(*op.args, sender=op.sender)
    raise ValueError(f"unsupported method: {op.method}")
