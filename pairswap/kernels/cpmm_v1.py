"""
CPMM kernel (v1 semantics).

- Fee is charged on the *gross* input amount using floor rounding.
- Pricing uses `net_in = gross_in - fee` (Uniswap-v2 style).
- The whole gross input, fee included, is added to the input reserve, so the
  fee stays in the pool and `k` never decreases.
- Liquidity is minted at the geometric mean for the first deposit and
  proportionally to side A afterwards; redemption is proportional on both sides.

All arithmetic is on Python ints, so `reserve * amount` products never wrap.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple


BPS_DENOM = 10_000


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _require_nonneg(name: str, value: int) -> None:
    _require_int(name, value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


@dataclass(frozen=True)
class SwapExactInResult:
    amount_out: int
    fee: int
    net_in: int
    gross_in: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def isqrt_floor(n: int) -> int:
    """floor(sqrt(n)) for a non-negative int, exact for any size."""
    _require_nonneg("n", n)
    return math.isqrt(n)


def compute_fee(*, gross_in: int, fee_bps: int) -> int:
    """
    Compute `fee = floor(gross_in * fee_bps / 10_000)`.
    """
    _require_nonneg("gross_in", gross_in)
    _require_int("fee_bps", fee_bps)
    if not (0 <= fee_bps <= BPS_DENOM):
        raise ValueError(f"fee_bps must be in [0, {BPS_DENOM}]")
    return (gross_in * fee_bps) // BPS_DENOM


def quote_out(*, reserve_in: int, reserve_out: int, net_in: int) -> int:
    """amount_out = floor(reserve_out * net_in / (reserve_in + net_in))."""
    for name, v in (("reserve_in", reserve_in), ("reserve_out", reserve_out), ("net_in", net_in)):
        _require_nonneg(name, v)
    denominator = reserve_in + net_in
    if denominator == 0:
        return 0
    return (reserve_out * net_in) // denominator


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
) -> SwapExactInResult:
    """
    Exact-in swap quote + post-state.

    Does not judge the economic outcome: a zero `amount_out` is returned as-is
    and left to the caller to reject. Raises ValueError on malformed inputs.
    """
    for name, v in (
        ("reserve_in", reserve_in),
        ("reserve_out", reserve_out),
        ("amount_in", amount_in),
    ):
        _require_nonneg(name, v)

    if reserve_in == 0 or reserve_out == 0:
        raise ValueError("cannot swap against an empty reserve")
    if amount_in == 0:
        raise ValueError("amount_in must be positive")

    k_before = reserve_in * reserve_out

    fee = compute_fee(gross_in=amount_in, fee_bps=fee_bps)
    net_in = amount_in - fee

    amount_out = quote_out(reserve_in=reserve_in, reserve_out=reserve_out, net_in=net_in)
    if amount_out > reserve_out:
        raise ValueError("amount_out exceeds reserve_out")

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out

    return SwapExactInResult(
        amount_out=amount_out,
        fee=fee,
        net_in=net_in,
        gross_in=amount_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=new_reserve_in * new_reserve_out,
    )


def mint_liquidity(
    *,
    reserve_a: int,
    liquidity_total: int,
    amount_a: int,
    amount_b: int,
) -> int:
    """
    Liquidity units minted for a deposit of (amount_a, amount_b).

        liquidity_total == 0:  floor(sqrt(amount_a * amount_b))
        reserve_a == 0:        amount_a
        otherwise:             floor(amount_a * liquidity_total / reserve_a)

    Only side A sets the ratio; asymmetric deposits are not rebalanced.
    """
    for name, v in (
        ("reserve_a", reserve_a),
        ("liquidity_total", liquidity_total),
        ("amount_a", amount_a),
        ("amount_b", amount_b),
    ):
        _require_nonneg(name, v)

    if liquidity_total == 0:
        return isqrt_floor(amount_a * amount_b)
    if reserve_a == 0:
        return amount_a
    return (amount_a * liquidity_total) // reserve_a


def redeem_liquidity(
    *,
    liquidity_amount: int,
    reserve_a: int,
    reserve_b: int,
    liquidity_total: int,
) -> Tuple[int, int]:
    """
    Proportional redemption, rounding down on both sides:

        amount_a = floor(liquidity_amount * reserve_a / liquidity_total)
        amount_b = floor(liquidity_amount * reserve_b / liquidity_total)
    """
    for name, v in (
        ("liquidity_amount", liquidity_amount),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("liquidity_total", liquidity_total),
    ):
        _require_nonneg(name, v)
    if liquidity_total == 0:
        raise ValueError("liquidity_total must be positive")
    if liquidity_amount > liquidity_total:
        raise ValueError(f"Cannot redeem more than supply: {liquidity_amount} > {liquidity_total}")

    amount_a = (liquidity_amount * reserve_a) // liquidity_total
    amount_b = (liquidity_amount * reserve_b) // liquidity_total
    return amount_a, amount_b
