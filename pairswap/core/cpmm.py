"""
Constant Product Market Maker (CPMM) transitions for a single pair.

Each `plan_*` function takes the current `Pair` and the operation inputs and
returns the value to report plus the candidate next `Pair`. Nothing is
mutated here: the settlement engine decides whether to commit.

Economic rejections raise `DexError`; malformed inputs (non-int, negative,
above U128_MAX) raise TypeError/ValueError.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Floor Rounding
- Time Complexity: O(1) per operation
- Invariant: After each swap, reserve_a' * reserve_b' >= reserve_a * reserve_b
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Optional, Tuple

from ..kernels.cpmm_v1 import SwapExactInResult, mint_liquidity, redeem_liquidity, swap_exact_in
from ..state.balances import Amount, U128_MAX
from ..state.pairs import Pair
from ..state.positions import ProviderPosition
from .errors import DexError, ErrorCode


class SwapDirection(Enum):
    A_TO_B = "a-to-b"
    B_TO_A = "b-to-a"


def require_amount(name: str, value: object) -> Amount:
    """Validate an amount argument: an int in [0, U128_MAX]."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")
    if value > U128_MAX:
        raise ValueError(f"{name} exceeds u128: {value}")
    return value


def _require_fits(pair: Pair) -> Pair:
    if not pair.fits_u128():
        raise DexError(ErrorCode.ARITHMETIC_OVERFLOW, "post-state exceeds u128")
    return pair


def plan_add_liquidity(
    pair: Pair,
    amount_a: Amount,
    amount_b: Amount,
    min_liquidity: Amount,
) -> Tuple[Amount, Pair]:
    """
    Compute liquidity minted for a deposit.

    Returns:
        Tuple of (minted, next_pair)

    Raises:
        DexError: ZERO_AMOUNT, SLIPPAGE_EXCEEDED or ARITHMETIC_OVERFLOW
    """
    require_amount("amount_a", amount_a)
    require_amount("amount_b", amount_b)
    require_amount("min_liquidity", min_liquidity)

    if amount_a == 0 or amount_b == 0:
        raise DexError(ErrorCode.ZERO_AMOUNT)

    minted = mint_liquidity(
        reserve_a=pair.reserve_a,
        liquidity_total=pair.liquidity_total,
        amount_a=amount_a,
        amount_b=amount_b,
    )
    if minted < min_liquidity:
        raise DexError(ErrorCode.SLIPPAGE_EXCEEDED, f"minted {minted} < min_liquidity {min_liquidity}")

    next_pair = _require_fits(
        Pair(
            reserve_a=pair.reserve_a + amount_a,
            reserve_b=pair.reserve_b + amount_b,
            liquidity_total=pair.liquidity_total + minted,
        )
    )
    return minted, next_pair


def plan_swap(
    pair: Pair,
    direction: SwapDirection,
    amount_in: Amount,
    min_amount_out: Amount,
    fee_bps: int,
) -> Tuple[SwapExactInResult, Pair]:
    """
    Exact-in swap against the pair.

    The fee is taken from the input side only and is never paid out: the gross
    input lands in the reserves, which is what makes `k` grow.

    Returns:
        Tuple of (kernel result, next_pair)

    Raises:
        DexError: ZERO_AMOUNT, ZERO_LIQUIDITY, SLIPPAGE_EXCEEDED or ARITHMETIC_OVERFLOW
    """
    require_amount("amount_in", amount_in)
    require_amount("min_amount_out", min_amount_out)
    direction = SwapDirection(direction)

    if amount_in == 0:
        raise DexError(ErrorCode.ZERO_AMOUNT)
    if not pair.has_liquidity:
        raise DexError(ErrorCode.ZERO_LIQUIDITY)

    if direction is SwapDirection.A_TO_B:
        reserve_in, reserve_out = pair.reserve_a, pair.reserve_b
    else:
        reserve_in, reserve_out = pair.reserve_b, pair.reserve_a

    res = swap_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=fee_bps,
    )
    if res.amount_out == 0:
        raise DexError(ErrorCode.ZERO_AMOUNT, "amount_out rounds to zero")
    if res.amount_out < min_amount_out:
        raise DexError(
            ErrorCode.SLIPPAGE_EXCEEDED, f"amount_out {res.amount_out} < min_amount_out {min_amount_out}"
        )

    if direction is SwapDirection.A_TO_B:
        next_pair = replace(pair, reserve_a=res.new_reserve_in, reserve_b=res.new_reserve_out)
    else:
        next_pair = replace(pair, reserve_a=res.new_reserve_out, reserve_b=res.new_reserve_in)
    return res, _require_fits(next_pair)


def plan_remove_liquidity(
    pair: Pair,
    position: Optional[ProviderPosition],
    liquidity_amount: Amount,
    min_amount_a: Amount,
    min_amount_b: Amount,
) -> Tuple[Tuple[Amount, Amount], Pair]:
    """
    Proportional redemption of `liquidity_amount` units.

    Floor rounding on both sides means dust stays in the pool.

    Returns:
        Tuple of ((amount_a, amount_b), next_pair)

    Raises:
        DexError: NOT_LIQUIDITY_PROVIDER, ZERO_AMOUNT, INSUFFICIENT_BALANCE,
            NO_LIQUIDITY or SLIPPAGE_EXCEEDED
    """
    require_amount("liquidity_amount", liquidity_amount)
    require_amount("min_amount_a", min_amount_a)
    require_amount("min_amount_b", min_amount_b)

    if position is None:
        raise DexError(ErrorCode.NOT_LIQUIDITY_PROVIDER)
    if liquidity_amount == 0:
        raise DexError(ErrorCode.ZERO_AMOUNT)
    if position.liquidity_provided < liquidity_amount:
        raise DexError(
            ErrorCode.INSUFFICIENT_BALANCE,
            f"position {position.liquidity_provided} < liquidity_amount {liquidity_amount}",
        )
    if pair.liquidity_total == 0:
        raise DexError(ErrorCode.NO_LIQUIDITY)
    if liquidity_amount > pair.liquidity_total:
        # Positions always sum to liquidity_total, so this means corrupted state.
        raise DexError(ErrorCode.INSUFFICIENT_BALANCE, "liquidity_amount exceeds liquidity_total")

    amount_a, amount_b = redeem_liquidity(
        liquidity_amount=liquidity_amount,
        reserve_a=pair.reserve_a,
        reserve_b=pair.reserve_b,
        liquidity_total=pair.liquidity_total,
    )
    if amount_a < min_amount_a or amount_b < min_amount_b:
        raise DexError(
            ErrorCode.SLIPPAGE_EXCEEDED,
            f"redeemed ({amount_a}, {amount_b}) below minimums ({min_amount_a}, {min_amount_b})",
        )

    next_pair = Pair(
        reserve_a=pair.reserve_a - amount_a,
        reserve_b=pair.reserve_b - amount_b,
        liquidity_total=pair.liquidity_total - liquidity_amount,
    )
    return (amount_a, amount_b), next_pair
