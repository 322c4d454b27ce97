"""Invariant checkers for pair state.

Each `inv_*` function returns True when the invariant holds. `check_pair()`
returns the violated invariant ids for one pair (empty = all pass);
`check_accounting()` compares a pair against the sum of its provider positions.
"""

from __future__ import annotations

from typing import Callable

from ..state.balances import Amount, U128_MAX
from ..state.pairs import Pair


def inv_reserves_nonneg(p: Pair) -> bool:
    return p.reserve_a >= 0 and p.reserve_b >= 0


def inv_liquidity_nonneg(p: Pair) -> bool:
    return p.liquidity_total >= 0


def inv_fits_u128(p: Pair) -> bool:
    return max(p.reserve_a, p.reserve_b, p.liquidity_total) <= U128_MAX


def inv_empty_pool_zeroed(p: Pair) -> bool:
    if p.liquidity_total > 0:
        return True
    return p.reserve_a == 0 and p.reserve_b == 0


INVARIANT_REGISTRY: dict[str, Callable[[Pair], bool]] = {
    "inv_reserves_nonneg": inv_reserves_nonneg,
    "inv_liquidity_nonneg": inv_liquidity_nonneg,
    "inv_fits_u128": inv_fits_u128,
    "inv_empty_pool_zeroed": inv_empty_pool_zeroed,
}


def check_pair(pair: Pair) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [inv_id for inv_id, check_fn in INVARIANT_REGISTRY.items() if not check_fn(pair)]


def check_accounting(pair: Pair, positions_total: Amount) -> list[str]:
    """Liquidity is only ever created by minting to a provider, so the two totals agree."""
    if positions_total != pair.liquidity_total:
        return ["inv_positions_sum_to_total"]
    return []


def check_swap_k(k_before: int, k_after: int) -> list[str]:
    if k_after < k_before:
        return ["inv_k_non_decreasing"]
    return []
