"""Randomized operation sequences against the `Exchange` facade.

Checks that every reachable state satisfies the pair invariants, that swaps
never shrink the constant product, and that rejected operations leave the
state byte-for-byte unchanged.
"""

from __future__ import annotations

import importlib.util
import threading

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from pairswap import EngineConfig, Exchange
from pairswap.core.invariants import check_pair, check_swap_k
from pairswap.integration.snapshot import snapshot_from_exchange
from pairswap.state.pairs import Pair

TOKEN_A = "tok-a"
TOKEN_B = "tok-b"
OWNER = "owner"
PROVIDERS = ("p1", "p2", "p3")

amounts = st.integers(min_value=0, max_value=10**9)
small = st.integers(min_value=0, max_value=10**6)

actions = st.one_of(
    st.tuples(st.just("add"), amounts, amounts, small, st.sampled_from(PROVIDERS)),
    st.tuples(st.just("swap_ab"), amounts, small, st.sampled_from(PROVIDERS)),
    st.tuples(st.just("swap_ba"), amounts, small, st.sampled_from(PROVIDERS)),
    st.tuples(st.just("remove"), amounts, small, small, st.sampled_from(PROVIDERS)),
    st.tuples(st.just("fee"), st.integers(min_value=0, max_value=2000), st.sampled_from((OWNER, "p1"))),
)


def _apply(ex: Exchange, action: tuple):
    tag, *args = action
    if tag == "add":
        return ex.add_liquidity(TOKEN_A, TOKEN_B, *args)
    if tag == "swap_ab":
        return ex.swap_a_for_b(TOKEN_A, TOKEN_B, *args)
    if tag == "swap_ba":
        return ex.swap_b_for_a(TOKEN_A, TOKEN_B, *args)
    if tag == "remove":
        return ex.remove_liquidity(TOKEN_A, TOKEN_B, *args)
    return ex.set_protocol_fee_percent(*args)


def _pair(ex: Exchange) -> Pair:
    view = ex.get_pair_data(TOKEN_A, TOKEN_B)
    return Pair(view.reserve_a, view.reserve_b, view.liquidity_total)


@settings(max_examples=200, deadline=None)
@given(st.lists(actions, min_size=1, max_size=40))
def test_random_sequences_preserve_invariants(seq: list[tuple]) -> None:
    ex = Exchange(EngineConfig(owner=OWNER))
    ex.create_pair(TOKEN_A, TOKEN_B)

    for action in seq:
        before_bytes = snapshot_from_exchange(ex).canonical_bytes()
        before = _pair(ex)
        res = _apply(ex, action)
        after = _pair(ex)

        if not res.ok:
            assert snapshot_from_exchange(ex).canonical_bytes() == before_bytes
        elif action[0] in ("swap_ab", "swap_ba"):
            assert check_swap_k(before.get_constant_product(), after.get_constant_product()) == []
            assert after.liquidity_total == before.liquidity_total

        assert check_pair(after) == []
        assert ex.check_invariants() == []


@settings(max_examples=100, deadline=None)
@given(
    st.integers(min_value=1, max_value=10**12),
    st.integers(min_value=1, max_value=10**12),
    st.integers(min_value=1, max_value=10**12),
)
def test_add_then_remove_never_profits(seed_a: int, seed_b: int, amount: int) -> None:
    ex = Exchange(EngineConfig(owner=OWNER))
    ex.create_pair(TOKEN_A, TOKEN_B)
    ex.add_liquidity(TOKEN_A, TOKEN_B, seed_a, seed_b, 0, "seed")

    amount_b = amount * seed_b // seed_a + 1
    res = ex.add_liquidity(TOKEN_A, TOKEN_B, amount, amount_b, 0, "lp")
    if not res.ok or res.value == 0:
        return
    out_a, out_b = ex.remove_liquidity(TOKEN_A, TOKEN_B, res.value, 0, 0, "lp").value
    assert out_a <= amount
    assert out_b <= amount_b


def test_concurrent_swaps_are_serialised() -> None:
    ex = Exchange(EngineConfig(owner=OWNER))
    ex.create_pair(TOKEN_A, TOKEN_B)
    ex.add_liquidity(TOKEN_A, TOKEN_B, 10**9, 10**9, 0, "lp")
    k0 = _pair(ex).get_constant_product()

    outputs: list[int] = []
    out_lock = threading.Lock()

    def worker() -> None:
        for _ in range(50):
            res = ex.swap_a_for_b(TOKEN_A, TOKEN_B, 1000, 0, "t")
            with out_lock:
                outputs.append(res.value)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    pair = _pair(ex)
    assert len(outputs) == 400
    assert pair.reserve_a == 10**9 + 400 * 1000
    assert pair.reserve_b == 10**9 - sum(outputs)
    assert pair.get_constant_product() >= k0
    assert ex.check_invariants() == []
