from __future__ import annotations

import pytest

from pairswap.core.errors import DexError, ErrorCode
from pairswap.core.registry import PairRegistry
from pairswap.state.pairs import Pair, PairKey

TOKEN_A = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM.token-a"
TOKEN_B = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM.token-b"


def test_create_pair_starts_empty() -> None:
    reg = PairRegistry()
    assert reg.create_pair(TOKEN_A, TOKEN_B).ok
    view = reg.get_pair(TOKEN_A, TOKEN_B)
    assert view is not None
    assert (view.reserve_a, view.reserve_b, view.liquidity_total) == (0, 0, 0)


def test_create_pair_same_token() -> None:
    reg = PairRegistry()
    res = reg.create_pair(TOKEN_A, TOKEN_A)
    assert not res.ok
    assert res.error is ErrorCode.SAME_TOKEN
    assert len(reg) == 0


def test_create_pair_twice() -> None:
    reg = PairRegistry()
    reg.create_pair(TOKEN_A, TOKEN_B)
    res = reg.create_pair(TOKEN_A, TOKEN_B)
    assert res.code == 110


def test_pair_keys_are_ordered() -> None:
    reg = PairRegistry()
    reg.create_pair(TOKEN_A, TOKEN_B)
    assert reg.get_pair(TOKEN_B, TOKEN_A) is None
    # The reverse order is a distinct pair and may be created separately.
    assert reg.create_pair(TOKEN_B, TOKEN_A).ok
    assert len(reg) == 2


def test_get_price() -> None:
    reg = PairRegistry()
    assert reg.get_price(TOKEN_A, TOKEN_B).error is ErrorCode.PAIR_NOT_FOUND
    reg.create_pair(TOKEN_A, TOKEN_B)
    assert reg.get_price(TOKEN_A, TOKEN_B).error is ErrorCode.ZERO_LIQUIDITY

    key = PairKey(TOKEN_A, TOKEN_B)
    reg.commit(key, Pair(reserve_a=1000, reserve_b=3500, liquidity_total=1870))
    assert reg.get_price(TOKEN_A, TOKEN_B).value == 3
    reg.commit(key, Pair(reserve_a=3500, reserve_b=1000, liquidity_total=1870))
    assert reg.get_price(TOKEN_A, TOKEN_B).value == 0


def test_resolve_unknown_pair() -> None:
    reg = PairRegistry()
    with pytest.raises(DexError) as exc_info:
        reg.resolve(PairKey(TOKEN_A, TOKEN_B))
    assert exc_info.value.code is ErrorCode.PAIR_NOT_FOUND


def test_commit_unknown_pair_is_a_bug() -> None:
    reg = PairRegistry()
    with pytest.raises(KeyError):
        reg.commit(PairKey(TOKEN_A, TOKEN_B), Pair())
