# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.state.pairs import PairKey
from pairswap.state.positions import ProviderPosition, ProviderTable

KEY = PairKey("A", "B")
OTHER = PairKey("A", "C")


def test_missing_position_is_none() -> None:
    table = ProviderTable()
    assert table.get(KEY, "alice") is None
    assert table.liquidity_of(KEY, "alice") == 0


def test_zero_position_is_kept() -> None:
    table = ProviderTable()
    table.set(KEY, "alice", 0)
    assert table.get(KEY, "alice") == ProviderPosition(0)
    assert len(table) == 1


def test_totals_are_per_pair() -> None:
    table = ProviderTable()
    table.set(KEY, "alice", 10)
    table.set(KEY, "bob", 5)
    table.set(OTHER, "alice", 7)
    assert table.total_for_pair(KEY) == 15
    assert table.total_for_pair(OTHER) == 7


def test_negative_position_rejected() -> None:
    with pytest.raises(ValueError, match="negative"):
        ProviderTable().set(KEY, "alice", -1)


def test_position_to_dict() -> None:
    assert ProviderPosition(3).to_dict() == {"liquidity-provided": 3}


def test_running_total_tracks_overwrites() -> None:
    table = ProviderTable()
    table.set(KEY, "alice", 10)
    table.set(KEY, "alice", 4)
    table.set(KEY, "bob", 6)
    table.set(KEY, "bob", 0)
    table.set(OTHER, "carol", 9)
    assert table.total_for_pair(KEY) == 4
    assert table.total_for_pair(OTHER) == 9
    assert table.total_for_pair(PairKey("X", "Y")) == 0
    expected = sum(p.liquidity_provided for (k, _), p in table.items() if k == KEY)
    assert table.total_for_pair(KEY) == expected


def test_rejected_set_leaves_total_unchanged() -> None:
    table = ProviderTable()
    table.set(KEY, "alice", 10)
    with pytest.raises(ValueError):
        table.set(KEY, "alice", -5)
    assert table.total_for_pair(KEY) == 10
    assert table.liquidity_of(KEY, "alice") == 10
