# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.core.custody import InMemoryLedger, Transfer
from pairswap.core.errors import InsufficientFundsError


def test_settle_applies_all_transfers() -> None:
    ledger = InMemoryLedger()
    ledger.mint("alice", "A", 100)
    ledger.mint("bob", "B", 50)
    ledger.settle([Transfer("A", 60, "alice", "bob"), Transfer("B", 50, "bob", "alice")])
    assert ledger.balance_of("alice", "A") == 40
    assert ledger.balance_of("bob", "A") == 60
    assert ledger.balance_of("alice", "B") == 50
    assert ledger.balance_of("bob", "B") == 0


def test_settle_is_all_or_nothing() -> None:
    ledger = InMemoryLedger()
    ledger.mint("alice", "A", 100)
    with pytest.raises(InsufficientFundsError, match="bob"):
        ledger.settle([Transfer("A", 10, "alice", "bob"), Transfer("B", 1, "bob", "alice")])
    assert ledger.balance_of("alice", "A") == 100
    assert ledger.balance_of("bob", "A") == 0


def test_debits_are_aggregated_per_owner_and_token() -> None:
    ledger = InMemoryLedger()
    ledger.mint("alice", "A", 100)
    with pytest.raises(InsufficientFundsError):
        ledger.settle([Transfer("A", 60, "alice", "bob"), Transfer("A", 60, "alice", "carol")])


def test_incoming_credit_does_not_fund_outgoing_debit() -> None:
    ledger = InMemoryLedger()
    ledger.mint("bob", "A", 10)
    with pytest.raises(InsufficientFundsError):
        ledger.settle([Transfer("A", 10, "bob", "alice"), Transfer("A", 5, "alice", "carol")])


def test_transfer_rejects_negative_amount() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        Transfer("A", -1, "alice", "bob")
