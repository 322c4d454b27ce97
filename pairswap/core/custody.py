"""
Token custody collaborator.

The engine does not hold token balances itself. When a ledger is attached,
each successful operation hands it the transfers to execute; the ledger must
apply them all or none.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Protocol, Sequence, Tuple

from ..state.balances import Amount, BalanceTable, ProviderId, TokenId
from .errors import InsufficientFundsError


@dataclass(frozen=True)
class Transfer:
    token: TokenId
    amount: Amount
    sender: ProviderId
    recipient: ProviderId

    def __post_init__(self) -> None:
        if not isinstance(self.amount, int) or isinstance(self.amount, bool) or self.amount < 0:
            raise ValueError(f"transfer amount must be a non-negative int: {self.amount}")


class TokenLedger(Protocol):
    def settle(self, transfers: Sequence[Transfer]) -> None:
        """Apply all transfers atomically or raise `InsufficientFundsError`."""
        ...


class InMemoryLedger:
    """`TokenLedger` backed by a `BalanceTable`, for tests and simulations."""

    def __init__(self, balances: BalanceTable | None = None) -> None:
        self.balances = balances if balances is not None else BalanceTable()

    def mint(self, owner: ProviderId, token: TokenId, amount: Amount) -> None:
        self.balances.add(owner, token, amount)

    def balance_of(self, owner: ProviderId, token: TokenId) -> Amount:
        return self.balances.get(owner, token)

    def settle(self, transfers: Sequence[Transfer]) -> None:
        # Debits are checked against pre-settlement balances; credits in the batch do not fund them.
        debits: Dict[Tuple[ProviderId, TokenId], Amount] = {}
        for t in transfers:
            key = (t.sender, t.token)
            debits[key] = debits.get(key, 0) + t.amount
        for (owner, token), total in debits.items():
            available = self.balances.get(owner, token)
            if available < total:
                raise InsufficientFundsError(
                    f"{owner} holds {available} {token}, needs {total}"
                )
        for t in transfers:
            if t.amount == 0:
                continue
            self.balances.subtract(t.sender, t.token, t.amount)
            self.balances.add(t.recipient, t.token, t.amount)
