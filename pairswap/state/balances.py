"""
Token balance tracking for the custody side of the exchange.

Implements BalanceTable[Owner, TokenId] -> Amount
"""

from typing import Dict, Tuple


# Type aliases
TokenId = str  # contract principal, e.g. "SP000...token-a"
ProviderId = str  # account principal
Amount = int  # Non-negative integer, bounded by U128_MAX at the engine boundary

U128_MAX = 2**128 - 1


class BalanceTable:
    """
    Balance table mapping (owner, token) -> amount.

    Zero balances are dropped to keep the table sparse.
    """

    def __init__(self):
        self._balances: Dict[Tuple[ProviderId, TokenId], Amount] = {}

    def get(self, owner: ProviderId, token: TokenId) -> Amount:
        """Get balance for (owner, token). Returns 0 if not found."""
        return self._balances.get((owner, token), 0)

    def set(self, owner: ProviderId, token: TokenId, amount: Amount) -> None:
        """
        Set balance for (owner, token).

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((owner, token), None)
        else:
            self._balances[(owner, token)] = amount

    def add(self, owner: ProviderId, token: TokenId, delta: int) -> None:
        """
        Add delta to balance (delta may be negative).

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(owner, token)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(owner, token, new_balance)

    def subtract(self, owner: ProviderId, token: TokenId, delta: Amount) -> None:
        """Subtract a non-negative amount from a balance."""
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(owner, token, -delta)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
