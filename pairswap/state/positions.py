"""
Liquidity provider positions.

Positions are scoped per (PairKey, ProviderId). Unlike asset balances, a
position is never dropped once created, even when it falls back to zero:
"has a position" and "has a non-zero position" are different facts for
`remove_liquidity`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from .balances import Amount, ProviderId
from .pairs import PairKey


@dataclass(frozen=True)
class ProviderPosition:
    liquidity_provided: Amount = 0

    def to_dict(self) -> dict[str, int]:
        return {"liquidity-provided": self.liquidity_provided}


class ProviderTable:
    """Mapping (pair_key, provider) -> ProviderPosition.

    Per-pair totals are kept alongside the entries and adjusted on every `set()`.
    """

    def __init__(self) -> None:
        self._positions: Dict[Tuple[PairKey, ProviderId], ProviderPosition] = {}
        self._totals: Dict[PairKey, Amount] = {}

    def get(self, key: PairKey, provider: ProviderId) -> Optional[ProviderPosition]:
        return self._positions.get((key, provider))

    def liquidity_of(self, key: PairKey, provider: ProviderId) -> Amount:
        """Liquidity held by provider in the pair. Returns 0 if no position exists."""
        position = self._positions.get((key, provider))
        return position.liquidity_provided if position is not None else 0

    def set(self, key: PairKey, provider: ProviderId, amount: Amount) -> None:
        """Set (creating if needed) the provider's liquidity for the pair."""
        if amount < 0:
            raise ValueError(f"Liquidity position cannot be negative: {amount}")
        previous = self.liquidity_of(key, provider)
        self._positions[(key, provider)] = ProviderPosition(liquidity_provided=amount)
        self._totals[key] = self._totals.get(key, 0) - previous + amount

    def total_for_pair(self, key: PairKey) -> Amount:
        return self._totals.get(key, 0)

    def items(self) -> Iterator[Tuple[Tuple[PairKey, ProviderId], ProviderPosition]]:
        return iter(list(self._positions.items()))

    def __len__(self) -> int:
        return len(self._positions)

    def __repr__(self) -> str:
        return f"ProviderTable({len(self._positions)} entries)"
