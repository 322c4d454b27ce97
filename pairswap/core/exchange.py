"""
Exchange facade: the operation and query interface.

Pairs are addressed by their two token identifiers, in creation order.
All calls, queries included, run under one re-entrant lock so threaded
callers observe operations in a single total order.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional

from ..config import EngineConfig
from ..state.balances import Amount, ProviderId, TokenId
from ..state.pairs import PairKey, PairView
from ..state.positions import ProviderPosition, ProviderTable
from .cpmm import SwapDirection
from .custody import TokenLedger
from .invariants import check_accounting, check_pair
from .registry import PairRegistry
from .results import OpResult
from .settlement import SettlementEngine


class Exchange:
    def __init__(
        self,
        config: EngineConfig,
        *,
        ledger: Optional[TokenLedger] = None,
        registry: Optional[PairRegistry] = None,
        positions: Optional[ProviderTable] = None,
    ) -> None:
        self.config = config
        self.registry = registry if registry is not None else PairRegistry()
        self.engine = SettlementEngine(
            self.registry,
            config.fee_config(),
            positions=positions,
            ledger=ledger,
            exchange_account=config.exchange_account,
        )
        self.lock = threading.RLock()

    @property
    def positions(self) -> ProviderTable:
        return self.engine.positions

    @property
    def protocol_fee_bps(self) -> int:
        with self.lock:
            return self.engine.fee_bps

    # -- mutating operations -------------------------------------------------

    def create_pair(self, token_a: TokenId, token_b: TokenId) -> OpResult:
        with self.lock:
            return self.registry.create_pair(token_a, token_b)

    def add_liquidity(
        self,
        token_a: TokenId,
        token_b: TokenId,
        amount_a: Amount,
        amount_b: Amount,
        min_liquidity: Amount,
        sender: ProviderId,
    ) -> OpResult:
        with self.lock:
            return self.engine.add_liquidity(PairKey(token_a, token_b), amount_a, amount_b, min_liquidity, sender)

    def swap_a_for_b(
        self,
        token_a: TokenId,
        token_b: TokenId,
        amount_in: Amount,
        min_amount_out: Amount,
        sender: ProviderId,
    ) -> OpResult:
        with self.lock:
            return self.engine.swap(PairKey(token_a, token_b), SwapDirection.A_TO_B, amount_in, min_amount_out, sender)

    def swap_b_for_a(
        self,
        token_a: TokenId,
        token_b: TokenId,
        amount_in: Amount,
        min_amount_out: Amount,
        sender: ProviderId,
    ) -> OpResult:
        with self.lock:
            return self.engine.swap(PairKey(token_a, token_b), SwapDirection.B_TO_A, amount_in, min_amount_out, sender)

    def remove_liquidity(
        self,
        token_a: TokenId,
        token_b: TokenId,
        liquidity_amount: Amount,
        min_amount_a: Amount,
        min_amount_b: Amount,
        sender: ProviderId,
    ) -> OpResult:
        with self.lock:
            return self.engine.remove_liquidity(
                PairKey(token_a, token_b), liquidity_amount, min_amount_a, min_amount_b, sender
            )

    def set_protocol_fee_percent(self, new_fee_bps: int, sender: ProviderId) -> OpResult:
        with self.lock:
            return self.engine.set_protocol_fee(new_fee_bps, sender)

    # -- raising variants ----------------------------------------------------

    def add_liquidity_or_raise(self, *args: Any, **kwargs: Any) -> Amount:
        """Like ``add_liquidity()`` but raises `DexError` on rejection."""
        return self.add_liquidity(*args, **kwargs).unwrap()

    def swap_a_for_b_or_raise(self, *args: Any, **kwargs: Any) -> Amount:
        return self.swap_a_for_b(*args, **kwargs).unwrap()

    def swap_b_for_a_or_raise(self, *args: Any, **kwargs: Any) -> Amount:
        return self.swap_b_for_a(*args, **kwargs).unwrap()

    def remove_liquidity_or_raise(self, *args: Any, **kwargs: Any) -> tuple[Amount, Amount]:
        return self.remove_liquidity(*args, **kwargs).unwrap()

    # -- queries -------------------------------------------------------------

    def get_price(self, token_a: TokenId, token_b: TokenId) -> OpResult:
        with self.lock:
            return self.registry.get_price(token_a, token_b)

    def get_pair_data(self, token_a: TokenId, token_b: TokenId) -> Optional[PairView]:
        with self.lock:
            return self.registry.get_pair(token_a, token_b)

    def get_liquidity_provider_data(
        self, token_a: TokenId, token_b: TokenId, provider: ProviderId
    ) -> Optional[ProviderPosition]:
        with self.lock:
            return self.positions.get(PairKey(token_a, token_b), provider)

    def check_invariants(self) -> List[str]:
        """Violated invariant ids across every pair, prefixed with the pair (empty = ok)."""
        with self.lock:
            totals: Dict[PairKey, int] = {}
            for (key, _provider), position in self.positions.items():
                totals[key] = totals.get(key, 0) + position.liquidity_provided
            out: List[str] = []
            for key, pair in self.registry.items():
                for inv_id in check_pair(pair) + check_accounting(pair, totals.pop(key, 0)):
                    out.append(f"{key}:{inv_id}")
            for key in totals:
                out.append(f"{key}:inv_position_without_pair")
            return out
