"""
Settlement engine: applies add-liquidity, swap, remove-liquidity and
set-fee against pairs held by a `PairRegistry`.

Every operation follows the same shape:

1. Resolve the pair and read the inputs it needs (fee read once).
2. Plan the transition with the pure `plan_*` functions (`core/cpmm.py`).
3. Check invariants on the candidate post-state.
4. Settle custody transfers, if a ledger is attached.
5. Commit pair + position together.

Any `DexError` raised in steps 1-4 becomes `OpResult.failure(code)` and
nothing is written. `InvariantViolation` is never converted.
The exchange's own custody account may not act as provider or trader; that
raises `ValueError` before step 1.
"""

from __future__ import annotations

from typing import Optional, Sequence

import structlog

from ..config import ProtocolFeeConfig
from ..state.balances import Amount, ProviderId
from ..state.pairs import Pair, PairKey
from ..state.positions import ProviderTable
from .cpmm import SwapDirection, plan_add_liquidity, plan_remove_liquidity, plan_swap, require_amount
from .custody import TokenLedger, Transfer
from .errors import DexError, ErrorCode, InsufficientFundsError, InvariantViolation
from .invariants import check_accounting, check_pair, check_swap_k
from .registry import PairRegistry
from .results import OpResult

logger = structlog.get_logger()


class SettlementEngine:
    def __init__(
        self,
        registry: PairRegistry,
        fee_config: ProtocolFeeConfig,
        *,
        positions: Optional[ProviderTable] = None,
        ledger: Optional[TokenLedger] = None,
        exchange_account: str = "exchange",
    ) -> None:
        self.registry = registry
        self.positions = positions if positions is not None else ProviderTable()
        self.ledger = ledger
        self.exchange_account = exchange_account
        self._fee = fee_config

    @property
    def fee_config(self) -> ProtocolFeeConfig:
        return self._fee

    @property
    def fee_bps(self) -> int:
        return self._fee.fee_bps

    # -- helpers -------------------------------------------------------------

    def _verify(self, key: PairKey, next_pair: Pair, liquidity_delta: int) -> None:
        violations = check_pair(next_pair)
        positions_total = self.positions.total_for_pair(key) + liquidity_delta
        violations += check_accounting(next_pair, positions_total)
        if violations:
            raise InvariantViolation(violations)

    def _settle(self, transfers: Sequence[Transfer]) -> None:
        if self.ledger is None:
            return
        try:
            self.ledger.settle([t for t in transfers if t.amount > 0])
        except InsufficientFundsError as exc:
            raise DexError(ErrorCode.INSUFFICIENT_BALANCE, str(exc)) from exc

    def _require_counterparty(self, account: ProviderId) -> None:
        if account == self.exchange_account:
            raise ValueError(f"custody account {account!r} cannot trade against its own pools")

    def _reject(self, op: str, key: Optional[PairKey], exc: DexError) -> OpResult:
        logger.info(
            "operation_rejected",
            op=op,
            pair=str(key) if key is not None else None,
            code=int(exc.code),
            reason=exc.code.label,
            detail=exc.detail or None,
        )
        return OpResult.failure(exc.code)

    # -- operations ----------------------------------------------------------

    def add_liquidity(
        self,
        key: PairKey,
        amount_a: Amount,
        amount_b: Amount,
        min_liquidity: Amount,
        provider: ProviderId,
    ) -> OpResult:
        """
        Deposit both tokens and mint liquidity units to `provider`.

        Returns:
            OpResult with the minted amount
        """
        self._require_counterparty(provider)
        try:
            pair = self.registry.resolve(key)
            minted, next_pair = plan_add_liquidity(pair, amount_a, amount_b, min_liquidity)
            self._verify(key, next_pair, liquidity_delta=minted)
            self._settle(
                [
                    Transfer(key.token_a, amount_a, provider, self.exchange_account),
                    Transfer(key.token_b, amount_b, provider, self.exchange_account),
                ]
            )
        except DexError as exc:
            return self._reject("add_liquidity", key, exc)

        self.registry.commit(key, next_pair)
        self.positions.set(key, provider, self.positions.liquidity_of(key, provider) + minted)
        logger.info(
            "liquidity_added",
            pair=str(key),
            provider=provider,
            amount_a=amount_a,
            amount_b=amount_b,
            minted=minted,
            liquidity_total=next_pair.liquidity_total,
        )
        return OpResult.success(minted)

    def swap(
        self,
        key: PairKey,
        direction: SwapDirection,
        amount_in: Amount,
        min_amount_out: Amount,
        trader: ProviderId,
    ) -> OpResult:
        """
        Exact-in swap in the given direction.

        Returns:
            OpResult with the output amount
        """
        self._require_counterparty(trader)
        fee_bps = self._fee.fee_bps
        try:
            pair = self.registry.resolve(key)
            res, next_pair = plan_swap(pair, direction, amount_in, min_amount_out, fee_bps)
            k_violations = check_swap_k(res.k_before, res.k_after)
            if k_violations:
                raise InvariantViolation(k_violations)
            self._verify(key, next_pair, liquidity_delta=0)
            if SwapDirection(direction) is SwapDirection.A_TO_B:
                token_in, token_out = key.token_a, key.token_b
            else:
                token_in, token_out = key.token_b, key.token_a
            self._settle(
                [
                    Transfer(token_in, amount_in, trader, self.exchange_account),
                    Transfer(token_out, res.amount_out, self.exchange_account, trader),
                ]
            )
        except DexError as exc:
            return self._reject("swap", key, exc)

        self.registry.commit(key, next_pair)
        logger.info(
            "swap_executed",
            pair=str(key),
            direction=SwapDirection(direction).value,
            trader=trader,
            amount_in=amount_in,
            fee=res.fee,
            amount_out=res.amount_out,
        )
        return OpResult.success(res.amount_out)

    def remove_liquidity(
        self,
        key: PairKey,
        liquidity_amount: Amount,
        min_amount_a: Amount,
        min_amount_b: Amount,
        provider: ProviderId,
    ) -> OpResult:
        """
        Burn `liquidity_amount` of the provider's units for a proportional share of reserves.

        Returns:
            OpResult with (amount_a, amount_b)
        """
        self._require_counterparty(provider)
        try:
            pair = self.registry.resolve(key)
            position = self.positions.get(key, provider)
            (amount_a, amount_b), next_pair = plan_remove_liquidity(
                pair, position, liquidity_amount, min_amount_a, min_amount_b
            )
            self._verify(key, next_pair, liquidity_delta=-liquidity_amount)
            self._settle(
                [
                    Transfer(key.token_a, amount_a, self.exchange_account, provider),
                    Transfer(key.token_b, amount_b, self.exchange_account, provider),
                ]
            )
        except DexError as exc:
            return self._reject("remove_liquidity", key, exc)

        self.registry.commit(key, next_pair)
        self.positions.set(key, provider, position.liquidity_provided - liquidity_amount)
        logger.info(
            "liquidity_removed",
            pair=str(key),
            provider=provider,
            burned=liquidity_amount,
            amount_a=amount_a,
            amount_b=amount_b,
            liquidity_total=next_pair.liquidity_total,
        )
        return OpResult.success((amount_a, amount_b))

    def set_protocol_fee(self, new_fee_bps: int, caller: ProviderId) -> OpResult:
        """Owner-only update of the swap fee, bounded by `max_fee_bps`."""
        require_amount("new_fee_bps", new_fee_bps)
        try:
            if caller != self._fee.owner:
                raise DexError(ErrorCode.OWNER_ONLY, f"caller {caller}")
            if new_fee_bps > self._fee.max_fee_bps:
                raise DexError(ErrorCode.FEE_TOO_HIGH, f"{new_fee_bps} > {self._fee.max_fee_bps}")
        except DexError as exc:
            return self._reject("set_protocol_fee", None, exc)

        previous = self._fee.fee_bps
        self._fee = ProtocolFeeConfig(
            owner=self._fee.owner,
            fee_bps=new_fee_bps,
            max_fee_bps=self._fee.max_fee_bps,
        )
        logger.info("protocol_fee_updated", previous_bps=previous, fee_bps=new_fee_bps)
        return OpResult.success(True)
