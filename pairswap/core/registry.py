"""
Pool registry: the set of pairs and their reserve state.
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Tuple

import structlog

from ..state.balances import TokenId
from ..state.pairs import Pair, PairKey, PairView
from .errors import DexError, ErrorCode
from .results import OpResult

logger = structlog.get_logger()


class PairRegistry:
    """
    Owns PairKey -> Pair.

    Pairs are stored as immutable values; updating a pair means replacing the
    entry, so a half-applied update cannot be observed. Pairs are never removed.
    """

    def __init__(self) -> None:
        self._pairs: Dict[PairKey, Pair] = {}

    def create_pair(self, token_a: TokenId, token_b: TokenId) -> OpResult:
        key = PairKey(token_a, token_b)
        if key.is_same_token:
            return OpResult.failure(ErrorCode.SAME_TOKEN)
        if key in self._pairs:
            return OpResult.failure(ErrorCode.PAIR_EXISTS)
        self._pairs[key] = Pair()
        logger.info("pair_created", pair=str(key))
        return OpResult.success(True)

    def get_pair(self, token_a: TokenId, token_b: TokenId) -> Optional[PairView]:
        pair = self._pairs.get(PairKey(token_a, token_b))
        return pair.view() if pair is not None else None

    def get_price(self, token_a: TokenId, token_b: TokenId) -> OpResult:
        """floor(reserve_b / reserve_a), in whole units of B per unit of A."""
        pair = self._pairs.get(PairKey(token_a, token_b))
        if pair is None:
            return OpResult.failure(ErrorCode.PAIR_NOT_FOUND)
        if not pair.has_liquidity:
            return OpResult.failure(ErrorCode.ZERO_LIQUIDITY)
        return OpResult.success(pair.reserve_b // pair.reserve_a)

    def resolve(self, key: PairKey) -> Pair:
        """
        Look up a pair for mutation.

        Raises:
            DexError: PAIR_NOT_FOUND if the pair was never created
        """
        pair = self._pairs.get(key)
        if pair is None:
            raise DexError(ErrorCode.PAIR_NOT_FOUND, str(key))
        return pair

    def commit(self, key: PairKey, pair: Pair) -> None:
        if key not in self._pairs:
            raise KeyError(f"cannot commit unknown pair: {key}")
        self._pairs[key] = pair

    def restore(self, key: PairKey, pair: Pair) -> None:
        """Insert a pair verbatim (snapshot loading)."""
        if key.is_same_token:
            raise ValueError(f"pair tokens must differ: {key}")
        if key in self._pairs:
            raise ValueError(f"duplicate pair: {key}")
        self._pairs[key] = pair

    def items(self) -> Iterator[Tuple[PairKey, Pair]]:
        return iter(list(self._pairs.items()))

    def __contains__(self, key: object) -> bool:
        return key in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"PairRegistry({len(self._pairs)} pairs)"
