"""
Pair state for the exchange's two-asset pools.
"""

from __future__ import annotations

from dataclasses import dataclass

from .balances import Amount, TokenId, U128_MAX


@dataclass(frozen=True, order=True)
class PairKey:
    """
    Ordered pair of token identifiers.

    (A, B) and (B, A) are distinct keys: callers must pass tokens in the order
    used when the pair was created.
    """

    token_a: TokenId
    token_b: TokenId

    def __post_init__(self) -> None:
        for name, v in (("token_a", self.token_a), ("token_b", self.token_b)):
            if not isinstance(v, str) or not v:
                raise ValueError(f"{name} must be a non-empty string")

    @property
    def is_same_token(self) -> bool:
        return self.token_a == self.token_b

    def __str__(self) -> str:
        return f"{self.token_a}/{self.token_b}"


@dataclass(frozen=True)
class Pair:
    """
    Reserve state of a single pair.

    Attributes:
        reserve_a: Pool holdings of token A
        reserve_b: Pool holdings of token B
        liquidity_total: Outstanding liquidity-share units
    """

    reserve_a: Amount = 0
    reserve_b: Amount = 0
    liquidity_total: Amount = 0

    def __post_init__(self) -> None:
        for name, v in (
            ("reserve_a", self.reserve_a),
            ("reserve_b", self.reserve_b),
            ("liquidity_total", self.liquidity_total),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")

    @property
    def has_liquidity(self) -> bool:
        return self.reserve_a > 0 and self.reserve_b > 0

    def get_constant_product(self) -> int:
        """k = reserve_a * reserve_b."""
        return self.reserve_a * self.reserve_b

    def fits_u128(self) -> bool:
        return max(self.reserve_a, self.reserve_b, self.liquidity_total) <= U128_MAX

    def view(self) -> PairView:
        return PairView(
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
            liquidity_total=self.liquidity_total,
        )


@dataclass(frozen=True)
class PairView:
    """Read-only snapshot returned by `get_pair_data`."""

    reserve_a: Amount
    reserve_b: Amount
    liquidity_total: Amount

    def to_dict(self) -> dict[str, int]:
        return {
            "reserve-a": self.reserve_a,
            "reserve-b": self.reserve_b,
            "liquidity-total": self.liquidity_total,
        }
