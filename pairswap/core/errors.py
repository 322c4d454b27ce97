"""Error taxonomy for the exchange.

Economic failures are reported as `ErrorCode` values inside an `OpResult`.
`DexError` carries the same code for callers that prefer exceptions
(``OpResult.unwrap()`` and the ``*_or_raise`` facade methods).
"""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class ErrorCode(IntEnum):
    """Numeric codes, stable across versions."""

    OWNER_ONLY = 100
    ZERO_LIQUIDITY = 102
    INSUFFICIENT_BALANCE = 103
    ZERO_AMOUNT = 104
    SLIPPAGE_EXCEEDED = 105
    NOT_LIQUIDITY_PROVIDER = 107
    NO_LIQUIDITY = 108
    PAIR_EXISTS = 110
    PAIR_NOT_FOUND = 111
    SAME_TOKEN = 112
    FEE_TOO_HIGH = 113
    ARITHMETIC_OVERFLOW = 114

    @property
    def label(self) -> str:
        return self.name.lower()


class DexError(Exception):
    """Raised when an operation is rejected with a typed error code."""

    def __init__(self, code: ErrorCode, detail: str = "") -> None:
        self.code = ErrorCode(code)
        self.detail = detail
        msg = f"{self.code.label} ({int(self.code)})"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class InvariantViolation(Exception):
    """Raised when a candidate post-state violates one or more invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


class InsufficientFundsError(Exception):
    """Raised by a token ledger when a debit cannot be covered."""
