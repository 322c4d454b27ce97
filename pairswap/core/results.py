"""Operation results: success-with-value or a typed failure."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import DexError, ErrorCode


@dataclass(frozen=True)
class OpResult:
    """Result of a single exchange operation."""

    ok: bool
    value: Any = None
    error: Optional[ErrorCode] = None

    @classmethod
    def success(cls, value: Any = True) -> "OpResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, code: ErrorCode) -> "OpResult":
        return cls(ok=False, error=ErrorCode(code))

    @property
    def code(self) -> Optional[int]:
        return int(self.error) if self.error is not None else None

    def unwrap(self) -> Any:
        """Return the value, or raise `DexError` if the operation failed."""
        if self.ok:
            return self.value
        raise DexError(self.error)

    def to_response(self) -> Dict[str, Any]:
        """Wire form: {"ok": true, "value": ...} or {"ok": false, "error": <code>}."""
        if self.ok:
            value = self.value
            if isinstance(value, tuple):
                value = list(value)
            return {"ok": True, "value": value}
        return {"ok": False, "error": self.code}
