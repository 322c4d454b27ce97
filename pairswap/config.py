"""
Engine configuration.

Every exchange instance owns its configuration; nothing here is module-level
mutable state, so independent engines can run side by side (e.g. in tests).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from .kernels.cpmm_v1 import BPS_DENOM


DEFAULT_PROTOCOL_FEE_BPS = 30
MAX_PROTOCOL_FEE_BPS = 1000


def _require_bps(name: str, value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if not (0 <= value <= BPS_DENOM):
        raise ValueError(f"{name} must be in [0, {BPS_DENOM}]: {value}")
    return value


def _require_id(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    return value


@dataclass(frozen=True)
class ProtocolFeeConfig:
    """Swap fee in basis points plus the identity allowed to change it."""

    owner: str
    fee_bps: int = DEFAULT_PROTOCOL_FEE_BPS
    max_fee_bps: int = MAX_PROTOCOL_FEE_BPS

    def __post_init__(self) -> None:
        _require_id("owner", self.owner)
        _require_bps("fee_bps", self.fee_bps)
        _require_bps("max_fee_bps", self.max_fee_bps)
        if self.max_fee_bps > MAX_PROTOCOL_FEE_BPS:
            raise ValueError(f"max_fee_bps ({self.max_fee_bps}) exceeds {MAX_PROTOCOL_FEE_BPS}")
        if self.fee_bps > self.max_fee_bps:
            raise ValueError(f"fee_bps ({self.fee_bps}) exceeds max_fee_bps ({self.max_fee_bps})")


@dataclass(frozen=True)
class EngineConfig:
    # Identity allowed to call set_protocol_fee_percent.
    owner: str
    protocol_fee_bps: int = DEFAULT_PROTOCOL_FEE_BPS
    max_protocol_fee_bps: int = MAX_PROTOCOL_FEE_BPS
    # Custody account that holds pooled tokens when a ledger is attached.
    exchange_account: str = "exchange"

    def __post_init__(self) -> None:
        _require_id("owner", self.owner)
        _require_id("exchange_account", self.exchange_account)
        # Reuse the fee config's range checks.
        self.fee_config()

    def fee_config(self) -> ProtocolFeeConfig:
        return ProtocolFeeConfig(
            owner=self.owner,
            fee_bps=self.protocol_fee_bps,
            max_fee_bps=self.max_protocol_fee_bps,
        )


_CONFIG_KEYS = ("owner", "protocol_fee_bps", "max_protocol_fee_bps", "exchange_account")


def engine_config_from_mapping(obj: Mapping[str, Any]) -> EngineConfig:
    """Build an `EngineConfig` from a plain mapping, rejecting unknown keys."""
    if not isinstance(obj, Mapping):
        raise TypeError("engine config must be a mapping")
    unknown = sorted(set(obj) - set(_CONFIG_KEYS))
    if unknown:
        raise ValueError(f"unknown engine config keys: {', '.join(map(str, unknown))}")
    if "owner" not in obj:
        raise ValueError("engine config requires 'owner'")
    return EngineConfig(**{k: obj[k] for k in _CONFIG_KEYS if k in obj})


def load_engine_config(path: Union[str, Path]) -> EngineConfig:
    """
    Load an `EngineConfig` from a YAML file.

    The file may hold the settings at top level or under an `engine:` key.
    """
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(obj, Mapping):
        raise TypeError("engine config YAML must be a mapping")
    if "engine" in obj:
        obj = obj["engine"]
    return engine_config_from_mapping(obj)
