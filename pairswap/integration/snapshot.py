"""
Exchange state snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing / equality checks.
- Round-trippable into a fresh `Exchange`.
- Explicit versioning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..config import EngineConfig
from ..core.custody import TokenLedger
from ..core.exchange import Exchange
from ..core.registry import PairRegistry
from ..state.canonical import canonical_json_bytes, commitment_digest
from ..state.pairs import Pair, PairKey
from ..state.positions import ProviderTable


EXCHANGE_SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str, max_len: int = 4096) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def _require_list(value: Any, *, name: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"{name} must be a list")
    return value


@dataclass(frozen=True)
class ExchangeSnapshot:
    """
    Deterministic, versioned snapshot of an `Exchange`.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        return commitment_digest("exchange_snapshot", self.version, self.data)

    def commitment_hex(self) -> str:
        return "0x" + self.commitment_bytes().hex()


def snapshot_from_exchange(exchange: Exchange, *, version: int = EXCHANGE_SNAPSHOT_VERSION) -> ExchangeSnapshot:
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")

    with exchange.lock:
        pairs_entries = [
            {
                "token_a": key.token_a,
                "token_b": key.token_b,
                "reserve_a": int(pair.reserve_a),
                "reserve_b": int(pair.reserve_b),
                "liquidity_total": int(pair.liquidity_total),
            }
            for key, pair in exchange.registry.items()
        ]
        position_entries = [
            {
                "token_a": key.token_a,
                "token_b": key.token_b,
                "provider": provider,
                "liquidity_provided": int(position.liquidity_provided),
            }
            for (key, provider), position in exchange.positions.items()
        ]
        fee = exchange.engine.fee_config

    pairs_entries.sort(key=lambda e: (e["token_a"], e["token_b"]))
    position_entries.sort(key=lambda e: (e["token_a"], e["token_b"], e["provider"]))

    data: Dict[str, Any] = {
        "version": int(version),
        "exchange_account": exchange.config.exchange_account,
        "fee": {
            "owner": fee.owner,
            "fee_bps": int(fee.fee_bps),
            "max_fee_bps": int(fee.max_fee_bps),
        },
        "pairs": pairs_entries,
        "positions": position_entries,
    }
    return ExchangeSnapshot(version=version, data=data)


def exchange_from_snapshot(
    snapshot: Mapping[str, Any],
    *,
    ledger: Optional[TokenLedger] = None,
    max_pairs: int = 50_000,
    max_positions: int = 200_000,
) -> Exchange:
    if not isinstance(snapshot, Mapping):
        raise TypeError("snapshot must be a mapping")

    version = snapshot.get("version", EXCHANGE_SNAPSHOT_VERSION)
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("snapshot.version must be a positive int")
    if version != EXCHANGE_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")

    fee = snapshot.get("fee")
    if not isinstance(fee, Mapping):
        raise TypeError("snapshot.fee must be an object")
    config = EngineConfig(
        owner=_require_str(fee.get("owner"), name="fee.owner"),
        protocol_fee_bps=_require_int(fee.get("fee_bps"), name="fee.fee_bps"),
        max_protocol_fee_bps=_require_int(fee.get("max_fee_bps"), name="fee.max_fee_bps"),
        exchange_account=_require_str(snapshot.get("exchange_account"), name="exchange_account"),
    )

    registry = PairRegistry()
    pairs_entries = _require_list(snapshot.get("pairs"), name="snapshot.pairs")
    if len(pairs_entries) > max_pairs:
        raise ValueError(f"too many pairs entries: {len(pairs_entries)} > {max_pairs}")
    for entry in pairs_entries:
        if not isinstance(entry, Mapping):
            raise TypeError("snapshot.pairs entries must be objects")
        key = PairKey(
            _require_str(entry.get("token_a"), name="pair.token_a"),
            _require_str(entry.get("token_b"), name="pair.token_b"),
        )
        registry.restore(
            key,
            Pair(
                reserve_a=_require_int(entry.get("reserve_a"), name="pair.reserve_a"),
                reserve_b=_require_int(entry.get("reserve_b"), name="pair.reserve_b"),
                liquidity_total=_require_int(entry.get("liquidity_total"), name="pair.liquidity_total"),
            ),
        )

    positions = ProviderTable()
    position_entries = _require_list(snapshot.get("positions"), name="snapshot.positions")
    if len(position_entries) > max_positions:
        raise ValueError(f"too many positions entries: {len(position_entries)} > {max_positions}")
    for entry in position_entries:
        if not isinstance(entry, Mapping):
            raise TypeError("snapshot.positions entries must be objects")
        key = PairKey(
            _require_str(entry.get("token_a"), name="position.token_a"),
            _require_str(entry.get("token_b"), name="position.token_b"),
        )
        if key not in registry:
            raise ValueError(f"position references unknown pair: {key}")
        provider = _require_str(entry.get("provider"), name="position.provider")
        if provider == config.exchange_account:
            raise ValueError("custody account cannot hold a position")
        if positions.get(key, provider) is not None:
            raise ValueError("duplicate position entry (pair, provider)")
        positions.set(key, provider, _require_int(entry.get("liquidity_provided"), name="position.liquidity_provided"))

    exchange = Exchange(config, ledger=ledger, registry=registry, positions=positions)
    violations = exchange.check_invariants()
    if violations:
        raise ValueError(f"snapshot violates invariants: {', '.join(violations)}")
    return exchange
