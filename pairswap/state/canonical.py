"""
Byte-exact encoding of exchange state.

Two exchange states are equal iff their canonical bytes are equal, which is
what snapshot commitments and the "failed operations change nothing" checks
rely on.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


COMMITMENT_PREFIX = b"pairswap:"


def _check_encodable(value: Any, path: str = "$") -> None:
    if isinstance(value, float):
        raise TypeError(f"float at {path}: amounts must be ints")
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"non-string key at {path}: {k!r}")
            _check_encodable(v, f"{path}.{k}")
    elif isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _check_encodable(item, f"{path}[{i}]")


def canonical_json_bytes(value: Any) -> bytes:
    """
    UTF-8 JSON with sorted keys and no insignificant whitespace.

    Floats are refused anywhere in the tree.
    """
    _check_encodable(value)
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """`pairswap:<label>:v<version>` followed by a NUL."""
    if not isinstance(label, str) or not label or not label.isascii():
        raise ValueError("label must be a non-empty ASCII string")
    if "\x00" in label or ":" in label:
        raise ValueError(f"label must not contain NUL or ':': {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return COMMITMENT_PREFIX + f"{label}:v{version}".encode("ascii") + b"\x00"


def commitment_digest(label: str, version: int, value: Any) -> bytes:
    """sha256 over the domain prefix and the canonical encoding of `value`."""
    return hashlib.sha256(domain_sep_bytes(label, version) + canonical_json_bytes(value)).digest()
