"""Structural equality over parameter snapshots.

Supported shapes are primitives, value objects (dates, UUIDs,
decimals, enums, sets), ordered sequences (``list``/``tuple``) and
plain keyed records (``Mapping``).  Anything else is compared by identity.
Cyclic structures are not supported and end in ``RecursionError``.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import math
import uuid
from collections.abc import Mapping
from typing import Any

_PRIMITIVES = (str, bytes, int, float, complex)

# Value objects: equal when ``==`` says so.
_VALUE_TYPES = (
    datetime.date,
    datetime.time,
    datetime.timedelta,
    datetime.timezone,
    uuid.UUID,
    decimal.Decimal,
    enum.Enum,
    bytearray,
    frozenset,
    set,
)


class _Absent:
    """Marker for a key missing from one side of a mapping comparison."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<absent>"


_ABSENT = _Absent()


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _primitive_equal(a: Any, b: Any) -> bool:
    # bool is a distinct type for comparison purposes: True != 1.
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, (str, bytes)) or isinstance(b, (str, bytes)):
        return type(a) is type(b) and a == b
    if _is_nan(a) and _is_nan(b):
        return True
    return bool(a == b)


def _value_equal(a: Any, b: Any) -> bool:
    try:
        return bool(a == b)
    except TypeError:
        return False


def _mapping_equal(a: Mapping[Any, Any], b: Mapping[Any, Any]) -> bool:
    for key in a.keys() | b.keys():
        if not structural_equal(a.get(key, _ABSENT), b.get(key, _ABSENT)):
            return False
    return True


def _sequence_equal(a: list[Any] | tuple[Any, ...], b: list[Any] | tuple[Any, ...]) -> bool:
    if len(a) != len(b):
        return False
    return all(structural_equal(x, y) for x, y in zip(a, b, strict=True))


def structural_equal(a: Any, b: Any) -> bool:
    """Return ``True`` when *a* and *b* have the same structure and values."""
    if a is b:
        return True
    if a is None or b is None or a is _ABSENT or b is _ABSENT:
        return False

    if isinstance(a, (*_PRIMITIVES, bool)) and isinstance(b, (*_PRIMITIVES, bool)):
        return _primitive_equal(a, b)

    if isinstance(a, _VALUE_TYPES) or isinstance(b, _VALUE_TYPES):
        return _value_equal(a, b)

    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return _sequence_equal(a, b)

    if isinstance(a, Mapping) and isinstance(b, Mapping):
        return _mapping_equal(a, b)

    # Class instances, callables: identity only (checked above).
    return False
