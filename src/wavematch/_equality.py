"""Structural equality used by literal and shape patterns."""

from __future__ import annotations

import math

from wavematch._types import Kind, classify

_NUMERIC = frozenset({Kind.INTEGER, Kind.FLOAT})


def _is_nan(x: object) -> bool:
    return isinstance(x, float) and math.isnan(x)


def same_value(a: object, b: object) -> bool:
    """Identity-style equality for primitives.

    NaN equals only NaN, and +0.0 and -0.0 are distinct. Booleans never equal
    numbers, and 1 equals 1.0 because both are the same integral number.
    """
    kind_a, kind_b = classify(a), classify(b)
    if kind_a in _NUMERIC and kind_b in _NUMERIC:
        if _is_nan(a) or _is_nan(b):
            return _is_nan(a) and _is_nan(b)
        if a == 0 and b == 0:
            return math.copysign(1, a) == math.copysign(1, b)
        return a == b
    if kind_a is not kind_b:
        return False
    if kind_a in (Kind.NULL, Kind.UNDEFINED, Kind.SYMBOL):
        return a is b
    return a == b


def deep_equal(a: object, b: object) -> bool:
    """Recursive structural equality over sequences, mappings, and primitives.

    Sequences compare element-wise regardless of concrete type, so a list and a
    tuple with equal items are equal. Mappings compare by key set, then
    value by value. Numbers compare by value, with NaN equal to NaN and
    0.0 equal to -0.0.
    """
    kind_a, kind_b = classify(a), classify(b)
    if kind_a in _NUMERIC and kind_b in _NUMERIC:
        if _is_nan(a) and _is_nan(b):
            return True
        return a == b
    if kind_a is not kind_b:
        return False
    match kind_a:
        case Kind.SEQUENCE:
            return len(a) == len(b) and all(
                deep_equal(x, y) for x, y in zip(a, b, strict=False)
            )
        case Kind.MAPPING:
            if a.keys() != b.keys():
                return False
            return all(deep_equal(a[k], b[k]) for k in a)
        case Kind.NULL | Kind.UNDEFINED | Kind.SYMBOL:
            return a is b
        case _:
            return a == b
