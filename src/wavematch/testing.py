"""Test utilities for wavematch.

Provides sample guards, type tags and body helpers for tests and examples.
These are NOT part of the matching engine. They exist to reduce boilerplate
when exploring wavematch or writing rule-set fixtures.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wavematch._registry import RegistryBuilder


@dataclass(frozen=True, slots=True)
class Returns:
    """Rule body that records its calls and returns a fixed value.

    >>> from wavematch import resolve, rule, wildcard
    >>> hit = Returns("hit")
    >>> resolve([3], [rule(3, body=hit), wildcard(Returns("miss"))])
    'hit'
    >>> hit.calls
    [(3,)]
    """

    value: Any
    calls: list[tuple[Any, ...]] = field(default_factory=list, compare=False, repr=False)

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        return self.value


def returns(value: Any) -> Returns:
    return Returns(value)


def register(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the sample guards and type tags used by the conformance fixtures.

    Guards: positive, even, non_empty, boom (returns a non-bool).
    Types: Point (mapping with x and y, parent Shape), Circle (mapping with
    radius, parent Shape).
    """
    return (
        builder.guard("positive", _positive)
        .guard("even", _even)
        .guard("non_empty", _non_empty)
        .guard("boom", _not_a_predicate)
        .type("Point", _is_point, parent="Shape")
        .type("Circle", _is_circle, parent="Shape")
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _positive(value: Any) -> bool:
    return _is_number(value) and value > 0


def _even(value: Any) -> bool:
    return _is_number(value) and value % 2 == 0


def _non_empty(value: Any) -> bool:
    return hasattr(value, "__len__") and len(value) > 0


def _not_a_predicate(value: Any) -> Any:
    return "yes"


def _is_point(value: Any) -> bool:
    return isinstance(value, Mapping) and {"x", "y"} <= value.keys()


def _is_circle(value: Any) -> bool:
    return isinstance(value, Mapping) and "radius" in value
