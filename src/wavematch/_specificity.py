"""Cross-rule specificity index.

Some acceptance decisions depend on sibling rules, not just on the pattern
being evaluated:

- A generic ``Number``/``String`` pattern rejects an input that any sibling
  literal pattern at the same position equals exactly.
- A generic ``Object`` pattern rejects when a shape pattern that fits the
  input is declared after it.
- A concrete ObjectShape accepts only if it ties for the most keys among the
  shapes that fit the input ("best fit").
- A generic ``Array`` pattern defers to the first destructuring ArrayShape
  that fits the input.

SpecificityIndex collects, once per resolution, the per-position facts
those decisions need, so acceptance never rescans the rule list.

Every non-wildcard rule contributes, whatever its arity, for each position
it declares a pattern at. The wildcard never does.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from wavematch._equality import same_value
from wavematch._patterns import ArrayShape, LiteralPattern, ObjectShape, UnionPattern

if TYPE_CHECKING:
    from wavematch._patterns import Pattern


@dataclass(frozen=True, slots=True)
class _PositionFacts:
    # Plain (non-negated, top-level) literal values.
    literals: tuple[Any, ...] = ()
    # (rule_index, key_count) for object shapes, union alternatives included.
    objects: tuple[tuple[int, int], ...] = ()
    # (rule_index, length) for top-level array shapes, in declaration order.
    arrays: tuple[tuple[int, int], ...] = ()


@dataclass(frozen=True, slots=True)
class SpecificityIndex:
    """Per-position specificity facts for one resolution.

    INV: immutable, and derived only from the rules it was built from.
    """

    positions: tuple[_PositionFacts, ...]
    non_wildcard_count: int

    @classmethod
    def build(
        cls,
        entries: Iterable[tuple[int, Sequence[Pattern]]],
        width: int,
        non_wildcard_count: int,
    ) -> SpecificityIndex:
        """Index ``(rule_index, positions)`` pairs of the non-wildcard rules."""
        literals: list[list[Any]] = [[] for _ in range(width)]
        objects: list[list[tuple[int, int]]] = [[] for _ in range(width)]
        arrays: list[list[tuple[int, int]]] = [[] for _ in range(width)]

        for rule_index, patterns in entries:
            for position, pattern in enumerate(patterns[:width]):
                match pattern:
                    case LiteralPattern(value=value, negated=False):
                        literals[position].append(value)
                    case ObjectShape():
                        objects[position].append((rule_index, pattern.size))
                    case ArrayShape():
                        arrays[position].append((rule_index, pattern.size))
                    case UnionPattern(alternatives=alts):
                        objects[position].extend(
                            (rule_index, alt.size)
                            for alt in alts
                            if isinstance(alt, ObjectShape)
                        )

        facts = tuple(
            _PositionFacts(tuple(literals[p]), tuple(objects[p]), tuple(arrays[p]))
            for p in range(width)
        )
        return cls(positions=facts, non_wildcard_count=non_wildcard_count)

    @classmethod
    def standalone(cls, pattern: Pattern) -> SpecificityIndex:
        """Index for evaluating one pattern with no siblings (nested constraints)."""
        return cls.build([(0, (pattern,))], width=1, non_wildcard_count=1)

    def literal_preempts(self, position: int, value: object) -> bool:
        """True if some non-wildcard rule has a literal equal to ``value`` here."""
        return any(same_value(lit, value) for lit in self._facts(position).literals)

    def object_candidates(self, position: int, key_count: int) -> list[tuple[int, int]]:
        """Shapes at ``position`` with no more keys than the input has."""
        return [(i, size) for i, size in self._facts(position).objects if size <= key_count]

    def first_array_destructurer(self, position: int, length: int) -> int | None:
        """Index of the first rule whose array shape here fits ``length`` items."""
        for rule_index, size in self._facts(position).arrays:
            if size <= length:
                return rule_index
        return None

    @property
    def single_destructurer(self) -> bool:
        """True when the rule set has exactly one non-wildcard rule."""
        return self.non_wildcard_count == 1

    def _facts(self, position: int) -> _PositionFacts:
        if position < len(self.positions):
            return self.positions[position]
        return _EMPTY


_EMPTY = _PositionFacts()
