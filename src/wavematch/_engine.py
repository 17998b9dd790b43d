"""Acceptance engine: does one pattern accept one input value?

Decisions dispatch on the pattern variant, then on the Kind of the input.
Most variants decide locally. Typed ``Number``/``String``/``Object``/``Array``
patterns and shape patterns also consult the SpecificityIndex of the
current resolution (see wavematch._specificity).
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from wavematch._equality import deep_equal, same_value
from wavematch._errors import PatternFault, SpecificityWarning
from wavematch._patterns import (
    PATTERN_TYPES,
    AnyPattern,
    ArrayShape,
    CustomTypePattern,
    GuardPattern,
    LengthPolicy,
    LiteralPattern,
    ObjectShape,
    TypedPattern,
    UnionPattern,
    WildcardPattern,
)
from wavematch._specificity import SpecificityIndex
from wavematch._types import DEFAULT_TYPES, UNDEFINED, Kind, TypeRegistry, classify

if TYPE_CHECKING:
    from wavematch._patterns import Pattern
    from wavematch._rules import Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MatchContext:
    """Everything acceptance needs beyond the (pattern, value) pair."""

    index: SpecificityIndex
    types: TypeRegistry = DEFAULT_TYPES
    rule_names: tuple[str | None, ...] = field(default=(), repr=False)
    # True inside a shape constraint, where array shapes follow their own length policy.
    nested: bool = False

    @classmethod
    def build(
        cls, rules: Sequence[Rule], width: int, types: TypeRegistry = DEFAULT_TYPES
    ) -> MatchContext:
        """Build the context for resolving ``width`` inputs against ``rules``."""
        candidates = [(i, rule.positions) for i, rule in enumerate(rules) if not rule.is_wildcard]
        index = SpecificityIndex.build(candidates, width, len(candidates))
        return cls(index=index, types=types, rule_names=tuple(r.name for r in rules))

    def standalone(self, pattern: Pattern) -> MatchContext:
        """Context for a nested constraint, evaluated with no sibling rules."""
        return MatchContext(
            index=SpecificityIndex.standalone(pattern), types=self.types, nested=True
        )

    def describe(self, rule_index: int) -> str:
        name = self.rule_names[rule_index] if rule_index < len(self.rule_names) else None
        if name and name != "<lambda>":
            return f"rule {name!r} at index {rule_index}"
        return f"rule at index {rule_index}"


def accepts(
    pattern: Pattern,
    value: Any,
    position: int,
    rule_index: int,
    ctx: MatchContext,
) -> bool:
    """Decide whether ``pattern`` accepts ``value`` at ``position`` of a rule.

    Raises:
        PatternFault: If a guard returns a non-bool, or a wildcard is evaluated.
    """
    match pattern:
        case AnyPattern():
            return True
        case LiteralPattern(value=expected, negated=negated):
            return same_value(expected, value) != negated
        case TypedPattern():
            return _typed(pattern, value, position, rule_index, ctx)
        case CustomTypePattern(name=name):
            own, parent = ctx.types.type_names(value)
            return name in (own, parent)
        case GuardPattern():
            return _guard(pattern, value, position, rule_index, ctx)
        case UnionPattern(alternatives=alts):
            return any(accepts(alt, value, position, rule_index, ctx) for alt in alts)
        case ObjectShape():
            if classify(value) is not Kind.MAPPING:
                return False
            return _object_shape(pattern, value, position, rule_index, ctx)
        case ArrayShape():
            if classify(value) is not Kind.SEQUENCE:
                return False
            return _array_shape(pattern, value, ctx)
        case WildcardPattern():
            msg = f"{ctx.describe(rule_index)}: wildcard parameter cannot be evaluated"
            raise PatternFault(msg)
        case _:
            msg = f"{ctx.describe(rule_index)}: not a pattern at position {position}: {pattern!r}"
            raise PatternFault(msg)


# ─── Typed constructors ─────────────────────────────────────────────────────


def _kind_matches(pattern: TypedPattern, value: Any, kind: Kind) -> bool:
    if pattern.exact_error_type is not None:
        return kind is Kind.ERROR and type(value).__name__ == pattern.exact_error_type
    return kind is pattern.kind


def _typed(
    pattern: TypedPattern, value: Any, position: int, rule_index: int, ctx: MatchContext
) -> bool:
    kind = classify(value)
    # Negation is a plain kind test. Specificity does not apply.
    if pattern.negated:
        return not _kind_matches(pattern, value, kind)

    match pattern.name:
        case "Number" | "String":
            # Floats are not Numbers: only a float literal accepts a float.
            if not _kind_matches(pattern, value, kind):
                return False
            return not ctx.index.literal_preempts(position, value)
        case "Object":
            if kind is not Kind.MAPPING:
                return False
            return _generic_object(value, position, rule_index, ctx)
        case "Array":
            if kind is not Kind.SEQUENCE:
                return False
            return _generic_array(value, position, rule_index, ctx)
        case _:
            return _kind_matches(pattern, value, kind)


def _guard(
    pattern: GuardPattern, value: Any, position: int, rule_index: int, ctx: MatchContext
) -> bool:
    result = pattern.predicate(value)
    if not isinstance(result, bool):
        label = f" {pattern.name!r}" if pattern.name else ""
        msg = (
            f"{ctx.describe(rule_index)} has a guard{label} at position {position} "
            f"that returned {type(result).__name__}, expected bool"
        )
        raise PatternFault(msg)
    return result


# ─── Objects ────────────────────────────────────────────────────────────────


def _generic_object(
    value: Mapping[Any, Any], position: int, rule_index: int, ctx: MatchContext
) -> bool:
    """``Object`` accepts unless a fitting shape is declared after it."""
    later = [i for i, _ in ctx.index.object_candidates(position, len(value)) if i > rule_index]
    if later:
        msg = (
            f"{ctx.describe(rule_index)} uses the Object constructor at position "
            f"{position} before the more specific object shape at index {later[0]}; "
            f"declare the generic rule after every shape rule it could shadow"
        )
        logger.warning(msg)
        warnings.warn(msg, SpecificityWarning, stacklevel=2)
        return False
    return True


def _object_shape(
    pattern: ObjectShape,
    value: Mapping[Any, Any],
    position: int,
    rule_index: int,
    ctx: MatchContext,
) -> bool:
    if pattern.size == 0:
        return len(value) == 0
    # More declared keys than the input has: reject, no warning.
    if pattern.size > len(value):
        return False

    candidates = ctx.index.object_candidates(position, len(value))
    best = max((size for _, size in candidates), default=pattern.size)
    if not any(i == rule_index for i, size in candidates if size == best):
        return False

    return all(
        _constraint_accepts(constraint, value[key] if key in value else UNDEFINED, ctx)
        for key, constraint in pattern.keys.items()
    )


# ─── Arrays ─────────────────────────────────────────────────────────────────


def _generic_array(
    value: Sequence[Any], position: int, rule_index: int, ctx: MatchContext
) -> bool:
    """``Array`` defers to the first destructuring shape that fits the input.

    If that shape's rule comes earlier, the scan already tried it and it
    failed, so the generic pattern accepts. If it comes later, the generic
    pattern rejects.
    """
    destructurer = ctx.index.first_array_destructurer(position, len(value))
    if destructurer is not None:
        return destructurer < rule_index
    return True


def _array_shape(pattern: ArrayShape, value: Sequence[Any], ctx: MatchContext) -> bool:
    size = pattern.size
    if size == 0:
        return len(value) == 0
    if size > len(value):
        return False

    if ctx.nested:
        prefix = pattern.policy is LengthPolicy.AT_LEAST
    else:
        # A rule position compares only the prefix when this is the sole
        # destructuring rule, whatever the policy. With siblings the whole
        # sequence must match, so rest tails are not supported.
        prefix = ctx.index.single_destructurer
    if not prefix and size != len(value):
        return False
    return all(
        _constraint_accepts(constraint, item, ctx)
        for constraint, item in zip(pattern.elements, value, strict=False)
    )


# ─── Nested constraints ─────────────────────────────────────────────────────


def _constraint_accepts(constraint: Any, item: Any, ctx: MatchContext) -> bool:
    if isinstance(constraint, PATTERN_TYPES):
        return accepts(constraint, item, 0, 0, ctx.standalone(constraint))
    return deep_equal(constraint, item)
