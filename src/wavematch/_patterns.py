"""Pattern model and the pattern construction API.

A pattern describes what one input value must look like for a rule to accept
it at one position. Patterns are frozen dataclasses, immutable after
construction and pattern-matchable via match/case.

Patterns are built directly (``LiteralPattern(3)``), through the builder
functions (``literal(3)``, ``typed("Number")``, ``shape(x=1)``), or by
coercing plain Python objects with ``as_pattern`` (``as_pattern(int)`` is
``typed("Number")``). Patterns compose with ``|`` (union) and ``~``
(negation, literal and typed patterns only).
"""

from __future__ import annotations

import builtins
import datetime
import enum
import re
import types
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Final

import re2

from wavematch._errors import PatternFault
from wavematch._types import Kind, is_primitive

# ═══════════════════════════════════════════════════════════════════════════════
# Constructor names
# ═══════════════════════════════════════════════════════════════════════════════

CONSTRUCTORS: Final[Mapping[str, Kind]] = MappingProxyType(
    {
        "String": Kind.STRING,
        "Number": Kind.INTEGER,
        "Boolean": Kind.BOOLEAN,
        "Function": Kind.FUNCTION,
        "Array": Kind.SEQUENCE,
        "Object": Kind.MAPPING,
        "RegExp": Kind.REGEXP,
        "Date": Kind.DATE,
        "Error": Kind.ERROR,
        "Set": Kind.SET,
        "Map": Kind.MAPPING,
        "Symbol": Kind.SYMBOL,
        "BigInt": Kind.INTEGER,
    }
)

# Built-in exception classes usable as constructor names (exact type match).
ERROR_SUBTYPES: Final = frozenset(
    name
    for name, obj in vars(builtins).items()
    if isinstance(obj, type) and issubclass(obj, BaseException)
)


class LengthPolicy(enum.Enum):
    """How an ArrayShape's declared length relates to the input's length."""

    EXACT = "exact"
    AT_LEAST = "at_least"


# ═══════════════════════════════════════════════════════════════════════════════
# Pattern variants
# ═══════════════════════════════════════════════════════════════════════════════


class _Composable:
    """``a | b`` builds a union, ``~p`` negates a literal or typed pattern."""

    __slots__ = ()

    def __or__(self, other: object) -> UnionPattern:
        return union(self, other)

    def __ror__(self, other: object) -> UnionPattern:
        return union(other, self)

    def __invert__(self) -> Pattern:
        return negate(self)


@dataclass(frozen=True, slots=True)
class AnyPattern(_Composable):
    """Unconstrained named parameter. Always accepts."""


@dataclass(frozen=True, slots=True)
class WildcardPattern:
    """The nominal ``_`` parameter of the fallback rule. Never evaluated."""


@dataclass(frozen=True, slots=True)
class LiteralPattern(_Composable):
    """Accept exactly one primitive value (identity-style equality)."""

    value: Any
    negated: bool = False

    def __post_init__(self) -> None:
        if not is_primitive(self.value):
            msg = (
                f"literal pattern value must be a primitive, "
                f"got {type(self.value).__name__}: {self.value!r}"
            )
            raise PatternFault(msg)


@dataclass(frozen=True, slots=True)
class TypedPattern(_Composable):
    """Accept any value of the kind denoted by a constructor name.

    ``name`` is one of CONSTRUCTORS or a built-in exception class name. The
    latter only accepts instances whose type is exactly that class.

    Raises:
        PatternFault: If the name is not a recognized constructor.
    """

    name: str
    negated: bool = False
    _kind: Kind = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        kind = CONSTRUCTORS.get(self.name)
        if kind is None and self.name in ERROR_SUBTYPES:
            kind = Kind.ERROR
        if kind is None:
            known = ", ".join(sorted(CONSTRUCTORS))
            msg = (
                f"unknown constructor name {self.name!r} "
                f"(known: {known}, or a built-in exception)"
            )
            raise PatternFault(msg)
        object.__setattr__(self, "_kind", kind)

    @property
    def kind(self) -> Kind:
        return self._kind

    @property
    def exact_error_type(self) -> str | None:
        """The exception class name this pattern pins, if any."""
        return self.name if self.name in ERROR_SUBTYPES else None


@dataclass(frozen=True, slots=True)
class CustomTypePattern(_Composable):
    """Accept values whose type name, or immediate parent's name, is ``name``.

    Only one level of inheritance is inspected. Given ``class B(A)`` and
    ``class C(B)``, a ``C`` instance matches "C" and "B" but not "A".
    """

    name: str


@dataclass(frozen=True, slots=True)
class GuardPattern(_Composable):
    """Accept values for which ``predicate`` returns True.

    The predicate must return a bool. Any other result is a PatternFault at
    evaluation time.
    """

    predicate: Callable[[Any], bool]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class ObjectShape(_Composable):
    """Structural mapping pattern.

    Each declared key's constraint must equal the input's value for that key.
    A constraint is a plain value (deep equality) or a nested Pattern. The
    empty shape accepts only empty mappings. It is not "any mapping".
    """

    keys: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", MappingProxyType(dict(self.keys)))

    def __hash__(self) -> int:
        # Hashable whenever every constraint is.
        return hash(tuple(self.keys.items()))

    @property
    def size(self) -> int:
        return len(self.keys)


@dataclass(frozen=True, slots=True)
class ArrayShape(_Composable):
    """Destructuring sequence pattern.

    ``policy`` is EXACT for ``[a, b]`` and AT_LEAST for ``[a, b, *rest]``.
    Elements follow the same constraint rules as ObjectShape values.
    """

    elements: tuple[Any, ...] = ()
    policy: LengthPolicy = LengthPolicy.EXACT

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))

    @property
    def size(self) -> int:
        return len(self.elements)


@dataclass(frozen=True, slots=True)
class UnionPattern(_Composable):
    """Accept if any alternative accepts (short-circuit OR).

    Raises:
        PatternFault: If empty, or an alternative is a union or a wildcard.
    """

    alternatives: tuple[Pattern, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "alternatives", tuple(self.alternatives))
        if not self.alternatives:
            msg = "union pattern requires at least one alternative"
            raise PatternFault(msg)
        for alt in self.alternatives:
            if isinstance(alt, (UnionPattern, WildcardPattern)):
                msg = f"union alternative cannot be {type(alt).__name__}"
                raise PatternFault(msg)
            if not isinstance(alt, PATTERN_TYPES):
                msg = f"union alternative is not a pattern: {alt!r}"
                raise PatternFault(msg)


type Pattern = (
    AnyPattern
    | WildcardPattern
    | LiteralPattern
    | TypedPattern
    | CustomTypePattern
    | GuardPattern
    | ObjectShape
    | ArrayShape
    | UnionPattern
)

PATTERN_TYPES: Final = (
    AnyPattern,
    WildcardPattern,
    LiteralPattern,
    TypedPattern,
    CustomTypePattern,
    GuardPattern,
    ObjectShape,
    ArrayShape,
    UnionPattern,
)

ANY: Final = AnyPattern()
WILDCARD: Final = WildcardPattern()

# ═══════════════════════════════════════════════════════════════════════════════
# Regex guard
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RegexPredicate:
    """Guard predicate: string input searched with a compiled RE2 pattern.

    Non-string inputs are rejected (False), never an error. Uses search, not
    fullmatch, so the pattern may match anywhere in the string.

    RE2 does not support backreferences or lookaround. Patterns using them are
    rejected at compile time.

    Raises:
        PatternFault: If the pattern is not valid RE2 syntax.
    """

    pattern: str
    _compiled: Any = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re2.compile(self.pattern)
        except re2.error as e:
            msg = f'invalid regex pattern "{self.pattern}": {e}'
            raise PatternFault(msg) from e
        object.__setattr__(self, "_compiled", compiled)

    def __call__(self, value: Any, /) -> bool:
        if not isinstance(value, str):
            return False
        return self._compiled.search(value) is not None


# ═══════════════════════════════════════════════════════════════════════════════
# Builders
# ═══════════════════════════════════════════════════════════════════════════════


def literal(value: Any) -> LiteralPattern:
    return LiteralPattern(value)


def typed(name: str) -> TypedPattern:
    return TypedPattern(name)


def instance_of(target: str | type) -> CustomTypePattern:
    """Custom type pattern from a class or a type name."""
    name = target.__name__ if isinstance(target, type) else target
    return CustomTypePattern(name)


def guard(predicate: Callable[[Any], bool], name: str | None = None) -> GuardPattern:
    if not callable(predicate):
        msg = f"guard predicate must be callable, got {type(predicate).__name__}"
        raise PatternFault(msg)
    return GuardPattern(predicate, name=name or getattr(predicate, "__name__", None))


def regex(pattern: str) -> GuardPattern:
    """Guard accepting strings in which ``pattern`` is found (RE2 syntax)."""
    return GuardPattern(RegexPredicate(pattern), name=f"regex({pattern!r})")


def shape(mapping: Mapping[str, Any] | None = None, /, **keys: Any) -> ObjectShape:
    """ObjectShape from a mapping and/or keyword arguments.

    Type objects among the values become typed patterns: ``shape(id=int)``.
    """
    merged = {**(mapping or {}), **keys}
    return ObjectShape({k: _constraint(v) for k, v in merged.items()})


def array(*elements: Any, rest: bool = False) -> ArrayShape:
    """ArrayShape. ``rest=True`` allows trailing elements (``[h, *t]``)."""
    policy = LengthPolicy.AT_LEAST if rest else LengthPolicy.EXACT
    return ArrayShape(tuple(_constraint(e) for e in elements), policy)


def union(*alternatives: Any) -> UnionPattern:
    """Union of patterns. Nested unions are flattened."""
    flat: list[Pattern] = []
    for alt in alternatives:
        p = as_pattern(alt)
        if isinstance(p, UnionPattern):
            flat.extend(p.alternatives)
        else:
            flat.append(p)
    return UnionPattern(tuple(flat))


def negate(pattern: Pattern) -> LiteralPattern | TypedPattern:
    """Flip a literal or typed pattern's acceptance.

    Raises:
        PatternFault: For any other pattern kind.
    """
    match pattern:
        case LiteralPattern() | TypedPattern():
            return replace(pattern, negated=not pattern.negated)
        case _:
            msg = f"only literal and typed patterns can be negated, got {type(pattern).__name__}"
            raise PatternFault(msg)


# ═══════════════════════════════════════════════════════════════════════════════
# Coercion of plain Python objects
# ═══════════════════════════════════════════════════════════════════════════════

_CLASS_CONSTRUCTORS: Final[Mapping[type, str]] = MappingProxyType(
    {
        bool: "Boolean",
        int: "Number",
        str: "String",
        list: "Array",
        tuple: "Array",
        dict: "Object",
        set: "Set",
        frozenset: "Set",
        re.Pattern: "RegExp",
        datetime.date: "Date",
        datetime.datetime: "Date",
        types.FunctionType: "Function",
        BaseException: "Error",
        Exception: "Error",
    }
)


def as_pattern(obj: Any) -> Pattern:
    """Coerce a plain Python object into a Pattern.

    - Patterns pass through unchanged.
    - Builtin classes map to typed patterns (``int`` → Number, ``dict`` →
      Object, ``ValueError`` → ValueError). Other classes become custom type
      patterns.
    - ``dict`` instances become ObjectShapes, and ``list``/``tuple`` instances
      become exact ArrayShapes.
    - Primitives become literals.
    - Remaining callables become guards.

    Raises:
        PatternFault: If the object has no pattern interpretation.
    """
    if isinstance(obj, PATTERN_TYPES):
        return obj
    if isinstance(obj, type):
        name = _CLASS_CONSTRUCTORS.get(obj)
        if name is not None:
            return TypedPattern(name)
        if issubclass(obj, BaseException) and getattr(builtins, obj.__name__, None) is obj:
            return TypedPattern(obj.__name__)
        return CustomTypePattern(obj.__name__)
    if is_primitive(obj):
        return LiteralPattern(obj)
    if isinstance(obj, Mapping):
        return shape(obj)
    if isinstance(obj, (list, tuple)):
        return array(*obj)
    if callable(obj):
        return guard(obj)
    msg = f"cannot build a pattern from {type(obj).__name__}: {obj!r}"
    raise PatternFault(msg)


def _constraint(value: Any) -> Any:
    """Shape constraint: patterns and classes become patterns, the rest stays plain."""
    if isinstance(value, PATTERN_TYPES) or isinstance(value, type):
        return as_pattern(value)
    return value
