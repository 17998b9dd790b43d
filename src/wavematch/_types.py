"""Value classification and core type aliases for wavematch.

The classifier maps any runtime value onto a closed set of Kinds. Every
acceptance decision in the engine dispatches on the Kind of the input,
never on its concrete Python type.
"""

from __future__ import annotations

import datetime
import enum
import functools
import inspect
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Protocol, runtime_checkable

import re2

# Compiled re2 patterns are not re.Pattern instances.
_RE2_PATTERN: Final = type(re2.compile(""))


class Kind(enum.Enum):
    """The shape class of a runtime value."""

    NULL = "Null"
    UNDEFINED = "Undefined"
    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    FLOAT = "Float"
    STRING = "String"
    SEQUENCE = "Sequence"
    MAPPING = "Mapping"
    SET = "Set"
    FUNCTION = "Function"
    REGEXP = "RegExp"
    DATE = "Date"
    ERROR = "Error"
    SYMBOL = "Symbol"
    INSTANCE = "Instance"


class Undefined(enum.Enum):
    """Marker for "no value at all", distinct from None."""

    UNDEFINED = "undefined"

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Final = Undefined.UNDEFINED

# A rule body: called with exactly `arity` positional values.
type Body = Callable[..., Any]


@runtime_checkable
class Predicate(Protocol):
    """A guard: one input in, a bool out.

    Returning anything other than a bool is a PatternFault, not "falsy".
    """

    def __call__(self, value: Any, /) -> bool: ...


def classify(value: object) -> Kind:
    """Classify a runtime value into its Kind.

    ``bool`` is checked before ``int``. Numbers split on integrality, not on
    Python type: ``4.0`` is INTEGER, ``4.2``, ``nan`` and ``inf`` are FLOAT.
    """
    if value is None:
        return Kind.NULL
    if value is UNDEFINED:
        return Kind.UNDEFINED
    if isinstance(value, bool):
        return Kind.BOOLEAN
    if isinstance(value, enum.Enum):
        return Kind.SYMBOL
    if isinstance(value, int):
        return Kind.INTEGER
    if isinstance(value, float):
        return Kind.INTEGER if value.is_integer() else Kind.FLOAT
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, BaseException):
        return Kind.ERROR
    if isinstance(value, (re.Pattern, _RE2_PATTERN)):
        return Kind.REGEXP
    if isinstance(value, datetime.date):
        return Kind.DATE
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, (set, frozenset)):
        return Kind.SET
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return Kind.SEQUENCE
    if inspect.isroutine(value) or inspect.isclass(value):
        return Kind.FUNCTION
    if isinstance(value, functools.partial):
        return Kind.FUNCTION
    return Kind.INSTANCE


def type_names(value: object) -> tuple[str, str | None]:
    """Return the value's own type name and its immediate parent's name.

    Only one level of inheritance is reported: ``class C(B)`` where
    ``class B(A)`` yields ``("C", "B")``, never ``"A"``. A class deriving
    directly from ``object`` has no parent.
    """
    cls = type(value)
    bases = [base for base in cls.__bases__ if base is not object]
    return cls.__name__, (bases[0].__name__ if bases else None)


def is_primitive(value: object) -> bool:
    """True for values a LiteralPattern may hold."""
    return classify(value) in _PRIMITIVE_KINDS


_PRIMITIVE_KINDS: Final = frozenset(
    {
        Kind.NULL,
        Kind.UNDEFINED,
        Kind.BOOLEAN,
        Kind.INTEGER,
        Kind.FLOAT,
        Kind.STRING,
        Kind.SYMBOL,
    }
)


# ═══════════════════════════════════════════════════════════════════════════════
# Type tags for custom type patterns
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TypeTag:
    """A named value type with an optional single parent name.

    Lets custom type patterns name things that are not Python classes, for
    example mappings of a certain shape coming from JSON.
    """

    name: str
    check: Callable[[Any], bool]
    parent: str | None = None


@dataclass(frozen=True, slots=True)
class TypeRegistry:
    """Resolves a value to its (type name, parent name) pair.

    Registered tags are consulted first, in registration order. Values no tag
    claims fall back to class introspection via type_names().
    """

    tags: tuple[TypeTag, ...] = ()

    def type_names(self, value: object) -> tuple[str, str | None]:
        for tag in self.tags:
            if tag.check(value):
                return tag.name, tag.parent
        return type_names(value)

    def __contains__(self, name: object) -> bool:
        return any(tag.name == name for tag in self.tags)


DEFAULT_TYPES: Final = TypeRegistry()
