"""Config types for data-driven rule sets.

A rule set can be described as plain data (JSON/YAML) instead of Python
code. Config-driven construction path:
  dict → parse_ruleset_config() → RuleSetConfig → Registry.load_ruleset() → RuleSet

Relationship to runtime types:

| Config type        | Runtime type        |
|--------------------|---------------------|
| RuleSetConfig      | RuleSet             |
| RuleConfig         | Rule                |
| ActionConfig       | wildcard Rule       |
| AnyConfig          | AnyPattern          |
| LiteralConfig      | LiteralPattern      |
| TypeConfig         | TypedPattern        |
| InstanceConfig     | CustomTypePattern   |
| GuardConfig        | GuardPattern        |
| RegexConfig        | GuardPattern (re2)  |
| ShapeConfig        | ObjectShape         |
| ArrayConfig        | ArrayShape          |
| UnionConfig        | UnionPattern        |
| ValueConfig        | plain constraint    |

Pattern dict shapes (exactly one discriminating key each):

    "_"  or  {any: true}
    {literal: 3}                   {not: {literal: 3}}
    {type: Number}                 {not: {type: String}}
    {instance: Person}
    {guard: positive}              (name resolved by the Registry)
    {regex: "^a+"}
    {shape: {x: 1, y: {type: Number}}}
    {array: [1, "_"], rest: true}
    {union: [{type: RegExp}, {type: Array}]}

Inside shape and array constraints, any other value is compared by deep
equality. ``{value: ...}`` forces a plain value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wavematch._errors import ConfigurationFault

# ═══════════════════════════════════════════════════════════════════════════════
# Config types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AnyConfig:
    """Unconstrained position."""


@dataclass(frozen=True, slots=True)
class LiteralConfig:
    value: Any
    negated: bool = False


@dataclass(frozen=True, slots=True)
class TypeConfig:
    name: str
    negated: bool = False


@dataclass(frozen=True, slots=True)
class InstanceConfig:
    name: str


@dataclass(frozen=True, slots=True)
class GuardConfig:
    """Named guard, resolved via the registry's guard table."""

    name: str


@dataclass(frozen=True, slots=True)
class RegexConfig:
    pattern: str


@dataclass(frozen=True, slots=True)
class ValueConfig:
    """Plain constraint value compared by deep equality."""

    value: Any


@dataclass(frozen=True, slots=True)
class ShapeConfig:
    keys: tuple[tuple[str, ConstraintConfig], ...]


@dataclass(frozen=True, slots=True)
class ArrayConfig:
    elements: tuple[ConstraintConfig, ...]
    rest: bool = False


@dataclass(frozen=True, slots=True)
class UnionConfig:
    alternatives: tuple[PatternConfig, ...]


type PatternConfig = (
    AnyConfig
    | LiteralConfig
    | TypeConfig
    | InstanceConfig
    | GuardConfig
    | RegexConfig
    | ShapeConfig
    | ArrayConfig
    | UnionConfig
)

type ConstraintConfig = PatternConfig | ValueConfig


@dataclass(frozen=True, slots=True)
class ActionConfig[A]:
    """Return this action when the fallback applies."""

    action: A


@dataclass(frozen=True, slots=True)
class RuleConfig[A]:
    """One rule: a pattern per input position, and the action it yields."""

    patterns: tuple[PatternConfig, ...]
    action: A
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RuleSetConfig[A]:
    """Configuration for a RuleSet.

    ``on_no_match`` becomes the trailing wildcard rule when present.
    """

    rules: tuple[RuleConfig[A], ...]
    on_no_match: ActionConfig[A] | None = field(default=None)


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════

_PATTERN_KEYS = frozenset(
    {"any", "literal", "type", "not", "instance", "guard", "regex", "shape", "array", "union"}
)


class ConfigParseError(ConfigurationFault):
    """Error parsing a config dict into config types."""


def parse_ruleset_config(data: dict[str, Any]) -> RuleSetConfig[Any]:
    """Parse a dict into a RuleSetConfig.

    This is the main entry point for config loading.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    raw_rules = data.get("rules")
    if raw_rules is None:
        msg = "missing required field 'rules'"
        raise ConfigParseError(msg)
    if not isinstance(raw_rules, list):
        msg = f"'rules' must be a list, got {type(raw_rules).__name__}"
        raise ConfigParseError(msg)

    rules = tuple(_parse_rule(r, i) for i, r in enumerate(raw_rules))

    on_no_match = None
    if "on_no_match" in data:
        on_no_match = _parse_action(data["on_no_match"])

    return RuleSetConfig(rules=rules, on_no_match=on_no_match)


def parse_pattern_config(data: Any) -> PatternConfig:
    """Parse a single pattern description.

    Raises:
        ConfigParseError: If the description is malformed.
    """
    if data == "_":
        return AnyConfig()
    if not isinstance(data, dict):
        msg = f"pattern must be a dict or '_', got {type(data).__name__}: {data!r}"
        raise ConfigParseError(msg)

    keys = set(data) & _PATTERN_KEYS
    if len(keys) != 1:
        msg = (
            f"pattern must contain exactly one of {sorted(_PATTERN_KEYS)}, "
            f"got keys: {sorted(data)}"
        )
        raise ConfigParseError(msg)
    (kind,) = keys
    body = data[kind]

    match kind:
        case "any":
            return AnyConfig()
        case "literal":
            return LiteralConfig(value=body)
        case "type":
            return TypeConfig(name=_expect_str(body, "type"))
        case "not":
            inner = parse_pattern_config(body)
            match inner:
                case LiteralConfig(value=v, negated=n):
                    return LiteralConfig(value=v, negated=not n)
                case TypeConfig(name=name, negated=n):
                    return TypeConfig(name=name, negated=not n)
                case _:
                    msg = f"'not' applies only to literal or type patterns, got {body!r}"
                    raise ConfigParseError(msg)
        case "instance":
            return InstanceConfig(name=_expect_str(body, "instance"))
        case "guard":
            return GuardConfig(name=_expect_str(body, "guard"))
        case "regex":
            return RegexConfig(pattern=_expect_str(body, "regex"))
        case "shape":
            if not isinstance(body, dict):
                msg = f"shape must be a dict, got {type(body).__name__}"
                raise ConfigParseError(msg)
            return ShapeConfig(
                keys=tuple((str(k), _parse_constraint(v)) for k, v in body.items())
            )
        case "array":
            if not isinstance(body, list):
                msg = f"array must be a list, got {type(body).__name__}"
                raise ConfigParseError(msg)
            rest = data.get("rest", False)
            if not isinstance(rest, bool):
                msg = f"array 'rest' must be a bool, got {type(rest).__name__}"
                raise ConfigParseError(msg)
            return ArrayConfig(elements=tuple(_parse_constraint(e) for e in body), rest=rest)
        case "union":
            if not isinstance(body, list) or not body:
                msg = "union must be a non-empty list of patterns"
                raise ConfigParseError(msg)
            alternatives = tuple(parse_pattern_config(alt) for alt in body)
            if any(isinstance(alt, UnionConfig) for alt in alternatives):
                msg = "union alternatives cannot themselves be unions"
                raise ConfigParseError(msg)
            return UnionConfig(alternatives=alternatives)
    msg = f"unknown pattern kind: {kind!r}"  # pragma: no cover
    raise ConfigParseError(msg)  # pragma: no cover


def _parse_rule(data: dict[str, Any], index: int) -> RuleConfig[Any]:
    if not isinstance(data, dict):
        msg = f"rule {index} must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)
    if "patterns" not in data:
        msg = f"rule {index} missing required field 'patterns'"
        raise ConfigParseError(msg)
    if "action" not in data:
        msg = f"rule {index} missing required field 'action'"
        raise ConfigParseError(msg)

    raw_patterns = data["patterns"]
    if not isinstance(raw_patterns, list):
        msg = f"rule {index} 'patterns' must be a list, got {type(raw_patterns).__name__}"
        raise ConfigParseError(msg)

    name = data.get("name")
    if name is not None and not isinstance(name, str):
        msg = f"rule {index} 'name' must be a string, got {type(name).__name__}"
        raise ConfigParseError(msg)

    return RuleConfig(
        patterns=tuple(parse_pattern_config(p) for p in raw_patterns),
        action=data["action"],
        name=name,
    )


def _parse_action(data: dict[str, Any]) -> ActionConfig[Any]:
    if not isinstance(data, dict):
        msg = f"on_no_match must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)
    if "action" not in data:
        msg = "on_no_match missing required field 'action'"
        raise ConfigParseError(msg)
    return ActionConfig(action=data["action"])


def _parse_constraint(data: Any) -> ConstraintConfig:
    if data == "_":
        return AnyConfig()
    if isinstance(data, dict):
        if set(data) == {"value"}:
            return ValueConfig(value=data["value"])
        if set(data) & _PATTERN_KEYS:
            return parse_pattern_config(data)
    return ValueConfig(value=data)


def _expect_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        msg = f"'{key}' must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value
