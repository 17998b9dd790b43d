"""Registry for config-driven rule set construction.

Config data can name guards and custom types, but cannot carry code. The
registry maps those names to Python callables:

- RegistryBuilder → .build() → Registry (immutable)
- Guards are plain callables: (value) → bool
- Type tags are (name, check, parent) triples consulted by custom type patterns
- load_ruleset() walks the config tree and constructs runtime types

Example::

    builder = RegistryBuilder()
    builder.guard("positive", lambda v: isinstance(v, int) and v > 0)
    registry = builder.build()

    config = parse_ruleset_config(yaml.safe_load(text))
    rules = registry.load_ruleset(config)
    rules.resolve(42)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from wavematch._config import (
    AnyConfig,
    ArrayConfig,
    GuardConfig,
    InstanceConfig,
    LiteralConfig,
    RegexConfig,
    ShapeConfig,
    TypeConfig,
    UnionConfig,
    ValueConfig,
)
from wavematch._errors import ConfigurationFault, PatternFault
from wavematch._patterns import (
    ANY,
    ArrayShape,
    CustomTypePattern,
    GuardPattern,
    LengthPolicy,
    LiteralPattern,
    ObjectShape,
    TypedPattern,
    UnionPattern,
    regex,
)
from wavematch._rules import Rule, RuleSet, wildcard
from wavematch._types import TypeRegistry, TypeTag

if TYPE_CHECKING:
    from collections.abc import Callable

    from wavematch._config import ConstraintConfig, PatternConfig, RuleConfig, RuleSetConfig
    from wavematch._patterns import Pattern

# ═══════════════════════════════════════════════════════════════════════════════
# Limits
# ═══════════════════════════════════════════════════════════════════════════════

MAX_RULES = 256
MAX_UNION_ALTERNATIVES = 64

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class UnknownGuardError(PatternFault):
    """A guard name was not found in the registry."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = f"unknown guard: {name!r} (registered: {registered})"
        else:
            msg = f"unknown guard: {name!r} (no guards are registered)"
        super().__init__(msg)


class TooManyRulesError(ConfigurationFault):
    """Config has too many rules (width-based limit)."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(f"too many rules: {count} exceeds maximum {max_}")


class TooManyAlternativesError(PatternFault):
    """A union has too many alternatives (width-based limit)."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(
            f"too many union alternatives: {count} exceeds maximum {max_}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════

type GuardFn = Callable[[Any], bool]


class RegistryBuilder:
    """Builder for constructing a Registry.

    Register guards and type tags by name, then call build() to produce an
    immutable Registry. Registering a name twice replaces the earlier entry.
    """

    def __init__(self) -> None:
        self._guards: dict[str, GuardFn] = {}
        self._types: dict[str, TypeTag] = {}

    def guard(self, name: str, predicate: GuardFn) -> RegistryBuilder:
        """Register a named guard predicate."""
        self._guards[name] = predicate
        return self

    def type(
        self, name: str, check: Callable[[Any], bool], parent: str | None = None
    ) -> RegistryBuilder:
        """Register a type tag: values passing ``check`` are of type ``name``."""
        self._types[name] = TypeTag(name=name, check=check, parent=parent)
        return self

    def build(self) -> Registry:
        """Freeze the registry. No further registration is possible."""
        return Registry(
            _guards=MappingProxyType(dict(self._guards)),
            types=TypeRegistry(tuple(self._types.values())),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class _ActionBody:
    """Rule body that ignores its inputs and returns a configured action."""

    action: Any

    def __call__(self, *_: Any) -> Any:
        return self.action


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable registry of guards and type tags.

    Constructed via RegistryBuilder. Use load_ruleset() to compile config into
    a runtime RuleSet.
    """

    _guards: MappingProxyType[str, GuardFn] = field(
        default_factory=lambda: MappingProxyType({})
    )
    types: TypeRegistry = field(default_factory=TypeRegistry)

    def load_ruleset(self, config: RuleSetConfig[Any]) -> RuleSet:
        """Load a RuleSet from configuration.

        Each rule's body returns its configured action. ``on_no_match``
        becomes the trailing wildcard.

        Raises:
            TooManyRulesError: too many rules
            TooManyAlternativesError: too many union alternatives
            UnknownGuardError: guard name not registered
            PatternFault: invalid pattern (unknown constructor, bad regex, ...)
            ConfigurationFault: structural violation (e.g. empty rule list)
        """
        if len(config.rules) > MAX_RULES:
            raise TooManyRulesError(len(config.rules), MAX_RULES)

        rules = [self._load_rule(rc) for rc in config.rules]
        if config.on_no_match is not None:
            rules.append(wildcard(_ActionBody(config.on_no_match.action)))
        return RuleSet(tuple(rules), types=self.types)

    @property
    def guard_count(self) -> int:
        """Number of registered guards."""
        return len(self._guards)

    def contains_guard(self, name: str) -> bool:
        """Check if a guard name is registered."""
        return name in self._guards

    def guard_names(self) -> list[str]:
        """Return all registered guard names (sorted)."""
        return sorted(self._guards.keys())

    def type_names(self) -> list[str]:
        """Return all registered type tag names (sorted)."""
        return sorted(tag.name for tag in self.types.tags)

    # ── Private loading methods ────────────────────────────────────────────

    def _load_rule(self, config: RuleConfig[Any]) -> Rule:
        positions = tuple(self._load_pattern(p) for p in config.patterns)
        return Rule(positions, _ActionBody(config.action), name=config.name)

    def _load_pattern(self, config: PatternConfig) -> Pattern:
        match config:
            case AnyConfig():
                return ANY
            case LiteralConfig(value=value, negated=negated):
                return LiteralPattern(value, negated=negated)
            case TypeConfig(name=name, negated=negated):
                return TypedPattern(name, negated=negated)
            case InstanceConfig(name=name):
                return CustomTypePattern(name)
            case GuardConfig(name=name):
                predicate = self._guards.get(name)
                if predicate is None:
                    raise UnknownGuardError(name, list(self._guards.keys()))
                return GuardPattern(predicate, name=name)
            case RegexConfig(pattern=pattern):
                return regex(pattern)
            case ShapeConfig(keys=keys):
                return ObjectShape({k: self._load_constraint(c) for k, c in keys})
            case ArrayConfig(elements=elements, rest=rest):
                policy = LengthPolicy.AT_LEAST if rest else LengthPolicy.EXACT
                return ArrayShape(tuple(self._load_constraint(e) for e in elements), policy)
            case UnionConfig(alternatives=alternatives):
                if len(alternatives) > MAX_UNION_ALTERNATIVES:
                    raise TooManyAlternativesError(len(alternatives), MAX_UNION_ALTERNATIVES)
                return UnionPattern(tuple(self._load_pattern(a) for a in alternatives))
            case _:  # pragma: no cover
                msg = f"unknown pattern config type: {type(config).__name__}"
                raise PatternFault(msg)

    def _load_constraint(self, config: ConstraintConfig) -> Any:
        if isinstance(config, ValueConfig):
            return config.value
        return self._load_pattern(config)
