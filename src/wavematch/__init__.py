"""wavematch: pattern-matching control flow with specificity-aware resolution.

Given input values and an ordered list of rules, each declaring one pattern
per input position, run the first rule whose patterns all accept the inputs.
Otherwise run the wildcard rule. All public types are exported from this module
for flat imports:

    from wavematch import wavematch, rule, wildcard, typed, shape

    wavematch({"x": 1, "y": 2})(
        lambda o={"x": 1}: "x only",
        lambda o={"x": 1, "y": 2}: "x and y",
        lambda _: "other",
    )  # → "x and y"
"""

__version__ = "0.2.0"

# Config types — see wavematch._config for details
from wavematch._config import (
    ActionConfig,
    AnyConfig,
    ArrayConfig,
    ConfigParseError,
    GuardConfig,
    InstanceConfig,
    LiteralConfig,
    PatternConfig,
    RegexConfig,
    RuleConfig,
    RuleSetConfig,
    ShapeConfig,
    TypeConfig,
    UnionConfig,
    ValueConfig,
    parse_pattern_config,
    parse_ruleset_config,
)

# Acceptance engine
from wavematch._engine import MatchContext, accepts

# Equality
from wavematch._equality import deep_equal, same_value

# Errors
from wavematch._errors import (
    ConfigurationFault,
    PatternFault,
    SpecificityWarning,
    WavematchError,
)

# Patterns
from wavematch._patterns import (
    ANY,
    CONSTRUCTORS,
    WILDCARD,
    AnyPattern,
    ArrayShape,
    CustomTypePattern,
    GuardPattern,
    LengthPolicy,
    LiteralPattern,
    ObjectShape,
    Pattern,
    RegexPredicate,
    TypedPattern,
    UnionPattern,
    WildcardPattern,
    array,
    as_pattern,
    guard,
    instance_of,
    literal,
    negate,
    regex,
    shape,
    typed,
    union,
)

# Reflection
from wavematch._reflect import rule_from_callable

# Registry — see wavematch._registry for details
from wavematch._registry import (
    MAX_RULES,
    MAX_UNION_ALTERNATIVES,
    Registry,
    RegistryBuilder,
    TooManyAlternativesError,
    TooManyRulesError,
    UnknownGuardError,
)

# Resolution
from wavematch._resolver import as_ruleset, resolve, select, wavematch

# Rules
from wavematch._rules import NO_MATCH, NoMatch, Rule, RuleSet, rule, wildcard
from wavematch._specificity import SpecificityIndex

# Value classification
from wavematch._types import (
    DEFAULT_TYPES,
    UNDEFINED,
    Kind,
    Predicate,
    TypeRegistry,
    TypeTag,
    Undefined,
    classify,
    type_names,
)

__all__ = [
    # Entry points
    "wavematch",
    "resolve",
    "select",
    "as_ruleset",
    # Rules
    "Rule",
    "RuleSet",
    "rule",
    "wildcard",
    "rule_from_callable",
    "NoMatch",
    "NO_MATCH",
    # Patterns
    "Pattern",
    "AnyPattern",
    "WildcardPattern",
    "LiteralPattern",
    "TypedPattern",
    "CustomTypePattern",
    "GuardPattern",
    "ObjectShape",
    "ArrayShape",
    "UnionPattern",
    "LengthPolicy",
    "RegexPredicate",
    "ANY",
    "WILDCARD",
    "CONSTRUCTORS",
    "literal",
    "typed",
    "instance_of",
    "guard",
    "regex",
    "shape",
    "array",
    "union",
    "negate",
    "as_pattern",
    # Engine
    "accepts",
    "MatchContext",
    "SpecificityIndex",
    "deep_equal",
    "same_value",
    # Value classification
    "Kind",
    "classify",
    "type_names",
    "Predicate",
    "TypeRegistry",
    "TypeTag",
    "DEFAULT_TYPES",
    "Undefined",
    "UNDEFINED",
    # Errors
    "WavematchError",
    "ConfigurationFault",
    "PatternFault",
    "SpecificityWarning",
    # Config types
    "PatternConfig",
    "AnyConfig",
    "LiteralConfig",
    "TypeConfig",
    "InstanceConfig",
    "GuardConfig",
    "RegexConfig",
    "ShapeConfig",
    "ArrayConfig",
    "UnionConfig",
    "ValueConfig",
    "ActionConfig",
    "RuleConfig",
    "RuleSetConfig",
    "ConfigParseError",
    "parse_pattern_config",
    "parse_ruleset_config",
    # Registry
    "RegistryBuilder",
    "Registry",
    "UnknownGuardError",
    "TooManyRulesError",
    "TooManyAlternativesError",
    "MAX_RULES",
    "MAX_UNION_ALTERNATIVES",
]
