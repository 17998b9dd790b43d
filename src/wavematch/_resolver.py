"""Top-level entry points: wavematch(), resolve(), select()."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from wavematch._errors import ConfigurationFault
from wavematch._reflect import rule_from_callable
from wavematch._rules import Rule, RuleSet
from wavematch._types import DEFAULT_TYPES, TypeRegistry

type RuleLike = Rule | Callable[..., Any]


def as_ruleset(
    rules: RuleSet | Iterable[RuleLike], types: TypeRegistry | None = None
) -> RuleSet:
    """Coerce rules (Rule objects or reflectable callables) into a RuleSet.

    Raises:
        ConfigurationFault: If there are no rules, or they are malformed.
    """
    if isinstance(rules, RuleSet):
        if types is None or types is rules.types:
            return rules
        return RuleSet(rules.rules, types=types)

    items = list(rules)
    if not items:
        msg = "no rules given; supply at least one rule"
        raise ConfigurationFault(msg)
    last = len(items) - 1
    reflected = tuple(
        rule_from_callable(item, index, last=index == last) for index, item in enumerate(items)
    )
    return RuleSet(reflected, types=types or DEFAULT_TYPES)


def resolve(
    inputs: Sequence[Any],
    rules: RuleSet | Iterable[RuleLike],
    *,
    types: TypeRegistry | None = None,
) -> Any:
    """Resolve ``inputs`` against ``rules`` and return the body's result.

    Returns NO_MATCH if no rule applies and there is no wildcard.

    Raises:
        ConfigurationFault: Empty inputs or rules, or malformed rules.
        PatternFault: A guard returned a non-bool.
    """
    if not inputs:
        msg = "no inputs given; cannot match on zero values"
        raise ConfigurationFault(msg)
    return as_ruleset(rules, types).resolve(*inputs)


def select(
    inputs: Sequence[Any],
    rules: RuleSet | Iterable[RuleLike],
    *,
    types: TypeRegistry | None = None,
) -> Rule | None:
    """Return the rule resolve() would run, without running it."""
    if not inputs:
        msg = "no inputs given; cannot match on zero values"
        raise ConfigurationFault(msg)
    return as_ruleset(rules, types).select(*inputs)


def wavematch(*inputs: Any, types: TypeRegistry | None = None) -> Callable[..., Any]:
    """Match ``inputs`` against the rules passed to the returned callable.

    >>> wavematch(3)(
    ...     lambda n=3: "three",
    ...     lambda n=int: "number",
    ...     lambda _: "other",
    ... )
    'three'
    """

    def run(*rules: RuleLike) -> Any:
        return resolve(inputs, rules, types=types)

    return run
