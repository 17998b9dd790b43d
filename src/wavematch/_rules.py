"""Rule and RuleSet: ordered candidate rules with first-match-wins resolution.

Resolution semantics:

- Rules are scanned in declaration order. A rule whose arity differs from the
  number of inputs is skipped without evaluating its patterns.
- A rule is selected when every position accepts (short-circuit AND). The
  selected rule's body runs and no further rules are consulted.
- If nothing is selected, the wildcard rule's body runs with no inputs bound.
  Without a wildcard the outcome is NO_MATCH.

Structural validation runs automatically at construction time. A malformed
rule set raises ConfigurationFault before any input is seen.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

from wavematch._engine import MatchContext, accepts
from wavematch._errors import ConfigurationFault, PatternFault
from wavematch._patterns import PATTERN_TYPES, WILDCARD, WildcardPattern, as_pattern
from wavematch._types import DEFAULT_TYPES, UNDEFINED, TypeRegistry

if TYPE_CHECKING:
    from wavematch._patterns import Pattern
    from wavematch._types import Body

logger = logging.getLogger(__name__)


class NoMatch(enum.Enum):
    """Outcome of a resolution in which no rule applied.

    Not an error: callers decide what "nothing matched" means for them.
    """

    NO_MATCH = "no match"

    def __repr__(self) -> str:
        return "NO_MATCH"

    def __bool__(self) -> bool:
        return False


NO_MATCH: Final = NoMatch.NO_MATCH


@dataclass(frozen=True, slots=True)
class Rule:
    """One candidate: a pattern per input position, plus a body.

    For the wildcard rule, ``positions`` is ``()`` or ``(WILDCARD,)``. The
    single wildcard parameter is nominal and carries no pattern.
    """

    positions: tuple[Pattern, ...]
    body: Body
    is_wildcard: bool = False
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", tuple(self.positions))
        if not callable(self.body):
            msg = f"rule body must be callable, got {type(self.body).__name__}"
            raise ConfigurationFault(msg)
        for position, pattern in enumerate(self.positions):
            if not isinstance(pattern, PATTERN_TYPES):
                msg = f"position {position} is not a pattern: {pattern!r}"
                raise PatternFault(msg)

    @property
    def arity(self) -> int:
        return len(self.positions)

    def invoke(self, inputs: tuple[Any, ...]) -> Any:
        """Run the body: all inputs for a regular rule, none for the wildcard."""
        if not self.is_wildcard:
            return self.body(*inputs)
        if self.arity == 1:
            return self.body(UNDEFINED)
        return self.body()


def rule(*patterns: Any, body: Body, name: str | None = None) -> Rule:
    """Build a rule, coercing each pattern with as_pattern().

    >>> r = rule(int, "x", body=lambda n, s: n)
    >>> r.arity
    2
    """
    return Rule(tuple(as_pattern(p) for p in patterns), body, name=name)


def wildcard(body: Body, *, nominal: bool = True, name: str | None = None) -> Rule:
    """Build the fallback rule.

    ``nominal=True`` declares the ``_`` parameter (body is called with
    UNDEFINED). ``nominal=False`` declares a zero-argument fallback.
    """
    positions = (WILDCARD,) if nominal else ()
    return Rule(positions, body, is_wildcard=True, name=name)


@dataclass(frozen=True, slots=True)
class RuleSet:
    """An ordered, immutable list of rules with an optional trailing wildcard.

    INV: first-match-wins in declaration order. The only exceptions are the
    cross-rule specificity checks in wavematch._specificity.
    INV: at most one wildcard, and it is last.
    """

    rules: tuple[Rule, ...]
    types: TypeRegistry = field(default=DEFAULT_TYPES, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", tuple(self.rules))
        self.validate()

    def validate(self) -> None:
        """Validate wildcard placement and rule arities.

        Raises:
            ConfigurationFault: On any structural violation.
        """
        if not self.rules:
            msg = "no rules given; supply at least one rule"
            raise ConfigurationFault(msg)

        wildcard_indexes = [i for i, r in enumerate(self.rules) if r.is_wildcard]
        if len(wildcard_indexes) > 1:
            msg = (
                f"expected at most one wildcard rule, found {len(wildcard_indexes)} "
                f"at indexes {wildcard_indexes}"
            )
            raise ConfigurationFault(msg)
        if wildcard_indexes and wildcard_indexes[0] != len(self.rules) - 1:
            msg = f"wildcard rule must be the last rule, found at index {wildcard_indexes[0]}"
            raise ConfigurationFault(msg)

        for index, r in enumerate(self.rules):
            if r.is_wildcard:
                _validate_wildcard(r, index)
                continue
            if r.arity == 0:
                msg = f"rule at index {index} must accept one or more arguments"
                raise ConfigurationFault(msg)
            for position, pattern in enumerate(r.positions):
                if isinstance(pattern, WildcardPattern):
                    msg = (
                        f"rule at index {index} uses the wildcard parameter at "
                        f"position {position}; only the fallback rule may"
                    )
                    raise ConfigurationFault(msg)

    @property
    def wildcard(self) -> Rule | None:
        last = self.rules[-1]
        return last if last.is_wildcard else None

    def select(self, *inputs: Any) -> Rule | None:
        """Return the rule that resolution would run, or None.

        Raises:
            ConfigurationFault: If no inputs are given.
            PatternFault: If a guard misbehaves.
        """
        if not inputs:
            msg = "no inputs given; cannot match on zero values"
            raise ConfigurationFault(msg)

        ctx = MatchContext.build(self.rules, len(inputs), self.types)
        for index, r in enumerate(self.rules):
            if r.is_wildcard or r.arity != len(inputs):
                continue
            if all(
                accepts(pattern, value, position, index, ctx)
                for position, (pattern, value) in enumerate(zip(r.positions, inputs, strict=True))
            ):
                logger.debug("selected %s", ctx.describe(index))
                return r

        if self.wildcard is not None:
            logger.debug("no rule matched; falling back to wildcard")
        return self.wildcard

    def resolve(self, *inputs: Any) -> Any:
        """Run the selected rule's body and return its result, or NO_MATCH."""
        selected = self.select(*inputs)
        if selected is None:
            return NO_MATCH
        return selected.invoke(inputs)

    def __len__(self) -> int:
        return len(self.rules)


def _validate_wildcard(r: Rule, index: int) -> None:
    if r.arity > 1:
        msg = f"wildcard rule at index {index} must take zero or one arguments, found {r.arity}"
        raise ConfigurationFault(msg)
    if r.arity == 1 and not isinstance(r.positions[0], WildcardPattern):
        msg = (
            f"wildcard rule at index {index} must not declare a pattern on its "
            f"parameter, found {r.positions[0]!r}"
        )
        raise ConfigurationFault(msg)
