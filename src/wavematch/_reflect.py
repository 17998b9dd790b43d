"""Build rules from plain callables by reading their signatures.

Python keeps parameter defaults as live objects, so a callable's signature
is enough to recover its patterns. Nothing is parsed from source text.

    lambda n=3: ...            → rule(literal(3))
    lambda n=int: ...          → rule(typed("Number"))
    lambda p=Person: ...       → rule(instance_of("Person"))
    lambda o={"x": 1}: ...     → rule(shape(x=1))
    lambda s=str, n=3: ...     → rule(typed("String"), literal(3))
    lambda xs, ys: ...         → rule(ANY, ANY)
    lambda _: ...              → wildcard(...)
    lambda: ...                → wildcard(..., nominal=False), last rule only

Defaults are coerced with as_pattern(), so union and negation use the
operator forms: ``lambda x=typed("RegExp") | list: ...``.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from wavematch._errors import ConfigurationFault
from wavematch._patterns import ANY, WILDCARD, as_pattern
from wavematch._rules import Rule

if TYPE_CHECKING:
    from collections.abc import Callable

    from wavematch._patterns import Pattern

WILDCARD_NAME = "_"

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def rule_from_callable(
    fn: Callable[..., Any] | Rule, index: int = 0, *, last: bool = False
) -> Rule:
    """Reflect a callable into a Rule. Rules pass through unchanged.

    A parameter named ``_`` marks the wildcard rule. A zero-parameter callable
    is the wildcard only in last position (``last=True``). Anywhere else it is
    an arity-0 rule, which RuleSet rejects.

    Raises:
        ConfigurationFault: If ``fn`` is not callable or uses ``*args``,
            ``**kwargs`` or keyword-only parameters.
    """
    if isinstance(fn, Rule):
        return fn
    if not callable(fn):
        msg = f"rule at index {index} is not callable, got {type(fn).__name__}"
        raise ConfigurationFault(msg)

    name = getattr(fn, "__name__", None)
    params = list(inspect.signature(fn).parameters.values())
    for param in params:
        if param.kind not in _POSITIONAL:
            msg = (
                f"rule at index {index}: parameter {param.name!r} must be positional, "
                f"found {param.kind.description}"
            )
            raise ConfigurationFault(msg)

    if not params:
        return Rule((), fn, is_wildcard=last, name=name)

    is_wildcard = any(p.name == WILDCARD_NAME for p in params)
    positions = tuple(_param_pattern(p) for p in params)
    return Rule(positions, fn, is_wildcard=is_wildcard, name=name)


def _param_pattern(param: inspect.Parameter) -> Pattern:
    if param.default is inspect.Parameter.empty:
        return WILDCARD if param.name == WILDCARD_NAME else ANY
    # A "_" parameter with a default keeps its pattern so that RuleSet
    # validation reports the wildcard as carrying one.
    return as_pattern(param.default)
