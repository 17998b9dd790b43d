"""Error taxonomy for wavematch.

Two fault families, both raised immediately and never retried:

- ConfigurationFault: the caller assembled the rules (or inputs) wrongly.
- PatternFault: a pattern is malformed or misbehaved during evaluation.

"No rule matched" is NOT an error. It is the NO_MATCH outcome returned by
resolve() (see wavematch._rules).
"""

from __future__ import annotations


class WavematchError(Exception):
    """Base class for all wavematch errors."""


class ConfigurationFault(WavematchError):
    """Misplaced or duplicate wildcard, zero-arity rule, empty inputs or rules."""


class PatternFault(WavematchError):
    """Invalid pattern, or a guard predicate that returned a non-boolean."""


class SpecificityWarning(UserWarning):
    """A generic pattern is declared before a more specific one it could shadow."""
