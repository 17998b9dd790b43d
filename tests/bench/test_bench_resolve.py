"""Resolution benchmarks for wavematch.

Measures the hot path: first-match-wins scanning, the per-resolution
specificity pre-pass, reflection of callables, and config loading.

Run: uv run pytest tests/bench/test_bench_resolve.py --benchmark-only
"""

from __future__ import annotations

from wavematch import (
    RegistryBuilder,
    RuleSet,
    as_ruleset,
    parse_ruleset_config,
    regex,
    rule,
    shape,
    wavematch,
    wildcard,
)
from wavematch.testing import register

# ── Shared configs ───────────────────────────────────────────────────────────

SIMPLE_CONFIG = {
    "rules": [{"patterns": [{"literal": "admin"}], "action": "matched"}],
    "on_no_match": {"action": "default"},
}

SHAPE_CONFIG = {
    "rules": [
        {"patterns": [{"shape": {"role": "admin"}}], "action": "admin"},
        {
            "patterns": [{"shape": {"role": "admin", "org": {"regex": "^acme"}}}],
            "action": "acme",
        },
        {"patterns": [{"type": "Object"}], "action": "object"},
    ],
    "on_no_match": {"action": "default"},
}


def _const(value):
    return lambda *_: value


def _literal_rules(n: int) -> RuleSet:
    rules = [rule(i, body=_const(i)) for i in range(n)]
    return RuleSet((*rules, wildcard(_const("miss"))))


# ── Core scenarios ───────────────────────────────────────────────────────────


def test_bench_literal_hit_resolve(benchmark):
    rules = RuleSet((rule("admin", body=_const("hit")), wildcard(_const("miss"))))
    benchmark(rules.resolve, "admin")


def test_bench_literal_miss_resolve(benchmark):
    rules = RuleSet((rule("admin", body=_const("hit")), wildcard(_const("miss"))))
    benchmark(rules.resolve, "guest")


def test_bench_number_preempted_by_literal_resolve(benchmark):
    rules = RuleSet((rule(int, body=_const("number")), rule(3, body=_const("three"))))
    benchmark(rules.resolve, 3)


def test_bench_regex_hit_resolve(benchmark):
    rules = RuleSet((rule(regex(r"^/api/v\d+/users/\d+$"), body=_const("user")),))
    benchmark(rules.resolve, "/api/v2/users/12345")


# ── Specificity ──────────────────────────────────────────────────────────────


def test_bench_object_best_fit_resolve(benchmark):
    rules = RuleSet(
        (
            rule(shape(x=1), body=_const("A")),
            rule(shape(x=1, y=2), body=_const("B")),
            rule(shape(x=1, y=2, z=3), body=_const("C")),
            wildcard(_const("D")),
        )
    )
    benchmark(rules.resolve, {"x": 1, "y": 2, "z": 3})


def test_bench_array_destructure_resolve(benchmark):
    rules = RuleSet((rule([1, 2, 3], body=_const("exact")), rule(list, body=_const("any"))))
    benchmark(rules.resolve, [4, 5, 6])


# ── Scaling: miss-heavy scans over many rules ────────────────────────────────


def test_bench_scan_10_rules_miss(benchmark):
    rules = _literal_rules(10)
    benchmark(rules.resolve, -1)


def test_bench_scan_100_rules_miss(benchmark):
    rules = _literal_rules(100)
    benchmark(rules.resolve, -1)


def test_bench_scan_100_rules_last_hit(benchmark):
    rules = _literal_rules(100)
    benchmark(rules.resolve, 99)


# ── Construction ─────────────────────────────────────────────────────────────


def test_bench_reflect_callables(benchmark):
    def go():
        return as_ruleset(
            [
                lambda n=3: "three",
                lambda n=int: "number",
                lambda o={"x": 1}: "shape",  # noqa: B006
                lambda _: "other",
            ]
        )

    benchmark(go)


def test_bench_wavematch_operator(benchmark):
    def go():
        return wavematch(4)(
            lambda n=3: "three",
            lambda n=int: "number",
            lambda _: "other",
        )

    benchmark(go)


def test_bench_config_load_simple(benchmark):
    registry = register(RegistryBuilder()).build()

    def go():
        return registry.load_ruleset(parse_ruleset_config(SIMPLE_CONFIG))

    benchmark(go)


def test_bench_config_evaluate_shapes(benchmark):
    registry = register(RegistryBuilder()).build()
    rules = registry.load_ruleset(parse_ruleset_config(SHAPE_CONFIG))
    benchmark(rules.resolve, {"role": "admin", "org": "acme-eu"})
