"""End-to-end tests for wavematch(), resolve() and select()."""

from __future__ import annotations

import enum
import functools
import re

import pytest

from wavematch import (
    ANY,
    NO_MATCH,
    UNDEFINED,
    ConfigurationFault,
    PatternFault,
    RuleSet,
    TypeRegistry,
    TypeTag,
    array,
    guard,
    instance_of,
    resolve,
    rule,
    select,
    shape,
    typed,
    wavematch,
    wildcard,
)
from wavematch.testing import returns

ACCEPT = "accept"
REJECT = "reject"


class Suit(enum.Enum):
    HEARTS = 1


class TestNumbers:
    @pytest.mark.parametrize("n", [-42, 42])
    def test_literal(self, n: int) -> None:
        assert wavematch(n)(lambda s=n: ACCEPT, lambda _: REJECT) == ACCEPT
        assert wavematch(n)(lambda s=0: REJECT, lambda s=79: REJECT, lambda _: ACCEPT) == ACCEPT

    @pytest.mark.parametrize("n", [-33, 33, 0])
    def test_constructor(self, n: int) -> None:
        assert wavematch(n)(lambda s=int: ACCEPT, lambda _: REJECT) == ACCEPT

    def test_integral_float_matches_integer_literal(self) -> None:
        result = wavematch(1.0)(
            lambda s=0.9: REJECT,
            lambda s=1.1: REJECT,
            lambda s=1: ACCEPT,
            lambda _: REJECT,
        )
        assert result == ACCEPT

    def test_float_literal(self) -> None:
        result = wavematch(4.2)(
            lambda s=4: REJECT,
            lambda s=4.0: REJECT,
            lambda s=4.1: REJECT,
            lambda s=4.2: ACCEPT,
            lambda s=4.3: REJECT,
            lambda _: REJECT,
        )
        assert result == ACCEPT

    @pytest.mark.parametrize(
        "value", [{}, lambda: None, "42", Suit.HEARTS, Exception(), False, []]
    )
    def test_non_numbers(self, value: object) -> None:
        assert (
            wavematch(value)(
                lambda s=-1: REJECT, lambda s=0: REJECT, lambda s=42: REJECT, lambda _: ACCEPT
            )
            == ACCEPT
        )
        assert wavematch(value)(lambda s=int: REJECT, lambda _: ACCEPT) == ACCEPT

    def test_zero(self) -> None:
        result = wavematch(0)(
            lambda n="": REJECT,
            lambda n=-1: REJECT,
            lambda n=1: REJECT,
            lambda n=None: REJECT,
            lambda n=0: ACCEPT,
            lambda _: REJECT,
        )
        assert result == ACCEPT


class TestNullAndUndefined:
    @pytest.mark.parametrize(("value", "expected"), [(None, ACCEPT), (UNDEFINED, REJECT)])
    def test_null(self, value: object, expected: str) -> None:
        assert wavematch(value)(lambda arg=None: ACCEPT, lambda _: REJECT) == expected

    @pytest.mark.parametrize(("value", "expected"), [(UNDEFINED, ACCEPT), (None, REJECT)])
    def test_undefined(self, value: object, expected: str) -> None:
        assert wavematch(value)(lambda arg=UNDEFINED: ACCEPT, lambda _: REJECT) == expected


class TestCustomTypes:
    def test_class(self) -> None:
        class Person:
            pass

        assert wavematch(Person())(lambda p=Person: ACCEPT, lambda _: REJECT) == ACCEPT

    def test_child_and_parent(self) -> None:
        class A:
            pass

        class B(A):
            pass

        assert wavematch(B())(lambda b=B: ACCEPT, lambda _: REJECT) == ACCEPT
        assert wavematch(B())(lambda b=A: ACCEPT, lambda _: REJECT) == ACCEPT

    def test_grandparent_is_not_matched(self) -> None:
        class A:
            pass

        class B(A):
            pass

        class C(B):
            pass

        assert wavematch(C())(lambda c=A: ACCEPT, lambda _: REJECT) == REJECT
        assert wavematch(C())(lambda c=instance_of("B"): ACCEPT, lambda _: REJECT) == ACCEPT

    def test_type_tags(self) -> None:
        types = TypeRegistry((TypeTag("Money", lambda v: isinstance(v, dict) and "cents" in v),))
        match = wavematch({"cents": 5}, types=types)
        assert match(lambda m=instance_of("Money"): ACCEPT, lambda _: REJECT) == ACCEPT


class TestObjects:
    def test_best_fit(self) -> None:
        def match(value: object) -> str:
            return wavematch(value)(
                lambda o={"x": 1}: "A",
                lambda o={"x": 1, "y": 2}: "B",
                lambda _: "C",
            )

        assert match({"x": 1, "y": 2}) == "B"
        assert match({"x": 1}) == "A"
        assert match({"y": 2}) == "C"

    def test_generic_object_after_shape(self) -> None:
        result = wavematch({"x": 1, "y": 2})(
            lambda o={"x": 1}: "A",
            lambda o=dict: "B",
            lambda _: "C",
        )
        assert result == "A"

    def test_generic_object_before_shape_warns(self) -> None:
        with pytest.warns(UserWarning, match="declare the generic rule after"):
            result = wavematch({"x": 1, "y": 2})(
                lambda o=dict: "B",
                lambda o={"x": 1}: "A",
                lambda _: "C",
            )
        assert result == "A"

    def test_empty_shape(self) -> None:
        assert wavematch({})(lambda o={}: "A", lambda _: "B") == "A"
        assert wavematch({"k": 1})(lambda o={}: "A", lambda _: "B") == "B"

    def test_typed_values_in_shapes(self) -> None:
        match = wavematch({"id": 7, "name": "n"})
        assert match(lambda o=shape(id=str): "str", lambda o=shape(id=int): "int") == "int"


class TestUnions:
    @pytest.mark.parametrize("value", [re.compile("foo"), re.compile("."), [], [1]])
    def test_regexp_or_array_accepts(self, value: object) -> None:
        assert wavematch(value)(lambda x=typed("RegExp") | list: ACCEPT, lambda _: REJECT) == ACCEPT

    @pytest.mark.parametrize("value", ["foo", 1, {}, None])
    def test_regexp_or_array_rejects(self, value: object) -> None:
        assert wavematch(value)(lambda x=typed("RegExp") | list: ACCEPT, lambda _: REJECT) == REJECT

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ({"status": 200}, ACCEPT),
            ({"ok": True}, ACCEPT),
            ({"ok": False}, REJECT),
            ({"status": 401}, "server said no"),
            ({"status": 510}, "server said no"),
        ],
    )
    def test_two_shapes_and_a_guard(self, value: object, expected: str) -> None:
        result = wavematch(value)(
            lambda r=shape(status=200) | {"ok": True}: ACCEPT,
            lambda r=guard(lambda o: o.get("status", 0) > 400): "server said no",
            lambda _: REJECT,
        )
        assert result == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ({"key": True}, ACCEPT),
            ({"id": 42}, ACCEPT),
            ({"key": False}, REJECT),
            ({"id": -42}, REJECT),
            ({"id": True}, REJECT),
            ({}, REJECT),
            ({"name": "chris"}, REJECT),
            ([1], REJECT),
            ("", REJECT),
            (77, REJECT),
        ],
    )
    def test_two_shapes(self, value: object, expected: str) -> None:
        result = wavematch(value)(
            lambda o=shape(key=True) | shape(id=42): ACCEPT,
            lambda _: REJECT,
        )
        assert result == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [([], ACCEPT), (False, ACCEPT), (True, ACCEPT), (99, REJECT), ("foo", REJECT)],
    )
    def test_boolean_or_array(self, value: object, expected: str) -> None:
        match = wavematch(value)
        assert match(lambda x=bool | typed("Array"): ACCEPT, lambda _: REJECT) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("3", ACCEPT), (3, ACCEPT), ([], REJECT), (False, REJECT), ({}, REJECT)],
    )
    def test_string_or_number(self, value: object, expected: str) -> None:
        match = wavematch(value)
        assert match(lambda a=typed("String") | int: ACCEPT, lambda _: REJECT) == expected


class TestSeveralInputs:
    def test_reduce(self) -> None:
        def reduce_(fn: object, initial: object, items: object) -> object:
            return wavematch(fn, initial, items)(
                lambda fn, initial, items=list: functools.reduce(fn, items, initial),
                lambda _: REJECT,
            )

        assert reduce_(lambda a, b: a + b, 0, [5, 5, 5]) == 15

    def test_filter(self) -> None:
        def filter_(predicate: object, value: object) -> object:
            return wavematch(predicate, value)(
                lambda predicate=typed("Function"), value=list: [v for v in value if predicate(v)],
                lambda predicate=typed("Function"), value=dict: {
                    k: v for k, v in value.items() if predicate(v)
                },
                lambda _: REJECT,
            )

        assert filter_(lambda n: n % 2 == 0, [2, 3, 4]) == [2, 4]
        assert filter_(lambda v: v == "yes", {"foo": 0, "id": "yes"}) == {"id": "yes"}
        assert filter_("not a function", [1]) == REJECT

    def test_zip(self) -> None:
        def zip_(xs: list[object], ys: list[object]) -> list[object]:
            return wavematch(xs, ys)(
                lambda xs, ys=(): [],
                lambda xs=(), ys=ANY: [],
                lambda xs, ys: [xs[0], ys[0], *zip_(xs[1:], ys[1:])],
                lambda _: REJECT,
            )

        assert zip_([1, 2, 3], ["a", "b", "c"]) == [1, "a", 2, "b", 3, "c"]
        assert zip_([1, 2], ["a"]) == [1, "a"]

    def test_zip_with(self) -> None:
        def zip_with(fn: object, xs: list[object], ys: list[object]) -> list[object]:
            return wavematch(fn, xs, ys)(
                lambda fn, xs=(), ys=ANY: [],
                lambda fn, xs, ys=(): [],
                lambda fn, xs, ys: [fn(xs[0], ys[0]), *zip_with(fn, xs[1:], ys[1:])],
                lambda _: REJECT,
            )

        assert zip_with(lambda x, y: x + y, [1, 1, 1], [1, 1, 1]) == [2, 2, 2]
        pairs = zip_with(lambda x, y: [x, y], [1, 2, 3], ["a", "b", "c"])
        assert [item for pair in pairs for item in pair] == [1, "a", 2, "b", 3, "c"]

    def test_head_rest(self) -> None:
        result = wavematch([1, 2, 3])(
            lambda xs=array(ANY, rest=True): ACCEPT,
            lambda _: REJECT,
        )
        assert result == ACCEPT

    def test_sole_destructurer_compares_prefix(self) -> None:
        def head_pair(xs: list[int]) -> object:
            return wavematch(xs)(lambda xs=(1, 2): ACCEPT, lambda _: REJECT)

        assert head_pair([1, 2, 3]) == ACCEPT
        assert head_pair([1, 2]) == ACCEPT
        assert head_pair([1, 3, 2]) == REJECT
        assert head_pair([1]) == REJECT

    def test_two_destructurers_need_full_equality(self) -> None:
        result = wavematch([1, 2, 3])(
            lambda xs=(1, 2): "pair",
            lambda xs=(9,): "nine",
            lambda _: REJECT,
        )
        assert result == REJECT

    def test_arity_mismatch_falls_through(self) -> None:
        assert wavematch(1, 2)(lambda a: "one", lambda a, b: "two") == "two"
        assert wavematch(1, 2, 3)(lambda a: "one", lambda a, b: "two") is NO_MATCH


class TestFaults:
    def test_no_inputs(self) -> None:
        with pytest.raises(ConfigurationFault, match="no inputs given"):
            wavematch()(lambda a: a)

    def test_no_rules(self) -> None:
        with pytest.raises(ConfigurationFault, match="no rules given"):
            wavematch(1)()

    def test_wildcard_not_last(self) -> None:
        with pytest.raises(ConfigurationFault, match="must be the last rule"):
            wavematch(1)(lambda _: 0, lambda n=1: 1)

    def test_two_wildcards(self) -> None:
        with pytest.raises(ConfigurationFault, match="at most one wildcard"):
            wavematch(1)(lambda n=2: 0, lambda _: 1, lambda _: 2)

    def test_zero_argument_rule_in_the_middle(self) -> None:
        with pytest.raises(ConfigurationFault, match="one or more arguments"):
            wavematch(1)(lambda: 0, lambda n=1: 1)

    def test_zero_argument_fallback(self) -> None:
        assert wavematch(5)(lambda n=1: 1, lambda: "fallback") == "fallback"

    def test_wildcard_body_gets_undefined(self) -> None:
        assert wavematch(5)(lambda n=1: 1, lambda _: _) is UNDEFINED

    def test_non_bool_guard(self) -> None:
        with pytest.raises(PatternFault, match="expected bool"):
            wavematch(1)(lambda n=guard(lambda v: v): 0, lambda _: 1)


class TestResolveAndSelect:
    def test_resolve_accepts_rule_objects(self) -> None:
        rules = [rule(int, body=returns("int")), wildcard(returns("other"))]
        assert resolve([3], rules) == "int"
        assert resolve(["3"], rules) == "other"

    def test_resolve_accepts_rule_sets(self) -> None:
        rules = RuleSet((rule(int, body=returns("int")),))
        assert resolve([3], rules) == "int"
        assert resolve(["3"], rules) is NO_MATCH

    def test_select_returns_the_rule(self) -> None:
        target = rule(str, body=returns("s"))
        assert select(["x"], [rule(int, body=returns("i")), target]) is target
        assert select([1.5], [target]) is None

    def test_select_requires_inputs(self) -> None:
        with pytest.raises(ConfigurationFault):
            select([], [rule(int, body=returns("i"))])
