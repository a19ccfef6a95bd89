import pytest

from combparse import grammars
from combparse.accumulate import AccumulatorKind
from combparse.combinators import (
    Literal,
    OneOrMore,
    Optional,
    Options,
    Or,
    Range,
    Times,
    Tuple,
    ZeroOrMore,
    parse_text,
)
from combparse.compiler import (
    OPT,
    OR,
    PLUS,
    RANGE,
    STAR,
    TIMES,
    TUPLE,
    SpecificationError,
    Symbol,
    compile,
)
from combparse.result import SKIP, is_failure


def test_compile_literal():
    assert compile(("abc",)) == Literal("abc")
    assert compile(("a",)) == Literal("a")
    assert compile("abc") == Literal("abc")


def test_compile_literal_options():
    node = compile(("AAA", "case_insensitive", True))
    assert node == Literal("AAA", Options(case_insensitive=True))
    assert parse_text(node, "aAa") == "aAa"


def test_options_as_mapping():
    node = compile(("a", {"tag": "A", "skip": False}))
    assert node.options == Options(tag="A")


def test_option_names_may_end_in_question_mark():
    node = compile(("a", "skip?", True, "case_insensitive?", True))
    assert node.options.skip
    assert node.options.case_insensitive


def test_compile_composites():
    node = compile(
        (
            TUPLE,
            [
                (OPT, ("x",)),
                (STAR, ("y",)),
                (PLUS, ("z",), "accumulator", "text"),
                (OR, [("a",), "b"]),
                (RANGE, ("0", "9"), "exclude", ["3"]),
                (TIMES, 2, ("q",)),
            ],
        )
    )

    assert node == Tuple(
        (
            Optional(Literal("x")),
            ZeroOrMore(Literal("y")),
            OneOrMore(Literal("z"), Options(accumulator=AccumulatorKind.TEXT)),
            Or((Literal("a"), Literal("b"))),
            Range("0", "9", frozenset({"3"})),
            Times(2, Literal("q")),
        )
    )


def test_symbols_by_name():
    assert Symbol("?") is OPT
    assert Symbol("+") is PLUS
    assert Symbol("*") is STAR
    assert Symbol("tuple") is TUPLE


def test_compiled_nodes_can_be_embedded():
    digit = compile(grammars.DIGIT)
    node = compile((TUPLE, [digit, digit]))
    assert node.children[0] is digit
    assert parse_text(node, "12") == ["1", "2"]


def test_compiled_example():
    node = compile(
        (
            TUPLE,
            [
                ("AA", "tag", "AAA", "case_insensitive", True),
                (OPT, ("xx",)),
                ("BB", "case_insensitive", True),
            ],
        )
    )
    assert parse_text(node, "aabb") == [("AAA", "aa"), "bb"]
    assert parse_text(node, "AAxxBB") == [("AAA", "AA"), "xx", "BB"]


def test_compiled_repetition_example():
    node = compile((TUPLE, [(PLUS, ("a",)), (PLUS, ("b", "case_insensitive", True))]))
    assert parse_text(node, "aaBbc") == [["a", "a"], ["B", "b"]]


def test_whitespace_grammars():
    assert parse_text(compile(grammars.WS_PLUS), " \t\n") is SKIP
    assert is_failure(parse_text(compile(grammars.WS_PLUS), "x"))
    assert parse_text(compile(grammars.WS_STAR), "x") is SKIP
    assert parse_text(compile(grammars.INTEGER), "0042") == 42


@pytest.mark.parametrize(
    "spec,problem",
    [
        ((42,), "unrecognized leading element"),
        ((), "non-empty"),
        (42, "non-empty"),
        (("",), "at least one character"),
        (("a", "colour", "red"), "unknown option"),
        (("a", "exclude", "x"), "unknown option"),
        (("a", "tag"), "key/value pairs"),
        (("a", "tag", "x", "tag", "y"), "more than once"),
        (("a", 1, 2), "option names must be strings"),
        (("a", "accumulator", "list"), "unknown accumulator"),
        (("a", "coerce", 3), "coerce must be callable"),
        (("a", "metadata", 3), "metadata must be a mapping"),
        (("a", "case_insensitive", "false"), "case_insensitive must be True or False"),
        (("a", "skip", 1), "skip must be True or False"),
        ((TUPLE,), "expected 1 argument"),
        ((TUPLE, "ab"), "sequence of specifications"),
        ((OR, []), "at least one alternative"),
        ((RANGE, ("9", "0")), "empty range"),
        ((RANGE, ("ab", "z")), "single character"),
        ((RANGE, "az"), "(low, high) pair"),
        ((RANGE, ("a", "z"), "exclude", ["xy"]), "single character"),
        ((RANGE, ("a", "z"), "exclude", 3), "exclude must be a collection"),
        ((TIMES, -1, "a"), "non-negative integer"),
        ((TIMES, "3", "a"), "non-negative integer"),
        ((TIMES, True, "a"), "non-negative integer"),
        ((TIMES, 3), "expected 2 argument"),
    ],
)
def test_bad_specifications(spec, problem):
    with pytest.raises(SpecificationError) as info:
        compile(spec)
    assert problem in str(info.value)


def test_error_names_the_location():
    with pytest.raises(SpecificationError) as info:
        compile((TUPLE, ["a", (OPT, (42,))]))

    assert info.value.path == "$/1/?"
    assert str(info.value).startswith("$/1/?: ")


def test_specification_error_is_value_error():
    with pytest.raises(ValueError):
        compile(("",))
