"""Compile declarative specifications into combinator trees.

A specification is a tuple (or list) whose first element says what to build
and whose remaining elements are its arguments and options:

    ("abc",)                                  # the literal "abc"
    ("abc", "case_insensitive", True)         # ...ignoring case
    (RANGE, ("0", "9"), "exclude", "3")       # a digit other than 3
    (TUPLE, [("a",), ("b",)], {"accumulator": "text"})
    (OR, [("yes",), ("no",)], "tag", "answer")
    (OPT, ("x",))
    (STAR, (RANGE, ("a", "z")), "accumulator", "text")
    (PLUS, ("ab",), "tag", "abs")
    (TIMES, 3, (RANGE, ("0", "9")))

Options come either as one mapping or as alternating keys and values. A bare
string is shorthand for a literal with no options, and an already-compiled
node may appear anywhere a specification can, so grammars can share pieces.

Compiling checks the whole specification up front: anything malformed raises
a SpecificationError naming where in the specification the problem is.
Compilation happens once; the resulting tree is reused for every parse.
"""

import collections.abc
import enum
import logging
import typing

from .accumulate import AccumulatorKind
from .combinators import (
    DEFAULT_OPTIONS,
    Literal,
    Node,
    OneOrMore,
    Optional,
    Options,
    Or,
    Range,
    Times,
    Tuple,
    ZeroOrMore,
    describe,
)


compile_log = logging.getLogger("combparse.compile")


class Symbol(enum.Enum):
    TUPLE = "tuple"
    OR = "or"
    OPTIONAL = "?"
    ONE_OR_MORE = "+"
    ZERO_OR_MORE = "*"
    RANGE = "range"
    TIMES = "times"


TUPLE = Symbol.TUPLE
OR = Symbol.OR
OPT = Symbol.OPTIONAL
PLUS = Symbol.ONE_OR_MORE
STAR = Symbol.ZERO_OR_MORE
RANGE = Symbol.RANGE
TIMES = Symbol.TIMES


class SpecificationError(ValueError):
    path: str
    problem: str

    def __init__(self, path: str, problem: str):
        super().__init__(path, problem)
        self.path = path
        self.problem = problem

    def __str__(self):
        return f"{self.path}: {self.problem}"


# The number of positional arguments each kind takes after the leading
# element.
_ARITY: dict[Symbol, int] = {
    Symbol.TUPLE: 1,
    Symbol.OR: 1,
    Symbol.OPTIONAL: 1,
    Symbol.ONE_OR_MORE: 1,
    Symbol.ZERO_OR_MORE: 1,
    Symbol.RANGE: 1,
    Symbol.TIMES: 2,
}

_OPTION_KEYS = frozenset(
    {"case_insensitive", "accumulator", "tag", "coerce", "metadata", "skip"}
)


def _split_options(
    path: str, rest: list, arity: int, extra_keys: frozenset[str] = frozenset()
) -> typing.Tuple[list, dict[str, typing.Any]]:
    """Split the elements after the leading one into positional arguments and
    a dictionary of options, checking the option names.
    """
    if len(rest) < arity:
        raise SpecificationError(
            path, f"expected {arity} argument(s) after the leading element, got {len(rest)}"
        )

    positional = rest[:arity]
    trailing = rest[arity:]

    if len(trailing) == 1 and isinstance(trailing[0], collections.abc.Mapping):
        pairs = list(trailing[0].items())
    elif len(trailing) % 2 != 0:
        raise SpecificationError(path, "options must come in key/value pairs")
    else:
        pairs = list(zip(trailing[0::2], trailing[1::2]))

    options = {}
    allowed = _OPTION_KEYS | extra_keys
    for key, value in pairs:
        if not isinstance(key, str):
            raise SpecificationError(path, f"option names must be strings, not {key!r}")
        name = key.rstrip("?")
        if name not in allowed:
            raise SpecificationError(path, f"unknown option {key!r}")
        if name in options:
            raise SpecificationError(path, f"option {name!r} given more than once")
        options[name] = value

    return positional, options


def _make_options(path: str, options: dict[str, typing.Any]) -> Options:
    if not options:
        return DEFAULT_OPTIONS

    accumulator = options.get("accumulator", AccumulatorKind.SEQUENCE)
    if not isinstance(accumulator, AccumulatorKind):
        try:
            accumulator = AccumulatorKind(accumulator)
        except ValueError:
            raise SpecificationError(
                path,
                f"unknown accumulator {accumulator!r}, expected one of "
                + ", ".join(repr(k.value) for k in AccumulatorKind),
            ) from None

    coerce = options.get("coerce")
    if coerce is not None and not callable(coerce):
        raise SpecificationError(path, f"coerce must be callable, not {coerce!r}")

    metadata = options.get("metadata")
    if metadata is not None and not isinstance(metadata, collections.abc.Mapping):
        raise SpecificationError(path, f"metadata must be a mapping, not {metadata!r}")

    for flag in ("case_insensitive", "skip"):
        if not isinstance(options.get(flag, False), bool):
            raise SpecificationError(path, f"{flag} must be True or False, not {options[flag]!r}")

    return Options(
        case_insensitive=options.get("case_insensitive", False),
        accumulator=accumulator,
        tag=options.get("tag"),
        coerce=coerce,
        metadata=metadata,
        skip=options.get("skip", False),
    )


def _children(path: str, children) -> list:
    if isinstance(children, str) or not isinstance(children, collections.abc.Sequence):
        raise SpecificationError(path, f"expected a sequence of specifications, not {children!r}")
    return list(children)


def _char(path: str, value, what: str) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise SpecificationError(path, f"{what} must be a single character, not {value!r}")
    return value


def _compile(spec, path: str) -> Node:
    if isinstance(spec, Node):
        return spec

    node = _build(spec, path)
    if compile_log.isEnabledFor(logging.DEBUG):
        compile_log.debug(f"{path}: {describe(node)}")
    return node


def _build(spec, path: str) -> Node:
    if isinstance(spec, str):
        spec = (spec,)

    if not isinstance(spec, (tuple, list)) or len(spec) == 0:
        raise SpecificationError(path, f"expected a non-empty tuple or list, not {spec!r}")

    lead = spec[0]
    rest = list(spec[1:])

    if isinstance(lead, str):
        if len(lead) == 0:
            raise SpecificationError(path, "a literal must match at least one character")
        _, options = _split_options(path, rest, 0)
        return Literal(lead, _make_options(path, options))

    if not isinstance(lead, Symbol):
        raise SpecificationError(path, f"unrecognized leading element {lead!r}")

    arity = _ARITY[lead]
    match lead:
        case Symbol.TUPLE | Symbol.OR:
            (children,), options = _split_options(path, rest, arity)
            compiled = tuple(
                _compile(child, f"{path}/{index}")
                for index, child in enumerate(_children(path, children))
            )
            if lead is Symbol.TUPLE:
                return Tuple(compiled, _make_options(path, options))
            if len(compiled) == 0:
                raise SpecificationError(path, "an alternation needs at least one alternative")
            return Or(compiled, _make_options(path, options))

        case Symbol.OPTIONAL:
            (child,), options = _split_options(path, rest, arity)
            return Optional(_compile(child, f"{path}/?"), _make_options(path, options))

        case Symbol.ONE_OR_MORE:
            (child,), options = _split_options(path, rest, arity)
            return OneOrMore(_compile(child, f"{path}/+"), _make_options(path, options))

        case Symbol.ZERO_OR_MORE:
            (child,), options = _split_options(path, rest, arity)
            return ZeroOrMore(_compile(child, f"{path}/*"), _make_options(path, options))

        case Symbol.RANGE:
            (bounds,), options = _split_options(path, rest, arity, frozenset({"exclude"}))
            if isinstance(bounds, str) or not isinstance(bounds, collections.abc.Sequence):
                raise SpecificationError(path, f"range bounds must be a (low, high) pair, not {bounds!r}")
            if len(bounds) != 2:
                raise SpecificationError(path, f"range bounds must be a (low, high) pair, not {bounds!r}")
            low = _char(path, bounds[0], "the low bound")
            high = _char(path, bounds[1], "the high bound")
            if low > high:
                raise SpecificationError(path, f"empty range {low!r}-{high!r}")

            exclude = options.pop("exclude", ())
            if not isinstance(exclude, collections.abc.Iterable):
                raise SpecificationError(path, f"exclude must be a collection of characters, not {exclude!r}")
            excluded = frozenset(_char(path, c, "an excluded character") for c in exclude)
            return Range(low, high, excluded, _make_options(path, options))

        case Symbol.TIMES:
            (count, child), options = _split_options(path, rest, arity)
            if isinstance(count, bool) or not isinstance(count, int) or count < 0:
                raise SpecificationError(path, f"the repeat count must be a non-negative integer, not {count!r}")
            return Times(count, _compile(child, f"{path}/x"), _make_options(path, options))

        case _:
            typing.assert_never(lead)


def compile(spec) -> Node:
    """Compile a specification into a tree of combinator nodes.

    Raises SpecificationError if the specification is malformed.
    """
    return _compile(spec, "$")
