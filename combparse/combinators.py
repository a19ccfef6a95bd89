"""The combinators.

There is a small, closed set of node kinds: literals, character ranges,
tuples (sequences), alternation, and the optional/repetition operators. Nodes
are immutable; the same tree can be used by any number of parses at once, as
long as each one has its own CharacterSource.

Every parse goes through `parse`, which runs the node's matching routine and
then applies the node's options in a fixed order:

    1. A Failure is returned as-is. Options never apply to failures.
    2. `skip` replaces the value with SKIP.
    3. `coerce` transforms the value.
    4. `metadata` wraps the value in an `Annotated` envelope.
    5. `tag` wraps the value in a `Tagged` pair.

An empty match (SKIP from `?` or `*`) goes through steps 3-5 like any other
value, so a tagged `?` that matched nothing still yields `(tag, SKIP)`.

The one rule every matching routine follows is that a failing parse gives
back everything it read. Literals and ranges unread the characters they
looked at; tuples and bounded repetitions rewind to where they started. That
is what makes `Or` work: each alternative sees the same input.
"""

import dataclasses
import logging
import typing

from .accumulate import AccumulatorKind, accumulator
from .result import SKIP, Annotated, Failure, Tagged, is_failure
from .source import EOF, CharacterSource, from_string


trace_log = logging.getLogger("combparse.trace")


@dataclasses.dataclass(frozen=True)
class Options:
    """The options shared by every kind of node."""

    case_insensitive: bool = False
    accumulator: AccumulatorKind = AccumulatorKind.SEQUENCE
    tag: typing.Any = None
    coerce: typing.Callable[[typing.Any], typing.Any] | None = None
    metadata: typing.Mapping[str, typing.Any] | None = None
    skip: bool = False


DEFAULT_OPTIONS = Options()


class _Parser:
    options: Options

    def parse(self, source: CharacterSource) -> typing.Any:
        return parse(typing.cast(Node, self), source)


@dataclasses.dataclass(frozen=True)
class Literal(_Parser):
    """Match an exact string, optionally ignoring case."""

    text: str
    options: Options = DEFAULT_OPTIONS

    def __post_init__(self):
        if len(self.text) == 0:
            raise ValueError("A literal must match at least one character")


@dataclasses.dataclass(frozen=True)
class Range(_Parser):
    """Match one character whose code point is between `low` and `high`
    (inclusive), and which isn't in `exclude`.
    """

    low: str
    high: str
    exclude: frozenset[str] = frozenset()
    options: Options = DEFAULT_OPTIONS

    def __post_init__(self):
        if len(self.low) != 1 or len(self.high) != 1:
            raise ValueError(f"Range bounds must be single characters: {self.low!r}, {self.high!r}")
        if self.low > self.high:
            raise ValueError(f"Empty range {self.low!r}-{self.high!r}")


@dataclasses.dataclass(frozen=True)
class Tuple(_Parser):
    """Match each child in order."""

    children: tuple["Node", ...]
    options: Options = DEFAULT_OPTIONS


@dataclasses.dataclass(frozen=True)
class Or(_Parser):
    """Match the first child that matches, trying them left to right. There is
    no longest-match rule: order is precedence.
    """

    children: tuple["Node", ...]
    options: Options = DEFAULT_OPTIONS

    def __post_init__(self):
        if len(self.children) == 0:
            raise ValueError("An alternation needs at least one alternative")


@dataclasses.dataclass(frozen=True)
class Optional(_Parser):
    child: "Node"
    options: Options = DEFAULT_OPTIONS


@dataclasses.dataclass(frozen=True)
class ZeroOrMore(_Parser):
    child: "Node"
    options: Options = DEFAULT_OPTIONS


@dataclasses.dataclass(frozen=True)
class OneOrMore(_Parser):
    child: "Node"
    options: Options = DEFAULT_OPTIONS


@dataclasses.dataclass(frozen=True)
class Times(_Parser):
    """Match the child exactly `count` times."""

    count: int
    child: "Node"
    options: Options = DEFAULT_OPTIONS

    def __post_init__(self):
        if self.count < 0:
            raise ValueError(f"Cannot repeat {self.count} times")


Node = Literal | Range | Tuple | Or | Optional | ZeroOrMore | OneOrMore | Times


def describe(node: Node) -> str:
    """A short, one-line name for a node, for logs and error messages."""
    match node:
        case Literal(text=text):
            return repr(text)
        case Range(low=low, high=high):
            return f"[{low}-{high}]"
        case Tuple(children=children):
            return f"tuple/{len(children)}"
        case Or(children=children):
            return f"or/{len(children)}"
        case Optional(child=child):
            return f"?{describe(child)}"
        case ZeroOrMore(child=child):
            return f"*{describe(child)}"
        case OneOrMore(child=child):
            return f"+{describe(child)}"
        case Times(count=count, child=child):
            return f"{count}x{describe(child)}"
        case _:
            typing.assert_never(node)


###############################################################################
# Matching routines
###############################################################################
def _same_char(expected: str, actual: str, case_insensitive: bool) -> bool:
    if case_insensitive:
        return expected.casefold() == actual.casefold()
    return expected == actual


def _match_literal(node: Literal, source: CharacterSource):
    case_insensitive = node.options.case_insensitive
    matched: list[str] = []
    for expected in node.text:
        actual = source.read()
        if actual is EOF:
            prefix = "".join(matched)
            source.unread(prefix)
            return Failure("EOF reached", prefix)

        if not _same_char(expected, actual, case_insensitive):
            # Put back the bad character first, so the prefix comes out ahead
            # of it when the input is read again.
            prefix = "".join(matched)
            source.unread(actual)
            source.unread(prefix)
            return Failure(
                f"expected {expected!r} but got {actual!r} (case_insensitive={case_insensitive})",
                prefix,
            )

        matched.append(actual)

    return "".join(matched)


def _in_range(node: Range, c: str) -> bool:
    if node.options.case_insensitive:
        candidates = {c, c.lower(), c.upper()}
    else:
        candidates = {c}

    return any(
        node.low <= candidate <= node.high and candidate not in node.exclude
        for candidate in candidates
        if len(candidate) == 1
    )


def _match_range(node: Range, source: CharacterSource):
    c = source.read()
    if c is EOF:
        return Failure("EOF reached", "")

    if _in_range(node, c):
        return c

    source.unread(c)
    exclude = "".join(sorted(node.exclude))
    return Failure(
        f"character {c!r} doesn't match range {node.low!r}-{node.high!r}, exclude: {exclude!r}",
        c,
    )


def _match_tuple(node: Tuple, source: CharacterSource):
    strategy = accumulator(node.options.accumulator)
    start = source.mark()

    acc = strategy.seed()
    for index, child in enumerate(node.children):
        result = parse(child, source)
        if is_failure(result):
            source.rewind(start)
            return Failure(f"error in tuple element {index}: {result.message}", strategy.finish(acc))
        acc = strategy.step(acc, result)

    return strategy.finish(acc)


def _match_or(node: Or, source: CharacterSource):
    result = None
    for child in node.children:
        result = parse(child, source)
        if not is_failure(result):
            return result

    # Everything failed; report the last alternative's failure.
    assert result is not None
    return result


def _match_optional(node: Optional, source: CharacterSource):
    result = parse(node.child, source)
    if is_failure(result):
        return SKIP
    return result


def _match_repetition(node: ZeroOrMore | OneOrMore, source: CharacterSource):
    strategy = accumulator(node.options.accumulator)

    acc = strategy.seed()
    count = 0
    while True:
        before = source.position
        result = parse(node.child, source)
        if is_failure(result):
            break

        acc = strategy.step(acc, result)
        count += 1

        if source.position == before:
            # The child matched without consuming anything, so it would keep
            # on doing that forever.
            break

    if count > 0:
        return strategy.finish(acc)

    if isinstance(node, OneOrMore):
        return Failure(f"required at least one match: {result.message}", strategy.finish(acc))
    return SKIP


def _match_times(node: Times, source: CharacterSource):
    strategy = accumulator(node.options.accumulator)
    start = source.mark()

    acc = strategy.seed()
    for index in range(node.count):
        result = parse(node.child, source)
        if is_failure(result):
            source.rewind(start)
            return Failure(
                f"error in repetition {index} of {node.count}: {result.message}",
                strategy.finish(acc),
            )
        acc = strategy.step(acc, result)

    return strategy.finish(acc)


###############################################################################
# The pipeline
###############################################################################
def parse(node: Node, source: CharacterSource) -> typing.Any:
    """Run `node` against `source`, returning its value or a Failure.

    On failure the source is left exactly where it was when parse was called.
    """
    tl = trace_log
    if tl.isEnabledFor(logging.DEBUG):
        tl.debug(f"{source.position:>6} try  {describe(node)}")

    match node:
        case Literal():
            result = _match_literal(node, source)
        case Range():
            result = _match_range(node, source)
        case Tuple():
            result = _match_tuple(node, source)
        case Or():
            result = _match_or(node, source)
        case Optional():
            result = _match_optional(node, source)
        case ZeroOrMore() | OneOrMore():
            result = _match_repetition(node, source)
        case Times():
            result = _match_times(node, source)
        case _:
            typing.assert_never(node)

    if is_failure(result):
        if tl.isEnabledFor(logging.DEBUG):
            tl.debug(f"{source.position:>6} fail {describe(node)}: {result.message}")
        return result

    if tl.isEnabledFor(logging.DEBUG):
        tl.debug(f"{source.position:>6} ok   {describe(node)}: {result!r}")

    options = node.options
    if options.skip:
        return SKIP

    if options.coerce is not None:
        result = options.coerce(result)
    if options.metadata is not None:
        result = Annotated(result, options.metadata)
    if options.tag is not None:
        result = Tagged(options.tag, result)
    return result


def parse_text(node: Node, text: str) -> typing.Any:
    """Parse a string with a fresh source."""
    return parse(node, from_string(text))
