"""What a parse returns.

A parse either succeeds, with a value of whatever type the node produces, or
returns a `Failure`. Failures are ordinary values: they are never raised, and
every combinator looks at the results of the parsers it calls and decides
what a failure means for it.

    result = parse(node, source)
    if is_failure(result):
        print(result)      # <<expected 'a' but got 'b' ...>>
    else:
        ...                # use the value
"""

import dataclasses
import enum
import typing


@dataclasses.dataclass(frozen=True)
class Failure:
    """A non-fatal mismatch.

    `message` says what went wrong; `state` is the best partial result that
    was available at the point of failure (the matched prefix of a literal,
    the offending character of a range, the accumulated values of a tuple...)
    """

    message: str
    state: typing.Any

    def __str__(self) -> str:
        return f"<<{self.message}>>"


class Skip(enum.Enum):
    """The empty variant of a successful match.

    A node that produces SKIP matched (possibly nothing at all) but has no
    value to contribute, and accumulators leave it out.
    """

    SKIP = "skip"

    def __repr__(self) -> str:
        return "SKIP"


SKIP = Skip.SKIP


class Tagged(typing.NamedTuple):
    """A value labelled by the node that produced it. Compares equal to the
    plain pair `(tag, value)`.
    """

    tag: typing.Any
    value: typing.Any


@dataclasses.dataclass(frozen=True)
class Annotated:
    """A value carrying a node's metadata."""

    value: typing.Any
    metadata: typing.Mapping[str, typing.Any]


def is_failure(result) -> typing.TypeGuard[Failure]:
    return isinstance(result, Failure)


def is_skip(result) -> bool:
    return result is SKIP


def text_of(value) -> str:
    """The character content of a parse value.

    Envelopes contribute their contents, sequences the concatenation of their
    elements. SKIP contributes nothing.
    """
    match value:
        case Skip.SKIP:
            return ""
        case str():
            return value
        case Tagged(value=inner) | Annotated(value=inner):
            return text_of(inner)
        case list() | tuple():
            return "".join(text_of(v) for v in value)
        case _:
            return str(value)
