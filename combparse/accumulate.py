"""Accumulator strategies: how a tuple or a repetition folds the values of its
children into one value.

A strategy is a seed/step/finish triple. `seed` makes a fresh accumulator,
`step` adds one child value to it (leaving out SKIP), and `finish` turns it
into the value the node returns.
"""

import abc
import enum
import io
import typing

from .result import Skip, text_of


class AccumulatorKind(enum.Enum):
    SEQUENCE = "sequence"
    TEXT = "text"


class Accumulator:
    @abc.abstractmethod
    def seed(self) -> typing.Any:
        raise NotImplementedError()

    @abc.abstractmethod
    def step(self, acc, value) -> typing.Any:
        raise NotImplementedError()

    @abc.abstractmethod
    def finish(self, acc) -> typing.Any:
        raise NotImplementedError()


class SequenceAccumulator(Accumulator):
    """Collects child values into a list."""

    def seed(self) -> list:
        return []

    def step(self, acc: list, value) -> list:
        if value is not Skip.SKIP:
            acc.append(value)
        return acc

    def finish(self, acc: list) -> list:
        return acc


class TextAccumulator(Accumulator):
    """Concatenates the character content of child values into a string."""

    def seed(self) -> io.StringIO:
        return io.StringIO()

    def step(self, acc: io.StringIO, value) -> io.StringIO:
        if value is not Skip.SKIP:
            acc.write(text_of(value))
        return acc

    def finish(self, acc: io.StringIO) -> str:
        return acc.getvalue()


_STRATEGIES: dict[AccumulatorKind, Accumulator] = {
    AccumulatorKind.SEQUENCE: SequenceAccumulator(),
    AccumulatorKind.TEXT: TextAccumulator(),
}


def accumulator(kind: AccumulatorKind) -> Accumulator:
    return _STRATEGIES[kind]
