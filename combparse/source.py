"""Character sources with unlimited pushback.

Every combinator reads through a CharacterSource, and every combinator that
fails gives back exactly what it read. The source makes that cheap: unread
characters go onto a last-in-first-out stack which is always drained before
the underlying stream is touched again, so no seeking is ever required.
"""

import enum
import io
import typing


class EndOfInput(enum.Enum):
    EOF = "eof"

    def __repr__(self) -> str:
        return "EOF"


EOF = EndOfInput.EOF


class TextStream(typing.Protocol):
    def read(self, size: int = -1, /) -> str: ...


class CharacterSource:
    """A character stream you can push characters back onto.

    `position` counts the characters that have been logically consumed: reads
    minus unreads. A combinator can compare it before and after a call to see
    how much input a match used.
    """

    stream: TextStream
    _stack: list[str]
    _history: list[str]

    def __init__(self, stream: TextStream):
        self.stream = stream
        self._stack = []
        # Every character currently consumed, in order. rewind() needs this
        # to put back input that has already been folded into a result.
        self._history = []

    def __enter__(self) -> "CharacterSource":
        return self

    def __exit__(self, *exc_info):
        close = getattr(self.stream, "close", None)
        if close is not None:
            close()

    def __repr__(self) -> str:
        return f"<CharacterSource position={self.position} pending={self.pending}>"

    @property
    def position(self) -> int:
        return len(self._history)

    @property
    def pending(self) -> int:
        """The number of pushed-back characters waiting to be read again."""
        return len(self._stack)

    def read(self) -> str | EndOfInput:
        if self._stack:
            c = self._stack.pop()
        else:
            c = self.stream.read(1)
            if c == "":
                return EOF

        self._history.append(c)
        return c

    def unread(self, c: str | EndOfInput):
        """Push characters back so that the next reads return them.

        A single character is simply pushed. A longer string is pushed in
        reverse, so reading len(s) characters afterwards reproduces s in its
        original order.
        """
        if c is EOF:
            raise ValueError("Cannot unread the end of input")
        assert isinstance(c, str)

        for ch in reversed(c):
            if self._history:
                self._history.pop()
            self._stack.append(ch)

    def peek(self) -> str | EndOfInput:
        c = self.read()
        if c is not EOF:
            self.unread(c)
        return c

    def at_eof(self) -> bool:
        return self.peek() is EOF

    def mark(self) -> int:
        """Remember the current position, for a later call to `rewind`."""
        return self.position

    def rewind(self, mark: int):
        """Put back everything consumed since `mark` was taken."""
        if mark > self.position:
            raise ValueError(f"Cannot rewind forward from {self.position} to {mark}")

        if mark < self.position:
            self.unread("".join(self._history[mark:]))
        assert self.position == mark

    def consumed(self, mark: int) -> str:
        """The text consumed since `mark`."""
        return "".join(self._history[mark:])


def from_string(text: str) -> CharacterSource:
    return CharacterSource(io.StringIO(text))


def from_path(path: str) -> CharacterSource:
    """Open a UTF-8 file as a source. Use the source as a context manager to
    close the file when you're done.
    """
    return CharacterSource(open(path, "r", encoding="utf-8", newline=""))
