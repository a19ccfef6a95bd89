"""A small backtracking parser-combinator engine.

Grammars are written as plain data: nested tuples describing literals,
character ranges, sequences, alternatives and repetitions. `compile` turns
that description into a tree of combinator nodes once, and the tree can then
parse as many inputs as you like.

## Making Grammars

    from combparse import compile, parse_text, TUPLE, OR, STAR, RANGE

    digit = (RANGE, ("0", "9"))
    ws = (STAR, (OR, [" ", "\\t"]), "skip", True)

    pair = compile((TUPLE, [ws, digit, ws, digit], "tag", "pair"))

    parse_text(pair, "  3 4")  # Tagged(tag='pair', value=['3', '4'])

Every node takes the same options: `case_insensitive`, `accumulator`
("sequence" builds a list, "text" builds a string), `tag`, `coerce`,
`metadata` and `skip`. Ranges also take `exclude`.

## Results

A parse returns the value of the match or a `Failure`, which carries a
message and whatever partial result was available. Failures are returned,
never raised, and a failed parse always leaves the input exactly where it
found it, so alternatives and repetitions can backtrack as far as they need
to. There's no memoization, though, so a grammar that backtracks a lot will
do a lot of work; keep alternatives cheap to reject.

Left recursion isn't supported: a rule that starts with itself will recurse
until Python gives up.
"""

from .accumulate import Accumulator, AccumulatorKind, SequenceAccumulator, TextAccumulator
from .combinators import (
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
    parse,
    parse_text,
)
from .compiler import (
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
from .result import SKIP, Annotated, Failure, Skip, Tagged, is_failure, is_skip, text_of
from .source import EOF, CharacterSource, EndOfInput, from_path, from_string
