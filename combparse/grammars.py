# Some small, generally useful specifications.
from .compiler import OR, PLUS, RANGE, STAR

WHITESPACE = (OR, [("\r",), ("\n",), ("\t",), (" ",)])

# Whitespace that has to be there, but that contributes nothing to a result.
WS_PLUS = (PLUS, WHITESPACE, "accumulator", "text", "skip", True)

# Whitespace that may be there, and contributes nothing to a result.
WS_STAR = (STAR, WHITESPACE, "accumulator", "text", "skip", True)

DIGIT = (RANGE, ("0", "9"))

LETTER = (OR, [(RANGE, ("a", "z")), (RANGE, ("A", "Z"))])

DIGITS = (PLUS, DIGIT, "accumulator", "text")

INTEGER = (PLUS, DIGIT, "accumulator", "text", "coerce", int)
