# An example grammar: signed integers and decimals.
#
#     python -m combparse examples/signed_numbers.py some_number.txt
from combparse import OPT, OR, TUPLE
from combparse.grammars import DIGITS

SIGN = (OPT, (OR, ["+", "-"]))

DECIMAL = (
    TUPLE,
    [SIGN, DIGITS, ".", DIGITS],
    {"accumulator": "text", "coerce": float, "tag": "decimal"},
)

INTEGER = (
    TUPLE,
    [SIGN, DIGITS],
    {"accumulator": "text", "coerce": int, "tag": "integer"},
)

# Decimals first: "1.5" starts with an integer, and the first alternative to
# match wins.
NUMBER = (OR, [DECIMAL, INTEGER])

GRAMMAR = NUMBER
