# An example grammar: "name = value" settings, one per line, with an optional
# (and case-insensitive) "set" keyword in front.
#
#     SET width = 80
#     height=24
#     set title = hello
from combparse import OPT, OR, PLUS, RANGE, SKIP, STAR, TUPLE
from combparse.grammars import DIGIT, LETTER

BLANK = (STAR, (OR, [" ", "\t"]), "skip", True)

NEWLINE = (OR, ["\r\n", "\n"], "skip", True)

# "set" followed by at least one blank. A name like "settings" starts the
# same way; then the blanks are missing and the whole keyword backs out.
KEYWORD = (
    TUPLE,
    [("set", "case_insensitive", True), (PLUS, (OR, [" ", "\t"]))],
    "skip",
    True,
)

NAME = (
    TUPLE,
    [LETTER, (STAR, (OR, [LETTER, DIGIT, "_"]), "accumulator", "text")],
    "accumulator",
    "text",
)

VALUE = (PLUS, (RANGE, ("!", "~")), "accumulator", "text")

SETTING = (
    TUPLE,
    [BLANK, (OPT, KEYWORD), NAME, BLANK, ("=", "skip", True), BLANK, VALUE, BLANK, (OPT, NEWLINE)],
    "tag",
    "setting",
)


def to_dict(settings) -> dict[str, str]:
    # An empty file is a `*` that matched nothing.
    if settings is SKIP:
        return {}
    return {setting.value[0]: setting.value[1] for setting in settings}


GRAMMAR = (STAR, SETTING, "coerce", to_dict)
