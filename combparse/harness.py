"""Run a grammar from a python file against an input file.

    python -m combparse examples/keyvalue.py settings.txt --log-level DEBUG

The grammar file is an ordinary python module. The harness uses the member
named by --grammar-member, or else the module's `GRAMMAR`. The member may be
a specification or an already-compiled node.
"""

import argparse
import importlib.util
import inspect
import logging
import sys
import types

from .combinators import Node, describe, parse
from .compiler import SpecificationError, compile
from .result import Failure, is_failure
from .source import from_path


DEFAULT_MEMBER = "GRAMMAR"


harness_log = logging.getLogger("combparse.harness")


def load_module(file_name: str) -> types.ModuleType:
    mod_name = inspect.getmodulename(file_name)
    if mod_name is None:
        raise Exception(f"{file_name} does not seem to be a module")

    spec = importlib.util.spec_from_file_location(mod_name, file_name)
    if spec is None or spec.loader is None:
        raise Exception(f"Cannot load {file_name}")

    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def load_grammar(file_name: str, member_name: str | None = None) -> Node:
    """Load and compile the grammar in the given file."""
    module = load_module(file_name)

    name = member_name or DEFAULT_MEMBER
    value = getattr(module, name, None)
    if value is None:
        raise Exception(f"Cannot find {name} in {file_name}")

    return compile(value)


def format_failure(failure: Failure, position: int) -> str:
    return f"{failure} at {position}\n  state: {failure.state!r}"


def main(args: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Parse a file with a combinator grammar")
    parser.add_argument("grammar", help="Path to a python file containing the grammar to load")
    parser.add_argument("source_path", help="Path to an input file to parse")
    parser.add_argument(
        "--grammar-member",
        type=str,
        default=None,
        help=f"The name of the member in the grammar module to load. The default is {DEFAULT_MEMBER}.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level. DEBUG traces every parser that is tried.",
    )
    parser.add_argument(
        "--require-eof",
        action="store_true",
        help="Fail if the grammar matches without consuming the whole input.",
    )

    parsed = parser.parse_args(args[1:])
    logging.basicConfig(level=parsed.log_level, format="%(name)s: %(message)s")

    try:
        node = load_grammar(parsed.grammar, parsed.grammar_member)
    except SpecificationError as e:
        print(f"Bad grammar in {parsed.grammar}: {e}", file=sys.stderr)
        return 2

    harness_log.info(f"Parsing {parsed.source_path} with {describe(node)}")

    with from_path(parsed.source_path) as source:
        result = parse(node, source)
        if is_failure(result):
            print(format_failure(result, source.position))
            return 1

        if parsed.require_eof and not source.at_eof():
            failure = Failure("unexpected input after the end of the grammar", result)
            print(format_failure(failure, source.position))
            return 1

    print(repr(result))
    return 0


def run():
    sys.exit(main(sys.argv))


if __name__ == "__main__":
    run()
