"""
CALF - Command Line Interface

Usage:
    calf "x = 10   y = (var + num) - 7"
    calf --tokens "f{1, 2}"
    echo "a ? b : c" | calf -
    python -m calf --number-type int64 "x = 300"
"""

import argparse
import logging
import sys

from .config import FrontendConfiguration
from .lexer import CalfError, Lexer
from .lexer.numbers import NUMBER_TYPES
from .parser import Parser, format_node


def _read_sources(args):
    for source in args.sources:
        if source == "-":
            yield "<stdin>", sys.stdin.read()
        else:
            yield "<argument>", source


def _dump_tokens(source: str, config: FrontendConfiguration, include_skips: bool):
    lexer = Lexer(source, config.converter, config.filename)
    for token in lexer.tokenize(include_skips=include_skips):
        print(token)


def _dump_ast(source: str, config: FrontendConfiguration):
    ast = Parser(source, config=config).parse()
    for statement in ast:
        print(format_node(statement))


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="calf",
        description="CALF front end: tokenize and parse CALF expressions",
    )
    parser.add_argument("sources", nargs="+", metavar="SOURCE",
                        help="Source text to parse ('-' reads standard input)")
    parser.add_argument(
        "--tokens",
        action="store_true",
        help="Print the token stream instead of the AST",
    )
    parser.add_argument(
        "--skips",
        action="store_true",
        help="With --tokens, also print comment and newline tokens",
    )
    parser.add_argument(
        "--number-type",
        choices=sorted(NUMBER_TYPES),
        default="float",
        dest="number_type",
        help="Type numeric literals are parsed into (default: float)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log lexer and parser activity to stderr",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    status = 0
    for filename, source in _read_sources(args):
        config = FrontendConfiguration(
            number_type=args.number_type,
            filename=filename,
        )
        try:
            if args.tokens:
                _dump_tokens(source, config, args.skips)
            else:
                _dump_ast(source, config)
        except CalfError as e:
            print(str(e), file=sys.stderr, end="")
            status = 1

    if status:
        sys.exit(status)
    return 0


if __name__ == "__main__":
    main()
