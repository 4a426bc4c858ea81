"""
Coem CLI Entrypoint.

This module provides the command-line interface for checking Coem source code.
It lexes and parses a program and prints the resulting tree, or the diagnostics
that stopped it from being well-formed.

Features:
    - Read source from `.coem` files or inline strings.
    - Print the parse as prefix text (`sexpr`), JSON (`json`), or the raw token list (`tokens`).
    - Load extra keyword spellings from a JSON alias file (`--keywords` or `COEM_KEYWORDS`).
    - Launch an interactive REPL.

Exit codes:
    0   the program is well-formed
    65  at least one diagnostic was reported

Example usage:
    coem hello.coem
    coem -s "let x be true;" -o json
    coem --keywords spanish.json hola.coem
    coem --repl --verbose

Functions:
    run_coem(source: str, is_string: bool = False, output: str = "sexpr",
             keywords: Optional[str] = None) -> int:
        Runs the front end (lex → parse → print) and returns the exit code.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or check).
"""

import argparse
import json
import logging
import os
import sys

from coem.coem_errors import ErrorReporter
from coem.coem_lexer import tokenize
from coem.coem_parser import Parser
from coem.coem_printer import AstPrinter
from coem.coem_uimap import KeywordMapper

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DATAERR = 65
KEYWORDS_ENV = "COEM_KEYWORDS"


def load_keywords(path: str | None) -> KeywordMapper:
    """
    Build the keyword mapper, adding aliases from `path` or `$COEM_KEYWORDS` if either is set.

    Raises:
        MappingError: If the alias file cannot be loaded.
    """
    mapper = KeywordMapper.from_canonical()
    path = path or os.getenv(KEYWORDS_ENV)
    if path:
        logger.debug("loading keyword aliases from %s", path)
        mapper.load_from_json(path)
    return mapper


def run_coem(
    source: str,
    is_string: bool = False,
    output: str = "sexpr",
    keywords: str | None = None,
) -> int:
    """
    Run the Coem front end over a file or a source string.

    Args:
        source (str): The Coem source code or path to a `.coem` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        output (str): `"sexpr"`, `"json"` or `"tokens"`.
        keywords (str | None): Optional path to a JSON keyword alias file.

    Returns:
        int: `EXIT_OK`, or `EXIT_DATAERR` when any diagnostic was reported.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.coem'.
        MappingError: If the keyword alias file is invalid.

    Side Effects:
        - Prints the tree (or tokens) to stdout and diagnostics to stderr.
    """
    if not is_string and not source.endswith(".coem"):
        raise ValueError("Only .coem files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    reporter = ErrorReporter()
    tokens = tokenize(source, on_error=reporter, keywords=load_keywords(keywords))
    logger.debug("lexed %d tokens", len(tokens))

    if output == "tokens":
        for tok in tokens:
            print(f"{tok.line}:{tok.col} {tok.type.value} {tok.lexeme!r}")
        return EXIT_DATAERR if reporter.had_error else EXIT_OK

    statements = Parser(tokens, on_error=reporter).parse()
    logger.debug("parsed %d top-level statements", len(statements))
    if reporter.had_error:
        return EXIT_DATAERR

    if output == "json":
        print(json.dumps([stmt.to_dict() for stmt in statements], indent=2))
    else:
        print(AstPrinter().print(statements))
    return EXIT_OK


def main() -> None:
    """
    Entry point for the Coem CLI.

    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise checks the given file or string and exits with `run_coem`'s code.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-o`, `--output`: `sexpr` (default), `json` or `tokens`.
        - `--keywords`: JSON keyword alias file.
        - `--repl`: Launch the interactive REPL.
        - `--verbose`: Debug logging, and verbose REPL mode.
    """
    parser = argparse.ArgumentParser(prog="coem")
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-o",
        "--output",
        choices=("sexpr", "json", "tokens"),
        default="sexpr",
        help="What to print (default: sexpr)",
    )
    parser.add_argument("--keywords", metavar="FILE", help="JSON keyword alias file")
    parser.add_argument("--repl", action="store_true", help="Launch interactive REPL")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.repl or args.source is None:
        from coem.coem_repl import start_repl

        start_repl(output=args.output, verbose=args.verbose, keywords=load_keywords(args.keywords))
        return

    sys.exit(
        run_coem(
            source=args.source,
            is_string=args.string,
            output=args.output,
            keywords=args.keywords,
        )
    )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
