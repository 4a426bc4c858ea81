"""
Interactive read-parse-print loop for Coem.

Each entry is lexed and parsed on its own and the resulting tree is printed, or the
diagnostics if the entry is not well-formed. An entry that opens more blocks (`:`)
than it closes (`.`) keeps reading continuation lines.

Commands:
    quit / exit     leave the REPL
    verbose-mode    toggle printing of the token stream
    keywords        list the active keyword spellings
"""

import io
import json

from coem.coem_constants import TokenType
from coem.coem_errors import ErrorReporter
from coem.coem_lexer import Token, tokenize
from coem.coem_parser import Parser
from coem.coem_printer import AstPrinter
from coem.coem_uimap import KeywordMapper

PROMPT = "coem> "
CONTINUATION_PROMPT = "....> "


def block_depth(tokens: list[Token]) -> int:
    """Number of blocks opened by `:` and not yet closed by `.`."""
    opened = sum(1 for tok in tokens if tok.type == TokenType.COLON)
    closed = sum(1 for tok in tokens if tok.type == TokenType.DOT)
    return opened - closed


def render(source: str, keywords: KeywordMapper, output: str = "sexpr", verbose: bool = False) -> str:
    """Parse one REPL entry and return the text to show for it."""
    buf = io.StringIO()
    reporter = ErrorReporter(stream=buf)
    tokens = tokenize(source, on_error=reporter, keywords=keywords)
    lines: list[str] = []
    if verbose or output == "tokens":
        lines.append(f"[tokens] >>> {tokens}")
    statements = Parser(tokens, on_error=reporter).parse()

    if reporter.had_error:
        lines.append("[error] >>>")
        lines.append(buf.getvalue().rstrip())
    elif output == "json":
        lines.append(json.dumps([stmt.to_dict() for stmt in statements], indent=2))
    elif output != "tokens":
        lines.append(AstPrinter().print(statements))
    return "\n".join(lines)


def start_repl(
    output: str = "sexpr", verbose: bool = False, keywords: KeywordMapper | None = None
) -> None:
    keywords = keywords or KeywordMapper.from_canonical()
    print("Coem REPL. Type 'quit' or 'exit' to leave.")

    while True:
        try:
            line = input(PROMPT)
            if line.strip() in ("quit", "exit"):
                print("Exiting Coem REPL.")
                break

            src_lines = [line]
            while block_depth(tokenize("\n".join(src_lines), keywords=keywords)) > 0:
                src_lines.append(input(CONTINUATION_PROMPT))
            src = "\n".join(src_lines).strip()

            if not src or src.startswith("#"):
                continue
            if src.lower() == "verbose-mode":
                verbose = not verbose
                print(f"[mode] >>> Verbose mode {'ON' if verbose else 'OFF'}")
                continue
            if src.lower() == "keywords":
                print(keywords.report())
                continue

            print(render(src, keywords, output=output, verbose=verbose))

        except (KeyboardInterrupt, EOFError):
            print("\nExiting Coem REPL.")
            break


def main() -> None:
    start_repl()


if __name__ == "__main__":
    main()
