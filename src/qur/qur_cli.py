"""
QUR CLI Entrypoint.

This module provides the command-line interface for the QUR front end.

Features:
    - Read source from `.qur` files (or inline strings with `-s`).
    - Lex and parse into an AST, reporting every syntax error found.
    - Dump the token stream or the AST tree for debugging.
    - Hand the AST to the code generator and write its output.

Example usage:
    qur hello.qur --ast
    qur -c hello.qur -o hello.s
    qur -s "int x = 1;" --tokens

Exit status:
    0 on success, 1 when lexing, parsing or code generation fails, and 2 on
    invalid command-line usage.

Functions:
    run_qur(source: str, is_string: bool = False, out: str = "out",
            show_tokens: bool = False, show_ast: bool = False, target: str = "asm") -> int:
        Executes the QUR pipeline (lex → parse → dump or generate) and returns an exit status.

    main(argv: list[str] | None = None) -> None:
        Parses CLI arguments, configures logging and exits with run_qur's status.
"""

import argparse
import logging
import sys

from qur.qur_errors import BuildError, LexError
from qur.qur_lexer import tokenize
from qur.qur_parser import Parser
from qur.qur_transpile import Transpiler

logger = logging.getLogger(__name__)


def run_qur(
    source: str,
    is_string: bool = False,
    out: str = "out",
    show_tokens: bool = False,
    show_ast: bool = False,
    target: str = "asm",
) -> int:
    """
    Run the QUR toolchain: lex, parse, then dump or generate code.

    Args:
        source (str): QUR source code, or a path to a `.qur` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        out (str): Path for generated code. Defaults to 'out'.
        show_tokens (bool): Print the token stream and stop.
        show_ast (bool): Print the AST tree and stop.
        target (str): Code generation target. Defaults to 'asm'.

    Returns:
        int: The process exit status.

    Side Effects:
        - Prints dumps to stdout and failures to stderr.
        - May write generated code to `out`.
    """
    if not is_string:
        try:
            with open(source, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            print(f"error: cannot read {source}: {e.strerror}", file=sys.stderr)
            return 1
    else:
        text = source

    # 1. Lexing
    try:
        tokens = tokenize(text)
    except LexError as e:
        print(f"lex error: {e}", file=sys.stderr)
        return 1

    if show_tokens:
        for tok in tokens:
            print(f"{tok.line}:{tok.col}\t{tok.kind.name}\t{tok.lexeme}")
        return 0

    # 2. Parsing
    parser = Parser(tokens)
    try:
        program = parser.build()
    except BuildError as e:
        for err in e.errors:
            print(f"parse error: {err}", file=sys.stderr)
        print(f"error: {e}", file=sys.stderr)
        return 1

    if show_ast:
        banner = "=" * 28
        print(f"{banner}\nAbstract Syntax Tree\n{banner}")
        print(program.render())
        print(banner)
        return 0

    # 3. Code generation
    result = Transpiler(target).transpile(program)
    if not result.supported:
        print(f"error: {result.message}", file=sys.stderr)
        return 1

    with open(out, "w", encoding="utf-8") as f:
        f.write(result.unwrap())
    logger.info("wrote %s", out)
    return 0


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the QUR CLI.

    Supported flags:
        - `-c`, `--compile`: Source file to compile (same as the positional argument).
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-o`, `--out`: Output path for generated code (default: out).
        - `--tokens`: Print the token stream.
        - `--ast`: Print the AST tree.
        - `-t`, `--target`: Code generation target (default: asm).
        - `-v`, `--verbose`: Enable debug logging.
    """
    parser = argparse.ArgumentParser(
        prog="qur", description="Front end for the QUR language."
    )
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-c", "--compile", dest="compile_path", metavar="FILE", help="Source file to compile"
    )
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-o", "--out", metavar="OUTFILE", default="out", help="Output file (default: out)"
    )
    parser.add_argument("--tokens", action="store_true", help="Print the token stream")
    parser.add_argument("--ast", action="store_true", help="Print the AST tree")
    parser.add_argument(
        "-t",
        "--target",
        choices=("asm", "x86"),
        default="asm",
        help="Code generation target (default: asm)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    source = args.compile_path or args.source
    if source is None:
        parser.error("a source file is required")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    status = run_qur(
        source=source,
        is_string=args.string,
        out=args.out,
        show_tokens=args.tokens,
        show_ast=args.ast,
        target=args.target,
    )
    sys.exit(status)


if __name__ == "__main__":
    main()
