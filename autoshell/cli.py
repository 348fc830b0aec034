"""Autoshell CLI — autoshell parse, autoshell tokens, autoshell check."""
import json
import logging
import sys

from autoshell.ast_nodes import to_dict
from autoshell.config import get_config
from autoshell.errors import AutoshellError, ConfigError
from autoshell.lexer import Lexer, Token, TokenType
from autoshell.parser import Parser
from autoshell.printer import format_tree


def _format_token(tok: Token, depth: int = 0) -> list[str]:
    pad = "  " * depth
    if tok.type == TokenType.QUOTED:
        lines = [f"{pad}QUOTED {tok.value} {tok.span!r}"]
        for part in tok.parts:
            lines.extend(_format_token(part, depth + 1))
        return lines
    return [f"{pad}{tok.type.name} {tok.value!r} {tok.span!r}"]


def main():
    args = sys.argv[1:]
    verbose = False
    # Flags only come before the subcommand; later words belong to the line.
    while args and args[0] in ("-v", "--verbose"):
        args.pop(0)
        verbose = True

    if len(args) < 1:
        print("Usage: autoshell <command> <command line | ->", file=sys.stderr)
        print("Commands: parse, tokens, check", file=sys.stderr)
        sys.exit(1)

    command = args[0]

    if command not in ("parse", "tokens", "check"):
        print(f"Unknown command: {command}", file=sys.stderr)
        sys.exit(1)

    if len(args) < 2:
        print(f"Usage: autoshell {command} <command line | ->", file=sys.stderr)
        sys.exit(1)

    try:
        config = get_config()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    level = "DEBUG" if verbose else str(config["logging"]["level"]).upper()
    logging.basicConfig(level=level, format="[autoshell] %(name)s: %(message)s")

    line = " ".join(args[1:])
    if line == "-":
        line = sys.stdin.read().rstrip("\n")

    try:
        tokens = Lexer(line).tokenize()

        if command == "tokens":
            for tok in tokens:
                print("\n".join(_format_token(tok)))
            sys.exit(0)

        tree = Parser(tokens).parse()

        if command == "check":
            print("OK")
            sys.exit(0)

        indent = config["output"]["indent"]
        if config["output"]["format"] == "json":
            try:
                print(json.dumps(to_dict(tree), indent=indent))
            except RecursionError:
                print("Error: tree too deep for JSON output", file=sys.stderr)
                sys.exit(1)
        else:
            print(format_tree(tree, indent=indent))
        sys.exit(0)

    except AutoshellError as e:
        diagnostics = config["diagnostics"]
        print(
            e.render(line, marker=diagnostics["marker"], fill=diagnostics["fill"],
                     suffix=diagnostics["suffix"]),
            file=sys.stderr,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
