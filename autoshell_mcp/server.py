"""Autoshell MCP Server — exposes the command-line parser via MCP protocol."""

import json

from mcp.server.fastmcp import FastMCP

from autoshell.ast_nodes import to_dict
from autoshell.config import get_config
from autoshell.errors import AutoshellError, ConfigError
from autoshell.lexer import Lexer, Token, TokenType
from autoshell.parser import Parser

mcp = FastMCP("autoshell")


def _render_error(line: str, error: AutoshellError, diagnostics: dict) -> str:
    rendered = error.render(line, marker=diagnostics["marker"], fill=diagnostics["fill"],
                            suffix=diagnostics["suffix"])
    return f"Error: {error.message}\n{rendered}"


def _token_to_dict(tok: Token) -> dict:
    data = {"type": tok.type.name, "value": tok.value, "span": [tok.span.start, tok.span.end]}
    if tok.type == TokenType.QUOTED:
        data["parts"] = [_token_to_dict(part) for part in tok.parts]
    if tok.redirect is not None:
        data["redirect"] = tok.redirect.name.lower()
    return data


@mcp.tool()
def autoshell_parse(line: str) -> str:
    """Parse one shell command line and return its syntax tree as JSON.

    Args:
        line: The command line to parse (e.g. "ls -la | grep txt > out")
    """
    return parse_command_line(line)


def parse_command_line(line: str) -> str:
    """Core logic for parsing a line — testable without MCP."""
    try:
        diagnostics = get_config()["diagnostics"]
    except ConfigError as e:
        return f"Error: {e}"

    try:
        tree = Parser(Lexer(line).tokenize()).parse()
    except AutoshellError as e:
        return _render_error(line, e, diagnostics)
    try:
        return json.dumps(to_dict(tree), indent=2)
    except RecursionError:
        return "Error: tree too deep for JSON output"


@mcp.tool()
def autoshell_tokens(line: str) -> str:
    """Split one shell command line into tokens and return them as JSON.

    Args:
        line: The command line to tokenize
    """
    return tokenize_command_line(line)


def tokenize_command_line(line: str) -> str:
    """Core logic for tokenizing a line — testable without MCP."""
    try:
        diagnostics = get_config()["diagnostics"]
    except ConfigError as e:
        return f"Error: {e}"

    try:
        tokens = Lexer(line).tokenize()
    except AutoshellError as e:
        return _render_error(line, e, diagnostics)
    return json.dumps([_token_to_dict(tok) for tok in tokens], indent=2)


@mcp.tool()
def autoshell_check(line: str) -> str:
    """Check that a shell command line is well formed without returning the tree.

    Args:
        line: The command line to check
    """
    return check_command_line(line)


def check_command_line(line: str) -> str:
    """Core logic for checking a line — testable without MCP."""
    try:
        diagnostics = get_config()["diagnostics"]
    except ConfigError as e:
        return f"Error: {e}"

    try:
        Parser(Lexer(line).tokenize()).parse()
    except AutoshellError as e:
        return _render_error(line, e, diagnostics)
    return "OK"


AUTOSHELL_GRAMMAR_GUIDE = """\
# Command lines autoshell understands

One line per call. Supported syntax:

- Words separated by whitespace: `ls -la /tmp`
- Quotes keep whitespace: `echo "hi there"` and `echo 'hi there'`
- Backslash escapes one character; backslash-newline joins lines: `a\\ b`
- Variables: `echo $HOME`, `echo $?`
- Command substitution, nestable, also inside double quotes:
  `echo $(basename $(pwd))`, `echo "today is $(date)"`
- Pipes: `cat file | grep x | wc -l`
- Redirect stdout or stderr to exactly one word: `make > build.log`, `make 2> errors.log`

Redirection binds tighter than pipes, so `a > b | c` sends `a` to `b`
and pipes the (empty) result into `c`.

Not supported: globbing, here-docs, `>>`, `<`, `&&`, `||`, `;`, arithmetic,
control-flow keywords.
"""


@mcp.prompt()
def autoshell_guide() -> str:
    """Guide to the command-line syntax the autoshell tools accept."""
    return AUTOSHELL_GRAMMAR_GUIDE


if __name__ == "__main__":
    mcp.run(transport="stdio")
