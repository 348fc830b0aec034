"""Autoshell — lexes and parses shell-like command lines into syntax trees."""

from autoshell.ast_nodes import (
    Command,
    Expansion,
    Node,
    Pipe,
    Redirect,
    Variable,
    Word,
    walk,
    to_dict,
    source_text,
)
from autoshell.errors import AutoshellError, LexerError, ParseError, ConfigError
from autoshell.lexer import Lexer, Token, TokenType, RedirectKind, tokenize
from autoshell.parser import Parser, Context, parse_line
from autoshell.span import Span

__all__ = [
    "tokenize", "parse_line", "Lexer", "Parser", "Context",
    "Token", "TokenType", "RedirectKind", "Span",
    "Node", "Word", "Variable", "Expansion", "Command", "Pipe", "Redirect",
    "walk", "to_dict", "source_text",
    "AutoshellError", "LexerError", "ParseError", "ConfigError",
]
