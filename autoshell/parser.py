"""Autoshell parser — precedence-climbing parser producing a tree from tokens.

Grammar, loosest first::

    line       := redirected ( "|" redirected )*
    redirected := command ( (">" | "2>") word )*
    command    := word+
    word       := WORD | "$" WORD | QUOTED | "$(" line ")"

Command substitutions are parsed by re-entering ``parse_expression`` with
``Context.SUBSTITUTION``.  The ``)`` that ends a substitution is found while
gathering words, possibly several operator frames below the ``$(`` that
opened it, so atom parsing and operator climbing return a ``Parsed`` result
whose ``close`` field tells every frame on the way up that the boundary has
been reached.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, NamedTuple

from autoshell.ast_nodes import (
    Command,
    Expansion,
    Node,
    Pipe,
    Redirect,
    Variable,
    Word,
)
from autoshell.errors import ParseError
from autoshell.lexer import Lexer, Precedence, Token, TokenType
from autoshell.span import Span

# Deepest $( ... ) nesting accepted before the line is rejected.
MAX_SUBSTITUTION_DEPTH = 100


class Context(Enum):
    TOP_LEVEL = auto()
    SUBSTITUTION = auto()


class Parsed(NamedTuple):
    """A finished subtree.

    ``close`` is the span of the ``)`` consumed while building it when the
    subtree ended an enclosing substitution, and ``None`` otherwise.
    """
    node: Node
    close: Span | None = None

    @property
    def closed(self) -> bool:
        return self.close is not None


class TokenCursor:
    """Read position over a token list that is never modified."""

    def __init__(self, tokens: list[Token] | tuple[Token, ...]) -> None:
        self.tokens = tokens
        self.pos: int = 0

    def peek(self) -> Token | None:
        """Return the next token without consuming it, or None at the end."""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def advance(self) -> Token | None:
        tok = self.peek()
        if tok is not None:
            self.pos += 1
        return tok

    def advance_if(self, predicate: Callable[[Token], bool]) -> Token | None:
        """Consume and return the next token only if *predicate* accepts it."""
        tok = self.peek()
        if tok is not None and predicate(tok):
            self.pos += 1
            return tok
        return None

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def remaining(self) -> int:
        return len(self.tokens) - self.pos


class Parser:
    """Parser for a single command line.

    Consumes the token list produced by the Lexer and returns the root node
    of the syntax tree, or raises ``ParseError``.
    """

    def __init__(self, tokens: list[Token], logger: logging.Logger | None = None) -> None:
        self.cursor = TokenCursor(tokens)
        self.logger = logger or logging.getLogger("autoshell.parser")
        self._depth = 0

    # -- Top-level ---------------------------------------------------------

    def parse(self) -> Node:
        """Parse the whole token list; every token must be consumed."""
        try:
            result = self.parse_expression(self.cursor, Context.TOP_LEVEL)
        except RecursionError:
            raise ParseError("nesting too deep") from None
        leftover = self.cursor.peek()
        if leftover is not None:
            if leftover.type == TokenType.CLOSE:
                raise ParseError("unexpected closing token", leftover.span.start, leftover.span.end)
            raise ParseError("unexpected trailing input", leftover.span.start, leftover.span.end)
        return result.node

    def parse_expression(self, cursor: TokenCursor, context: Context) -> Parsed:
        """Parse one command with its operators: an atom, then climbing.

        Used for the whole line and for the inside of every ``$(...)``.
        """
        first = self.parse_atom(cursor, context)
        if first.closed:
            return first
        return self.climb(first.node, Precedence.PIPE, cursor, context)

    # -- Operators ---------------------------------------------------------

    def climb(self, lhs: Node, min_precedence: Precedence,
              cursor: TokenCursor, context: Context) -> Parsed:
        """Fold operators of at least *min_precedence* into *lhs*."""
        while self._at_operator(cursor, min_precedence):
            op = cursor.advance()
            limit = op.atom_limit
            rhs = self.parse_atom(cursor, context, limit=limit)

            # Redirect targets are a single word; only a pipe's right side
            # can absorb tighter operators.
            while limit is None and not rhs.closed and self._at_operator(cursor, op.precedence.tighter()):
                rhs = self.climb(rhs.node, op.precedence.tighter(), cursor, context)

            lhs = self._combine(op, lhs, rhs.node)
            if rhs.closed:
                return Parsed(lhs, rhs.close)
        return Parsed(lhs)

    @staticmethod
    def _at_operator(cursor: TokenCursor, min_precedence: Precedence) -> bool:
        tok = cursor.peek()
        return tok is not None and tok.is_operator and tok.precedence >= min_precedence

    @staticmethod
    def _combine(op: Token, lhs: Node, rhs: Node) -> Node:
        span = lhs.span.union(rhs.span)
        if op.type == TokenType.PIPE:
            return Pipe(left=lhs, op_span=op.span, right=rhs, span=span)
        if op.type == TokenType.REDIRECT:
            return Redirect(source=lhs, kind=op.redirect, op_span=op.span, target=rhs, span=span)
        raise AssertionError(f"not an operator: {op!r}")

    # -- Atoms -------------------------------------------------------------

    def parse_atom(self, cursor: TokenCursor, context: Context,
                   limit: int | None = None) -> Parsed:
        """Gather a run of word tokens into a ``Command``.

        At most *limit* tokens are taken when a limit is given.  Inside a
        substitution a ``)`` ends the run and the result is marked closed.
        """
        words: list[Node] = []
        taken = 0

        while limit is None or taken < limit:
            tok = cursor.advance_if(lambda t: not t.is_operator)
            if tok is None:
                break
            taken += 1
            close = self._word(tok, cursor, context, words)
            if close is not None:
                return Parsed(self._command(words), close)

        if not words:
            nxt = cursor.peek()
            if nxt is None:
                if context == Context.SUBSTITUTION:
                    raise ParseError("unmatched substitution")
                raise ParseError("expected a command")
            raise ParseError("expected a command", nxt.span.start, nxt.span.end)

        return Parsed(self._command(words))

    def _word(self, tok: Token, cursor: TokenCursor, context: Context,
              words: list[Node]) -> Span | None:
        """Turn one token into word-level nodes appended to *words*.

        Returns the span of the ``)`` when *tok* closes the enclosing
        substitution, else None.
        """
        if tok.type == TokenType.WORD:
            words.append(Word(text=tok.value, span=tok.span))
            return None

        if tok.type == TokenType.DOLLAR:
            name = cursor.advance_if(lambda t: t.type == TokenType.WORD)
            if name is None:
                raise ParseError("missing identifier after variable sigil", tok.span.end)
            words.append(Variable(name=name.value, span=tok.span.union(name.span)))
            return None

        if tok.type == TokenType.QUOTED:
            self._quoted(tok, words)
            return None

        if tok.type == TokenType.OPEN_SUBST:
            words.append(self._substitution(tok, cursor))
            return None

        if tok.type == TokenType.CLOSE:
            if context == Context.TOP_LEVEL:
                raise ParseError("unexpected closing token", tok.span.start, tok.span.end)
            if not words:
                raise ParseError("expected a command", tok.span.start, tok.span.end)
            return tok.span

        raise AssertionError(f"unexpected token in word position: {tok!r}")

    def _quoted(self, tok: Token, words: list[Node]) -> None:
        """Recognize the contents of a quoted group like unquoted words.

        The group is closed by its own quote, never by a substitution's
        ``)``, so its parts are read at top level on their own cursor.
        """
        if not tok.parts:
            words.append(Word(text="", span=Span.point(tok.span.start + 1)))
            return
        inner = TokenCursor(tok.parts)
        while not inner.at_end():
            self._word(inner.advance(), inner, Context.TOP_LEVEL, words)

    def _substitution(self, opener: Token, cursor: TokenCursor) -> Expansion:
        """Parse ``$( ... )`` after its opener has been consumed."""
        self.logger.debug("substitution opened at %d", opener.span.start)
        if self._depth >= MAX_SUBSTITUTION_DEPTH:
            raise ParseError("nesting too deep", opener.span.start, opener.span.end)
        self._depth += 1
        try:
            result = self.parse_expression(cursor, Context.SUBSTITUTION)
        except RecursionError:
            raise ParseError("nesting too deep", opener.span.start, opener.span.end) from None
        finally:
            self._depth -= 1
        close = result.close

        if close is None:
            nxt = cursor.advance_if(lambda t: t.type == TokenType.CLOSE)
            if nxt is None:
                leftover = cursor.peek()
                if leftover is None:
                    raise ParseError("unmatched substitution")
                raise ParseError("unexpected trailing input", leftover.span.start, leftover.span.end)
            close = nxt.span

        self.logger.debug("substitution closed at %d", close.end)
        return Expansion(command=result.node, span=opener.span.union(close))

    @staticmethod
    def _command(words: list[Node]) -> Command:
        span = words[0].span.union(words[-1].span)
        return Command(words=tuple(words), span=span)


def parse_line(source: str, logger: logging.Logger | None = None) -> Node:
    """Lex and parse one command line into its syntax tree."""
    tokens = Lexer(source, logger=logger).tokenize()
    return Parser(tokens, logger=logger).parse()
