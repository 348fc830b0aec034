"""Autoshell lexer — scans one command line into a flat list of tokens."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum, auto

from autoshell.errors import LexerError
from autoshell.span import Span


# ---------------------------------------------------------------------------
# Token types
# ---------------------------------------------------------------------------

class TokenType(Enum):
    # Words
    WORD = auto()
    QUOTED = auto()        # "..." or '...', holds its own token list

    # Operators
    PIPE = auto()          # |
    REDIRECT = auto()      # > or 2>

    # Expansion markers
    DOLLAR = auto()        # $
    OPEN_SUBST = auto()    # $(
    CLOSE = auto()         # )


class RedirectKind(Enum):
    STDOUT = ">"
    STDERR = "2>"


class Precedence(IntEnum):
    """Operator binding strength, loosest first."""
    PIPE = 1
    REDIRECT = 2
    COMMAND = 3

    def tighter(self) -> Precedence:
        return Precedence(self + 1)


QUOTES = ("'", '"')


# ---------------------------------------------------------------------------
# Token dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    span: Span
    parts: tuple[Token, ...] = ()
    redirect: RedirectKind | None = None

    @property
    def is_operator(self) -> bool:
        return self.type in (TokenType.PIPE, TokenType.REDIRECT)

    @property
    def precedence(self) -> Precedence:
        if self.type == TokenType.PIPE:
            return Precedence.PIPE
        if self.type == TokenType.REDIRECT:
            return Precedence.REDIRECT
        return Precedence.COMMAND

    @property
    def atom_limit(self) -> int | None:
        """How many word tokens the operator takes on its right, if bounded."""
        assert self.is_operator, f"{self.type.name} is not an operator"
        return 1 if self.type == TokenType.REDIRECT else None

    def __repr__(self) -> str:
        if self.type == TokenType.QUOTED:
            return f"Token(QUOTED, {self.value!r}, {list(self.parts)!r}, {self.span!r})"
        return f"Token({self.type.name}, {self.value!r}, {self.span!r})"


# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------

@dataclass
class _Frame:
    """One output collection: the whole line, or the inside of a quote."""
    tokens: list[Token] = field(default_factory=list)
    quote: str | None = None
    start: int = 0
    depth: int = 0         # $( opened inside this quote and not yet closed


class Lexer:
    """Scans a command line and produces a flat list of Token objects.

    Quoted text is collected into its own frame and spliced back into the
    enclosing stream as a single QUOTED token when the quote closes.
    """

    def __init__(self, source: str, logger: logging.Logger | None = None) -> None:
        self.source = source
        self.pos: int = 0
        self.logger = logger or logging.getLogger("autoshell.lexer")
        self._frames: list[_Frame] = [_Frame()]
        self._buffer: list[str] = []
        self._run_start: int | None = None

    # -- Character-level helpers -------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at EOF."""
        if self.pos < len(self.source):
            return self.source[self.pos]
        return ""

    def peek(self) -> str:
        """Look ahead one character without consuming it."""
        next_pos = self.pos + 1
        if next_pos < len(self.source):
            return self.source[next_pos]
        return ""

    @property
    def _frame(self) -> _Frame:
        return self._frames[-1]

    @property
    def quoting(self) -> str | None:
        """The active quote character, or None outside quotes."""
        return self._frame.quote

    # -- Output helpers ----------------------------------------------------

    def _emit(self, token_type: TokenType, value: str, width: int,
              redirect: RedirectKind | None = None) -> None:
        """Flush the pending word, emit an operator token and step past it."""
        self._flush()
        span = Span(self.pos, self.pos + width)
        self._frame.tokens.append(Token(token_type, value, span, redirect=redirect))
        self.pos += width

    def _append(self, ch: str) -> None:
        if self._run_start is None:
            self._run_start = self.pos
        self._buffer.append(ch)
        self.pos += 1

    def _flush(self) -> None:
        """Turn the pending run into a WORD token.

        Outside quotes an all-whitespace run is a word boundary and is
        dropped; inside quotes every run is kept.
        """
        if self._run_start is None:
            return
        text = "".join(self._buffer)
        span = Span(self._run_start, self.pos)
        self._buffer = []
        self._run_start = None
        if self.quoting is None and not text.strip():
            return
        self._frame.tokens.append(Token(TokenType.WORD, text, span))

    # -- Main entry point --------------------------------------------------

    def tokenize(self) -> list[Token]:
        """Scan the entire line and return its tokens."""
        while self.pos < len(self.source):
            ch = self._current()
            quote = self.quoting

            if ch == "$":
                if self.peek() == "(":
                    if quote is not None:
                        self._frame.depth += 1
                    self._emit(TokenType.OPEN_SUBST, "$(", 2)
                else:
                    self._emit(TokenType.DOLLAR, "$", 1)
                continue

            if ch == "|" and quote is None:
                self._emit(TokenType.PIPE, "|", 1)
                continue

            if ch == ")" and (quote is None or self._frame.depth > 0):
                if quote is not None:
                    self._frame.depth -= 1
                self._emit(TokenType.CLOSE, ")", 1)
                continue

            if ch == "\\":
                self._read_escape()
                continue

            if ch == "2" and self.peek() == ">" and quote is None:
                self._emit(TokenType.REDIRECT, "2>", 2, redirect=RedirectKind.STDERR)
                continue

            if ch == ">" and quote is None:
                self._emit(TokenType.REDIRECT, ">", 1, redirect=RedirectKind.STDOUT)
                continue

            if ch in QUOTES:
                if quote is None:
                    self._open_quote(ch)
                elif quote == ch:
                    self._close_quote()
                else:
                    self._append(ch)
                continue

            if ch.isspace() and quote is None:
                self._flush()
                self.pos += 1
                continue

            self._append(ch)

        self._flush()

        if len(self._frames) > 1:
            raise LexerError("unterminated quote", self._frame.start, len(self.source))

        tokens = self._frames[0].tokens
        self.logger.debug("lexed %d tokens from %r", len(tokens), self.source)
        return tokens

    # -- Token readers -----------------------------------------------------

    def _read_escape(self) -> None:
        """Consume a backslash and the character it escapes.

        An escaped newline is a line continuation and adds nothing.
        """
        escaped = self.peek()
        if escaped == "":
            raise LexerError("expected a character after escape", self.pos)
        if self._run_start is None:
            self._run_start = self.pos
        if escaped != "\n":
            self._buffer.append(escaped)
        self.pos += 2

    def _open_quote(self, quote: str) -> None:
        self._flush()
        self._frames.append(_Frame(quote=quote, start=self.pos))
        self.pos += 1

    def _close_quote(self) -> None:
        self._flush()
        frame = self._frames.pop()
        span = Span(frame.start, self.pos + 1)
        self._frame.tokens.append(
            Token(TokenType.QUOTED, frame.quote, span, parts=tuple(frame.tokens))
        )
        self.pos += 1


def tokenize(source: str) -> list[Token]:
    """Convenience: scan *source* with a fresh Lexer."""
    return Lexer(source).tokenize()
