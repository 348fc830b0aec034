"""Autoshell error types with source offset info."""

from __future__ import annotations


class AutoshellError(Exception):
    """A diagnostic positioned in the input line.

    ``start`` is ``None`` when the problem is running out of input, and
    ``end`` is ``None`` when the diagnostic points at a single position.
    """

    def __init__(self, message: str, start: int | None = None, end: int | None = None):
        self.message = message
        self.start = start
        self.end = end
        super().__init__(f"{message} ({self.location})")

    @property
    def location(self) -> str:
        if self.start is None:
            return "at end of input"
        if self.end is None:
            return f"at {self.start}"
        return f"at {self.start}..{self.end}"

    def render(self, source: str, marker: str = "^", fill: str = "-", suffix: str = "") -> str:
        """Render the input followed by a caret line and the message.

        ::

            ls $(echo
               ^
               unmatched substitution
        """
        start = len(source) if self.start is None else self.start

        # Escaped newlines split the input; show only the line holding start.
        line_start = source.rfind("\n", 0, start) + 1
        line_end = source.find("\n", start)
        if line_end == -1:
            line_end = len(source)
        column = start - line_start

        if self.end is None:
            width = 0
        elif self.end < start:
            width = line_end - start
        else:
            width = min(self.end, line_end) - start

        underline = marker
        if width > 1:
            underline += fill * (width - 2) + marker

        message = self.message + (f" {suffix}" if suffix else "")
        pad = " " * column
        return f"{source[line_start:line_end]}\n{pad}{underline}\n{pad}{message}"


class LexerError(AutoshellError):
    pass


class ParseError(AutoshellError):
    pass


class ConfigError(Exception):
    """autoshell.config could not be loaded."""
    pass
