"""Source ranges shared by tokens, syntax-tree nodes and diagnostics."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """Half-open ``[start, end)`` range of offsets into the input line."""
    start: int = 0
    end: int = 0

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span: [{self.start}, {self.end})")

    @classmethod
    def point(cls, offset: int) -> Span:
        """An empty span sitting at *offset*."""
        return cls(offset, offset)

    def __len__(self) -> int:
        return self.end - self.start

    def slice(self, source: str) -> str:
        """Return the text of *source* covered by this span."""
        return source[self.start:self.end]

    def union(self, other: Span) -> Span:
        return Span(min(self.start, other.start), max(self.end, other.end))

    def __repr__(self) -> str:
        return f"{self.start}..{self.end}"
