"""Autoshell syntax-tree node definitions.

Every node is a frozen dataclass carrying a ``span`` into the input line.
A node's span is the union of its children's spans (``Expansion`` and
``Variable`` also cover their ``$(``/``)`` and ``$`` markers), so spans can
be used for diagnostics directly.  Nodes own their text and hold no
back-references.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

from autoshell.lexer import RedirectKind
from autoshell.span import Span


# ── Base ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Node:
    """Base class for every syntax-tree node."""
    span: Span = Span()


# ── Word-level nodes ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Word(Node):
    text: str = ""


@dataclass(frozen=True)
class Variable(Node):
    name: str = ""


@dataclass(frozen=True)
class Expansion(Node):
    command: Node | None = None


# ── Commands and operators ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Command(Node):
    words: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Pipe(Node):
    left: Node | None = None
    op_span: Span = Span()
    right: Node | None = None


@dataclass(frozen=True)
class Redirect(Node):
    source: Node | None = None
    kind: RedirectKind = RedirectKind.STDOUT
    op_span: Span = Span()
    target: Node | None = None


# ── Tree helpers ────────────────────────────────────────────────────────────

def children(node: Node) -> tuple[Node, ...]:
    """Direct children of *node*, left to right."""
    if isinstance(node, Command):
        return node.words
    if isinstance(node, Expansion):
        return (node.command,)
    if isinstance(node, Pipe):
        return (node.left, node.right)
    if isinstance(node, Redirect):
        return (node.source, node.target)
    return ()


def walk(node: Node) -> Iterator[Node]:
    """Yield *node* and all its descendants, depth-first, pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))


def source_text(node: Node, source: str) -> str:
    """The slice of the input line this node was parsed from."""
    return node.span.slice(source)


def left_spine(node: Node) -> tuple[list[Node], Node]:
    """Split a left-deep operator chain into its operators and first operand.

    The operators come back outermost first.  Long pipelines nest on the
    left, so callers loop over the spine instead of recursing into it.
    """
    spine: list[Node] = []
    while isinstance(node, (Pipe, Redirect)):
        spine.append(node)
        node = node.left if isinstance(node, Pipe) else node.source
    return spine, node


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a tree into plain dicts and lists, ready for ``json.dumps``."""
    spine, first = left_spine(node)
    data = _operand_dict(first)
    for op in reversed(spine):
        data = _operator_dict(op, data)
    return data


def _header(node: Node) -> dict[str, Any]:
    return {
        "type": type(node).__name__,
        "span": [node.span.start, node.span.end],
    }


def _operand_dict(node: Node) -> dict[str, Any]:
    data = _header(node)
    if isinstance(node, Word):
        data["text"] = node.text
    elif isinstance(node, Variable):
        data["name"] = node.name
    elif isinstance(node, Expansion):
        data["command"] = to_dict(node.command)
    elif isinstance(node, Command):
        data["words"] = [to_dict(w) for w in node.words]
    return data


def _operator_dict(node: Node, inner: dict[str, Any]) -> dict[str, Any]:
    data = _header(node)
    if isinstance(node, Pipe):
        data["left"] = inner
        data["op_span"] = [node.op_span.start, node.op_span.end]
        data["right"] = to_dict(node.right)
    else:
        data["source"] = inner
        data["kind"] = node.kind.name.lower()
        data["op_span"] = [node.op_span.start, node.op_span.end]
        data["target"] = to_dict(node.target)
    return data
