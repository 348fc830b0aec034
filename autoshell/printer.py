"""Autoshell printer — walks a syntax tree and emits an indented outline."""

from __future__ import annotations

from autoshell.ast_nodes import (
    Command,
    Expansion,
    Node,
    Pipe,
    Redirect,
    Variable,
    Word,
    left_spine,
)


class TreePrinter:
    """Render a syntax tree as text, one node per line.

    ::

        Pipe 0..12
          Command 0..6
            Word 'ls' 0..2
            Word '-la' 3..6
          Command 9..12
            Word 'cat' 9..12
    """

    def __init__(self, root: Node, indent: int = 2) -> None:
        self.root = root
        self.indent = indent
        self.lines: list[str] = []

    def render(self) -> str:
        self.lines = []
        self._emit(self.root, 0)
        return "\n".join(self.lines)

    def _emit(self, node: Node, depth: int) -> None:
        # Operator chains nest on the left: print their headers in a loop,
        # then the first operand, then each right-hand side on the way out.
        spine, first = left_spine(node)
        for level, op in enumerate(spine):
            self._line(op, depth + level)
        self._emit_operand(first, depth + len(spine))
        for level in reversed(range(len(spine))):
            op = spine[level]
            right = op.right if isinstance(op, Pipe) else op.target
            self._emit(right, depth + level + 1)

    def _line(self, node: Node, depth: int) -> None:
        pad = " " * (self.indent * depth)
        if isinstance(node, Pipe):
            self.lines.append(f"{pad}Pipe {node.span!r}")
        elif isinstance(node, Redirect):
            self.lines.append(f"{pad}Redirect {node.kind.value} {node.span!r}")

    def _emit_operand(self, node: Node, depth: int) -> None:
        pad = " " * (self.indent * depth)

        if isinstance(node, Word):
            self.lines.append(f"{pad}Word {node.text!r} {node.span!r}")
        elif isinstance(node, Variable):
            self.lines.append(f"{pad}Variable ${node.name} {node.span!r}")
        elif isinstance(node, Expansion):
            self.lines.append(f"{pad}Expansion {node.span!r}")
            self._emit(node.command, depth + 1)
        elif isinstance(node, Command):
            self.lines.append(f"{pad}Command {node.span!r}")
            for word in node.words:
                self._emit(word, depth + 1)
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")


def format_tree(root: Node, indent: int = 2) -> str:
    return TreePrinter(root, indent=indent).render()
