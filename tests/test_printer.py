"""Tests for the autoshell tree printer."""

import pytest

from autoshell.ast_nodes import Node
from autoshell.parser import parse_line
from autoshell.printer import TreePrinter, format_tree


def test_pipe_outline():
    assert format_tree(parse_line("ls -la | cat")) == (
        "Pipe 0..12\n"
        "  Command 0..6\n"
        "    Word 'ls' 0..2\n"
        "    Word '-la' 3..6\n"
        "  Command 9..12\n"
        "    Word 'cat' 9..12"
    )


def test_redirect_and_expansion_outline():
    assert format_tree(parse_line("echo $X 2> $(tty)")) == (
        "Redirect 2> 0..17\n"
        "  Command 0..7\n"
        "    Word 'echo' 0..4\n"
        "    Variable $X 5..7\n"
        "  Command 11..17\n"
        "    Expansion 11..17\n"
        "      Command 13..16\n"
        "        Word 'tty' 13..16"
    )


def test_custom_indent():
    lines = format_tree(parse_line("a | b"), indent=4).splitlines()
    assert lines[1] == "    Command 0..1"
    assert lines[2] == "        Word 'a' 0..1"


def test_render_can_be_called_twice():
    printer = TreePrinter(parse_line("a"))
    assert printer.render() == printer.render()


def test_unknown_node_raises():
    with pytest.raises(TypeError):
        format_tree(Node())


def test_long_pipeline_outline():
    lines = format_tree(parse_line(" | ".join(["a"] * 1500))).splitlines()
    assert len(lines) == 1499 + 1500 * 2
    assert lines[0] == "Pipe 0..5997"
    assert lines[1498] == " " * (2 * 1498) + "Pipe 0..5"
    assert lines[1499] == " " * (2 * 1499) + "Command 0..1"
    assert lines[-1] == "    Word 'a' 5996..5997"


def test_nested_pipes_keep_preorder():
    assert format_tree(parse_line("a | b | c")).splitlines() == [
        "Pipe 0..9",
        "  Pipe 0..5",
        "    Command 0..1",
        "      Word 'a' 0..1",
        "    Command 4..5",
        "      Word 'b' 4..5",
        "  Command 8..9",
        "    Word 'c' 8..9",
    ]
