"""Human-readable tree dump for debugging rewrites."""

from __future__ import annotations

import sys
from typing import TextIO

from sqlp.ast import DoubleColon, Enclosed, Node, Sequence


def dump_tree(node: Node | None, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable tree to *file*."""
    stack: list[tuple[Node | None, int]] = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        file.write(f"{_indent(depth)}{_label(current)}\n")
        if isinstance(current, (Sequence, Enclosed)):
            stack.extend((child, depth + 1) for child in reversed(current.children))


def _indent(depth: int) -> str:
    return "  " * depth


def _label(node: Node | None) -> str:
    if node is None:
        return "None"
    if isinstance(node, Sequence):
        return "Sequence"
    if isinstance(node, (Enclosed, DoubleColon)):
        return type(node).__name__
    if hasattr(node, "value"):
        return f"{type(node).__name__}({node.value!r})"
    # Caller-defined node: show what it serializes to
    return f"{type(node).__name__} {node.serialize()!r}"
