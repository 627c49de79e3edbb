"""Generic traversal and copying over any tree of nodes.

These functions only know about the :class:`~sqlp.ast.Walker` and
:class:`~sqlp.ast.Copier` capabilities, so they work the same for every
built-in composite and for caller-defined ones. Built-in composites are
descended with an explicit stack, so nesting depth is not limited by the
interpreter's recursion limit.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from sqlp.ast import Copier, Enclosed, Node, Sequence, Slot, Walker, copy_child

_DONE = object()


def walk_shallow(node: Node | None, fn: Callable[[Slot], None]) -> Node | None:
    """Call ``fn`` with a slot for each direct child of ``node``.

    A node that is not a composite is passed to ``fn`` itself, in a detached
    slot. Returns the root, which differs from ``node`` only in that case if
    ``fn`` replaced it.
    """
    if node is None:
        return None
    if isinstance(node, Walker):
        node.walk_node(fn)
        return node
    slot = Slot.detached(node)
    fn(slot)
    return slot.node


def walk_deep(node: Node | None, fn: Callable[[Slot], None]) -> Node | None:
    """Call ``fn`` with a slot for every leaf, in document order.

    Composites are transparent: ``fn`` never sees them. Replacing a leaf with
    a composite does not make the walk descend into the replacement.
    """
    if node is None:
        return None
    if isinstance(node, Walker):
        _walk_leaves(node, fn)
        return node
    slot = Slot.detached(node)
    fn(slot)
    return slot.node


def _walk_leaves(node: Walker, fn: Callable[[Slot], None]) -> None:
    if not isinstance(node, (Sequence, Enclosed)):
        # Caller-defined composite: only its walk_node knows the children
        def visit(slot: Slot) -> None:
            child = slot.node
            if isinstance(child, Walker):
                _walk_leaves(child, fn)
            else:
                fn(slot)

        node.walk_node(visit)
        return

    # Frames are [children, next index]; the index is read after fn runs
    stack: list[list] = [[node.children, 0]]
    while stack:
        frame = stack[-1]
        children, i = frame
        if i >= len(children):
            stack.pop()
            continue
        frame[1] = i + 1
        child = children[i]
        if child is None:
            continue
        if isinstance(child, (Sequence, Enclosed)):
            stack.append([child.children, 0])
        elif isinstance(child, Walker):
            _walk_leaves(child, fn)
        else:
            fn(Slot(children, i))


def iter_leaves(node: Node | None) -> Iterator[Node]:
    """Yield every leaf of ``node`` in document order (read-only deep walk)."""
    return _leaves(node, reverse=False)


def _leaves(node: Node | None, reverse: bool) -> Iterator[Node]:
    if node is None:
        return
    if not isinstance(node, Walker):
        yield node
        return
    stack = [_child_iter(node, reverse)]
    while stack:
        child = next(stack[-1], _DONE)
        if child is _DONE:
            stack.pop()
        elif child is None:
            continue
        elif isinstance(child, Walker):
            stack.append(_child_iter(child, reverse))
        else:
            yield child


def _child_iter(node: Walker, reverse: bool) -> Iterator[Node | None]:
    children = _children(node)
    return reversed(children) if reverse else iter(children)


def copy_deep(node: Node | None) -> Node | None:
    """Copy ``node`` so that no mutable storage is shared with the original.

    Composites are rebuilt and nodes with a ``copy_node`` method copy
    themselves. Built-in leaves are immutable and returned as they are; any
    other leaf is deep-copied.
    """
    return copy_child(node)


def first_leaf(node: Node | None) -> Node | None:
    """Return the leftmost leaf of ``node``, or None if it holds no leaves."""
    return next(_leaves(node, reverse=False), None)


def last_leaf(node: Node | None) -> Node | None:
    """Return the rightmost leaf of ``node``, or None if it holds no leaves."""
    return next(_leaves(node, reverse=True), None)


def _children(node: Walker) -> list[Node | None]:
    if isinstance(node, (Sequence, Enclosed)):
        return node.children
    out: list[Node | None] = []
    node.walk_node(lambda slot: out.append(slot.node))
    return out
