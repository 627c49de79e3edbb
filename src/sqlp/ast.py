"""AST node types for parsed SQL.

Leaves are immutable and know how to reproduce their exact source spelling.
Composites own a mutable list of children; rewriting a tree means replacing
children in place, usually through a :class:`Slot` handed out by the walk
functions in :mod:`sqlp.walk`.

The set of node types is open. Anything implementing :class:`Node` can be put
into a composite and will serialize with it. Traversal and copying only rely
on the :class:`Walker` and :class:`Copier` capabilities, which the built-in
composites implement.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Protocol, runtime_checkable

from sqlp.tokens import Span


class NodeKind(Enum):
    # Leaves
    TEXT = auto()
    WHITESPACE = auto()
    QUOTE_SINGLE = auto()
    QUOTE_DOUBLE = auto()
    QUOTE_GRAVE = auto()
    COMMENT_LINE = auto()
    COMMENT_BLOCK = auto()
    DOUBLE_COLON = auto()
    ORDINAL_PARAM = auto()
    NAMED_PARAM = auto()

    # Composites
    SEQUENCE = auto()
    PARENS = auto()
    BRACKETS = auto()
    BRACES = auto()


@runtime_checkable
class Node(Protocol):
    """Anything that can be serialized back into SQL text."""

    def append_to(self, buf: list[str]) -> None: ...

    def serialize(self) -> str: ...


@runtime_checkable
class Walker(Protocol):
    """Composite that hands out a slot for each direct child."""

    def walk_node(self, fn: Callable[[Slot], None]) -> None: ...


@runtime_checkable
class Copier(Protocol):
    """Node that can produce a copy sharing no mutable state with itself."""

    def copy_node(self) -> Node: ...


class Slot:
    """Mutable reference to one position in a composite's child list."""

    __slots__ = ("_children", "_index")

    def __init__(self, children: list[Node | None], index: int) -> None:
        self._children = children
        self._index = index

    @classmethod
    def detached(cls, node: Node | None) -> Slot:
        """Slot for a root node that has no parent."""
        return cls([node], 0)

    @property
    def index(self) -> int:
        return self._index

    @property
    def node(self) -> Node | None:
        return self._children[self._index]

    @node.setter
    def node(self, value: Node | None) -> None:
        self._children[self._index] = value

    def __repr__(self) -> str:
        return f"Slot({self.node!r})"


# ----------------------------------------------------------------------
# Leaves
# ----------------------------------------------------------------------


class Leaf:
    """Base for leaf nodes: subclasses only need ``append_to``."""

    __slots__ = ()

    kind: ClassVar[NodeKind]

    def append_to(self, buf: list[str]) -> None:
        raise NotImplementedError

    def serialize(self) -> str:
        buf: list[str] = []
        self.append_to(buf)
        return "".join(buf)

    def __str__(self) -> str:
        return self.serialize()


@dataclass(frozen=True, slots=True)
class Text(Leaf):
    """Arbitrary text the tokenizer did not recognize."""

    value: str
    span: Span | None = field(default=None, compare=False, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.TEXT

    def append_to(self, buf: list[str]) -> None:
        buf.append(self.value)


@dataclass(frozen=True, slots=True)
class Whitespace(Leaf):
    """Run of spaces, tabs, vertical tabs, and line terminators."""

    value: str
    span: Span | None = field(default=None, compare=False, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.WHITESPACE

    def append_to(self, buf: list[str]) -> None:
        buf.append(self.value)


@dataclass(frozen=True, slots=True)
class QuoteSingle(Leaf):
    """Text inside single quotes: ''. No escape processing."""

    value: str
    span: Span | None = field(default=None, compare=False, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.QUOTE_SINGLE

    def append_to(self, buf: list[str]) -> None:
        buf.append("'")
        buf.append(self.value)
        buf.append("'")


@dataclass(frozen=True, slots=True)
class QuoteDouble(Leaf):
    """Text inside double quotes: "". No escape processing."""

    value: str
    span: Span | None = field(default=None, compare=False, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.QUOTE_DOUBLE

    def append_to(self, buf: list[str]) -> None:
        buf.append('"')
        buf.append(self.value)
        buf.append('"')


@dataclass(frozen=True, slots=True)
class QuoteGrave(Leaf):
    """Text inside grave quotes: ``. No escape processing."""

    value: str
    span: Span | None = field(default=None, compare=False, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.QUOTE_GRAVE

    def append_to(self, buf: list[str]) -> None:
        buf.append("`")
        buf.append(self.value)
        buf.append("`")


@dataclass(frozen=True, slots=True)
class CommentLine(Leaf):
    """Line comment body after '--'. The line terminator is not included."""

    value: str
    span: Span | None = field(default=None, compare=False, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.COMMENT_LINE

    def append_to(self, buf: list[str]) -> None:
        buf.append("--")
        buf.append(self.value)


@dataclass(frozen=True, slots=True)
class CommentBlock(Leaf):
    """Block comment body between '/*' and '*/'."""

    value: str
    span: Span | None = field(default=None, compare=False, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.COMMENT_BLOCK

    def append_to(self, buf: list[str]) -> None:
        buf.append("/*")
        buf.append(self.value)
        buf.append("*/")


@dataclass(frozen=True, slots=True)
class DoubleColon(Leaf):
    """Postgres cast operator '::'. Keeps casts apart from named params."""

    span: Span | None = field(default=None, compare=False, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.DOUBLE_COLON

    def append_to(self, buf: list[str]) -> None:
        buf.append("::")


@dataclass(frozen=True, slots=True)
class OrdinalParam(Leaf):
    """Ordinal parameter placeholder: $1, $2, $3, ..."""

    value: int
    span: Span | None = field(default=None, compare=False, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.ORDINAL_PARAM

    @property
    def index(self) -> int:
        """0-based index of the referenced argument."""
        return self.value - 1

    def append_to(self, buf: list[str]) -> None:
        buf.append("$")
        buf.append(str(self.value))


@dataclass(frozen=True, slots=True)
class NamedParam(Leaf):
    """Named parameter placeholder: :identifier"""

    value: str
    span: Span | None = field(default=None, compare=False, repr=False)

    kind: ClassVar[NodeKind] = NodeKind.NAMED_PARAM

    def append_to(self, buf: list[str]) -> None:
        buf.append(":")
        buf.append(self.value)


# ----------------------------------------------------------------------
# Composites
# ----------------------------------------------------------------------
#
# Nesting depth is bounded only by memory, so the tree operations below keep
# their own stacks instead of recursing through the composites.


def copy_child(node: Node | None) -> Node | None:
    """Copy one child node.

    Built-in leaves are immutable and returned as they are. Other nodes use
    their ``copy_node`` when they have one and are deep-copied otherwise.
    """
    if node is None or type(node) in _BUILTIN_LEAVES:
        return node
    if isinstance(node, Copier):
        return node.copy_node()
    return copy.deepcopy(node)


def _append_tree(root: Sequence | Enclosed, buf: list[str]) -> None:
    # Closing delimiters are pushed as plain strings between the nodes
    stack: list[Node | str | None] = [root]
    while stack:
        item = stack.pop()
        if item is None:
            continue
        if isinstance(item, str):
            buf.append(item)
        elif isinstance(item, Sequence):
            stack.extend(reversed(item.children))
        elif isinstance(item, Enclosed):
            buf.append(item.open)
            stack.append(item.close)
            stack.extend(reversed(item.body.children))
        else:
            item.append_to(buf)


def _copy_tree(root: Sequence | Enclosed) -> Sequence | Enclosed:
    copied = _empty_like(root)
    stack = [(root, copied)]
    while stack:
        src, dst = stack.pop()
        out = dst.children
        for child in src.children:
            if isinstance(child, (Sequence, Enclosed)):
                new = _empty_like(child)
                stack.append((child, new))
                out.append(new)
            else:
                out.append(copy_child(child))
    return copied


def _empty_like(node: Sequence | Enclosed) -> Sequence | Enclosed:
    if isinstance(node, Sequence):
        return type(node)()
    return type(node)(Sequence())


def _tree_equal(a: Sequence | Enclosed, b: Sequence | Enclosed) -> bool:
    stack = [(a, b)]
    while stack:
        x, y = stack.pop()
        if type(x) is not type(y):
            return False
        if isinstance(x, (Sequence, Enclosed)):
            if len(x.children) != len(y.children):
                return False
            stack.extend(zip(x.children, y.children))
        elif x != y:
            return False
    return True


@dataclass(slots=True, eq=False)
class Sequence:
    """Ordered run of nodes. Serializes as the plain concatenation of its children.

    ``None`` children are skipped, so assigning ``None`` to a slot removes
    that node from the output.
    """

    children: list[Node | None] = field(default_factory=list)

    kind: ClassVar[NodeKind] = NodeKind.SEQUENCE

    @classmethod
    def of(cls, *children: Node | None) -> Sequence:
        return cls(list(children))

    def append_to(self, buf: list[str]) -> None:
        _append_tree(self, buf)

    def serialize(self) -> str:
        buf: list[str] = []
        self.append_to(buf)
        return "".join(buf)

    def __str__(self) -> str:
        return self.serialize()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return _tree_equal(self, other)

    def walk_node(self, fn: Callable[[Slot], None]) -> None:
        children = self.children
        for i in range(len(children)):
            if children[i] is not None:
                fn(Slot(children, i))

    def copy_node(self) -> Sequence:
        return _copy_tree(self)

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[Node | None]:
        return iter(self.children)

    def __getitem__(self, index: int) -> Node | None:
        return self.children[index]

    def __setitem__(self, index: int, node: Node | None) -> None:
        self.children[index] = node


@dataclass(slots=True, eq=False)
class Enclosed:
    """A Sequence wrapped in a delimiter pair."""

    body: Sequence = field(default_factory=Sequence)

    kind: ClassVar[NodeKind]
    open: ClassVar[str]
    close: ClassVar[str]

    @classmethod
    def of(cls, *children: Node | None) -> Enclosed:
        return cls(Sequence(list(children)))

    @property
    def children(self) -> list[Node | None]:
        return self.body.children

    def append_to(self, buf: list[str]) -> None:
        _append_tree(self, buf)

    def serialize(self) -> str:
        buf: list[str] = []
        self.append_to(buf)
        return "".join(buf)

    def __str__(self) -> str:
        return self.serialize()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return _tree_equal(self, other)

    def walk_node(self, fn: Callable[[Slot], None]) -> None:
        self.body.walk_node(fn)

    def copy_node(self) -> Enclosed:
        return _copy_tree(self)

    def __len__(self) -> int:
        return len(self.body)

    def __iter__(self) -> Iterator[Node | None]:
        return iter(self.body)

    def __getitem__(self, index: int) -> Node | None:
        return self.body[index]

    def __setitem__(self, index: int, node: Node | None) -> None:
        self.body[index] = node


@dataclass(slots=True, eq=False)
class Parens(Enclosed):
    """Nodes enclosed in parentheses: ()."""

    kind: ClassVar[NodeKind] = NodeKind.PARENS
    open: ClassVar[str] = "("
    close: ClassVar[str] = ")"


@dataclass(slots=True, eq=False)
class Brackets(Enclosed):
    """Nodes enclosed in brackets: []."""

    kind: ClassVar[NodeKind] = NodeKind.BRACKETS
    open: ClassVar[str] = "["
    close: ClassVar[str] = "]"


@dataclass(slots=True, eq=False)
class Braces(Enclosed):
    """Nodes enclosed in braces: {}."""

    kind: ClassVar[NodeKind] = NodeKind.BRACES
    open: ClassVar[str] = "{"
    close: ClassVar[str] = "}"


# Frozen, so copies may share them
_BUILTIN_LEAVES: frozenset[type] = frozenset(
    {
        Text,
        Whitespace,
        QuoteSingle,
        QuoteDouble,
        QuoteGrave,
        CommentLine,
        CommentBlock,
        DoubleColon,
        OrdinalParam,
        NamedParam,
    }
)
