"""Tests for shallow/deep walks, leaf lookup, and deep copy."""

from __future__ import annotations

import io
from dataclasses import dataclass

from sqlp.ast import (
    Brackets,
    Leaf,
    NamedParam,
    OrdinalParam,
    Parens,
    Sequence,
    Slot,
    Text,
    Whitespace,
)
from sqlp.debug import dump_tree
from sqlp.parser import parse
from sqlp.walk import (
    copy_deep,
    first_leaf,
    iter_leaves,
    last_leaf,
    walk_deep,
    walk_shallow,
)


def sample_tree() -> Sequence:
    return Sequence.of(
        Text("one"),
        Sequence.of(Text("two"), OrdinalParam(3)),
        Parens.of(Text("four")),
    )


def collect(visit_fn, node) -> list:
    visited: list = []
    visit_fn(node, lambda slot: visited.append(slot.node))
    return visited


@dataclass
class Tags(Leaf):
    """Mutable caller-defined leaf with no copy_node."""

    names: list[str]

    def append_to(self, buf: list[str]) -> None:
        buf.append(",".join(self.names))


class TestWalkShallow:
    def test_visits_direct_children(self):
        tree = sample_tree()
        assert collect(walk_shallow, tree) == tree.children

    def test_enclosed_visits_body(self):
        node = Parens.of(Text("a"), Text("b"))
        assert collect(walk_shallow, node) == [Text("a"), Text("b")]

    def test_replace_through_slot(self):
        tree = parse("select * from [bracketed] where col1 = 123")

        def rewrite(slot: Slot) -> None:
            if isinstance(slot.node, Brackets):
                slot.node = Text("(select * from some_table where col2 = '456') as _")

        walk_shallow(tree, rewrite)
        assert tree.serialize() == (
            "select * from (select * from some_table where col2 = '456') as _ where col1 = 123"
        )

    def test_leaf_root_is_detached(self):
        def rewrite(slot: Slot) -> None:
            slot.node = Text("b")

        assert walk_shallow(Text("a"), rewrite) == Text("b")

    def test_returns_composite_root(self):
        tree = sample_tree()
        assert walk_shallow(tree, lambda slot: None) is tree

    def test_none_root(self):
        assert walk_shallow(None, lambda slot: None) is None

    def test_skips_removed_children(self):
        tree = Sequence.of(Text("a"), None, Text("b"))
        assert collect(walk_shallow, tree) == [Text("a"), Text("b")]


class TestWalkDeep:
    def test_leaves_in_order(self):
        assert collect(walk_deep, sample_tree()) == [
            Text("one"),
            Text("two"),
            OrdinalParam(3),
            Text("four"),
        ]

    def test_parsed_brackets(self):
        tree = parse("[one [two three]]")
        assert collect(walk_deep, tree) == [
            Text("one"),
            Whitespace(" "),
            Text("two"),
            Whitespace(" "),
            Text("three"),
        ]

    def test_only_composites(self):
        tree = Sequence.of(Parens.of(Text("a")), Brackets.of(Text("b")))
        assert collect(walk_deep, tree) == [Text("a"), Text("b")]

    def test_empty_composites_yield_nothing(self):
        assert collect(walk_deep, parse("([]{})")) == []

    def test_named_to_ordinal(self):
        tree = parse("select * from t where a = :a and b in (:b, :a)")
        names: list[str] = []

        def renumber(slot: Slot) -> None:
            node = slot.node
            if isinstance(node, NamedParam):
                if node.value not in names:
                    names.append(node.value)
                slot.node = OrdinalParam(names.index(node.value) + 1)

        walk_deep(tree, renumber)
        assert tree.serialize() == "select * from t where a = $1 and b in ($2, $1)"
        assert names == ["a", "b"]

    def test_replacement_is_not_descended(self):
        tree = Sequence.of(Text("a"), Text("b"))
        calls: list = []

        def expand(slot: Slot) -> None:
            calls.append(slot.node)
            slot.node = Parens.of(Text("x"))

        walk_deep(tree, expand)
        assert calls == [Text("a"), Text("b")]
        assert tree.serialize() == "(x)(x)"

    def test_leaf_root(self):
        assert collect(walk_deep, Text("a")) == [Text("a")]


class TestIterLeaves:
    def test_matches_deep_walk(self):
        tree = parse("select ($1, [:x]) -- end")
        assert list(iter_leaves(tree)) == collect(walk_deep, tree)

    def test_none(self):
        assert list(iter_leaves(None)) == []


class TestFirstLastLeaf:
    def test_parsed(self):
        tree = parse("(a) b [c]")
        assert first_leaf(tree) == Text("a")
        assert last_leaf(tree) == Text("c")

    def test_skips_empty_composites(self):
        tree = Sequence.of(Parens(), Text("x"), Brackets())
        assert first_leaf(tree) == Text("x")
        assert last_leaf(tree) == Text("x")

    def test_empty_tree(self):
        assert first_leaf(Sequence()) is None
        assert last_leaf(parse("([]{})")) is None

    def test_leaf_is_its_own_leaf(self):
        assert first_leaf(Text("a")) == Text("a")
        assert last_leaf(Text("a")) == Text("a")

    def test_none(self):
        assert first_leaf(None) is None
        assert last_leaf(None) is None


class TestCopyDeep:
    def test_equal_but_distinct(self):
        source = sample_tree()
        copy = copy_deep(source)
        assert copy == source
        assert copy is not source
        assert copy.children is not source.children
        assert copy[1] is not source[1]
        assert copy[2].body is not source[2].body

    def test_mutating_source_leaves_copy(self):
        source = sample_tree()
        copy = copy_deep(source)

        def clear(slot: Slot) -> None:
            slot.node = None

        walk_deep(source, clear)
        assert source == Sequence.of(None, Sequence.of(None, None), Parens.of(None))
        assert copy == sample_tree()

    def test_mutating_copy_leaves_source(self):
        source = sample_tree()
        copy = copy_deep(source)

        def upper(slot: Slot) -> None:
            if isinstance(slot.node, Text):
                slot.node = Text(slot.node.value.upper())

        walk_deep(copy, upper)
        assert copy.serialize() == "ONETWO$3(FOUR)"
        assert source.serialize() == "onetwo$3(four)"

    def test_copy_parsed_tree(self):
        tree = parse("select [x] from {y} where z = ($1)")
        copy = copy_deep(tree)
        copy[2] = Text("q")
        assert tree.serialize() == "select [x] from {y} where z = ($1)"
        assert copy.serialize() == "select q from {y} where z = ($1)"

    def test_leaf(self):
        leaf = Text("a")
        assert copy_deep(leaf) == leaf

    def test_none(self):
        assert copy_deep(None) is None

    def test_custom_leaf_is_not_shared(self):
        source = Sequence.of(Text("a"), Parens.of(Tags(["x"])))
        copy = copy_deep(source)
        source[1][0].names.append("y")
        assert copy[1][0] is not source[1][0]
        assert copy.serialize() == "a(x)"
        assert source.serialize() == "a(x,y)"

    def test_custom_leaf_root(self):
        leaf = Tags(["x"])
        copy = copy_deep(leaf)
        leaf.names.clear()
        assert copy == Tags(["x"])

    def test_builtin_leaves_are_shared(self):
        source = sample_tree()
        copy = copy_deep(source)
        assert copy[0] is source[0]


class TestDeepNesting:
    DEPTH = 5000

    def source(self) -> str:
        return "(" * self.DEPTH + "x" + ")" * self.DEPTH

    def test_serialize(self):
        src = self.source()
        tree = parse(src)
        assert tree.serialize() == src
        assert str(tree[0]) == src

    def test_equality(self):
        assert parse(self.source()) == parse(self.source())
        assert parse(self.source()) != parse(self.source().replace("x", "y"))

    def test_copy(self):
        tree = parse(self.source())
        copy = copy_deep(tree)
        assert copy == tree
        assert copy.serialize() == self.source()

    def test_first_and_last_leaf(self):
        tree = parse(self.source())
        assert first_leaf(tree) == Text("x")
        assert last_leaf(tree) == Text("x")
        assert list(iter_leaves(tree)) == [Text("x")]

    def test_walk_deep_rewrites_innermost_leaf(self):
        tree = parse(self.source())

        def rename(slot: Slot) -> None:
            slot.node = NamedParam("x")

        walk_deep(tree, rename)
        assert tree.serialize() == self.source().replace("x", ":x")

    def test_dump(self):
        out = io.StringIO()
        dump_tree(parse(self.source()), file=out)
        lines = out.getvalue().splitlines()
        assert len(lines) == self.DEPTH + 2
        assert lines[-1] == "  " * (self.DEPTH + 1) + "Text('x')"
