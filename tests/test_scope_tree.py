"""Test the scope tree, its outline walk and node toggling."""

import pytest

from tuiwave.errors import ContractViolation
from tuiwave.scope_tree import Scope, SignalRef, is_renderable, walk_outline


def collect_rows(root):
    rows = []
    walk_outline(
        root,
        lambda scope, row: rows.append(("scope", scope.name, row)),
        lambda ref, row: rows.append(("signal", ref.name, row)),
    )
    return rows


class TestSortItems:
    def test_signals_before_scopes_by_name(self) -> None:
        root = Scope("top")
        root.add_scope(Scope("b_scope"))
        root.add_signal("z", 0)
        root.add_scope(Scope("a_scope"))
        root.add_signal("a", 1)
        root.sort_items()
        assert [item.name for item in root.items] == ["a", "z", "a_scope", "b_scope"]


class TestWalkOutline:
    def test_preorder_positions(self, small_trace) -> None:
        rows = collect_rows(small_trace.root)
        assert [(kind, name) for kind, name, _ in rows] == [
            ("scope", "top"),
            ("signal", "clk"),
            ("signal", "rst"),
            ("scope", "cpu"),
            ("signal", "ir"),
            ("signal", "pc"),
            ("scope", "alu"),
            ("signal", "flag"),
        ]
        assert [row.position for _, _, row in rows] == list(range(8))
        assert [row.depth for _, _, row in rows] == [0, 1, 1, 1, 2, 2, 2, 3]

    def test_collapsed_scope_hides_children(self, small_trace) -> None:
        small_trace.root.subscopes()[0].expanded = False
        rows = collect_rows(small_trace.root)
        assert [name for _, name, _ in rows] == ["top", "clk", "rst", "cpu"]

    def test_hidden_signals_still_listed(self, small_trace) -> None:
        small_trace.root.signals()[0].visible = False
        assert len(collect_rows(small_trace.root)) == 8

    def test_visitor_can_stop_walk(self, small_trace) -> None:
        seen = []

        def visit(node, row):
            seen.append(node.name)
            return row.position == 2

        walk_outline(small_trace.root, visit, visit)
        assert seen == ["top", "clk", "rst"]

    def test_returns_row_count(self, small_trace) -> None:
        assert walk_outline(small_trace.root, lambda s, r: False, lambda s, r: False) == 8


class TestToggleNode:
    def test_toggle_signal_visibility(self, small_trace) -> None:
        root = small_trace.root
        node = root.toggle_node(1)
        assert isinstance(node, SignalRef)
        assert node.name == "clk"
        assert node.visible is False
        root.toggle_node(1)
        assert node.visible is True

    def test_toggle_scope_expansion(self, small_trace) -> None:
        root = small_trace.root
        node = root.toggle_node(3)
        assert isinstance(node, Scope)
        assert node.name == "cpu"
        assert node.expanded is False

    def test_positions_follow_collapsed_state(self, small_trace) -> None:
        """After collapsing cpu, position 4 no longer exists."""
        root = small_trace.root
        root.toggle_node(3)
        with pytest.raises(ContractViolation):
            root.toggle_node(4)

    def test_root_is_row_zero(self, small_trace) -> None:
        root = small_trace.root
        assert root.toggle_node(0) is root
        assert root.expanded is False
        assert walk_outline(root, lambda s, r: False, lambda s, r: False) == 1

    def test_version_bumps(self, small_trace) -> None:
        root = small_trace.root
        before = root.version
        root.toggle_node(2)
        root.toggle_node(2)
        assert root.version == before + 2

    def test_out_of_range(self, small_trace) -> None:
        with pytest.raises(ContractViolation):
            small_trace.root.toggle_node(8)


class TestIsRenderable:
    def test_signal(self) -> None:
        assert is_renderable(SignalRef("a", 0))
        assert not is_renderable(SignalRef("a", 0, visible=False))

    def test_scope_needs_visible_descendant(self) -> None:
        root = Scope("top")
        inner = root.add_scope(Scope("inner"))
        assert not is_renderable(root)
        ref = inner.add_signal("x", 0)
        assert is_renderable(root)
        ref.visible = False
        assert not is_renderable(root)

    def test_collapsed_scope_with_visible_signal(self) -> None:
        scope = Scope("s", expanded=False)
        scope.add_signal("x", 0)
        assert is_renderable(scope)
