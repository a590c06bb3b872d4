"""Scope tree: the hierarchical namespace of signals shown in the tree pane.

    Scope("top", expanded)
    ├── SignalRef("clk", index=0, visible)
    ├── SignalRef("rst", index=1, visible)
    └── Scope("cpu", expanded)
        ├── SignalRef("pc", index=2, visible)
        └── SignalRef("ir", index=3, hidden)

Leaves carry a SignalIndex into the SignalStore, never the stream itself.
The tree is built once at load time and afterwards only its UI flags change:
`expanded` on scopes (tree pane disclosure) and `visible` on signals
(selection for the signal pane).

Rows of the tree pane are addressed by flat position. The mapping between a
position and a node is derived by `walk_outline`, the one traversal used both
to draw the outline and to toggle a node, so the two cannot disagree.
"""

from typing import Callable, List, NamedTuple, Optional, Tuple, Union

from .data_model import SignalIndex
from .errors import ContractViolation


class SignalRef:
    """Leaf of the scope tree referencing a stream in the SignalStore."""

    def __init__(self, name: str, index: SignalIndex, visible: bool = True) -> None:
        self.name = name
        self.index = index
        self.visible = visible

    def __repr__(self) -> str:
        return f"SignalRef({self.name!r}, index={self.index}, visible={self.visible})"


class Scope:
    """Named tree node holding signals and nested scopes."""

    def __init__(self, name: str, expanded: bool = True) -> None:
        self.name = name
        self.items: List[Union["Scope", SignalRef]] = []
        self.expanded = expanded
        self.parent: Optional["Scope"] = None
        # Bumped on every toggle in this subtree; selection caches compare against it
        self.version = 0

    def __repr__(self) -> str:
        return f"Scope({self.name!r}, items={len(self.items)}, expanded={self.expanded})"

    def add_scope(self, scope: "Scope") -> "Scope":
        scope.parent = self
        self.items.append(scope)
        return scope

    def add_signal(self, name: str, index: SignalIndex) -> SignalRef:
        ref = SignalRef(name, index)
        self.items.append(ref)
        return ref

    def signals(self) -> List[SignalRef]:
        return [item for item in self.items if isinstance(item, SignalRef)]

    def subscopes(self) -> List["Scope"]:
        return [item for item in self.items if isinstance(item, Scope)]

    def sort_items(self) -> None:
        """Sort recursively: signals first, then subscopes, each by name."""
        for scope in self.subscopes():
            scope.sort_items()
        self.items.sort(key=lambda item: (isinstance(item, Scope), item.name))

    def toggle_node(self, flat_position: int) -> Union["Scope", SignalRef]:
        """Flip `expanded` or `visible` on the outline row at `flat_position`.

        Positions are relative to this scope's own outline. The version of this
        scope and of every ancestor is bumped.

        Raises:
            ContractViolation: If no outline row has that position.
        """
        found: List[Union[Scope, SignalRef]] = []

        def hit(node: Union[Scope, SignalRef], row: "OutlineRow") -> bool:
            if row.position == flat_position:
                found.append(node)
                return True
            return False

        walk_outline(self, hit, hit)
        if not found:
            raise ContractViolation(f"no tree row at position {flat_position}")

        node = found[0]
        if isinstance(node, Scope):
            node.expanded = not node.expanded
        else:
            node.visible = not node.visible
        scope: Optional[Scope] = self
        while scope is not None:
            scope.version += 1
            scope = scope.parent
        return node


class OutlineRow(NamedTuple):
    position: int              # Flat row index in the tree pane
    depth: int                 # 0 for the root scope
    guides: Tuple[bool, ...]   # For each ancestor below the root: was it the last sibling
    is_last: bool              # Last among its siblings


# Visitor returns True to stop the walk
ScopeVisitor = Callable[[Scope, OutlineRow], Optional[bool]]
SignalVisitor = Callable[[SignalRef, OutlineRow], Optional[bool]]


def walk_outline(root: Scope, visit_scope: ScopeVisitor, visit_signal: SignalVisitor) -> int:
    """Pre-order walk over the rows of the tree pane.

    Every scope is one row. The children of an expanded scope follow it, in item
    order, regardless of their visibility; collapsed scopes hide their children.

    Returns:
        Number of rows visited.
    """
    position = 0

    def visit(scope: Scope, depth: int, guides: Tuple[bool, ...], is_last: bool) -> bool:
        nonlocal position
        row = OutlineRow(position, depth, guides, is_last)
        position += 1
        if visit_scope(scope, row):
            return True
        if not scope.expanded:
            return False

        child_guides = guides + (is_last,) if depth > 0 else ()
        last_idx = len(scope.items) - 1
        for i, item in enumerate(scope.items):
            if isinstance(item, Scope):
                if visit(item, depth + 1, child_guides, i == last_idx):
                    return True
            else:
                row = OutlineRow(position, depth + 1, child_guides, i == last_idx)
                position += 1
                if visit_signal(item, row):
                    return True
        return False

    visit(root, 0, (), True)
    return position


def is_renderable(node: Union[Scope, SignalRef]) -> bool:
    """True for a visible signal or a scope with any renderable descendant."""
    if isinstance(node, SignalRef):
        return node.visible
    return any(is_renderable(item) for item in node.items)
