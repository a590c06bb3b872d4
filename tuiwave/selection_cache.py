"""Derived views over the scope tree: the signal list and the tree outline.

Both views are recomputed together by `rebuild` and are stale after any
toggle on the tree until the next rebuild. The cache remembers the tree
version it was built from so callers can check staleness.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .config import OUTLINE, OutlineConfig
from .data_model import SignalIndex
from .scope_tree import OutlineRow, Scope, SignalRef, is_renderable, walk_outline

# (display_path, signal_index)
FlatSignal = Tuple[str, SignalIndex]


def flatten_signals(root: Scope) -> List[FlatSignal]:
    """Visible signals in depth-first order, each scope's signals before its subscopes.

    Subscopes that are collapsed or have nothing renderable are skipped.
    """
    result: List[FlatSignal] = []

    def collect(scope: Scope, path: str) -> None:
        if not scope.expanded:
            return
        for ref in sorted(scope.signals(), key=lambda s: s.name):
            if ref.visible:
                result.append((f"{path}.{ref.name}", ref.index))
        for sub in sorted(scope.subscopes(), key=lambda s: s.name):
            if is_renderable(sub):
                collect(sub, f"{path}.{sub.name}")

    collect(root, root.name)
    return result


def build_outline(root: Scope, glyphs: OutlineConfig = OUTLINE) -> List[str]:
    """Printable lines of the tree pane, one per outline row."""
    lines: List[str] = []

    def prefix(row: OutlineRow) -> str:
        if row.depth == 0:
            return ""
        guides = "".join(glyphs.BLANK if last else glyphs.PIPE for last in row.guides)
        return guides + (glyphs.LAST_BRANCH if row.is_last else glyphs.BRANCH)

    def on_scope(scope: Scope, row: OutlineRow) -> bool:
        mark = glyphs.EXPANDED if scope.expanded else glyphs.COLLAPSED
        lines.append(f"{prefix(row)}{mark} {scope.name}")
        return False

    def on_signal(ref: SignalRef, row: OutlineRow) -> bool:
        mark = glyphs.CHECKED if ref.visible else glyphs.UNCHECKED
        lines.append(f"{prefix(row)}{mark} {ref.name}")
        return False

    walk_outline(root, on_scope, on_signal)
    return lines


@dataclass
class SelectionCache:
    flattened_signals: List[FlatSignal] = field(default_factory=list)
    tree_outline: List[str] = field(default_factory=list)
    version: int = -1  # tree version the cache was built from
    glyphs: OutlineConfig = OUTLINE

    def rebuild(self, root: Scope) -> None:
        self.flattened_signals = flatten_signals(root)
        self.tree_outline = build_outline(root, self.glyphs)
        self.version = root.version

    def is_stale(self, root: Scope) -> bool:
        return self.version != root.version
