"""Viewport state and its pure transition functions.

The whole on-screen state (time window, zoom, scroll, focus, pane mode) is one
frozen `ViewportState`. Every transition takes a state and returns a new one,
normalizing out-of-range results by clamping; nothing here raises.

Invariant kept by every transition that touches rows:

    scroll_offset <= focused_row < scroll_offset + drawable_rows

(and the same for the tree pane), whenever the relevant list is non-empty.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from .config import RENDERING, UI, RenderingConfig, UIConfig
from .data_model import Time


class PaneFocus(Enum):
    SIGNAL = "signal"
    TREE = "tree"


@dataclass(frozen=True)
class ViewportState:
    time_from: Time = 0
    time_to: Time = 1
    time_last: Time = 0                 # last timestamp of the trace, fixed at load
    time_per_cell: int = RENDERING.DEFAULT_TIME_PER_CELL
    scroll_offset: int = 0              # first visible signal row
    focused_row: int = 0                # cursor in the flattened signal list
    tree_scroll_offset: int = 0
    focused_tree_row: int = 0
    pane_focus: PaneFocus = PaneFocus.SIGNAL
    pending_pane_switch: bool = False
    drawable_rows: int = 1              # signal rows that fit on screen
    tree_drawable_rows: int = 1
    wave_width: int = 0                 # cells available to the waveform
    screen_width: int = 0
    screen_height: int = 0

    @property
    def window_width(self) -> Time:
        return self.time_to - self.time_from

    def visible_window(self) -> Tuple[Time, Time]:
        """Window actually rendered: clipped to one tick past the last change."""
        return self.time_from, max(self.time_from, min(self.time_to, self.time_last + 1))


@dataclass(frozen=True)
class Layout:
    drawable_rows: int
    tree_drawable_rows: int
    wave_width: int


def compute_layout(width: int, height: int, ui: UIConfig = UI) -> Layout:
    """Derive row counts and waveform width from the terminal size in cells."""
    drawable_rows = max((height - 1) // ui.LINES_PER_SIGNAL, 1)
    tree_drawable_rows = max(height - ui.PANE_BORDER, 1)
    sidebar = width * ui.SIDEBAR_WIDTH_PERCENT // 100
    timeline = width - sidebar
    names = timeline * ui.SIGNAME_WIDTH_PERCENT // 100
    wave_width = max(timeline - names - ui.PANE_BORDER, 0)
    return Layout(drawable_rows, tree_drawable_rows, wave_width)


def ticks_for_width(wave_width: int, time_per_cell: int) -> Time:
    return max(wave_width // time_per_cell, 1)


def scroll_to_cursor(cursor: int, scroll: int, rows: int) -> int:
    """Minimal scroll shift that brings `cursor` into [scroll, scroll + rows)."""
    if cursor < scroll:
        return cursor
    if cursor >= scroll + rows:
        return cursor - rows + 1
    return scroll


def _clamp_index(value: int, length: int) -> int:
    return min(max(value, 0), max(length - 1, 0))


def initial_state(time_last: Time, width: int, height: int,
                  ui: UIConfig = UI, rendering: RenderingConfig = RENDERING) -> ViewportState:
    layout = compute_layout(width, height, ui)
    time_per_cell = rendering.DEFAULT_TIME_PER_CELL
    return ViewportState(
        time_from=0,
        time_to=ticks_for_width(layout.wave_width, time_per_cell),
        time_last=time_last,
        time_per_cell=time_per_cell,
        drawable_rows=layout.drawable_rows,
        tree_drawable_rows=layout.tree_drawable_rows,
        wave_width=layout.wave_width,
        screen_width=width,
        screen_height=height,
    )


# ---- Horizontal ----

def pan_left(state: ViewportState) -> ViewportState:
    if state.time_from == 0:
        return state
    return replace(state, time_from=state.time_from - 1, time_to=state.time_to - 1)


def pan_right(state: ViewportState) -> ViewportState:
    # The last tick stays in view
    if state.time_from >= state.time_last:
        return state
    return replace(state, time_from=state.time_from + 1, time_to=state.time_to + 1)


def zoom(state: ViewportState, delta: int, rendering: RenderingConfig = RENDERING) -> ViewportState:
    """Change cells per tick by `delta` (floor MIN_TIME_PER_CELL) and refit the window."""
    time_per_cell = max(state.time_per_cell + delta, rendering.MIN_TIME_PER_CELL)
    time_to = state.time_from + ticks_for_width(state.wave_width, time_per_cell)
    return replace(state, time_per_cell=time_per_cell, time_to=time_to)


def jump_start(state: ViewportState) -> ViewportState:
    return replace(state, time_from=0, time_to=state.window_width)


def jump_end(state: ViewportState) -> ViewportState:
    span = state.window_width
    time_from = max(state.time_last - span, 0)
    return replace(state, time_from=time_from, time_to=time_from + span)


# ---- Vertical ----

def move_focus(state: ViewportState, delta: int, signal_count: int, tree_count: int) -> ViewportState:
    """Move the cursor of the focused pane by `delta` rows, saturating at both ends."""
    if state.pane_focus is PaneFocus.TREE:
        row = _clamp_index(state.focused_tree_row + delta, tree_count)
        scroll = scroll_to_cursor(row, state.tree_scroll_offset, state.tree_drawable_rows)
        return replace(state, focused_tree_row=row, tree_scroll_offset=scroll)
    row = _clamp_index(state.focused_row + delta, signal_count)
    scroll = scroll_to_cursor(row, state.scroll_offset, state.drawable_rows)
    return replace(state, focused_row=row, scroll_offset=scroll)


def clamp_rows(state: ViewportState, signal_count: int, tree_count: int) -> ViewportState:
    """Re-clamp both cursors and scroll offsets after list lengths or row counts changed."""
    row = _clamp_index(state.focused_row, signal_count)
    tree_row = _clamp_index(state.focused_tree_row, tree_count)
    return replace(
        state,
        focused_row=row,
        scroll_offset=scroll_to_cursor(row, state.scroll_offset, state.drawable_rows),
        focused_tree_row=tree_row,
        tree_scroll_offset=scroll_to_cursor(tree_row, state.tree_scroll_offset, state.tree_drawable_rows),
    )


# ---- Pane focus ----

def begin_pane_switch(state: ViewportState) -> ViewportState:
    return replace(state, pending_pane_switch=True)


def finish_pane_switch(state: ViewportState, target: Optional[PaneFocus]) -> ViewportState:
    """Leave window-change mode, focusing `target` if one was chosen."""
    focus = target if target is not None else state.pane_focus
    return replace(state, pending_pane_switch=False, pane_focus=focus)


# ---- Resize ----

def resize(state: ViewportState, width: int, height: int, signal_count: int, tree_count: int,
           ui: UIConfig = UI) -> ViewportState:
    """Apply a new terminal size: rows, then scroll re-clamp, then window width."""
    layout = compute_layout(width, height, ui)
    state = replace(
        state,
        drawable_rows=layout.drawable_rows,
        tree_drawable_rows=layout.tree_drawable_rows,
        wave_width=layout.wave_width,
        screen_width=width,
        screen_height=height,
    )
    state = clamp_rows(state, signal_count, tree_count)
    time_to = state.time_from + ticks_for_width(state.wave_width, state.time_per_cell)
    return replace(state, time_to=time_to)
