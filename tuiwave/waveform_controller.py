"""WaveformController: owns the viewport state and turns input into transitions.

The controller is the only writer of the ViewportState, the only caller of
`Scope.toggle_node` and the owner of the SelectionCache and RowCache. Input
arrives as KeyEvent/ResizeEvent objects, one at a time; each handled event
either produces a new state (and marks the frame dirty) or is a no-op.

`frame()` hands the drawing layer everything it needs for one screen. It is
rebuilt at most once per state change.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple, Union

from .application.event_bus import EventBus
from .application.events import (
    FocusChangedEvent, ResizedEvent, SelectionChangedEvent, ViewportChangedEvent
)
from .config import AppConfig
from .data_model import Time
from .selection_cache import SelectionCache
from .viewport import (
    PaneFocus, ViewportState, begin_pane_switch, clamp_rows, finish_pane_switch,
    initial_state, jump_end, jump_start, move_focus, pan_left, pan_right, resize, zoom
)
from .waveform_loader import Trace
from .waveform_renderer import RenderedRow, RowCache, render_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyEvent:
    code: str                              # "a", "Left", "Enter", ...
    modifiers: FrozenSet[str] = frozenset()  # {"ctrl", "alt", "shift"}

    @property
    def spec(self) -> str:
        """Key spec as used in KeyBindings, e.g. "ctrl+w"."""
        return "+".join(sorted(self.modifiers) + [self.code])


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


InputEvent = Union[KeyEvent, ResizeEvent]


@dataclass(frozen=True)
class Frame:
    """Everything visible on one screen."""
    tree_lines: Tuple[str, ...]     # visible slice of the outline
    tree_first_row: int
    focused_tree_row: int
    rows: Tuple[RenderedRow, ...]   # visible slice of the signal list
    first_row: int
    focused_row: int
    pane_focus: PaneFocus
    pending_pane_switch: bool
    time_from: Time
    time_to: Time
    time_per_cell: int


@dataclass
class WaveformController:
    trace: Trace
    width: int = 80
    height: int = 24
    config: AppConfig = field(default_factory=AppConfig)
    event_bus: EventBus = field(default_factory=EventBus)

    should_quit: bool = field(default=False, init=False)
    selection: SelectionCache = field(init=False)
    state: ViewportState = field(init=False)
    _row_cache: RowCache = field(init=False)
    _frame: Optional[Frame] = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.selection = SelectionCache(glyphs=self.config.outline)
        self.selection.rebuild(self.trace.root)
        self._row_cache = RowCache(self.config.rendering.ROW_CACHE_MAX_ENTRIES)
        self.state = initial_state(self.trace.time_last, self.width, self.height,
                                   self.config.ui, self.config.rendering)

    # ---- Input ----
    def handle_event(self, event: InputEvent) -> bool:
        if isinstance(event, ResizeEvent):
            return self.handle_resize(event.width, event.height)
        return self.handle_key(event)

    def handle_key(self, event: KeyEvent) -> bool:
        """Apply the action bound to `event`; returns True if the state changed."""
        action = self.config.keys.action_for(event.spec)
        state = self.state

        if state.pending_pane_switch:
            target = {"pan_left": PaneFocus.TREE, "pan_right": PaneFocus.SIGNAL}.get(action or "")
            return self._apply(finish_pane_switch(state, target))

        if action is None:
            return False
        logger.debug(f"key {event.spec} -> {action}")

        if action == "quit":
            self.should_quit = True
            return False
        if action == "activate":
            return self._activate()

        signal_count = len(self.selection.flattened_signals)
        tree_count = len(self.selection.tree_outline)
        transitions = {
            "pan_left": pan_left,
            "pan_right": pan_right,
            "zoom_in": lambda s: zoom(s, +1, self.config.rendering),
            "zoom_out": lambda s: zoom(s, -1, self.config.rendering),
            "move_up": lambda s: move_focus(s, -1, signal_count, tree_count),
            "move_down": lambda s: move_focus(s, +1, signal_count, tree_count),
            "jump_start": jump_start,
            "jump_end": jump_end,
            "window_chord": begin_pane_switch,
        }
        return self._apply(transitions[action](state))

    def handle_resize(self, width: int, height: int) -> bool:
        self.width, self.height = width, height
        new_state = resize(self.state, width, height,
                           len(self.selection.flattened_signals),
                           len(self.selection.tree_outline), self.config.ui)
        self.event_bus.publish(ResizedEvent(width=width, height=height))
        return self._apply(new_state)

    def _activate(self) -> bool:
        if self.state.pane_focus is not PaneFocus.TREE:
            return False
        node = self.trace.root.toggle_node(self.state.focused_tree_row)
        self.selection.rebuild(self.trace.root)
        logger.debug(f"toggled {node!r}")
        self.event_bus.publish(SelectionChangedEvent(
            tree_version=self.trace.root.version,
            signal_count=len(self.selection.flattened_signals),
        ))
        self._apply(clamp_rows(self.state, len(self.selection.flattened_signals),
                               len(self.selection.tree_outline)))
        self._frame = None
        return True

    def _apply(self, new_state: ViewportState) -> bool:
        old = self.state
        if new_state == old:
            return False
        self.state = new_state
        self._frame = None

        if (old.time_from, old.time_to, old.time_per_cell) != \
                (new_state.time_from, new_state.time_to, new_state.time_per_cell):
            self.event_bus.publish(ViewportChangedEvent(old=old, new=new_state))
        if (old.pane_focus, old.focused_row, old.focused_tree_row) != \
                (new_state.pane_focus, new_state.focused_row, new_state.focused_tree_row):
            self.event_bus.publish(FocusChangedEvent(
                pane_focus=new_state.pane_focus,
                focused_row=new_state.focused_row,
                focused_tree_row=new_state.focused_tree_row,
            ))
        return True

    # ---- Output ----
    def frame(self) -> Frame:
        """Current screen contents, rebuilt only after a state change."""
        if self.selection.is_stale(self.trace.root):
            self.selection.rebuild(self.trace.root)
            self._frame = None
        if self._frame is not None:
            return self._frame

        s = self.state
        time_from, time_to = s.visible_window()
        visible = self.selection.flattened_signals[s.scroll_offset:s.scroll_offset + s.drawable_rows]
        rows = render_rows(self.trace.store, visible, time_from, time_to, s.time_per_cell,
                           self._row_cache, self.config.rendering)
        outline = self.selection.tree_outline
        self._frame = Frame(
            tree_lines=tuple(outline[s.tree_scroll_offset:s.tree_scroll_offset + s.tree_drawable_rows]),
            tree_first_row=s.tree_scroll_offset,
            focused_tree_row=s.focused_tree_row,
            rows=tuple(rows),
            first_row=s.scroll_offset,
            focused_row=s.focused_row,
            pane_focus=s.pane_focus,
            pending_pane_switch=s.pending_pane_switch,
            time_from=time_from,
            time_to=time_to,
            time_per_cell=s.time_per_cell,
        )
        return self._frame
