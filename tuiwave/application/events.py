"""Events published by the waveform controller.

The terminal status line subscribes to SelectionChangedEvent and ResizedEvent;
ViewportChangedEvent and FocusChangedEvent are there for further views.
"""

from dataclasses import dataclass, field
import time

from tuiwave.viewport import PaneFocus, ViewportState


@dataclass(frozen=True, kw_only=True)
class Event:
    """Base class for all events."""
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True, kw_only=True)
class ViewportChangedEvent(Event):
    """Emitted when the time window or zoom changes."""
    old: ViewportState
    new: ViewportState


@dataclass(frozen=True, kw_only=True)
class FocusChangedEvent(Event):
    """Emitted when the focused pane or a cursor row moves."""
    pane_focus: PaneFocus
    focused_row: int
    focused_tree_row: int


@dataclass(frozen=True, kw_only=True)
class SelectionChangedEvent(Event):
    """Emitted after a tree toggle, once the selection cache is rebuilt."""
    tree_version: int
    signal_count: int


@dataclass(frozen=True, kw_only=True)
class ResizedEvent(Event):
    """Emitted when the terminal size changes."""
    width: int
    height: int
