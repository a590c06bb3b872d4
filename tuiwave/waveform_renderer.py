"""Waveform renderer: turns a signal stream and a time window into styled text.

Layout of one row for the window [time_from, time_to) at `w` cells per tick:

    time:   0     1     2     3     4     5     6     7     8
    cells:  ▁▁▁▁▁ ╱ ▔▔▔ ╲ ▁▁▁▁▁▁▁▁▁▁▁▁▁▁▁▁▁▁▁ ...
            |<-- w*3 -->|<w*2>|<------ w*(8-5) ------>|

Every change strictly inside the window closes the run of the previous value
one cell early and puts a transition glyph in that cell, so the run plus the
glyph spans exactly `w * dt` cells. The run after the last change extends to
`time_to` without a glyph. The whole row is therefore exactly
`w * (time_to - time_from)` cells wide.

Rendering is a pure function of (stream contents, window, zoom); `RowCache`
memoizes it for the controller.
"""

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .config import RENDERING, RenderingConfig
from .data_model import Bit, HighZ, SignalIndex, Time, Unknown, Vector, is_unresolved
from .signal_store import SignalStore, SignalStream


class StyleTag(Enum):
    ASSERTED = "asserted"       # 1-bit signal high
    DEASSERTED = "deasserted"   # 1-bit signal low
    VALUE = "value"             # vector, real or text value
    ALARM = "alarm"             # X or Z
    EDGE = "edge"               # transition between defined values
    EDGE_ALARM = "edge_alarm"   # transition into or out of X/Z


@dataclass(frozen=True)
class Segment:
    text: str
    style: StyleTag


@dataclass(frozen=True)
class RenderedRow:
    path: str
    index: SignalIndex
    segments: Tuple[Segment, ...]

    @property
    def width(self) -> int:
        return sum(len(s.text) for s in self.segments)


def fit_text(text: str, width: int) -> str:
    """Truncate or left-align `text` to exactly `width` characters."""
    return text[:width].ljust(width)


def format_run(value: object, width: int, config: RenderingConfig = RENDERING) -> Segment:
    """Render `value` held for `width` cells."""
    if isinstance(value, Bit):
        if value.value:
            return Segment((config.BIT_HIGH * width)[:width], StyleTag.ASSERTED)
        return Segment((config.BIT_LOW * width)[:width], StyleTag.DEASSERTED)
    if isinstance(value, Vector):
        return Segment(fit_text(f"{value.value:x}", width), StyleTag.VALUE)
    if value is Unknown:
        return Segment(config.UNKNOWN_LABEL.center(width)[:width], StyleTag.ALARM)
    if value is HighZ:
        return Segment(config.HIGH_Z_LABEL.center(width)[:width], StyleTag.ALARM)
    # Real and text scalars
    return Segment(fit_text(str(value), width), StyleTag.VALUE)


def transition_glyph(previous: object, new: object, config: RenderingConfig = RENDERING) -> Segment:
    """One-cell glyph marking the change from `previous` to `new`."""
    if is_unresolved(previous) or is_unresolved(new):
        return Segment(fit_text(config.EDGE_WARNING, 1), StyleTag.EDGE_ALARM)
    if isinstance(previous, Bit) and isinstance(new, Bit):
        if new.value and not previous.value:
            return Segment(fit_text(config.EDGE_RISING, 1), StyleTag.EDGE)
        if previous.value and not new.value:
            return Segment(fit_text(config.EDGE_FALLING, 1), StyleTag.EDGE)
        # Same level written again at a later tick
        return format_run(new, 1, config)
    return Segment(fit_text(config.EDGE_VALUE, 1), StyleTag.EDGE)


def render_row(stream: SignalStream, time_from: Time, time_to: Time, time_per_cell: int,
               config: RenderingConfig = RENDERING) -> List[Segment]:
    """Render one signal over the window [time_from, time_to).

    Args:
        stream: Change stream of the signal.
        time_from: First tick of the window (inclusive).
        time_to: End of the window (exclusive).
        time_per_cell: Character cells per tick; raised to the configured floor.

    Returns:
        Segments whose text widths add up to time_per_cell * (time_to - time_from).
    """
    width = max(time_per_cell, config.MIN_TIME_PER_CELL)
    if time_to <= time_from:
        return []

    before = stream.change_before(time_from)
    current = stream[before].value if before is not None else HighZ
    current_t = time_from

    segments: List[Segment] = []
    # Changes at exactly time_from are already reflected in `current`
    first = stream.change_after(time_from + 1)
    if first is not None:
        end = stream.change_after(time_to)
        stop = end if end is not None else len(stream)
        for i in range(first, stop):
            change = stream[i]
            dt = max(change.time - current_t, 1)
            segments.append(format_run(current, width * dt - 1, config))
            segments.append(transition_glyph(current, change.value, config))
            current = change.value
            current_t = change.time

    if current_t < time_to:
        segments.append(format_run(current, width * (time_to - current_t), config))
    return segments


class RowCache:
    """Bounded LRU memo of rendered rows keyed by (index, window, zoom)."""

    def __init__(self, max_entries: int = RENDERING.ROW_CACHE_MAX_ENTRIES) -> None:
        self.max_entries = max_entries
        self._rows: "OrderedDict[Tuple[int, int, int, int], Tuple[Segment, ...]]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._rows)

    def get(self, key: Tuple[int, int, int, int]) -> Optional[Tuple[Segment, ...]]:
        segments = self._rows.get(key)
        if segments is None:
            self.misses += 1
            return None
        self.hits += 1
        self._rows.move_to_end(key)
        return segments

    def put(self, key: Tuple[int, int, int, int], segments: Tuple[Segment, ...]) -> None:
        self._rows[key] = segments
        self._rows.move_to_end(key)
        while len(self._rows) > self.max_entries:
            self._rows.popitem(last=False)

    def clear(self) -> None:
        self._rows.clear()


def render_rows(store: SignalStore, signals: Iterable[Tuple[str, SignalIndex]],
                time_from: Time, time_to: Time, time_per_cell: int,
                cache: Optional[RowCache] = None,
                config: RenderingConfig = RENDERING) -> List[RenderedRow]:
    """Render a batch of (display_path, signal_index) pairs."""
    rows: List[RenderedRow] = []
    for path, index in signals:
        key = (index, time_from, time_to, time_per_cell)
        segments = cache.get(key) if cache is not None else None
        if segments is None:
            segments = tuple(render_row(store.stream(index), time_from, time_to, time_per_cell, config))
            if cache is not None:
                cache.put(key, segments)
        rows.append(RenderedRow(path, index, segments))
    return rows
