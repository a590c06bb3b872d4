"""Curses front end: draws controller frames and feeds it key/resize events.

Screen layout (widths follow UIConfig percentages; the status line sits in
the bottom border of the signal pane):

    ┌──────────┐┌───────────┬───────────────────────────┐
    │▼ top     ││top.clk    │▁▁▁╱▔▔▔╲▁▁▁╱▔▔▔╲▁▁▁        │
    │├ ☑ clk   ││           │                           │
    │└ ▼ cpu   ││top.cpu.pc │1f     ╳20     ╳21         │
    └──────────┘└[0, 9) x4  5 signals───────────────────┘

Borders are drawn only when UIConfig.PANE_BORDER is non-zero.
"""

import curses
import logging
from typing import Dict, Optional

from .application.events import ResizedEvent, SelectionChangedEvent
from .config import UI, UIConfig
from .waveform_controller import Frame, KeyEvent, WaveformController
from .viewport import PaneFocus
from .waveform_renderer import StyleTag

logger = logging.getLogger(__name__)

# (foreground, background); -1 is the terminal default
STYLE_COLORS: Dict[StyleTag, tuple] = {
    StyleTag.ASSERTED: (curses.COLOR_GREEN, -1),
    StyleTag.DEASSERTED: (curses.COLOR_GREEN, -1),
    StyleTag.VALUE: (curses.COLOR_BLACK, curses.COLOR_GREEN),
    StyleTag.ALARM: (curses.COLOR_BLACK, curses.COLOR_RED),
    StyleTag.EDGE: (curses.COLOR_GREEN, -1),
    StyleTag.EDGE_ALARM: (curses.COLOR_RED, -1),
}

_NAMED_KEYS = {
    curses.KEY_LEFT: "Left",
    curses.KEY_RIGHT: "Right",
    curses.KEY_UP: "Up",
    curses.KEY_DOWN: "Down",
    curses.KEY_HOME: "Home",
    curses.KEY_END: "End",
    curses.KEY_ENTER: "Enter",
    10: "Enter",
    13: "Enter",
    27: "Esc",
}


def translate_key(code: int) -> Optional[KeyEvent]:
    """Map a curses key code to a KeyEvent, None for keys we do not handle."""
    if code in _NAMED_KEYS:
        return KeyEvent(_NAMED_KEYS[code])
    if 1 <= code <= 26 and code != 9:
        return KeyEvent(chr(code + 96), frozenset({"ctrl"}))
    if 32 <= code < 127:
        return KeyEvent(chr(code))
    return None


def _init_colors() -> Dict[StyleTag, int]:
    if not curses.has_colors():
        return {tag: curses.A_NORMAL for tag in StyleTag}
    curses.start_color()
    curses.use_default_colors()
    attrs: Dict[StyleTag, int] = {}
    for pair, (tag, (fg, bg)) in enumerate(STYLE_COLORS.items(), start=1):
        curses.init_pair(pair, fg, bg)
        attrs[tag] = curses.color_pair(pair)
    return attrs


def _put(screen, y: int, x: int, text: str, attr: int = curses.A_NORMAL) -> None:
    height, width = screen.getmaxyx()
    if not 0 <= y < height or x >= width:
        return
    try:
        screen.addstr(y, x, text[:max(width - x, 0)], attr)
    except curses.error:
        # Writing the bottom-right cell moves the cursor off screen
        pass


def _box(screen, top: int, left: int, height: int, width: int, divider: Optional[int] = None) -> None:
    """Draw a box; `divider` is the x offset of an inner vertical line."""
    if height < 2 or width < 2:
        return
    top_edge = ["─"] * (width - 2)
    bottom_edge = ["─"] * (width - 2)
    if divider is not None and 0 < divider < width - 1:
        top_edge[divider - 1] = "┬"
        bottom_edge[divider - 1] = "┴"
    _put(screen, top, left, "┌" + "".join(top_edge) + "┐")
    for y in range(top + 1, top + height - 1):
        _put(screen, y, left, "│")
        if divider is not None and 0 < divider < width - 1:
            _put(screen, y, left + divider, "│")
        _put(screen, y, left + width - 1, "│")
    _put(screen, top + height - 1, left, "└" + "".join(bottom_edge) + "┘")


class StatusLine:
    """Status line text, kept current from controller events.

    Also tracks whether the screen needs a full clear, which is the case after
    every terminal resize.
    """

    def __init__(self, controller: WaveformController) -> None:
        self.signal_count = len(controller.selection.flattened_signals)
        self.needs_clear = True
        controller.event_bus.subscribe(SelectionChangedEvent, self._on_selection_changed)
        controller.event_bus.subscribe(ResizedEvent, self._on_resized)

    def _on_selection_changed(self, event: SelectionChangedEvent) -> None:
        self.signal_count = event.signal_count

    def _on_resized(self, event: ResizedEvent) -> None:
        logger.debug(f"terminal resized to {event.width}x{event.height}")
        self.needs_clear = True

    def text(self, frame: Frame) -> str:
        status = f"[{frame.time_from}, {frame.time_to}) x{frame.time_per_cell}  {self.signal_count} signals"
        if frame.pending_pane_switch:
            status += "  -- WINDOW --"
        return status


def draw(screen, frame: Frame, attrs: Dict[StyleTag, int], ui: UIConfig = UI,
         status: str = "") -> None:
    height, width = screen.getmaxyx()
    sidebar = width * ui.SIDEBAR_WIDTH_PERCENT // 100
    timeline = width - sidebar
    names = timeline * ui.SIGNAME_WIDTH_PERCENT // 100
    wave_x = sidebar + names + 1

    screen.erase()
    if ui.PANE_BORDER:
        _box(screen, 0, 0, height, sidebar)
        _box(screen, 0, sidebar, height, timeline, divider=names)

    tree_focused = frame.pane_focus is PaneFocus.TREE
    for i, line in enumerate(frame.tree_lines):
        row = frame.tree_first_row + i
        attr = curses.A_REVERSE if row == frame.focused_tree_row and tree_focused else curses.A_NORMAL
        _put(screen, 1 + i, 1, line[:max(sidebar - 2, 0)], attr)

    for i, rendered in enumerate(frame.rows):
        y = 1 + i * ui.LINES_PER_SIGNAL
        row = frame.first_row + i
        attr = curses.A_BOLD if row == frame.focused_row and not tree_focused else curses.A_NORMAL
        _put(screen, y, sidebar + 1, rendered.path[:max(names - 1, 0)], attr)
        x = wave_x
        for segment in rendered.segments:
            _put(screen, y, x, segment.text, attrs.get(segment.style, curses.A_NORMAL))
            x += len(segment.text)

    _put(screen, height - 1, sidebar + 1, status[:max(timeline - 2, 0)], curses.A_DIM)
    screen.noutrefresh()
    curses.doupdate()


def _main_loop(screen, controller: WaveformController) -> None:
    ui = controller.config.ui
    try:
        curses.curs_set(0)
    except curses.error:
        # Not every terminal can hide the cursor
        pass
    screen.keypad(True)
    screen.timeout(ui.POLL_TIMEOUT_MS)
    attrs = _init_colors()
    status_line = StatusLine(controller)

    height, width = screen.getmaxyx()
    controller.handle_resize(width, height)

    drawn = None
    while not controller.should_quit:
        frame = controller.frame()
        if status_line.needs_clear:
            screen.clear()
            status_line.needs_clear = False
            drawn = None
        if frame is not drawn:
            draw(screen, frame, attrs, ui, status_line.text(frame))
            drawn = frame
        code = screen.getch()
        if code == -1:
            continue
        if code == curses.KEY_RESIZE:
            height, width = screen.getmaxyx()
            controller.handle_resize(width, height)
            continue
        event = translate_key(code)
        if event is not None:
            controller.handle_key(event)


def run(controller: WaveformController) -> None:
    """Take over the terminal until the user quits."""
    logger.info("Entering terminal UI")
    curses.wrapper(_main_loop, controller)
    logger.info("Left terminal UI")
