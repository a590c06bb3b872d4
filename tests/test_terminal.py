"""Test key translation, pane drawing and the status line (no terminal needed)."""

import curses

import pytest

from tuiwave.config import AppConfig, UIConfig
from tuiwave.terminal import StatusLine, draw, translate_key
from tuiwave.waveform_controller import KeyEvent, WaveformController


@pytest.mark.parametrize("code,expected", [
    (ord("q"), KeyEvent("q")),
    (ord("$"), KeyEvent("$")),
    (ord(" "), KeyEvent(" ")),
    (23, KeyEvent("w", frozenset({"ctrl"}))),
    (curses.KEY_LEFT, KeyEvent("Left")),
    (curses.KEY_DOWN, KeyEvent("Down")),
    (curses.KEY_HOME, KeyEvent("Home")),
    (10, KeyEvent("Enter")),
    (13, KeyEvent("Enter")),
    (27, KeyEvent("Esc")),
])
def test_translate_key(code, expected) -> None:
    assert translate_key(code) == expected


@pytest.mark.parametrize("code", [9, curses.KEY_F1, 200])
def test_unhandled_keys(code) -> None:
    assert translate_key(code) is None


def test_ctrl_w_matches_binding() -> None:
    assert translate_key(23).spec == "ctrl+w"


class FakeScreen:
    """Character grid standing in for a curses window."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.cells = {}

    def getmaxyx(self):
        return self.height, self.width

    def erase(self) -> None:
        self.cells.clear()

    def addstr(self, y, x, text, attr=0) -> None:
        for i, ch in enumerate(text):
            self.cells[(y, x + i)] = ch

    def noutrefresh(self) -> None:
        pass

    def row(self, y: int) -> str:
        return "".join(self.cells.get((y, x), " ") for x in range(self.width))


@pytest.fixture
def no_doupdate(monkeypatch):
    monkeypatch.setattr(curses, "doupdate", lambda: None)


class TestDraw:
    # 60x12: sidebar 12 cells, names column 14 cells, waveform 32 cells
    WIDTH, HEIGHT = 60, 12

    def draw_small(self, small_trace, config=None):
        config = config or AppConfig()
        controller = WaveformController(small_trace, self.WIDTH, self.HEIGHT, config)
        screen = FakeScreen(self.WIDTH, self.HEIGHT)
        draw(screen, controller.frame(), {}, config.ui, "[0, 8) x4")
        return screen

    def test_pane_borders(self, small_trace, no_doupdate) -> None:
        screen = self.draw_small(small_trace)
        top, bottom = screen.row(0), screen.row(self.HEIGHT - 1)
        assert top[0] == "┌" and top[11] == "┐"
        assert top[12] == "┌" and top[26] == "┬" and top[59] == "┐"
        assert bottom[0] == "└" and bottom[11] == "┘" and bottom[59] == "┘"
        for y in range(1, self.HEIGHT - 1):
            line = screen.row(y)
            assert (line[0], line[11], line[12], line[26], line[59]) == ("│",) * 5

    def test_content_inside_borders(self, small_trace, no_doupdate) -> None:
        screen = self.draw_small(small_trace)
        assert screen.row(1)[1:6] == "▼ top"
        assert screen.row(1)[13:20] == "top.clk"
        # Waveform fills the 32 cells between the divider and the right border
        assert screen.row(1)[27:59].strip() != ""
        assert screen.row(self.HEIGHT - 1)[13:22] == "[0, 8) x4"

    def test_borderless(self, small_trace, no_doupdate) -> None:
        screen = self.draw_small(small_trace, AppConfig(ui=UIConfig(PANE_BORDER=0)))
        assert "┌" not in screen.row(0)
        assert screen.row(1)[1:6] == "▼ top"


class TestStatusLine:
    def test_follows_selection_events(self, small_trace) -> None:
        controller = WaveformController(small_trace)
        status = StatusLine(controller)
        assert status.signal_count == 5

        controller.handle_key(KeyEvent("w", frozenset({"ctrl"})))
        controller.handle_key(KeyEvent("h"))
        controller.handle_key(KeyEvent("j"))
        controller.handle_key(KeyEvent("Enter"))  # hides clk
        assert status.signal_count == 4
        assert "4 signals" in status.text(controller.frame())

    def test_resize_requests_clear(self, small_trace) -> None:
        controller = WaveformController(small_trace)
        status = StatusLine(controller)
        status.needs_clear = False
        controller.handle_resize(100, 30)
        assert status.needs_clear

    def test_window_chord_shown(self, small_trace) -> None:
        controller = WaveformController(small_trace)
        status = StatusLine(controller)
        controller.handle_key(KeyEvent("w", frozenset({"ctrl"})))
        assert status.text(controller.frame()).endswith("-- WINDOW --")
