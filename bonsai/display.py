"""
Display drivers.

CursesDisplay drives a real terminal through the stdlib curses module and
lets curses diff the virtual screen against the physical one. Headless
display has a fixed size and scripted input; it backs non-interactive
print mode and the tests.
"""

import curses
import shutil
import sys
from collections.abc import Iterable
from typing import Protocol

import numpy as np

from bonsai.serializer import Palette
from bonsai.surface import PAD, Surface

RESIZE = "KEY_RESIZE"


class Display(Protocol):
    palette: Palette

    def __enter__(self) -> "Display": ...

    def __exit__(self, *exc_info: object) -> None: ...

    def size(self) -> tuple[int, int]: ...

    def present(self, frame: Surface, changed: np.ndarray) -> None: ...

    def poll_key(self) -> str | None: ...

    def wait_key(self, timeout: float | None) -> str | None: ...

    def close(self) -> None: ...


class CursesDisplay:
    """Live terminal display."""

    def __init__(self, noir: bool = False) -> None:
        self.noir = noir
        self.palette = Palette(colors=0)
        self.stdscr: "curses.window | None" = None
        self.warnings: list[str] = []

    def __enter__(self) -> "CursesDisplay":
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def open(self) -> None:
        self.stdscr = curses.initscr()
        curses.noecho()
        curses.cbreak()
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self.stdscr.nodelay(True)
        self.stdscr.keypad(True)
        if not self.noir:
            self._init_colors()

    def _init_colors(self) -> None:
        if not curses.has_colors():
            self.warnings.append("Warning: terminal does not have color support.")
            return
        curses.start_color()
        background = curses.COLOR_BLACK
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            pass
        palette = Palette(colors=curses.COLORS)
        if palette.monochrome:
            self.warnings.append("Warning: terminal has too few colors; using bold only.")
            return
        for pair in range(1, min(16, curses.COLOR_PAIRS)):
            try:
                curses.init_pair(pair, palette.foreground(pair), background)
            except curses.error:
                pass
        self.palette = palette

    def size(self) -> tuple[int, int]:
        rows, cols = self.stdscr.getmaxyx()
        return rows, cols

    def _attr(self, pair: int, bold: bool) -> int:
        attr = curses.A_BOLD if bold else curses.A_NORMAL
        if not self.palette.monochrome and pair > 0:
            attr |= curses.color_pair(pair)
        return attr

    def present(self, frame: Surface, changed: np.ndarray) -> None:
        """Write changed cells to the virtual screen, then update the terminal."""
        for y, x in zip(*np.nonzero(changed)):
            char = frame.chars[y, x]
            if char == PAD:
                continue
            try:
                self.stdscr.addstr(
                    int(y), int(x), char, self._attr(int(frame.pairs[y, x]), bool(frame.bold[y, x]))
                )
            except curses.error:
                # Writing the bottom-right cell moves the cursor off screen
                pass
        self.stdscr.noutrefresh()
        curses.doupdate()

    def _read(self) -> str | None:
        code = self.stdscr.getch()
        if code == -1:
            return None
        if 0 <= code < 256:
            return chr(code)
        return curses.keyname(code).decode(errors="replace")

    def poll_key(self) -> str | None:
        return self._read()

    def wait_key(self, timeout: float | None) -> str | None:
        """Block for a key, at most `timeout` seconds (None waits forever)."""
        self.stdscr.timeout(-1 if timeout is None else int(timeout * 1000))
        try:
            return self._read()
        finally:
            self.stdscr.nodelay(True)

    def close(self) -> None:
        if self.stdscr is None:
            return
        self.stdscr.clear()
        self.stdscr.refresh()
        curses.endwin()
        self.stdscr = None
        for warning in self.warnings:
            print(warning, file=sys.stderr)


class HeadlessDisplay:
    """
    Off-screen display with a fixed size and scripted keys.

    `keys` are returned one per poll or wait; None entries (or running out)
    mean no key was pressed.
    """

    def __init__(
        self,
        rows: int | None = None,
        cols: int | None = None,
        keys: Iterable[str | None] = (),
        noir: bool = False,
    ) -> None:
        if rows is None or cols is None:
            fallback = shutil.get_terminal_size()
            rows = fallback.lines if rows is None else rows
            cols = fallback.columns if cols is None else cols
        self.rows = rows
        self.cols = cols
        self.palette = Palette(colors=0 if noir else 256)
        self._keys = iter(keys)
        self.frames = 0
        self.cells_presented = 0
        self.waits: list[float | None] = []
        self.closed = False

    def __enter__(self) -> "HeadlessDisplay":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def size(self) -> tuple[int, int]:
        return self.rows, self.cols

    def present(self, frame: Surface, changed: np.ndarray) -> None:
        self.frames += 1
        self.cells_presented += int(changed.sum())

    def poll_key(self) -> str | None:
        return next(self._keys, None)

    def wait_key(self, timeout: float | None) -> str | None:
        self.waits.append(timeout)
        return next(self._keys, None)

    def close(self) -> None:
        self.closed = True
