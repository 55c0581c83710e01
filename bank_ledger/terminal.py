"""
Terminal handle backed by curses.

The Terminal wraps the curses screen so screens receive an explicit
object instead of touching process-wide curses state. ``open_terminal``
sets curses up and always restores the terminal on the way out.
"""

import curses
import locale
import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from .keys import ESC, KeyEvent, KeyKind, decode_key

logger = logging.getLogger(__name__)

ERROR_PAIR = 1
ESCAPE_DELAY_MS = 25


class Terminal:
    """Drawing and input on a curses window."""

    def __init__(self, window):
        self.window = window
        self.colors = False

    def size(self) -> Tuple[int, int]:
        """Current (height, width)."""
        return self.window.getmaxyx()

    def read_event(self) -> KeyEvent:
        """Block for the next key and decode it.

        A lone ESC is the escape key; ESC followed by more input is an
        unrecognized escape sequence and is swallowed whole.
        """
        code = self.window.getch()
        if code != ESC:
            return decode_key(code)

        self.window.nodelay(True)
        try:
            if self.window.getch() == -1:
                return KeyEvent(KeyKind.ESCAPE)
            while self.window.getch() != -1:
                pass
        finally:
            self.window.nodelay(False)
        return KeyEvent(KeyKind.IGNORED)

    def clear(self):
        self.window.erase()

    def refresh(self):
        self.window.refresh()

    def _attributes(self, style: Optional[str]) -> int:
        if style == "standout":
            return curses.A_STANDOUT
        if style == "underline":
            return curses.A_UNDERLINE
        if style == "error":
            return curses.color_pair(ERROR_PAIR) if self.colors else curses.A_REVERSE
        return curses.A_NORMAL

    def draw(self, y: int, x: int, text: str, style: Optional[str] = None):
        """Write text at a position; text falling off the screen is clipped."""
        height, width = self.size()
        if y < 0 or y >= height or x >= width:
            return
        if x < 0:
            text = text[-x:]
            x = 0
        try:
            self.window.addstr(y, x, text[:width - x], self._attributes(style))
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen
            pass

    def move(self, y: int, x: int):
        try:
            self.window.move(y, x)
        except curses.error:
            pass

    def show_cursor(self, visible: bool):
        try:
            curses.curs_set(1 if visible else 0)
        except curses.error:
            pass


@contextmanager
def open_terminal() -> Iterator[Terminal]:
    """Initialize curses for the session and tear it down afterwards."""
    locale.setlocale(locale.LC_ALL, "")
    window = curses.initscr()
    try:
        curses.raw()
        curses.noecho()
        window.keypad(True)
        curses.set_escdelay(ESCAPE_DELAY_MS)
        terminal = Terminal(window)
        try:
            curses.start_color()
            curses.init_pair(ERROR_PAIR, curses.COLOR_BLACK, curses.COLOR_RED)
            terminal.colors = True
        except curses.error:
            logger.info("Terminal has no color support")
        yield terminal
    finally:
        window.keypad(False)
        curses.noraw()
        curses.echo()
        curses.endwin()
