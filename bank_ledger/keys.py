"""
Logical key events.

Raw curses key codes are decoded here into the small set of events the
screens and the core components understand.
"""

import curses
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class KeyKind(Enum):
    """Kinds of logical key events."""
    CHAR = "char"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ENTER = "enter"
    BACKSPACE = "backspace"
    ESCAPE = "escape"
    TAB = "tab"
    INTERRUPT = "interrupt"
    RESIZE = "resize"
    FIND = "find"
    NEW_ACCOUNT = "new_account"
    REPORT = "report"
    IGNORED = "ignored"


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press."""

    kind: KeyKind
    char: Optional[str] = None

    @classmethod
    def of(cls, char: str) -> "KeyEvent":
        """Event for a printable character."""
        return cls(KeyKind.CHAR, char)

    @property
    def is_digit(self) -> bool:
        return self.kind is KeyKind.CHAR and self.char is not None and self.char in "0123456789"


CTRL_C = 3
CTRL_F = 6
CTRL_N = 14
CTRL_R = 18
ESC = 27

_CONTROL_CODES = {
    CTRL_C: KeyKind.INTERRUPT,
    CTRL_F: KeyKind.FIND,
    CTRL_N: KeyKind.NEW_ACCOUNT,
    CTRL_R: KeyKind.REPORT,
    ESC: KeyKind.ESCAPE,
    8: KeyKind.BACKSPACE,
    9: KeyKind.TAB,
    10: KeyKind.ENTER,
    13: KeyKind.ENTER,
    127: KeyKind.BACKSPACE,
}

_CURSES_CODES = {
    curses.KEY_UP: KeyKind.UP,
    curses.KEY_DOWN: KeyKind.DOWN,
    curses.KEY_LEFT: KeyKind.LEFT,
    curses.KEY_RIGHT: KeyKind.RIGHT,
    curses.KEY_ENTER: KeyKind.ENTER,
    curses.KEY_BACKSPACE: KeyKind.BACKSPACE,
    curses.KEY_RESIZE: KeyKind.RESIZE,
}


def decode_key(code: Union[int, str]) -> KeyEvent:
    """Translate a curses key code into a logical event."""
    if isinstance(code, str):
        if len(code) != 1:
            return KeyEvent(KeyKind.IGNORED)
        code = ord(code)

    if code in _CONTROL_CODES:
        return KeyEvent(_CONTROL_CODES[code])
    if code in _CURSES_CODES:
        return KeyEvent(_CURSES_CODES[code])
    if 32 <= code < 127:
        return KeyEvent.of(chr(code))
    return KeyEvent(KeyKind.IGNORED)
