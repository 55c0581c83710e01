"""
Shared fixtures for the bank ledger tests.
"""

from decimal import Decimal

import pytest

from bank_ledger.config import LedgerConfig
from bank_ledger.keys import KeyEvent, KeyKind
from bank_ledger.models import Account
from bank_ledger.operations import AccountOperations
from bank_ledger.store import AccountStore


def make_account(number, balance='0.00', password='PASS01', first='John', last='Doe'):
    """Build an account with filler identity fields."""
    return Account(
        account_number=number,
        first_name=first,
        last_name=last,
        middle_initial='Q',
        ssn=123456789,
        area_code=555,
        phone_number=1234567,
        balance=Decimal(balance),
        password=password,
    )


def keys(*items):
    """Script key events: strings become one CHAR event per character."""
    events = []
    for item in items:
        if isinstance(item, KeyKind):
            events.append(KeyEvent(item))
        elif isinstance(item, KeyEvent):
            events.append(item)
        else:
            events.extend(KeyEvent.of(char) for char in item)
    return events


class FakeTerminal:
    """Scripted stand-in for the curses terminal."""

    def __init__(self, events=(), height=24, width=100):
        self.events = list(events)
        self.height = height
        self.width = width
        self.drawn = []
        self.frames = []
        self.cursor_visible = False

    def size(self):
        return self.height, self.width

    def read_event(self):
        if not self.events:
            return KeyEvent(KeyKind.INTERRUPT)
        return self.events.pop(0)

    def clear(self):
        self.drawn = []

    def refresh(self):
        self.frames.append("\n".join(text for _, _, text, _ in self.drawn))

    def draw(self, y, x, text, style=None):
        self.drawn.append((y, x, text, style))

    def move(self, y, x):
        pass

    def show_cursor(self, visible):
        self.cursor_visible = visible

    def styled(self, style):
        return [text for _, _, text, drawn_style in self.drawn if drawn_style == style]


@pytest.fixture
def config():
    """Default ledger settings."""
    return LedgerConfig()


@pytest.fixture
def store():
    """Two-account store used by the scenario tests."""
    return AccountStore([
        make_account('B0002', '5.00', password='PASS02'),
        make_account('A0001', '100.00', password='PASS01'),
    ])


@pytest.fixture
def operations(store, config):
    """AccountOperations over the two-account store."""
    return AccountOperations(store, config=config)
