"""
Digit-by-digit currency entry.

Deposit, withdraw and transfer screens all collect their amount through
AmountEntryEngine. Digits are typed left to right; each whole-part digit
shifts the previous ones up a place until a decimal point is placed, after
which at most two fractional digits are accepted. Committing takes two
confirmations, and any edit in between disarms the first one.
"""

from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_DOWN
from enum import Enum
from typing import Callable, Optional

from .keys import KeyEvent, KeyKind
from .models import to_money

Validator = Callable[[Decimal], bool]

# decimal_cursor values
WHOLE_PART = 0
POINT_PLACED = -1
LAST_FRACTION_SLOT = -2


class EntrySignal(Enum):
    """Outcome of a single entry action."""
    EDITED = "edited"
    IGNORED = "ignored"
    REJECTED = "rejected"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMMIT = "commit"
    CONFIRM_CLEARED = "confirm_cleared"
    ABANDON = "abandon"


@dataclass(frozen=True)
class AmountEntryState:
    """Immutable snapshot of an amount being typed.

    ``decimal_cursor`` is 0 while the whole part is typed, -1 once the
    point is placed, -2 after one fractional digit and -3 after two.
    """

    accumulated_amount: Decimal = Decimal('0')
    decimal_cursor: int = WHOLE_PART
    confirm_pending: bool = False


def _whole_digits(amount: Decimal) -> int:
    whole = int(amount)
    return len(str(whole)) if whole else 0


def _accept_all(amount: Decimal) -> bool:
    return True


class AmountEntryEngine:
    """State machine for entering a non-negative two-place amount."""

    def __init__(self, max_whole_digits: int = 12, state: Optional[AmountEntryState] = None):
        self.max_whole_digits = max_whole_digits
        self.state = state or AmountEntryState()

    @property
    def amount(self) -> Decimal:
        """The entered amount as money."""
        return to_money(self.state.accumulated_amount)

    @property
    def confirm_pending(self) -> bool:
        return self.state.confirm_pending

    @property
    def fraction_digits(self) -> int:
        """Number of fractional digits typed so far."""
        return max(0, -self.state.decimal_cursor - 1)

    @property
    def accepting_digits(self) -> bool:
        return self.state.decimal_cursor >= LAST_FRACTION_SLOT

    def reset(self):
        self.state = AmountEntryState()

    def _disarm(self) -> AmountEntryState:
        if self.state.confirm_pending:
            self.state = replace(self.state, confirm_pending=False)
        return self.state

    def digit(self, d: int) -> EntrySignal:
        """Type one digit."""
        state = self._disarm()
        if not 0 <= d <= 9:
            return EntrySignal.IGNORED

        amount = state.accumulated_amount
        if state.decimal_cursor == WHOLE_PART:
            # Leading zeros
            if d == 0 and not amount:
                return EntrySignal.IGNORED
            if _whole_digits(amount) + 1 > self.max_whole_digits:
                return EntrySignal.IGNORED
            self.state = replace(state, accumulated_amount=amount * 10 + d)
            return EntrySignal.EDITED

        if state.decimal_cursor < LAST_FRACTION_SLOT:
            return EntrySignal.IGNORED
        self.state = replace(
            state,
            accumulated_amount=amount + Decimal(d).scaleb(state.decimal_cursor),
            decimal_cursor=state.decimal_cursor - 1,
        )
        return EntrySignal.EDITED

    def decimal_point(self) -> EntrySignal:
        """Place the decimal point."""
        state = self._disarm()
        if state.decimal_cursor != WHOLE_PART:
            return EntrySignal.IGNORED
        self.state = replace(state, decimal_cursor=POINT_PLACED)
        return EntrySignal.EDITED

    def backspace(self) -> EntrySignal:
        """Remove the last typed digit or the decimal point."""
        state = self._disarm()
        cursor = state.decimal_cursor
        amount = state.accumulated_amount

        if cursor == POINT_PLACED:
            self.state = replace(state, decimal_cursor=WHOLE_PART)
            return EntrySignal.EDITED
        if cursor < POINT_PLACED:
            kept = -cursor - 2
            self.state = replace(
                state,
                accumulated_amount=amount.quantize(Decimal(1).scaleb(-kept), rounding=ROUND_DOWN),
                decimal_cursor=cursor + 1,
            )
            return EntrySignal.EDITED
        if not amount:
            return EntrySignal.IGNORED
        self.state = replace(state, accumulated_amount=amount // 10)
        return EntrySignal.EDITED

    def request_confirm(self, validator: Optional[Validator] = None) -> EntrySignal:
        """Arm the confirmation, or commit if it is already armed."""
        validator = validator or _accept_all
        if not validator(self.amount):
            return EntrySignal.REJECTED
        if self.state.confirm_pending:
            return EntrySignal.COMMIT
        self.state = replace(self.state, confirm_pending=True)
        return EntrySignal.AWAITING_CONFIRMATION

    def cancel(self) -> EntrySignal:
        """Disarm a pending confirmation, or ask to abandon the entry."""
        if self.state.confirm_pending:
            self.state = replace(self.state, confirm_pending=False)
            return EntrySignal.CONFIRM_CLEARED
        return EntrySignal.ABANDON

    def handle(self, event: KeyEvent, validator: Optional[Validator] = None) -> EntrySignal:
        """Apply a logical key event."""
        if event.is_digit:
            return self.digit(int(event.char))
        if event.kind is KeyKind.CHAR and event.char == ".":
            return self.decimal_point()
        if event.kind is KeyKind.BACKSPACE:
            return self.backspace()
        if event.kind is KeyKind.ENTER:
            return self.request_confirm(validator)
        if event.kind is KeyKind.ESCAPE:
            return self.cancel()
        return EntrySignal.IGNORED
