"""
Tests for the amount_entry module.

This module contains tests for digit entry, decimal placement, backspace
and the two-step confirmation of AmountEntryEngine.
"""

import random
from decimal import Decimal

import pytest

from bank_ledger.amount_entry import AmountEntryEngine, AmountEntryState, EntrySignal
from bank_ledger.keys import KeyEvent, KeyKind
from conftest import keys


def type_text(engine, text):
    """Feed characters through the engine's key handler."""
    for event in keys(text):
        engine.handle(event)
    return engine


class TestWholePart:
    """Test whole-part digit entry."""

    @pytest.mark.parametrize('text,expected', [
        ('7', '7'),
        ('120', '120'),
        ('007', '7'),
        ('0', '0'),
        ('000', '0'),
        ('1000000', '1000000'),
    ])
    def test_digits_form_integer(self, text, expected):
        """Test typed digits form the integer, leading zeros collapsing."""
        engine = type_text(AmountEntryEngine(), text)

        assert engine.amount == Decimal(expected)
        assert engine.state.decimal_cursor == 0

    @pytest.mark.parametrize('seed', range(10))
    def test_random_digit_strings(self, seed):
        """Test arbitrary digit strings up to the digit cap."""
        rng = random.Random(seed)
        text = ''.join(rng.choice('0123456789') for _ in range(rng.randint(1, 12)))

        engine = type_text(AmountEntryEngine(), text)

        assert engine.amount == Decimal(int(text))

    def test_leading_zero_is_ignored(self):
        """Test a zero on an empty amount does nothing."""
        engine = AmountEntryEngine()

        assert engine.digit(0) is EntrySignal.IGNORED
        assert engine.state == AmountEntryState()

    def test_whole_digit_cap(self):
        """Test no more than twelve whole digits are accepted."""
        engine = type_text(AmountEntryEngine(), '1' * 12)

        assert engine.digit(9) is EntrySignal.IGNORED
        assert engine.amount == Decimal('111111111111')

    def test_custom_digit_cap(self):
        """Test the cap is configurable."""
        engine = type_text(AmountEntryEngine(max_whole_digits=3), '12345')

        assert engine.amount == Decimal('123')

    def test_out_of_range_digit(self):
        """Test values that are not digits are ignored."""
        engine = AmountEntryEngine()

        assert engine.digit(10) is EntrySignal.IGNORED
        assert engine.digit(-1) is EntrySignal.IGNORED


class TestFraction:
    """Test fractional entry."""

    def test_one_point_five_zero(self):
        """Test 1 . 5 0 gives 1.50 and caps the fraction."""
        engine = type_text(AmountEntryEngine(), '1.50')

        assert engine.amount == Decimal('1.50')
        assert engine.fraction_digits == 2
        assert not engine.accepting_digits

        assert engine.digit(9) is EntrySignal.IGNORED
        assert engine.amount == Decimal('1.50')

    def test_zero_after_point_is_accepted(self):
        """Test amounts below ten cents can be typed."""
        engine = type_text(AmountEntryEngine(), '.05')

        assert engine.amount == Decimal('0.05')

    def test_cursor_progression(self):
        """Test the decimal cursor after each step."""
        engine = AmountEntryEngine()
        engine.digit(3)
        assert engine.state.decimal_cursor == 0
        engine.decimal_point()
        assert engine.state.decimal_cursor == -1
        assert engine.fraction_digits == 0
        engine.digit(2)
        assert engine.state.decimal_cursor == -2
        assert engine.fraction_digits == 1
        engine.digit(5)
        assert engine.state.decimal_cursor == -3
        assert engine.amount == Decimal('3.25')

    def test_second_point_ignored(self):
        """Test only one decimal point is accepted."""
        engine = type_text(AmountEntryEngine(), '4.')

        assert engine.decimal_point() is EntrySignal.IGNORED
        assert engine.state.decimal_cursor == -1


class TestBackspace:
    """Test backspace."""

    @pytest.mark.parametrize('prefix', ['', '1', '42', '90210', '12345678901'])
    @pytest.mark.parametrize('d', range(10))
    def test_backspace_undoes_whole_digit(self, prefix, d):
        """Test backspace after a whole-part digit restores the prior state."""
        engine = type_text(AmountEntryEngine(), prefix)
        before = engine.state

        engine.digit(d)
        engine.backspace()

        assert engine.state == before

    def test_backspace_at_whole_digit_cap(self):
        """Test a digit refused at the cap is not undone by backspace."""
        engine = type_text(AmountEntryEngine(), '123456789012')

        assert engine.digit(3) is EntrySignal.IGNORED
        assert engine.amount == Decimal('123456789012.00')

        engine.backspace()

        assert engine.amount == Decimal('12345678901.00')

    def test_backspace_fraction_digits(self):
        """Test fractional digits are removed one at a time."""
        engine = type_text(AmountEntryEngine(), '12.55')

        engine.backspace()
        assert engine.amount == Decimal('12.50')
        assert engine.state.decimal_cursor == -2

        engine.backspace()
        assert engine.amount == Decimal('12.00')
        assert engine.state.decimal_cursor == -1

    def test_backspace_removes_point(self):
        """Test backspace right after the point returns to the whole part."""
        engine = type_text(AmountEntryEngine(), '15.')

        engine.backspace()

        assert engine.state == AmountEntryState(Decimal('15'), 0, False)
        engine.digit(3)
        assert engine.amount == Decimal('153')

    def test_backspace_on_empty(self):
        """Test backspace on nothing is ignored."""
        engine = AmountEntryEngine()

        assert engine.backspace() is EntrySignal.IGNORED
        assert engine.amount == Decimal('0')


class TestConfirmation:
    """Test the two-step confirmation gate."""

    def test_two_step_commit(self):
        """Test the first confirm arms and the second commits."""
        engine = type_text(AmountEntryEngine(), '25')

        assert engine.request_confirm() is EntrySignal.AWAITING_CONFIRMATION
        assert engine.confirm_pending
        assert engine.request_confirm() is EntrySignal.COMMIT
        assert engine.amount == Decimal('25.00')

    def test_rejected_amount_changes_nothing(self):
        """Test a rejecting validator leaves the state unchanged."""
        engine = type_text(AmountEntryEngine(), '200')
        before = engine.state

        signal = engine.request_confirm(lambda amount: amount <= Decimal('5.00'))

        assert signal is EntrySignal.REJECTED
        assert engine.state == before
        assert not engine.confirm_pending

    def test_rejected_after_arming(self):
        """Test a validator rejecting on the second confirm does not commit."""
        engine = type_text(AmountEntryEngine(), '5')
        engine.request_confirm()

        assert engine.request_confirm(lambda amount: False) is EntrySignal.REJECTED
        assert engine.confirm_pending

    @pytest.mark.parametrize('edit', ['digit', 'point', 'backspace'])
    def test_edit_clears_pending(self, edit):
        """Test any edit disarms the confirmation."""
        engine = type_text(AmountEntryEngine(), '5')
        engine.request_confirm()

        if edit == 'digit':
            engine.digit(1)
        elif edit == 'point':
            engine.decimal_point()
        else:
            engine.backspace()

        assert not engine.confirm_pending
        assert engine.request_confirm() is EntrySignal.AWAITING_CONFIRMATION

    def test_rejected_edit_still_clears_pending(self):
        """Test a no-op keystroke still requires confirming again."""
        engine = type_text(AmountEntryEngine(), '1.23')
        engine.request_confirm()

        assert engine.digit(4) is EntrySignal.IGNORED
        assert not engine.confirm_pending

    def test_cancel(self):
        """Test cancel disarms first and abandons second."""
        engine = type_text(AmountEntryEngine(), '9')
        engine.request_confirm()

        assert engine.cancel() is EntrySignal.CONFIRM_CLEARED
        assert not engine.confirm_pending
        assert engine.cancel() is EntrySignal.ABANDON
        assert engine.amount == Decimal('9')

    def test_reset(self):
        """Test reset clears everything."""
        engine = type_text(AmountEntryEngine(), '9.9')
        engine.request_confirm()
        engine.reset()

        assert engine.state == AmountEntryState()


class TestHandle:
    """Test key event dispatch."""

    def test_enter_and_escape(self):
        """Test Enter confirms and Escape cancels."""
        engine = type_text(AmountEntryEngine(), '3')

        assert engine.handle(KeyEvent(KeyKind.ENTER)) is EntrySignal.AWAITING_CONFIRMATION
        assert engine.handle(KeyEvent(KeyKind.ESCAPE)) is EntrySignal.CONFIRM_CLEARED
        assert engine.handle(KeyEvent(KeyKind.ESCAPE)) is EntrySignal.ABANDON

    def test_backspace_event(self):
        """Test the backspace key."""
        engine = type_text(AmountEntryEngine(), '34')

        assert engine.handle(KeyEvent(KeyKind.BACKSPACE)) is EntrySignal.EDITED
        assert engine.amount == Decimal('3')

    def test_validator_passed_through(self):
        """Test Enter uses the given validator."""
        engine = type_text(AmountEntryEngine(), '3')

        signal = engine.handle(KeyEvent(KeyKind.ENTER), lambda amount: False)

        assert signal is EntrySignal.REJECTED

    def test_other_keys_ignored(self):
        """Test letters and navigation keys are ignored."""
        engine = AmountEntryEngine()

        assert engine.handle(KeyEvent.of('x')) is EntrySignal.IGNORED
        assert engine.handle(KeyEvent(KeyKind.UP)) is EntrySignal.IGNORED
        assert engine.state == AmountEntryState()
