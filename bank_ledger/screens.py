"""
Interactive screens for the bank ledger.

LedgerApp drives one session: the scrolling account list, the account
page and the deposit, withdraw, transfer, close, new account, report and
find screens. Screens hold account numbers rather than indices and look
the index up again on every pass, so a record that moved or vanished is
never written through a stale position.
"""

import logging
from typing import Optional

from .account_form import NewAccountForm
from .amount_entry import AmountEntryEngine, EntrySignal
from .config import LedgerConfig
from .credentials import AccessResult, PasswordEntry
from .errors import (
    AccountNotFound, AuthorizationFailed, DuplicateAccountNumber,
    ReportUnavailable, SessionInterrupted,
)
from .keys import KeyEvent, KeyKind
from .models import Account
from .operations import AccountOperations
from .reports import write_report
from .terminal import Terminal
from .viewport import ViewportNavigator

logger = logging.getLogger(__name__)

ACCOUNT_MIN_WIDTH = 46
ACCOUNT_MIN_HEIGHT = 10
TRANSFER_MIN_WIDTH = 80
TRANSFER_MIN_HEIGHT = 10

ACTIONS = ("Deposit", "Withdraw", "Transfer", "Close Account")

NAME_COLUMN = 28
BALANCE_COLUMN = 15


def format_balance(balance, width: int) -> str:
    """Right-justify a balance, marking it with ~ when it had to be cut."""
    text = f"{balance:>{width}.2f}"
    if len(text) > width:
        text = "~" + text[-(width - 1):]
    return text


def _fit(text: str, width: int) -> str:
    if len(text) > width:
        return text[:width - 3] + "..."
    return text


class LedgerApp:
    """One interactive session over an account store."""

    def __init__(self, terminal: Terminal, operations: AccountOperations,
                 config: Optional[LedgerConfig] = None):
        self.terminal = terminal
        self.operations = operations
        self.store = operations.store
        self.config = config or operations.config

    def read(self) -> KeyEvent:
        """Next key event; Ctrl-C ends the session from any screen."""
        event = self.terminal.read_event()
        if event.kind is KeyKind.INTERRUPT:
            raise SessionInterrupted()
        return event

    def _heading(self, y: int, x: int, text: str):
        self.terminal.draw(y, x, "-" * len(text))
        self.terminal.draw(y + 1, x, text)
        self.terminal.draw(y + 2, x, "-" * len(text))

    def _banner(self, x: int, text: str):
        self.terminal.draw(0, x - 9, "-" * 17)
        self.terminal.draw(1, x - len(text) // 2, text)
        self.terminal.draw(2, x - 9, "-" * 17)

    # Main list

    def run(self):
        """Show the account list until the operator presses Escape."""
        navigator = ViewportNavigator.from_config(self.config, len(self.store))
        while True:
            height, width = self.terminal.size()
            navigator.sync(len(self.store))
            navigator.resize(height)

            self.terminal.clear()
            if height >= self.config.min_rows and width >= self.config.min_width:
                self.draw_list(navigator, height, width)
            self.terminal.show_cursor(False)
            self.terminal.refresh()

            event = self.read()
            if event.kind is KeyKind.UP:
                navigator.move_up()
            elif event.kind is KeyKind.DOWN:
                navigator.move_down()
            elif event.kind is KeyKind.ENTER:
                selected = navigator.select_confirmed()
                if selected is not None:
                    self.account_page(self.store[selected].account_number)
            elif event.kind is KeyKind.ESCAPE:
                return
            elif event.kind is KeyKind.NEW_ACCOUNT:
                number = self.open_account()
                if number is not None:
                    navigator.sync(len(self.store))
                    navigator.jump_to(self.store.index_of(number))
            elif event.kind is KeyKind.REPORT:
                self.create_report()
            elif event.kind is KeyKind.FIND:
                index = self.find_account()
                if index is not None:
                    navigator.jump_to(index)

    def draw_list(self, navigator: ViewportNavigator, height: int, width: int):
        spare = max(0, width - self.config.min_width)
        name_width = 17 + min(spare, NAME_COLUMN - 17)
        left = 3 + max(0, spare - (NAME_COLUMN - 17)) // 2

        columns = [
            ("Account", 7),
            ("Name", name_width),
            ("SS Number", 9),
            ("Phone Number", 12),
            ("Balance", BALANCE_COLUMN),
        ]
        anchors = []
        x = left
        for title, column_width in columns:
            anchors.append(x)
            self._heading(0, x, title)
            x += column_width + 2
        right = x - 2

        for row, index in enumerate(navigator.visible_range()):
            account = self.store[index]
            y = 3 + row
            self.terminal.draw(y, anchors[0] + 1, account.account_number)
            self.terminal.draw(y, anchors[1], _fit(account.list_name, name_width))
            self.terminal.draw(y, anchors[2], f"{account.ssn:09d}")
            self.terminal.draw(y, anchors[3], account.phone)
            self.terminal.draw(y, anchors[4], format_balance(account.balance, BALANCE_COLUMN))

        if navigator.selected is not None and navigator.window_size:
            y = 3 + navigator.cursor_index
            self.terminal.draw(y, left - 2, "[-")
            self.terminal.draw(y, right, "-]")

        footer = min(height - 2, 3 + navigator.window_size + 1)
        self.terminal.draw(footer, anchors[1], "Up/Down - Navigate  Enter - Select  Esc - Quit")
        self.terminal.draw(footer + 1, anchors[1], "^f - Find  ^n - New Account  ^r - Create Report")

    # Account page

    def draw_account(self, account: Account, center: int, width: int = 30):
        left = center - width // 2
        right = center + width // 2
        self._banner(center, f"Account {account.account_number}")
        rows = (
            ("Name", account.full_name),
            ("Balance", f"{account.balance:.2f}"),
            ("SSN", f"{account.ssn:09d}"),
            ("Phone", account.phone),
        )
        for offset, (label, value) in enumerate(rows):
            self.terminal.draw(3 + offset, left, label)
            self.terminal.draw(3 + offset, right - len(value), value)

    def account_page(self, number: str):
        """Details of one account and the actions that can be taken on it."""
        cursor = 0
        verified = False
        while True:
            account = self.store.get(number)
            height, width = self.terminal.size()

            self.terminal.clear()
            self.terminal.show_cursor(False)
            if width >= ACCOUNT_MIN_WIDTH and height >= ACCOUNT_MIN_HEIGHT:
                self.draw_account(account, width // 2, max(30, len(account.full_name) + 14))
                menu = "|".join(
                    f"[{action}]" if position == cursor else f" {action} "
                    for position, action in enumerate(ACTIONS)
                )
                self.terminal.draw(8, width // 2 - len(menu) // 2, menu)
                self.terminal.draw(9, width // 2 - 20, "Left/Right - Navigate  Enter - Select  Esc - Back")
            self.terminal.refresh()

            event = self.read()
            if event.kind is KeyKind.ESCAPE:
                return
            if event.kind is KeyKind.LEFT:
                cursor = (cursor - 1) % len(ACTIONS)
            elif event.kind is KeyKind.RIGHT:
                cursor = (cursor + 1) % len(ACTIONS)
            elif event.kind is KeyKind.ENTER:
                if not verified:
                    verified = self.verify(account) is not None
                if not verified:
                    continue
                if cursor == 0:
                    self.deposit(number)
                elif cursor == 1:
                    self.withdraw(number)
                elif cursor == 2:
                    self.transfer(number)
                elif self.close(number):
                    return

    # Amount entry

    def _draw_entry(self, x: int, balance, label: str, amount, sign: str):
        new_balance = balance + amount if sign == "+" else balance - amount
        self.terminal.draw(4, x, f"Current Balance: {balance:15.2f}")
        self.terminal.draw(5, x, f"{label + ':':<17}{amount:15.2f}{sign}", "underline")
        self.terminal.draw(6, x, f"New Balance:     {new_balance:15.2f}",
                           "error" if new_balance < 0 else None)

    def _draw_prompt(self, width: int, engine: AmountEntryEngine, allowed: bool):
        if engine.confirm_pending:
            self.terminal.draw(8, width // 2 - 6, "Are you sure?", "standout")
            return
        style = "standout" if not engine.accepting_digits else None
        if not allowed:
            style = "error"
        self.terminal.draw(8, width // 2 - 14, "Enter - Confirm", style)
        self.terminal.draw(8, width // 2 + 3, "Esc - Cancel")

    def _place_cursor(self, x: int, engine: AmountEntryEngine):
        if engine.accepting_digits:
            self.terminal.move(5, x + 28 - engine.state.decimal_cursor)
            self.terminal.show_cursor(True)
        else:
            self.terminal.show_cursor(False)

    def _single_entry(self, number: str, label: str, sign: str, validator_for, commit) -> bool:
        engine = AmountEntryEngine(self.config.max_whole_digits)
        while True:
            index = self.store.index_of(number)
            account = self.store[index]
            validator = validator_for(index)
            height, width = self.terminal.size()

            self.terminal.clear()
            if width >= ACCOUNT_MIN_WIDTH and height >= ACCOUNT_MIN_HEIGHT:
                x = width // 2 - 17
                self._banner(width // 2, f"Account {account.account_number}")
                self._draw_entry(x, account.balance, label, engine.amount, sign)
                self._draw_prompt(width, engine, validator(engine.amount))
                self._place_cursor(x, engine)
            self.terminal.refresh()

            signal = engine.handle(self.read(), validator)
            if signal is EntrySignal.COMMIT:
                commit(index, engine.amount)
                return True
            if signal is EntrySignal.ABANDON:
                return False

    def deposit(self, number: str) -> bool:
        """Collect and deposit an amount; False when cancelled."""
        return self._single_entry(
            number, "Deposit", "+",
            self.operations.deposit_validator, self.operations.deposit,
        )

    def withdraw(self, number: str) -> bool:
        """Collect and withdraw an amount; False when cancelled."""
        return self._single_entry(
            number, "Withdraw", "-",
            self.operations.withdraw_validator, self.operations.withdraw,
        )

    def transfer(self, number: str) -> bool:
        """Pick a destination, then collect and transfer an amount."""
        target = self.transfer_target(number)
        if target is None:
            return False
        return self.transfer_amount(number, target)

    def transfer_target(self, number: str) -> Optional[str]:
        """Choose the destination account by typing its number or with Tab."""
        typed = ""
        target = None
        error = False
        length = self.config.account_number_length
        while True:
            from_index = self.store.index_of(number)
            if target is None and len(typed) == length:
                found = self.operations.find_transfer_target(from_index, typed)
                if found is None:
                    error = True
                else:
                    target = self.store[found].account_number

            height, width = self.terminal.size()
            self.terminal.clear()
            if width >= TRANSFER_MIN_WIDTH and height >= TRANSFER_MIN_HEIGHT:
                self._draw_transfer_pair(width, self.store[from_index], target, typed, error)
            self.terminal.refresh()

            event = self.read()
            if event.kind is KeyKind.ENTER:
                if target is not None:
                    return target
                error = True
            elif event.kind is KeyKind.ESCAPE:
                return None
            elif event.kind is KeyKind.BACKSPACE:
                if target is not None:
                    typed = target
                    target = None
                typed = typed[:-1]
                error = False
            elif event.kind is KeyKind.TAB:
                found = self.operations.next_transfer_target(from_index, target or typed)
                if found is not None:
                    target = self.store[found].account_number
                    error = False
            elif event.kind is KeyKind.CHAR and event.char.isalnum() and target is None:
                if len(typed) < length:
                    typed += event.char.upper()
                    error = False

    def _draw_transfer_pair(self, width: int, source: Account, target: Optional[str],
                            typed: str, error: bool):
        left_center = width // 2 - 5 - 15
        right_center = width // 2 + 5 + 15
        self.terminal.draw(1, width // 2 - 4, "Transfer")
        self.terminal.draw(4, width // 2 - 1, "->")
        self.draw_account(source, left_center)

        if target is not None:
            self.draw_account(self.store.get(target), right_center)
            self.terminal.draw(8, width // 2 - 14, "Enter - Confirm", "standout")
            self.terminal.show_cursor(False)
        else:
            self.terminal.draw(0, right_center - 9, "-" * 17)
            label = f"Account {typed}"
            self.terminal.draw(1, right_center - 7, label, "error" if error else None)
            self.terminal.draw(2, right_center - 9, "-" * 17)
            for offset, name in enumerate(("Name", "Balance", "SSN", "Phone")):
                self.terminal.draw(3 + offset, right_center - 15, name)
            self.terminal.draw(8, width // 2 - 14, "Enter - Confirm")
            self.terminal.move(1, right_center - 7 + len(label))
            self.terminal.show_cursor(True)
        self.terminal.draw(8, width // 2 + 3, "Esc - Cancel")

    def transfer_amount(self, number: str, target: str) -> bool:
        """Collect the amount to move from one account to another."""
        engine = AmountEntryEngine(self.config.max_whole_digits)
        while True:
            from_index = self.store.index_of(number)
            to_index = self.store.index_of(target)
            source = self.store[from_index]
            destination = self.store[to_index]
            validator = self.operations.transfer_validator(from_index, to_index)
            height, width = self.terminal.size()

            self.terminal.clear()
            if width >= TRANSFER_MIN_WIDTH and height >= TRANSFER_MIN_HEIGHT:
                left = width // 2 - 38
                right = width // 2 + 5
                self.terminal.draw(1, width // 2 - 4, "Transfer")
                self.terminal.draw(4, width // 2 - 1, "->")
                self._banner(left + 17, f"Account {source.account_number}")
                self._banner(right + 17, f"Account {destination.account_number}")
                self._draw_entry(left, source.balance, "Withdraw", engine.amount, "-")
                self._draw_entry(right, destination.balance, "Deposit", engine.amount, "+")
                self._draw_prompt(width, engine, validator(engine.amount))
                self._place_cursor(left, engine)
            self.terminal.refresh()

            signal = engine.handle(self.read(), validator)
            if signal is EntrySignal.COMMIT:
                self.operations.transfer(from_index, to_index, engine.amount)
                return True
            if signal is EntrySignal.ABANDON:
                return False

    # Credentials and closing

    def verify(self, account: Account) -> Optional[str]:
        """Ask for the account password; return it when it was accepted."""
        entry = PasswordEntry(self.operations.gate, account)
        height, width = self.terminal.size()
        while True:
            self.terminal.clear()
            self.terminal.draw(height // 2 - 3, width // 2 - 9, "-" * 17)
            self.terminal.draw(height // 2 - 2, width // 2 - 7, f"Account {account.account_number}")
            self.terminal.draw(height // 2 - 1, width // 2 - 9, "-" * 17)
            self.terminal.draw(height // 2 + 1, width // 2 - 11, f"Password: {entry.masked}")
            self.terminal.show_cursor(True)
            self.terminal.refresh()

            event = self.read()
            if event.kind is KeyKind.ESCAPE:
                return None
            if event.kind is KeyKind.BACKSPACE:
                entry.backspace()
            elif event.kind is KeyKind.CHAR:
                result = entry.type_char(event.char)
                if result is AccessResult.GRANTED:
                    return entry.buffer
                if result is AccessResult.DENIED:
                    self.terminal.draw(height // 2 + 2, width // 2 - 10, "Password incorrect!", "error")
                    self.terminal.draw(height // 2 + 3, width // 2 - 14, "Press Any Key to Continue...")
                    self.terminal.show_cursor(False)
                    self.terminal.refresh()
                    self.read()
                    return None

    def close(self, number: str) -> bool:
        """Confirm, re-verify and close an account; True when it was removed."""
        while True:
            account = self.store.get(number)
            height, width = self.terminal.size()
            self.terminal.clear()
            self.terminal.draw(height // 2 - 2, width // 2 - 11, f"Closing Account {account.account_number}")
            self.terminal.draw(height // 2, width // 2 - 7, "Are you sure?", "standout")
            self.terminal.draw(height // 2 + 1, width // 2 - 6, "Enter / ESC")
            self.terminal.show_cursor(False)
            self.terminal.refresh()

            event = self.read()
            if event.kind is KeyKind.ESCAPE:
                return False
            if event.kind is KeyKind.ENTER:
                password = self.verify(account)
                if password is None:
                    return False
                try:
                    self.operations.close_account(self.store.index_of(number), password)
                except AuthorizationFailed as e:
                    logger.warning(str(e))
                    return False
                return True

    # New account, report and find

    def open_account(self) -> Optional[str]:
        """Fill in the new account form; return the new account number."""
        form = NewAccountForm()
        error = ""
        while True:
            height, width = self.terminal.size()
            left = width // 2 - 20
            self.terminal.clear()
            self._banner(width // 2, "New Account")
            for offset, (label, text) in enumerate(form.entries()):
                self.terminal.draw(4 + offset, left, f"{label}: {text}")
            if error:
                self.terminal.draw(5 + len(form.entries()), left, error, "error")
            self.terminal.show_cursor(True)
            self.terminal.refresh()

            event = self.read()
            if event.kind is KeyKind.ESCAPE:
                return None
            if event.kind is KeyKind.BACKSPACE:
                form.backspace()
            elif event.kind is KeyKind.CHAR:
                form.type_char(event.char)
            elif event.kind is KeyKind.ENTER:
                account = form.advance()
                if account is None:
                    continue
                try:
                    self.operations.open_account(account)
                except DuplicateAccountNumber:
                    logger.info(f"Rejected duplicate account number {account.account_number}")
                    error = f"Account {account.account_number} already exists"
                    form.reopen("account_number")
                    continue
                return account.account_number

    def create_report(self) -> Optional[str]:
        """Prompt for a file name and write the account report to it."""
        file_name = self.config.default_report_path
        error = ""
        while True:
            height, width = self.terminal.size()
            self.terminal.clear()
            self._heading(height // 2 - 4, width // 2 - 8, "  Create Report  ")
            self.terminal.draw(height // 2, width // 2 - 12, f"Filename: {file_name}")
            if error:
                self.terminal.draw(height // 2 + 1, width // 2 - 15, f"Error: {error}", "error")
            self.terminal.show_cursor(True)
            self.terminal.refresh()

            event = self.read()
            error = ""
            if event.kind is KeyKind.ESCAPE:
                return None
            if event.kind is KeyKind.BACKSPACE:
                file_name = file_name[:-1]
            elif event.kind is KeyKind.CHAR:
                file_name += event.char
            elif event.kind is KeyKind.ENTER:
                try:
                    write_report(self.store, file_name)
                except ReportUnavailable as e:
                    error = str(e)
                    continue
                self.terminal.draw(height // 2 + 1, width // 2 - 11,
                                   f"Report file \"{file_name}\" written", "standout")
                self.terminal.show_cursor(False)
                self.terminal.refresh()
                self.read()
                return file_name

    def find_account(self) -> Optional[int]:
        """Prompt for an account number and return its index."""
        typed = ""
        error = False
        length = self.config.account_number_length
        while True:
            height, width = self.terminal.size()
            self.terminal.clear()
            self._heading(height // 2 - 4, width // 2 - 8, "  Find Account  ")
            self.terminal.draw(height // 2, width // 2 - 12, f"Account Number: {typed}",
                               "error" if error else None)
            if error:
                self.terminal.draw(height // 2 + 1, width // 2 - 12, f"Account {typed} not found", "error")
            self.terminal.show_cursor(True)
            self.terminal.refresh()

            event = self.read()
            if event.kind is KeyKind.ESCAPE:
                return None
            if event.kind is KeyKind.BACKSPACE:
                typed = typed[:-1]
                error = False
            elif event.kind is KeyKind.CHAR and event.char.isalnum() and len(typed) < length:
                typed += event.char.upper()
                error = False
            elif event.kind is KeyKind.ENTER:
                try:
                    return self.store.index_of(typed)
                except AccountNotFound:
                    error = True
