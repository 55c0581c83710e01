"""
New account form.

Fields are entered one at a time. Each keystroke is checked against the
field's character rules and Enter only moves on when the buffer is
complete. Once the password is accepted the form builds the Account.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from .models import (
    Account, ACCOUNT_NUMBER_LENGTH, AREA_CODE_DIGITS, PASSWORD_LENGTH,
    PHONE_DIGITS, SSN_DIGITS,
)

NAME_MAX_LENGTH = 50
NAME_MIN_LENGTH = 3


@dataclass(frozen=True)
class FormField:
    """One input field of the form."""

    name: str
    label: str
    max_length: int
    accepts: Callable[[str, str], bool]
    complete: Callable[[str], bool]
    uppercase: bool = False
    masked: bool = False


def _letters(char: str, buffer: str) -> bool:
    return char.isalpha()


def _digits(char: str, buffer: str) -> bool:
    return char.isdigit()


def _alnum(char: str, buffer: str) -> bool:
    return char.isascii() and char.isalnum()


def _money(char: str, buffer: str) -> bool:
    if char == ".":
        return "." not in buffer
    if not char.isdigit():
        return False
    if "." in buffer:
        return len(buffer.split(".", 1)[1]) < 2
    return True


def _exactly(length: int) -> Callable[[str], bool]:
    return lambda buffer: len(buffer) == length


FIELDS: List[FormField] = [
    FormField("first_name", "First Name", NAME_MAX_LENGTH, _letters,
              lambda buffer: len(buffer) >= NAME_MIN_LENGTH),
    FormField("last_name", "Last Name", NAME_MAX_LENGTH, _letters,
              lambda buffer: len(buffer) >= NAME_MIN_LENGTH),
    FormField("middle_initial", "Middle Initial", 1, _letters, _exactly(1)),
    FormField("ssn", "Social Security Number", SSN_DIGITS, _digits, _exactly(SSN_DIGITS)),
    FormField("area_code", "Phone Number Area Code", AREA_CODE_DIGITS, _digits,
              _exactly(AREA_CODE_DIGITS)),
    FormField("phone_number", "Phone Number", PHONE_DIGITS, _digits, _exactly(PHONE_DIGITS)),
    FormField("balance", "Balance", 16, _money, lambda buffer: buffer not in ("", ".")),
    FormField("account_number", "Account Number", ACCOUNT_NUMBER_LENGTH, _alnum,
              _exactly(ACCOUNT_NUMBER_LENGTH), uppercase=True),
    FormField("password", "Password", PASSWORD_LENGTH, _alnum,
              _exactly(PASSWORD_LENGTH), uppercase=True, masked=True),
]


class NewAccountForm:
    """Collects and validates the fields of a new account."""

    def __init__(self):
        self.field_index = 0
        self.buffer = ""
        self.values = {}

    @property
    def field(self) -> FormField:
        return FIELDS[self.field_index]

    def type_char(self, char: str) -> bool:
        """Append a character if the current field allows it."""
        field = self.field
        if len(char) != 1 or len(self.buffer) >= field.max_length:
            return False
        if not field.accepts(char, self.buffer):
            return False
        self.buffer += char.upper() if field.uppercase else char
        return True

    def backspace(self):
        self.buffer = self.buffer[:-1]

    def advance(self) -> Optional[Account]:
        """Accept the current field; return the Account after the last one."""
        if not self.field.complete(self.buffer):
            return None

        self.values[self.field.name] = self.buffer
        self.buffer = ""
        if self.field_index < len(FIELDS) - 1:
            self.field_index += 1
            return None
        return self.build()

    def reopen(self, name: str):
        """Go back to a field so it can be typed again."""
        for index, field in enumerate(FIELDS):
            if field.name == name:
                self.field_index = index
                self.buffer = ""
                for later in FIELDS[index:]:
                    self.values.pop(later.name, None)
                return
        raise KeyError(name)

    def build(self) -> Account:
        values = self.values
        return Account(
            account_number=values["account_number"],
            first_name=values["first_name"],
            last_name=values["last_name"],
            middle_initial=values["middle_initial"],
            ssn=int(values["ssn"]),
            area_code=int(values["area_code"]),
            phone_number=int(values["phone_number"]),
            balance=Decimal(values["balance"]),
            password=values["password"],
        )

    def entries(self) -> List[Tuple[str, str]]:
        """Labels and shown text for every field reached so far."""
        rows = []
        for index, field in enumerate(FIELDS[:self.field_index + 1]):
            text = self.buffer if index == self.field_index else self.values[field.name]
            if field.masked:
                text = "*" * len(text)
            rows.append((field.label, text))
        return rows
