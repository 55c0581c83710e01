"""
Data models for the bank ledger.

This module contains the account record and the money helpers shared by
the store, the operations and the persistence layer.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

ACCOUNT_NUMBER_LENGTH = 5
PASSWORD_LENGTH = 6
SSN_DIGITS = 9
AREA_CODE_DIGITS = 3
PHONE_DIGITS = 7

CENT = Decimal('0.01')


def to_money(value) -> Decimal:
    """Convert a number or string to a two-place Decimal."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_number(number: str) -> str:
    """Normalize an account number for lookup and storage."""
    return number.strip().upper()


@dataclass
class Account:
    """Represents one ledger entry."""

    account_number: str
    first_name: str
    last_name: str
    middle_initial: str
    ssn: int = 0
    area_code: int = 0
    phone_number: int = 0
    balance: Decimal = Decimal('0.00')
    password: str = ""

    def __post_init__(self):
        """Normalize fields after creation."""
        self.account_number = normalize_number(self.account_number)
        self.balance = to_money(self.balance)
        self.ssn = int(self.ssn)
        self.area_code = int(self.area_code)
        self.phone_number = int(self.phone_number)

    @property
    def full_name(self) -> str:
        """Name as shown on the account page."""
        return f"{self.first_name} {self.middle_initial}. {self.last_name}"

    @property
    def list_name(self) -> str:
        """Name as shown in the account list."""
        return f"{self.last_name}, {self.first_name} {self.middle_initial}."

    @property
    def phone(self) -> str:
        """Formatted phone number."""
        return f"({self.area_code:03d}){self.phone_number:07d}"

    def can_withdraw(self, amount: Decimal) -> bool:
        """Check if withdrawal is possible without going below zero."""
        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))

        return self.balance - amount >= 0
