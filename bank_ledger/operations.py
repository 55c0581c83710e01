"""
Account operations for the bank ledger.

This module contains the business rules for deposits, withdrawals,
transfers and account closing, plus the validators the amount entry
screens use to decide whether an amount may be confirmed.
"""

import logging
from decimal import Decimal
from typing import Optional, Tuple

from .amount_entry import Validator
from .config import LedgerConfig
from .credentials import CredentialGate
from .errors import AuthorizationFailed, IndexOutOfRange, ValidationRejected
from .models import Account, normalize_number, to_money
from .store import AccountStore


class AccountOperations:
    """Performs confirmed mutations on an AccountStore."""

    def __init__(self, store: AccountStore, gate: Optional[CredentialGate] = None,
                 config: Optional[LedgerConfig] = None):
        """Initialize operations with a store and a credential gate."""
        self.store = store
        self.config = config or LedgerConfig()
        self.gate = gate or CredentialGate(
            self.config.master_password, self.config.password_length
        )
        self.logger = logging.getLogger(__name__)

    def _fits_display(self, balance: Decimal) -> bool:
        return abs(balance) < self.config.balance_limit

    def deposit_validator(self, index: int) -> Validator:
        """Validator accepting deposits whose resulting balance can be shown."""
        account = self.store[index]

        def validate(amount: Decimal) -> bool:
            return amount >= 0 and self._fits_display(account.balance + amount)

        return validate

    def withdraw_validator(self, index: int) -> Validator:
        """Validator rejecting withdrawals larger than the balance."""
        account = self.store[index]

        def validate(amount: Decimal) -> bool:
            return amount >= 0 and account.can_withdraw(amount)

        return validate

    def transfer_validator(self, from_index: int, to_index: int) -> Validator:
        """Validator for moving money from one account to another."""
        source = self.store[from_index]
        destination = self.store[to_index]

        def validate(amount: Decimal) -> bool:
            if from_index == to_index or amount < 0:
                return False
            return source.can_withdraw(amount) and self._fits_display(destination.balance + amount)

        return validate

    def _check_amount(self, amount) -> Decimal:
        amount = to_money(amount)
        if amount < 0:
            raise ValidationRejected("Amount cannot be negative")
        return amount

    def deposit(self, index: int, amount: Decimal) -> Decimal:
        """Deposit money to an account and return the new balance."""
        amount = self._check_amount(amount)
        if not self.deposit_validator(index)(amount):
            raise ValidationRejected("Resulting balance is too large to display")

        new_balance = self.store.mutate_balance_at(index, amount)
        self.logger.info(f"Deposited {amount} to {self.store[index].account_number}, balance {new_balance}")
        return new_balance

    def withdraw(self, index: int, amount: Decimal) -> Decimal:
        """Withdraw money from an account and return the new balance."""
        amount = self._check_amount(amount)
        if not self.withdraw_validator(index)(amount):
            raise ValidationRejected(f"Insufficient funds. Available: {self.store[index].balance}")

        new_balance = self.store.mutate_balance_at(index, -amount)
        self.logger.info(f"Withdrew {amount} from {self.store[index].account_number}, balance {new_balance}")
        return new_balance

    def transfer(self, from_index: int, to_index: int, amount: Decimal) -> Tuple[Decimal, Decimal]:
        """Transfer money between accounts and return both new balances."""
        amount = self._check_amount(amount)
        if from_index == to_index:
            raise ValidationRejected("Cannot transfer to the same account")
        if not self.transfer_validator(from_index, to_index)(amount):
            raise ValidationRejected(
                f"Insufficient funds in source account. Available: {self.store[from_index].balance}"
            )

        balances = self.store.apply_transfer(from_index, to_index, amount)
        self.logger.info(
            f"Transferred {amount} from {self.store[from_index].account_number} "
            f"to {self.store[to_index].account_number}"
        )
        return balances

    def close_account(self, index: int, password: str) -> Account:
        """Remove an account after checking its password."""
        account = self.store[index]
        if not self.gate.verify(account, password):
            raise AuthorizationFailed(f"Password incorrect for account {account.account_number}")

        removed = self.store.remove_at(index)
        self.logger.info(f"Closed account {removed.account_number} with balance {removed.balance}")
        return removed

    def open_account(self, account: Account) -> int:
        """Add a new account and return its index."""
        index = self.store.insert(account)
        self.logger.info(f"Opened account {account.account_number}")
        return index

    def find_transfer_target(self, from_index: int, number: str) -> Optional[int]:
        """Find a destination account by exact number, excluding the source."""
        if from_index < 0 or from_index >= len(self.store):
            raise IndexOutOfRange(f"No account at index {from_index}")
        index = self.store.find_by_number(number)
        if index is None or index == from_index:
            return None
        return index

    def next_transfer_target(self, from_index: int, after_number: str = "") -> Optional[int]:
        """Next destination after ``after_number`` in sort order.

        Wraps to the first account other than the source. Returns None when
        the source is the only account.
        """
        source_number = self.store[from_index].account_number
        after_number = normalize_number(after_number)
        first = None
        for index, account in enumerate(self.store):
            if account.account_number == source_number:
                continue
            if first is None:
                first = index
            if account.account_number > after_number:
                return index
        return first
