"""
In-memory account store for the bank ledger.

The store owns every Account and keeps them sorted by account number.
Other components refer to accounts by index for a single operation, or by
account number when they need a handle that survives inserts and removals.
"""

import logging
from decimal import Decimal
from typing import Iterable, Iterator, List, Optional

from .errors import AccountNotFound, DuplicateAccountNumber, IndexOutOfRange
from .models import Account, normalize_number, to_money


class AccountStore:
    """Sorted collection of accounts."""

    def __init__(self, accounts: Optional[Iterable[Account]] = None):
        """Initialize the store, rejecting duplicate account numbers."""
        self.logger = logging.getLogger(__name__)
        self._accounts: List[Account] = []
        for account in accounts or ():
            self._check_unique(account.account_number)
            self._accounts.append(account)
        self._sort()

    def __len__(self) -> int:
        return len(self._accounts)

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts)

    def __getitem__(self, index: int) -> Account:
        self._check_index(index)
        return self._accounts[index]

    def _sort(self):
        self._accounts.sort(key=lambda account: account.account_number)

    def _check_index(self, index: int):
        if not isinstance(index, int) or index < 0 or index >= len(self._accounts):
            raise IndexOutOfRange(f"No account at index {index}")

    def _check_unique(self, number: str):
        if self.find_by_number(number) is not None:
            raise DuplicateAccountNumber(f"Account {number} already exists")

    def accounts(self) -> List[Account]:
        """Get a copy of the sorted account list."""
        return list(self._accounts)

    def numbers(self) -> List[str]:
        """Get all account numbers in sort order."""
        return [account.account_number for account in self._accounts]

    def insert(self, account: Account) -> int:
        """Add an account and return its index after sorting."""
        self._check_unique(account.account_number)
        self._accounts.append(account)
        self._sort()
        self.logger.info(f"Inserted account {account.account_number}")
        return self.index_of(account.account_number)

    def find_by_number(self, number: str) -> Optional[int]:
        """Get the index of an account by exact number match."""
        number = normalize_number(number)
        for index, account in enumerate(self._accounts):
            if account.account_number == number:
                return index
        return None

    def index_of(self, number: str) -> int:
        """Get the index of an account, raising if it does not exist."""
        index = self.find_by_number(number)
        if index is None:
            raise AccountNotFound(f"Account {normalize_number(number)} not found")
        return index

    def get(self, number: str) -> Account:
        """Get an account by number."""
        return self._accounts[self.index_of(number)]

    def remove_at(self, index: int) -> Account:
        """Remove the account at an index and return it."""
        self._check_index(index)
        account = self._accounts.pop(index)
        self.logger.info(f"Removed account {account.account_number}")
        return account

    def mutate_balance_at(self, index: int, delta: Decimal) -> Decimal:
        """Add delta to a balance and return the new balance.

        Non-negativity is the caller's concern.
        """
        self._check_index(index)
        account = self._accounts[index]
        account.balance = to_money(account.balance + to_money(delta))
        return account.balance

    def apply_transfer(self, from_index: int, to_index: int, amount: Decimal):
        """Move amount between two accounts as one unit.

        Both indices are checked and both new balances computed before
        either account is written.
        """
        self._check_index(from_index)
        self._check_index(to_index)
        if from_index == to_index:
            raise IndexOutOfRange("Transfer source and destination are the same record")

        amount = to_money(amount)
        source = self._accounts[from_index]
        destination = self._accounts[to_index]
        source_balance = to_money(source.balance - amount)
        destination_balance = to_money(destination.balance + amount)

        source.balance = source_balance
        destination.balance = destination_balance
        return source_balance, destination_balance

    def total_balance(self) -> Decimal:
        """Sum of all balances."""
        return sum((account.balance for account in self._accounts), Decimal('0.00'))
