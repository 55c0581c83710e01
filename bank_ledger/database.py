"""
Database manager for the bank ledger.

This module reads and writes the flat account file. Each record is nine
whitespace-separated fields in a fixed order; records are written one
field per line with a blank line after each record.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Iterable, List

from .errors import DuplicateAccountNumber, PersistenceUnavailable
from .models import Account
from .store import AccountStore

FIELD_ORDER = (
    "last_name",
    "first_name",
    "middle_initial",
    "ssn",
    "area_code",
    "phone_number",
    "balance",
    "account_number",
    "password",
)
FIELDS_PER_RECORD = len(FIELD_ORDER)


class DatabaseManager:
    """Manages the account file for the ledger."""

    def __init__(self, db_path: str = "db"):
        """Initialize database manager."""
        self.db_path = db_path
        self.logger = logging.getLogger(__name__)

    def _parse_record(self, tokens: List[str], record_number: int) -> Account:
        fields = dict(zip(FIELD_ORDER, tokens))
        if len(fields["middle_initial"]) != 1:
            raise PersistenceUnavailable(
                f"Record {record_number} in {self.db_path}: middle initial must be one character"
            )
        try:
            return Account(
                account_number=fields["account_number"],
                first_name=fields["first_name"],
                last_name=fields["last_name"],
                middle_initial=fields["middle_initial"],
                ssn=int(fields["ssn"]),
                area_code=int(fields["area_code"]),
                phone_number=int(fields["phone_number"]),
                balance=Decimal(fields["balance"]),
                password=fields["password"],
            )
        except (ValueError, InvalidOperation) as e:
            raise PersistenceUnavailable(f"Record {record_number} in {self.db_path} is malformed: {e}")

    def load(self) -> List[Account]:
        """Read every account from the file."""
        try:
            with open(self.db_path, encoding="utf-8") as handle:
                tokens = handle.read().split()
        except OSError as e:
            self.logger.error(f"Error opening database {self.db_path}: {e}")
            raise PersistenceUnavailable(f"Could not open database {self.db_path}: {e}")

        accounts = []
        complete = len(tokens) - len(tokens) % FIELDS_PER_RECORD
        for start in range(0, complete, FIELDS_PER_RECORD):
            record = tokens[start:start + FIELDS_PER_RECORD]
            accounts.append(self._parse_record(record, start // FIELDS_PER_RECORD + 1))

        if complete != len(tokens):
            self.logger.warning(
                f"Discarded partial record of {len(tokens) - complete} fields at end of {self.db_path}"
            )
        self.logger.info(f"Loaded {len(accounts)} accounts from {self.db_path}")
        return accounts

    def load_store(self) -> AccountStore:
        """Read the file into a sorted AccountStore."""
        try:
            return AccountStore(self.load())
        except DuplicateAccountNumber as e:
            raise PersistenceUnavailable(f"Database {self.db_path} is inconsistent: {e}")

    @staticmethod
    def format_record(account: Account) -> str:
        """Serialize one account, including the trailing blank line."""
        values = (
            account.last_name,
            account.first_name,
            account.middle_initial,
            account.ssn,
            account.area_code,
            account.phone_number,
            f"{account.balance:.2f}",
            account.account_number,
            account.password,
        )
        return "".join(f"{value}\n" for value in values) + "\n"

    def save(self, accounts: Iterable[Account]) -> bool:
        """Write every account to the file."""
        accounts = list(accounts)
        try:
            with open(self.db_path, "w", encoding="utf-8") as handle:
                for account in accounts:
                    handle.write(self.format_record(account))
        except OSError as e:
            self.logger.error(f"Error writing database {self.db_path}: {e}")
            return False

        self.logger.info(f"Saved {len(accounts)} accounts to {self.db_path}")
        return True
