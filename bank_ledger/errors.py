"""
Exceptions for the bank ledger.

All ledger errors derive from ValueError so that callers which guard
operations with ``except ValueError`` keep working.
"""


class LedgerError(ValueError):
    """Base class for ledger errors."""


class ValidationRejected(LedgerError):
    """An amount, credential or field failed a local check."""


class AccountNotFound(LedgerError):
    """No account matches the given account number."""


class DuplicateAccountNumber(LedgerError):
    """An account with the same number already exists."""


class IndexOutOfRange(LedgerError):
    """A record index does not point into the store."""


class AuthorizationFailed(LedgerError):
    """The entered password does not unlock the account."""


class PersistenceUnavailable(LedgerError):
    """The database file could not be read or written."""


class ReportUnavailable(LedgerError):
    """The report file could not be written."""


class SessionInterrupted(Exception):
    """The operator pressed Ctrl-C; the session must end."""
