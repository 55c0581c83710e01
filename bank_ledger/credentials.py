"""
Password verification for mutating account operations.
"""

import logging
from enum import Enum
from typing import Optional

from .models import Account, PASSWORD_LENGTH


class AccessResult(Enum):
    """State of a password prompt."""
    PENDING = "pending"
    GRANTED = "granted"
    DENIED = "denied"


class CredentialGate:
    """Checks entered passwords against an account."""

    def __init__(self, master_password: Optional[str] = None,
                 password_length: int = PASSWORD_LENGTH):
        self.master_password = master_password
        self.password_length = password_length
        self.logger = logging.getLogger(__name__)

    def verify(self, account: Account, entered: str) -> bool:
        """Check a password for an account.

        The master password, when configured, unlocks every account.
        """
        if entered == account.password:
            return True
        if self.master_password is not None and entered == self.master_password:
            self.logger.warning(f"Master password used to unlock account {account.account_number}")
            return True
        self.logger.info(f"Password rejected for account {account.account_number}")
        return False


class PasswordEntry:
    """Typing buffer that verifies once it holds a full-length password."""

    def __init__(self, gate: CredentialGate, account: Account):
        self.gate = gate
        self.account = account
        self.buffer = ""
        self.result = AccessResult.PENDING

    @property
    def masked(self) -> str:
        return "*" * len(self.buffer)

    def type_char(self, char: str) -> AccessResult:
        """Add a character; verify when the buffer is full."""
        if self.result is not AccessResult.PENDING:
            return self.result
        if len(char) != 1 or not char.isalnum() or len(self.buffer) >= self.gate.password_length:
            return self.result

        self.buffer += char
        if len(self.buffer) == self.gate.password_length:
            if self.gate.verify(self.account, self.buffer):
                self.result = AccessResult.GRANTED
            else:
                self.result = AccessResult.DENIED
        return self.result

    def backspace(self):
        if self.result is AccessResult.PENDING:
            self.buffer = self.buffer[:-1]
