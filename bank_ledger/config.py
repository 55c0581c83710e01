"""
Configuration for the bank ledger.

Presentation limits, entry limits and credential settings live here so the
screens and the core components read them from one place.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class LedgerConfig:
    """Runtime settings for a ledger session."""

    # Rows taken by headings and the help footer on the main list
    fixed_ui_rows: int = 6
    max_rows: int = 40
    min_rows: int = 11
    min_width: int = 74

    max_whole_digits: int = 12
    password_length: int = 6
    account_number_length: int = 5

    # Secondary credential accepted for every account; disabled when None
    master_password: Optional[str] = None

    default_db_path: str = "db"
    default_report_path: str = "BankAcct.Rpt"

    def __post_init__(self):
        """Validate settings after creation."""
        if self.fixed_ui_rows < 0:
            raise ValueError("fixed_ui_rows cannot be negative")
        if self.max_rows < 1:
            raise ValueError("max_rows must be at least 1")
        if self.max_whole_digits < 1:
            raise ValueError("max_whole_digits must be at least 1")
        if self.master_password is not None and len(self.master_password) != self.password_length:
            raise ValueError(
                f"Master password must be exactly {self.password_length} characters"
            )

    @property
    def balance_limit(self):
        """Smallest balance that no longer fits the display."""
        return 10 ** self.max_whole_digits
