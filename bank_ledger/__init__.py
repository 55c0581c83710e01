"""
Bank Account Ledger

A terminal account ledger: browse accounts, open and close them, deposit,
withdraw and transfer, and keep the collection in a flat text file.
"""

__version__ = "0.1.0"
__author__ = "Developer"
__email__ = "dev@example.com"

from .models import Account
from .config import LedgerConfig
from .store import AccountStore
from .viewport import ViewportNavigator, ViewState
from .amount_entry import AmountEntryEngine, AmountEntryState, EntrySignal
from .credentials import CredentialGate, PasswordEntry, AccessResult
from .operations import AccountOperations
from .database import DatabaseManager
from .cli import main


def create_operations(db_path: str = "db", config: LedgerConfig = None) -> AccountOperations:
    """
    Load a database file and wrap it in AccountOperations.

    Args:
        db_path: Path to the database file
        config: Optional ledger settings

    Returns:
        AccountOperations over the loaded store
    """
    db_manager = DatabaseManager(db_path)
    return AccountOperations(db_manager.load_store(), config=config)


__all__ = [
    "Account",
    "LedgerConfig",
    "AccountStore",
    "ViewportNavigator",
    "ViewState",
    "AmountEntryEngine",
    "AmountEntryState",
    "EntrySignal",
    "CredentialGate",
    "PasswordEntry",
    "AccessResult",
    "AccountOperations",
    "DatabaseManager",
    "create_operations",
    "main",
]
