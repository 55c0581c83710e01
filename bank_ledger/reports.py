"""
Printable account report.
"""

import logging
from typing import Iterable

from .errors import ReportUnavailable
from .models import Account

logger = logging.getLogger(__name__)

REPORT_HEADER = (
    "-------  ----            -----           --  ---------  ------------  -------\n"
    "Account  Last            First           MI  SS         Phone         Account\n"
    "Number   Name            Name                Number     Number        Balance\n"
    "-------  ----            -----           --  ---------  ------------  -------\n"
)


def format_report_line(account: Account) -> str:
    """One fixed-width report row."""
    return (
        f" {account.account_number}   "
        f"{account.last_name:<14}  "
        f"{account.first_name:<14}  "
        f"{account.middle_initial}.  "
        f"{account.ssn:09d}  "
        f"{account.phone}  "
        f"{account.balance:.2f}\n"
    )


def write_report(accounts: Iterable[Account], path: str) -> int:
    """Write the report file and return the number of accounts listed."""
    if not path:
        raise ReportUnavailable("Blank file name not supported")

    count = 0
    try:
        with open(path, "w", encoding="utf-8") as handle:
            handle.write(REPORT_HEADER)
            for account in accounts:
                handle.write(format_report_line(account))
                count += 1
    except OSError as e:
        logger.error(f"Error writing report {path}: {e}")
        raise ReportUnavailable(f"\"{path}\" could not be opened")

    logger.info(f"Wrote report of {count} accounts to {path}")
    return count
