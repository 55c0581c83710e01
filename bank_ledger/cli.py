"""
CLI entry point for the bank ledger.

Prompts for the database file, loads it, runs the interactive session and
writes the database back however the session ends.
"""

import logging
import signal
import sys
from typing import Callable, ContextManager, Optional

import click

from .config import LedgerConfig
from .database import DatabaseManager
from .errors import PersistenceUnavailable, SessionInterrupted
from .operations import AccountOperations
from .screens import LedgerApp
from .terminal import Terminal, open_terminal

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
EXIT_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


def _exit_on_signal(signum, frame):
    raise SystemExit(0)


def configure_logging(log_file: Optional[str], log_level: str):
    """Send log records to a file; curses owns the screen otherwise."""
    if log_file:
        logging.basicConfig(filename=log_file, level=getattr(logging, log_level), format=LOG_FORMAT)


def run_session(operations: AccountOperations, db_manager: DatabaseManager,
                terminal_factory: Callable[[], ContextManager[Terminal]] = open_terminal) -> bool:
    """Run the interactive session and save the store on every exit path.

    Returns whether the save succeeded.
    """
    previous = {signum: signal.signal(signum, _exit_on_signal) for signum in EXIT_SIGNALS}
    try:
        with terminal_factory() as terminal:
            LedgerApp(terminal, operations).run()
    except SessionInterrupted:
        logger.info("Session interrupted")
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
        saved = db_manager.save(operations.store)
        if not saved:
            click.echo(f"❌ Error: could not write database {db_manager.db_path}", err=True)
    return saved


@click.command()
@click.option('--db-path', prompt='Database file', default='db', help='Account database file')
@click.option('--master-password', default=None,
              help='Password that unlocks every account (disabled when omitted)')
@click.option('--log-file', default=None, help='Write log records to this file')
@click.option('--log-level', default='INFO',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']), help='Log level')
def cli(db_path, master_password, log_file, log_level):
    """Bank Account Ledger"""
    configure_logging(log_file, log_level)

    try:
        config = LedgerConfig(master_password=master_password, default_db_path=db_path)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--master-password')

    db_manager = DatabaseManager(db_path)
    try:
        store = db_manager.load_store()
    except PersistenceUnavailable as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    if master_password is not None:
        logger.warning("Master password override is enabled")
    run_session(AccountOperations(store, config=config), db_manager)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == '__main__':
    main()
