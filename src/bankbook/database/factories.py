"""Factory functions for opening ledger files."""

import os
from pathlib import Path
from typing import Optional

from bankbook.database.store import LedgerStore
from bankbook.domain.errors import ValidationError

LEDGER_ENV_VAR = "BANKBOOK_FILE"


def resolve_ledger_path(ledger_path: Optional[str] = None) -> Path:
    """Resolve the SQLite file backing a ledger.

    Args:
        ledger_path: Path to a ledger file or a ``.bank8`` package directory.
            If None, the BANKBOOK_FILE environment variable is used.

    Returns:
        Path to the SQLite store

    Raises:
        ValidationError: If no path was given or configured
    """
    if ledger_path is None:
        ledger_path = os.environ.get(LEDGER_ENV_VAR)

    if not ledger_path:
        raise ValidationError(f"No ledger file given; pass a path or set {LEDGER_ENV_VAR}")

    path = Path(ledger_path).expanduser()
    if path.is_dir():
        # Package directories keep the store under StoreContent/
        return path / "StoreContent" / "core.sql"
    return path


def open_ledger_store(ledger_path: Optional[str] = None, readonly: bool = False) -> LedgerStore:
    """Open a ledger file.

    Args:
        ledger_path: Path to the ledger (see resolve_ledger_path)
        readonly: Open the SQLite file in read-only mode

    Returns:
        LedgerStore bound to the file
    """
    path = resolve_ledger_path(ledger_path)
    if readonly:
        database_url = f"sqlite:///file:{path}?mode=ro&uri=true"
    else:
        database_url = f"sqlite:///{path}"
    return LedgerStore(database_url, readonly=readonly)
