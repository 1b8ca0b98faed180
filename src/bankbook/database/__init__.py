"""Database layer for bankbook application."""

from bankbook.database.store import LedgerStore, UNSET
from bankbook.database.factories import open_ledger_store

__all__ = ["LedgerStore", "UNSET", "open_ledger_store"]
