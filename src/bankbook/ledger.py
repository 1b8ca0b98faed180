"""Ledger facade bundling the domain services over one open store."""

from typing import Optional

from bankbook.database.factories import open_ledger_store
from bankbook.database.store import LedgerStore
from bankbook.domain.account import AccountService
from bankbook.domain.import_rule import ImportRuleService
from bankbook.domain.line_item import LineItemService
from bankbook.domain.schedule import ScheduleService
from bankbook.domain.tag import TagService
from bankbook.domain.template import TemplateService
from bankbook.domain.transaction import TransactionService


class Ledger:
    """One open ledger file and the services operating on it.

    Usable as a context manager; the store is closed on exit.
    """

    def __init__(self, store: LedgerStore):
        self.store = store
        self.accounts = AccountService(store)
        self.line_items = LineItemService(store)
        self.transactions = TransactionService(store, self.line_items)
        self.tags = TagService(store)
        self.templates = TemplateService(store)
        self.import_rules = ImportRuleService(store)
        self.schedules = ScheduleService(store)

    @classmethod
    def open(cls, ledger_path: Optional[str] = None, readonly: bool = False) -> "Ledger":
        """Open a ledger file (see open_ledger_store)."""
        return cls(open_ledger_store(ledger_path, readonly=readonly))

    @property
    def readonly(self) -> bool:
        return self.store.readonly

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> "Ledger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
