"""Shared pytest fixtures for bankbook tests."""

import os
import tempfile

import pytest

from bankbook.database.constants import AccountClass
from bankbook.database.factories import open_ledger_store
from bankbook.database.models import Currency, TransactionType
from bankbook.domain.entities import LineItemInput
from bankbook.ledger import Ledger


def seed_reference_data(store):
    """Insert the currency and transaction types a ledger file ships with."""
    with store.atomic() as session:
        session.add(Currency(code="EUR", name="Euro", opt=0))
        session.add(TransactionType(name="Withdrawal", short_name="W", opt=0))
        session.add(TransactionType(name="Deposit", short_name="D", opt=0))


@pytest.fixture
def ledger_path():
    """Path of a temporary ledger file, removed after the test."""
    fd, path = tempfile.mkstemp(suffix=".sql")
    os.close(fd)

    yield path

    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def store(ledger_path):
    """Open ledger store with reference data."""
    store = open_ledger_store(ledger_path)
    seed_reference_data(store)

    yield store

    store.close()


@pytest.fixture
def ledger(store):
    """Ledger facade over the temporary store."""
    return Ledger(store)


@pytest.fixture
def account_service(ledger):
    return ledger.accounts


@pytest.fixture
def transaction_service(ledger):
    return ledger.transactions


@pytest.fixture
def line_item_service(ledger):
    return ledger.line_items


@pytest.fixture
def tag_service(ledger):
    return ledger.tags


@pytest.fixture
def template_service(ledger):
    return ledger.templates


@pytest.fixture
def import_rule_service(ledger):
    return ledger.import_rules


@pytest.fixture
def schedule_service(ledger):
    return ledger.schedules


@pytest.fixture
def accounts(account_service):
    """Create a small chart of accounts and return their IDs by key."""
    return {
        "checking": account_service.create_account("Checking", AccountClass.CHECKING),
        "savings": account_service.create_account("Savings", AccountClass.SAVINGS),
        "visa": account_service.create_account("Visa", AccountClass.CREDIT_CARD),
        "groceries": account_service.create_account(
            "Groceries", AccountClass.EXPENSE, full_name="Expenses:Groceries"
        ),
        "dining": account_service.create_account("Dining", AccountClass.EXPENSE, full_name="Expenses:Dining"),
        "salary": account_service.create_account("Salary", AccountClass.INCOME, full_name="Income:Salary"),
    }


@pytest.fixture
def make_transaction(transaction_service):
    """Create a transaction from (account_id, amount) pairs and return its ID."""

    def _make(title, txn_date, *legs, note=None):
        created = transaction_service.create_transaction(
            title=title,
            date=txn_date,
            line_items=[LineItemInput(account_id=account_id, amount=amount) for account_id, amount in legs],
            note=note,
        )
        return created.transaction_id

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
