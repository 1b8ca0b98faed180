"""Tests for AccountService."""

from decimal import Decimal

import pytest

from bankbook.database.constants import AccountClass, EntityType
from bankbook.database.models import Account
from bankbook.domain.errors import NotFoundError, ValidationError


def _row(store, account_id):
    return store.session.query(Account).filter(Account.id == account_id).one()


class TestCreateAccount:
    def test_primary_account_discriminator(self, store, account_service):
        account_id = account_service.create_account("Checking", AccountClass.CHECKING)
        row = _row(store, account_id)
        assert row.entity == EntityType.PRIMARY_ACCOUNT
        assert row.debit is True
        assert row.unique_id == row.unique_id.upper()

    def test_category_discriminator(self, store, account_service):
        for account_class in (AccountClass.INCOME, AccountClass.EXPENSE):
            account_id = account_service.create_account(f"Cat {account_class}", account_class)
            assert _row(store, account_id).entity == EntityType.CATEGORY

    def test_credit_card_is_credit_natured(self, store, account_service):
        account_id = account_service.create_account("Visa", AccountClass.CREDIT_CARD)
        assert _row(store, account_id).debit is False

    def test_default_currency(self, account_service):
        account_id = account_service.create_account("Checking", AccountClass.CHECKING)
        assert account_service.get_account(account_id).currency == "EUR"

    def test_unknown_currency_falls_back_to_default(self, account_service):
        account_id = account_service.create_account("Checking", AccountClass.CHECKING, currency_code="XXX")
        assert account_service.get_account(account_id).currency == "EUR"

    def test_full_name_defaults_to_name(self, account_service):
        account_id = account_service.create_account("Checking", AccountClass.CHECKING)
        assert account_service.get_account(account_id).full_name == "Checking"

    def test_unknown_class_display(self, account_service):
        account_id = account_service.create_account("Odd", 4242)
        account = account_service.get_account(account_id)
        assert account.account_type == "Unknown (4242)"


class TestQueries:
    def test_get_missing_account(self, account_service):
        assert account_service.get_account(9999) is None

    def test_require_missing_account(self, account_service):
        with pytest.raises(NotFoundError):
            account_service.require_account(9999)

    def test_list_ordered_by_class_then_name(self, account_service, accounts):
        names = [acc.name for acc in account_service.list_accounts()]
        assert names == ["Savings", "Checking", "Visa", "Salary", "Dining", "Groceries"]

    def test_hidden_accounts(self, account_service, accounts):
        account_service.create_account("Old", AccountClass.CHECKING, hidden=True)

        assert "Old" not in [acc.name for acc in account_service.list_accounts()]
        assert "Old" in [acc.name for acc in account_service.list_accounts(include_hidden=True)]

    def test_find_by_name_is_case_insensitive(self, account_service, accounts):
        assert account_service.find_by_name("checking").id == accounts["checking"]
        assert account_service.find_by_name("expenses:groceries").id == accounts["groceries"]
        assert account_service.find_by_name("Nothing") is None


class TestUpdateAccount:
    def test_partial_update(self, account_service, accounts):
        assert account_service.update_account(accounts["checking"], name="Main Checking") is True

        account = account_service.get_account(accounts["checking"])
        assert account.name == "Main Checking"
        assert account.hidden is False

    def test_hide_account(self, account_service, accounts):
        account_service.update_account(accounts["savings"], hidden=True)
        assert account_service.get_account(accounts["savings"]).hidden is True

    def test_nothing_to_update(self, account_service, accounts):
        assert account_service.update_account(accounts["checking"]) is False

    def test_missing_account(self, account_service):
        assert account_service.update_account(9999, name="Ghost") is False


class TestBalances:
    def test_empty_account_has_zero_balance(self, account_service, accounts):
        assert account_service.get_balance(accounts["checking"]) == 0.0

    def test_balance_sums_line_items(self, account_service, accounts, make_transaction):
        make_transaction("Pay", "2024-01-01", (accounts["checking"], 1000.0), (accounts["salary"], -1000.0))
        make_transaction("Shop", "2024-01-05", (accounts["checking"], -45.5), (accounts["groceries"], 45.5))

        assert account_service.get_balance(accounts["checking"]) == Decimal("954.50")
        assert account_service.get_balance(accounts["groceries"]) == Decimal("45.50")

    def test_net_worth(self, account_service, accounts, make_transaction):
        make_transaction("Pay", "2024-01-01", (accounts["checking"], 1000.0), (accounts["salary"], -1000.0))
        make_transaction("Save", "2024-01-02", (accounts["checking"], -200.0), (accounts["savings"], 200.0))
        make_transaction("Dinner", "2024-01-03", (accounts["visa"], -80.0), (accounts["dining"], 80.0))

        result = account_service.net_worth()

        assert result.assets == Decimal("1000.00")
        assert result.liabilities == Decimal("-80.00")
        assert result.net_worth == Decimal("920.00")


class TestCategoryAnalysis:
    @pytest.fixture
    def spending(self, accounts, make_transaction):
        make_transaction("Market", "2024-01-05", (accounts["checking"], -30.0), (accounts["groceries"], 30.0))
        make_transaction("Market", "2024-01-20", (accounts["checking"], -25.0), (accounts["groceries"], 25.0))
        make_transaction("Bistro", "2024-01-10", (accounts["visa"], -70.0), (accounts["dining"], 70.0))
        make_transaction("Bistro", "2024-02-02", (accounts["visa"], -40.0), (accounts["dining"], 40.0))
        make_transaction("Pay", "2024-01-31", (accounts["checking"], 2000.0), (accounts["salary"], -2000.0))

    def test_totals_ordered_descending(self, account_service, spending):
        rows = account_service.category_analysis("expense")

        assert [(row.category, row.total, row.transaction_count) for row in rows] == [
            ("Dining", 110.0, 2),
            ("Groceries", 55.0, 2),
        ]

    def test_date_range(self, account_service, spending):
        rows = account_service.category_analysis("expense", start_date="2024-01-01", end_date="2024-01-31")

        assert [(row.category, row.total) for row in rows] == [("Dining", 70.0), ("Groceries", 55.0)]

    def test_income(self, account_service, spending):
        rows = account_service.category_analysis("income")
        assert [(row.category, row.total) for row in rows] == [("Salary", -2000.0)]

    def test_unknown_kind(self, account_service):
        with pytest.raises(ValidationError):
            account_service.category_analysis("transfers")
