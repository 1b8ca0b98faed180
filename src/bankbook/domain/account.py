"""Account domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import distinct, func, or_

from bankbook.database.constants import (
    ASSET_CLASSES,
    LIABILITY_CLASSES,
    AccountClass,
    EntityType,
    entity_type_for_class,
    is_debit_class,
)
from bankbook.database.mappers import account_to_domain
from bankbook.database.models import Account, Category, LineItem, PrimaryAccount, Transaction
from bankbook.database.store import UNSET, LedgerStore, generate_unique_id
from bankbook.domain.entities import Account as AccountEntity, CategorySpending, NetWorth
from bankbook.domain.errors import NotFoundError, ValidationError, not_found
from bankbook.utils import date_codec
from bankbook.utils.money import ZERO, to_money

CATEGORY_KINDS = {
    "income": AccountClass.INCOME,
    "expense": AccountClass.EXPENSE,
}


class AccountService:
    """Service for managing accounts and computing balances."""

    def __init__(self, store: LedgerStore):
        """Initialize account service.

        Args:
            store: Open ledger store
        """
        self.store = store

    def create_account(
        self,
        name: str,
        account_class: int,
        currency_code: Optional[str] = None,
        hidden: bool = False,
        full_name: Optional[str] = None,
    ) -> int:
        """Create a new account or category.

        The entity type and debit/credit nature are derived from the class:
        income and expense classes become categories, and every class except
        credit card is debit-natured.

        Args:
            name: Display name
            account_class: Account class code (e.g. 1006 for checking)
            currency_code: Optional currency code; falls back to the ledger's first currency
            hidden: Whether the account is hidden
            full_name: Hierarchical name (defaults to name)

        Returns:
            Account ID
        """
        currency_id = None
        if currency_code:
            currency_id = self.store.currency_id_by_code(currency_code)
        if currency_id is None:
            currency_id = self.store.default_currency_id()

        now = date_codec.now()
        model = Category if entity_type_for_class(account_class) == EntityType.CATEGORY else PrimaryAccount
        account = model(
            account_class=account_class,
            debit=is_debit_class(account_class),
            hidden=hidden,
            taxable=False,
            currency_id=currency_id,
            creation_time=now,
            modification_date=now,
            name=name,
            full_name=full_name or name,
            unique_id=generate_unique_id(),
            opt=0,
        )
        return self.store.insert(account)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        account = self.store.session.query(Account).filter(Account.id == account_id).first()
        if account is None:
            return None
        return account_to_domain(account)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID, raising NotFoundError if missing."""
        account = self.get_account(account_id)
        if account is None:
            raise NotFoundError(not_found("Account", account_id))
        return account

    def list_accounts(self, include_hidden: bool = False) -> list[AccountEntity]:
        """List accounts ordered by class, then name.

        Args:
            include_hidden: Include accounts flagged as hidden
        """
        query = self.store.session.query(Account)
        if not include_hidden:
            query = query.filter(or_(Account.hidden.is_(False), Account.hidden.is_(None)))
        accounts = query.order_by(Account.account_class, Account.name).all()
        return [account_to_domain(acc) for acc in accounts]

    def find_by_name(self, name: str) -> Optional[AccountEntity]:
        """Find an account by name or full name, case-insensitively."""
        lowered = name.lower()
        for account in self.list_accounts(include_hidden=True):
            if account.name.lower() == lowered or account.full_name.lower() == lowered:
                return account
        return None

    def update_account(
        self, account_id: int, name: Any = UNSET, full_name: Any = UNSET, hidden: Any = UNSET
    ) -> bool:
        """Update account fields that were provided.

        Returns:
            True if a row changed; False if not found or nothing to update
        """
        changed = self.store.update_fields(
            Account,
            account_id,
            {"name": name, "full_name": full_name, "hidden": hidden},
        )
        return changed > 0

    def get_balance(self, account_id: int) -> Decimal:
        """Sum of all line item amounts for an account, recomputed on every call.

        Amounts are added as Decimal cents so the result always equals the
        running balance of the account's last line item.
        """
        amounts = self.store.session.query(LineItem.amount).filter(LineItem.account_id == account_id)
        return sum((to_money(row.amount) for row in amounts), ZERO)

    def category_analysis(
        self,
        kind: str,
        start_date: Optional[str | date] = None,
        end_date: Optional[str | date] = None,
    ) -> list[CategorySpending]:
        """Total line item amounts per income or expense category.

        Args:
            kind: "income" or "expense"
            start_date: Optional inclusive lower bound on transaction date
            end_date: Optional inclusive upper bound on transaction date

        Returns:
            Per-category totals with distinct transaction counts, largest total first

        Raises:
            ValidationError: If kind is not income or expense
        """
        if kind not in CATEGORY_KINDS:
            raise ValidationError(f"Unknown category kind '{kind}'; expected income or expense")

        total = func.sum(LineItem.amount).label("total")
        query = (
            self.store.session.query(
                Account.name,
                total,
                func.count(distinct(Transaction.id)).label("transaction_count"),
            )
            .select_from(LineItem)
            .join(Account, LineItem.account_id == Account.id)
            .join(Transaction, LineItem.transaction_id == Transaction.id)
            .filter(Account.account_class == int(CATEGORY_KINDS[kind]))
        )
        if start_date is not None:
            query = query.filter(Transaction.date >= date_codec.to_epoch(start_date))
        if end_date is not None:
            query = query.filter(Transaction.date <= date_codec.to_epoch(end_date))

        rows = query.group_by(Account.id, Account.name).order_by(total.desc()).all()
        return [
            CategorySpending(category=row.name, total=to_money(row.total), transaction_count=row.transaction_count)
            for row in rows
        ]

    def net_worth(self) -> NetWorth:
        """Assets (checking, savings) plus liabilities (credit cards, naturally negative)."""
        assets = self._sum_for_classes(ASSET_CLASSES)
        liabilities = self._sum_for_classes(LIABILITY_CLASSES)
        return NetWorth(assets=assets, liabilities=liabilities, net_worth=assets + liabilities)

    def _sum_for_classes(self, account_classes: tuple) -> Decimal:
        total = (
            self.store.session.query(func.sum(LineItem.amount))
            .select_from(LineItem)
            .join(Account, LineItem.account_id == Account.id)
            .filter(Account.account_class.in_([int(c) for c in account_classes]))
            .scalar()
        )
        return to_money(total)
