"""Line item domain service and running balance maintenance."""

import logging
from decimal import Decimal
from typing import Any, Optional

from bankbook.database.mappers import line_item_to_domain
from bankbook.database.models import LineItem, Transaction, line_item_tags
from bankbook.database.store import UNSET, LedgerStore, generate_unique_id, is_set
from bankbook.domain.entities import LineItem as LineItemEntity
from bankbook.domain.errors import ValidationError
from bankbook.utils import date_codec
from bankbook.utils.money import ZERO, to_money

logger = logging.getLogger(__name__)


class LineItemService:
    """Service for line items (transaction splits).

    Every write that changes which line items belong to an account, or their
    amounts, recalculates the running balances of each affected account
    inside the same atomic unit.
    """

    def __init__(self, store: LedgerStore):
        """Initialize line item service.

        Args:
            store: Open ledger store
        """
        self.store = store

    def get_line_item(self, line_item_id: int) -> Optional[LineItemEntity]:
        """Get line item by ID."""
        item = self.store.session.query(LineItem).filter(LineItem.id == line_item_id).first()
        if item is None:
            return None
        return line_item_to_domain(item)

    def list_for_transaction(self, transaction_id: int) -> list[LineItemEntity]:
        """List a transaction's line items in insertion order."""
        items = (
            self.store.session.query(LineItem)
            .filter(LineItem.transaction_id == transaction_id)
            .order_by(LineItem.id)
            .all()
        )
        return [line_item_to_domain(item) for item in items]

    def list_for_account(self, account_id: int) -> list[LineItemEntity]:
        """List an account's line items in ledger order (transaction date, then ID)."""
        return [line_item_to_domain(item) for item in self._ledger_order(account_id)]

    def account_ids_for_transaction(self, transaction_id: int) -> list[int]:
        """Distinct accounts referenced by a transaction's line items."""
        rows = (
            self.store.session.query(LineItem.account_id)
            .filter(LineItem.transaction_id == transaction_id)
            .distinct()
            .order_by(LineItem.account_id)
            .all()
        )
        return [row.account_id for row in rows]

    def insert_line_item(
        self, transaction_id: int, account_id: int, amount: Decimal, memo: Optional[str] = None
    ) -> int:
        """Insert a line item with a provisional running balance of 0.

        Callers are responsible for recalculating the account afterwards.
        """
        item = LineItem(
            account_id=account_id,
            transaction_id=transaction_id,
            creation_time=date_codec.now(),
            amount=to_money(amount),
            exchange_rate=1.0,
            running_balance=ZERO,
            memo=memo,
            unique_id=generate_unique_id(),
            cleared=False,
            opt=0,
        )
        return self.store.insert(item)

    def create_line_item(
        self, transaction_id: int, account_id: int, amount: Decimal, memo: Optional[str] = None
    ) -> int:
        """Add a line item to an existing transaction.

        Returns:
            Line item ID

        Raises:
            IntegrityViolation: If the transaction or account does not exist
        """
        with self.store.atomic():
            line_item_id = self.insert_line_item(transaction_id, account_id, amount, memo)
            self.recalculate_running_balances(account_id)
        return line_item_id

    def update_line_item(
        self, line_item_id: int, account_id: Any = UNSET, amount: Any = UNSET, memo: Any = UNSET
    ) -> bool:
        """Update the provided fields of a line item.

        Moving a line item to another account recalculates both accounts.
        Line item edits leave Z_OPT and the modification date untouched.

        Returns:
            True if the line item changed; False if not found or nothing to update

        Raises:
            ValidationError: If account_id or amount is given as None
        """
        if account_id is None:
            raise ValidationError("Line item account is required")
        if amount is None:
            raise ValidationError("Line item amount is required")
        if is_set(amount):
            amount = to_money(amount)

        with self.store.atomic() as session:
            current = session.query(LineItem.account_id).filter(LineItem.id == line_item_id).first()
            if current is None:
                return False

            changed = self.store.update_fields(
                LineItem,
                line_item_id,
                {"account_id": account_id, "amount": amount, "memo": memo},
                touch_modification_date=False,
                increment_version=False,
            )
            if not changed:
                return False

            if is_set(account_id) or is_set(amount):
                affected = {current.account_id}
                if is_set(account_id):
                    affected.add(account_id)
                for affected_id in sorted(affected):
                    self.recalculate_running_balances(affected_id)
        return True

    def delete_line_item(self, line_item_id: int) -> bool:
        """Delete a line item and its tag associations.

        Returns:
            True if deleted; False if not found
        """
        with self.store.atomic() as session:
            current = session.query(LineItem.account_id).filter(LineItem.id == line_item_id).first()
            if current is None:
                return False

            self.store.delete_rows(line_item_tags, line_item_tags.c.Z_19PLINEITEMS == line_item_id)
            self.store.delete_rows(LineItem, LineItem.id == line_item_id)
            self.recalculate_running_balances(current.account_id)
        return True

    def delete_for_transaction(self, transaction_id: int) -> int:
        """Delete all line items of a transaction, tag associations first.

        Running balances are not recalculated here.

        Returns:
            Number of line items deleted
        """
        with self.store.atomic() as session:
            line_item_ids = session.query(LineItem.id).filter(LineItem.transaction_id == transaction_id)
            self.store.delete_rows(line_item_tags, line_item_tags.c.Z_19PLINEITEMS.in_(line_item_ids.scalar_subquery()))
            return self.store.delete_rows(LineItem, LineItem.transaction_id == transaction_id)

    def recalculate_running_balances(self, account_id: int) -> int:
        """Rewrite the running balance of every line item in an account.

        Line items are walked in ledger order (transaction date, then line item
        ID) and each receives the cumulative sum of amounts up to and including
        itself. This is a full rescan of the account's history.

        Returns:
            Number of line items rewritten
        """
        with self.store.atomic():
            items = self._ledger_order(account_id)
            running_balance = ZERO
            for item in items:
                running_balance += to_money(item.amount)
                item.running_balance = running_balance

        logger.debug("Recalculated %d running balances for account %s", len(items), account_id)
        return len(items)

    def _ledger_order(self, account_id: int) -> list[LineItem]:
        return (
            self.store.session.query(LineItem)
            .join(Transaction, LineItem.transaction_id == Transaction.id)
            .filter(LineItem.account_id == account_id)
            .order_by(Transaction.date.asc(), LineItem.id.asc())
            .all()
        )
