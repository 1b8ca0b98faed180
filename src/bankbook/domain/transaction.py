"""Transaction domain service."""

import logging
from datetime import date
from typing import Any, Iterable, Optional

from sqlalchemy import func, or_

from bankbook.database.mappers import transaction_to_domain
from bankbook.database.models import LineItem, Transaction
from bankbook.database.store import UNSET, LedgerStore, generate_unique_id, is_set
from bankbook.domain.entities import CreatedTransaction, LineItemInput, Transaction as TransactionEntity
from bankbook.domain.errors import NotFoundError, not_found
from bankbook.domain.line_item import LineItemService
from bankbook.utils import date_codec

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for managing transactions and keeping running balances consistent."""

    def __init__(self, store: LedgerStore, line_items: Optional[LineItemService] = None):
        """Initialize transaction service.

        Args:
            store: Open ledger store
            line_items: Line item service to share; one is created if omitted
        """
        self.store = store
        self.line_items = line_items or LineItemService(store)

    def create_transaction(
        self,
        title: str,
        date: str | date,
        line_items: Iterable[LineItemInput],
        note: Optional[str] = None,
        transaction_type: Optional[str] = None,
    ) -> CreatedTransaction:
        """Create a transaction with its line items.

        The transaction row, every line item and the running balance
        recalculation of each touched account are written as one atomic unit.
        Line items are not required to sum to zero.

        Args:
            title: Payee / description
            date: ISO calendar date
            line_items: One entry per leg
            note: Optional note
            transaction_type: Optional transaction type name or short code; unknown names are ignored

        Returns:
            IDs of the new transaction and of its line items, in input order

        Raises:
            ValidationError: If the date is not a valid calendar date
            IntegrityViolation: If a line item references a missing account
        """
        epoch = date_codec.to_epoch(date)
        line_items = list(line_items)

        transaction_type_id = self.store.transaction_type_id(transaction_type) if transaction_type else None

        now = date_codec.now()
        with self.store.atomic():
            transaction = Transaction(
                transaction_type_id=transaction_type_id,
                currency_id=self.store.default_currency_id(),
                creation_time=now,
                date=epoch,
                modification_date=now,
                title=title,
                note=note,
                unique_id=generate_unique_id(),
                cleared=False,
                void=False,
                opt=0,
            )
            transaction_id = self.store.insert(transaction)

            line_item_ids = [
                self.line_items.insert_line_item(transaction_id, item.account_id, item.amount, item.memo)
                for item in line_items
            ]
            for account_id in sorted({item.account_id for item in line_items}):
                self.line_items.recalculate_running_balances(account_id)

        logger.debug("Created transaction %s with %d line items", transaction_id, len(line_item_ids))
        return CreatedTransaction(transaction_id=transaction_id, line_item_ids=line_item_ids)

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID with its line items.

        Returns:
            Transaction entity or None if not found
        """
        transaction = self.store.session.query(Transaction).filter(Transaction.id == transaction_id).first()
        if transaction is None:
            return None
        return transaction_to_domain(transaction)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID, raising NotFoundError if missing."""
        transaction = self.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(not_found("Transaction", transaction_id))
        return transaction

    def list_transactions(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[str | date] = None,
        end_date: Optional[str | date] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions, newest first.

        Args:
            account_id: Only transactions with a line item in this account
            start_date: Optional inclusive lower bound
            end_date: Optional inclusive upper bound
            limit: Maximum number of transactions
            offset: Number of transactions to skip
        """
        query = self.store.session.query(Transaction)
        if account_id is not None:
            in_account = self.store.session.query(LineItem.transaction_id).filter(LineItem.account_id == account_id)
            query = query.filter(Transaction.id.in_(in_account.scalar_subquery()))
        if start_date is not None:
            query = query.filter(Transaction.date >= date_codec.to_epoch(start_date))
        if end_date is not None:
            query = query.filter(Transaction.date <= date_codec.to_epoch(end_date))

        query = query.order_by(Transaction.date.desc(), Transaction.id.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [transaction_to_domain(txn) for txn in query.all()]

    def search_transactions(self, text: str, limit: int = 50) -> list[TransactionEntity]:
        """Find transactions whose title or note contains the text (case-insensitive)."""
        pattern = f"%{text}%"
        transactions = (
            self.store.session.query(Transaction)
            .filter(or_(Transaction.title.ilike(pattern), Transaction.note.ilike(pattern)))
            .order_by(Transaction.date.desc(), Transaction.id.desc())
            .limit(limit)
            .all()
        )
        return [transaction_to_domain(txn) for txn in transactions]

    def count_transactions(self) -> int:
        return self.store.session.query(func.count(Transaction.id)).scalar()

    def update_transaction(
        self,
        transaction_id: int,
        title: Any = UNSET,
        date: Any = UNSET,
        note: Any = UNSET,
        cleared: Any = UNSET,
    ) -> bool:
        """Update the provided transaction fields.

        Changing the date moves the transaction within the ledger order of
        every account it touches, so all of them are recalculated.

        Returns:
            True if the transaction changed; False if not found or nothing to update

        Raises:
            ValidationError: If a new date is not a valid calendar date
        """
        epoch = date_codec.to_epoch(date) if is_set(date) else UNSET

        with self.store.atomic():
            changed = self.store.update_fields(
                Transaction,
                transaction_id,
                {"title": title, "date": epoch, "note": note, "cleared": cleared},
            )
            if changed and is_set(epoch):
                for account_id in self.line_items.account_ids_for_transaction(transaction_id):
                    self.line_items.recalculate_running_balances(account_id)
        return changed > 0

    def delete_transaction(self, transaction_id: int) -> bool:
        """Delete a transaction, its line items and their tag associations.

        Accounts are captured before deletion and recalculated afterwards,
        all inside the same atomic unit.

        Returns:
            True if deleted; False if not found
        """
        with self.store.atomic():
            account_ids = self.line_items.account_ids_for_transaction(transaction_id)
            self.line_items.delete_for_transaction(transaction_id)
            deleted = self.store.delete_rows(Transaction, Transaction.id == transaction_id)
            for account_id in account_ids:
                self.line_items.recalculate_running_balances(account_id)

        if deleted:
            logger.debug("Deleted transaction %s", transaction_id)
        return deleted > 0

    def reconcile(self, transaction_ids: Iterable[int], cleared: bool = True) -> int:
        """Set the cleared flag on several transactions at once.

        Returns:
            Number of transactions changed
        """
        changed = 0
        with self.store.atomic():
            for transaction_id in transaction_ids:
                changed += self.store.update_fields(Transaction, transaction_id, {"cleared": cleared})
        return changed
