"""Transaction template domain service."""

from decimal import Decimal
from typing import Any, Iterable, Optional

from bankbook.database.mappers import line_item_template_to_domain, template_to_domain
from bankbook.database.models import (
    Account,
    LineItemTemplate,
    RecurringTransaction,
    ScheduledTransaction,
    TemplateSelector,
    TransactionTemplate,
)
from bankbook.database.store import UNSET, LedgerStore, generate_unique_id, is_set
from bankbook.domain.entities import (
    LineItemTemplate as LineItemTemplateEntity,
    LineItemTemplateInput,
    TransactionTemplate as TemplateEntity,
)
from bankbook.utils import date_codec
from bankbook.utils.money import to_money


class TemplateService:
    """Service for transaction templates and their line item templates."""

    def __init__(self, store: LedgerStore):
        """Initialize template service.

        Args:
            store: Open ledger store
        """
        self.store = store

    def create_template(
        self,
        title: str,
        amount: Decimal,
        note: Optional[str] = None,
        currency_id: Optional[str] = None,
        line_items: Iterable[LineItemTemplateInput] = (),
    ) -> int:
        """Create a template together with its line item templates.

        Args:
            title: Payee / title applied by the template
            amount: Template amount
            note: Optional note
            currency_id: Optional currency code
            line_items: Line item templates; accounts are referenced by unique id

        Returns:
            Template ID
        """
        now = date_codec.now()
        with self.store.atomic():
            template = TransactionTemplate(
                title=title,
                amount=to_money(amount),
                note=note,
                currency_id=currency_id,
                active=True,
                fixed_amount=True,
                creation_time=now,
                modification_date=now,
                unique_id=generate_unique_id(),
                opt=0,
            )
            template_id = self.store.insert(template)

            for item in line_items:
                self.store.insert(
                    LineItemTemplate(
                        template_id=template_id,
                        account_unique_id=item.account_id,
                        amount=to_money(item.amount),
                        memo=item.memo,
                        fixed_amount=True,
                        creation_time=now,
                        opt=0,
                    )
                )
        return template_id

    def get_template(self, template_id: int) -> Optional[TemplateEntity]:
        """Get template by ID with its line item templates."""
        template = (
            self.store.session.query(TransactionTemplate)
            .filter(TransactionTemplate.id == template_id)
            .first()
        )
        if template is None:
            return None
        return template_to_domain(template, self._line_items(template.id))

    def list_templates(self) -> list[TemplateEntity]:
        """List templates ordered by title."""
        templates = (
            self.store.session.query(TransactionTemplate)
            .order_by(TransactionTemplate.title, TransactionTemplate.id)
            .all()
        )
        return [template_to_domain(t, self._line_items(t.id)) for t in templates]

    def update_template(
        self,
        template_id: int,
        title: Any = UNSET,
        amount: Any = UNSET,
        note: Any = UNSET,
        active: Any = UNSET,
    ) -> bool:
        """Update provided template fields; returns False if not found or nothing to update."""
        if is_set(amount) and amount is not None:
            amount = to_money(amount)
        changed = self.store.update_fields(
            TransactionTemplate,
            template_id,
            {"title": title, "amount": amount, "note": note, "active": active},
        )
        return changed > 0

    def delete_template(self, template_id: int) -> bool:
        """Delete a template and everything that references it.

        Line item templates, import rules and schedules built on the template
        are removed, along with the recurring transaction rows the schedules
        owned.

        Returns:
            True if the template existed
        """
        with self.store.atomic() as session:
            recurring_ids = [
                row.recurring_transaction_id
                for row in session.query(ScheduledTransaction.recurring_transaction_id)
                .filter(ScheduledTransaction.template_id == template_id)
                .all()
                if row.recurring_transaction_id is not None
            ]

            self.store.delete_rows(LineItemTemplate, LineItemTemplate.template_id == template_id)
            self.store.delete_rows(TemplateSelector, TemplateSelector.template_id == template_id)
            if recurring_ids:
                self.store.delete_rows(RecurringTransaction, RecurringTransaction.id.in_(recurring_ids))
            deleted = self.store.delete_rows(TransactionTemplate, TransactionTemplate.id == template_id)
        return deleted > 0

    def _line_items(self, template_id: int) -> list[LineItemTemplateEntity]:
        rows = (
            self.store.session.query(LineItemTemplate, Account.name)
            .outerjoin(Account, LineItemTemplate.account_unique_id == Account.unique_id)
            .filter(LineItemTemplate.template_id == template_id)
            .order_by(LineItemTemplate.id)
            .all()
        )
        return [line_item_template_to_domain(item, account_name) for item, account_name in rows]
