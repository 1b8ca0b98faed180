"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: integer flags become booleans and
epoch dates become ISO calendar dates.
"""

from decimal import Decimal
from typing import Optional

from bankbook.database.constants import account_type_name
from bankbook.domain import entities as domain
from bankbook.database.models import (
    Account as ORMAccount,
    ImportRule as ORMImportRule,
    LineItem as ORMLineItem,
    LineItemTemplate as ORMLineItemTemplate,
    ScheduledTransaction as ORMScheduledTransaction,
    Tag as ORMTag,
    Transaction as ORMTransaction,
    TransactionTemplate as ORMTransactionTemplate,
)
from bankbook.utils.date_codec import optional_calendar_date, to_calendar_date
from bankbook.utils.money import to_money


def optional_money(value) -> Optional[Decimal]:
    return to_money(value) if value is not None else None


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        full_name=orm_account.full_name or orm_account.name,
        account_class=orm_account.account_class,
        account_type=account_type_name(orm_account.account_class),
        hidden=bool(orm_account.hidden),
        currency=orm_account.currency.code if orm_account.currency else None,
    )


def line_item_to_domain(orm_line_item: ORMLineItem) -> domain.LineItem:
    """Convert SQLAlchemy LineItem model to domain LineItem entity."""
    account = orm_line_item.account
    return domain.LineItem(
        id=orm_line_item.id,
        transaction_id=orm_line_item.transaction_id,
        account_id=orm_line_item.account_id,
        account_name=account.name if account else None,
        amount=to_money(orm_line_item.amount),
        memo=orm_line_item.memo,
        running_balance=optional_money(orm_line_item.running_balance),
        cleared=bool(orm_line_item.cleared),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    txn_type = orm_transaction.transaction_type
    return domain.Transaction(
        id=orm_transaction.id,
        date=to_calendar_date(orm_transaction.date),
        title=orm_transaction.title,
        note=orm_transaction.note,
        cleared=bool(orm_transaction.cleared),
        voided=bool(orm_transaction.void),
        transaction_type=txn_type.name if txn_type else None,
        line_items=[line_item_to_domain(li) for li in orm_transaction.line_items],
    )


def tag_to_domain(orm_tag: ORMTag) -> domain.Tag:
    """Convert SQLAlchemy Tag model to domain Tag entity."""
    return domain.Tag(id=orm_tag.id, name=orm_tag.name)


def line_item_template_to_domain(
    orm_item: ORMLineItemTemplate, account_name: Optional[str]
) -> domain.LineItemTemplate:
    """Convert a line item template; the account name is resolved by the caller."""
    return domain.LineItemTemplate(
        id=orm_item.id,
        account_id=orm_item.account_unique_id,
        account_name=account_name,
        amount=optional_money(orm_item.amount),
        memo=orm_item.memo,
        fixed_amount=bool(orm_item.fixed_amount),
    )


def template_to_domain(
    orm_template: ORMTransactionTemplate, line_items: list[domain.LineItemTemplate]
) -> domain.TransactionTemplate:
    """Convert SQLAlchemy TransactionTemplate model to domain entity."""
    return domain.TransactionTemplate(
        id=orm_template.id,
        title=orm_template.title,
        amount=optional_money(orm_template.amount),
        currency_id=orm_template.currency_id,
        note=orm_template.note,
        active=bool(orm_template.active),
        fixed_amount=bool(orm_template.fixed_amount),
        last_applied_date=optional_calendar_date(orm_template.last_applied_date),
        line_items=line_items,
    )


def import_rule_to_domain(orm_rule: ORMImportRule) -> domain.ImportRule:
    """Convert SQLAlchemy ImportRule selector to domain ImportRule entity."""
    template = orm_rule.template
    return domain.ImportRule(
        id=orm_rule.id,
        template_id=orm_rule.template_id,
        template_title=template.title if template else None,
        pattern=orm_rule.details_expression,
        account_id=orm_rule.account_unique_id,
        payee=orm_rule.payee,
    )


def schedule_to_domain(orm_schedule: ORMScheduledTransaction) -> domain.ScheduledTransaction:
    """Convert SQLAlchemy ScheduledTransaction selector to domain entity."""
    template = orm_schedule.template
    return domain.ScheduledTransaction(
        id=orm_schedule.id,
        template_id=orm_schedule.template_id,
        template_title=template.title if template else None,
        amount=optional_money(template.amount) if template else None,
        start_date=optional_calendar_date(orm_schedule.start_date),
        next_date=optional_calendar_date(orm_schedule.next_date),
        repeat_interval=orm_schedule.repeat_interval,
        repeat_multiplier=orm_schedule.repeat_multiplier,
        account_id=orm_schedule.account_unique_id,
        reminder_days=orm_schedule.remind_days_in_advance,
        recurring_transaction_id=orm_schedule.recurring_transaction_id,
    )
