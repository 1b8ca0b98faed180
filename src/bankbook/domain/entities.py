"""Domain model entities for bankbook.

These are pure data classes representing ledger concepts, independent of the
ledger file's physical schema. Dates are ISO calendar date strings.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Account:
    """Account or income/expense category."""

    id: int
    name: str
    full_name: str
    account_class: int
    account_type: str
    hidden: bool
    currency: Optional[str]


@dataclass(frozen=True)
class LineItem:
    """One leg of a transaction."""

    id: int
    transaction_id: int
    account_id: int
    account_name: Optional[str]
    amount: Decimal
    memo: Optional[str]
    running_balance: Optional[Decimal]
    cleared: bool = False


@dataclass(frozen=True)
class Transaction:
    """Transaction with its line items."""

    id: int
    date: str
    title: str
    note: Optional[str]
    cleared: bool
    voided: bool
    transaction_type: Optional[str]
    line_items: list[LineItem] = field(default_factory=list)


@dataclass(frozen=True)
class LineItemInput:
    """Line item to create as part of a new transaction."""

    account_id: int
    amount: Decimal
    memo: Optional[str] = None


@dataclass(frozen=True)
class Tag:
    """Tag entity."""

    id: int
    name: str


@dataclass(frozen=True)
class LineItemTemplate:
    """Line item of a transaction template."""

    id: int
    account_id: str
    account_name: Optional[str]
    amount: Decimal
    memo: Optional[str]
    fixed_amount: bool


@dataclass(frozen=True)
class LineItemTemplateInput:
    """Line item template to create; account_id is the account's unique id."""

    account_id: str
    amount: Decimal
    memo: Optional[str] = None


@dataclass(frozen=True)
class TransactionTemplate:
    """Reusable transaction template."""

    id: int
    title: str
    amount: Decimal
    currency_id: Optional[str]
    note: Optional[str]
    active: bool
    fixed_amount: bool
    last_applied_date: Optional[str]
    line_items: list[LineItemTemplate] = field(default_factory=list)


@dataclass(frozen=True)
class ImportRule:
    """Regex rule suggesting a template for imported transactions."""

    id: int
    template_id: int
    template_title: Optional[str]
    pattern: Optional[str]
    account_id: Optional[str]
    payee: Optional[str]


@dataclass(frozen=True)
class ScheduledTransaction:
    """Recurring schedule built on a template."""

    id: int
    template_id: int
    template_title: Optional[str]
    amount: Optional[Decimal]
    start_date: Optional[str]
    next_date: Optional[str]
    repeat_interval: Optional[int]
    repeat_multiplier: Optional[int]
    account_id: Optional[str]
    reminder_days: Optional[int]
    recurring_transaction_id: Optional[int]


@dataclass(frozen=True)
class CategorySpending:
    """Aggregated amount for one income or expense category."""

    category: str
    total: Decimal
    transaction_count: int


@dataclass(frozen=True)
class NetWorth:
    """Assets, liabilities and their sum."""

    assets: Decimal
    liabilities: Decimal
    net_worth: Decimal


@dataclass(frozen=True)
class CreatedTransaction:
    """IDs produced by creating a transaction."""

    transaction_id: int
    line_item_ids: list[int]
