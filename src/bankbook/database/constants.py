"""Entity-type discriminators and account classes used by the ledger file format.

These values are part of the on-disk format and must match existing ledger
files exactly.
"""

from enum import IntEnum


class EntityType(IntEnum):
    """Values stored in the Z_ENT column of each physical table."""

    ACCOUNT = 1
    CATEGORY = 2
    PRIMARY_ACCOUNT = 3
    LINEITEM = 19
    LINEITEM_TEMPLATE = 21
    PAYEE = 31
    PAYEE_INFO = 33
    RECURRING_TRANSACTION = 35
    TAG = 47
    TEMPLATE_SELECTOR = 48
    IMPORT_SOURCE_TEMPLATE_SELECTOR = 49
    SCHEDULED_TEMPLATE_SELECTOR = 52
    TRANSACTION = 53
    TRANSACTION_TEMPLATE = 54
    TRANSACTION_TYPE = 55


class AccountClass(IntEnum):
    """Account class codes (ZPACCOUNTCLASS)."""

    SAVINGS = 1002
    CHECKING = 1006
    CREDIT_CARD = 5001
    INCOME = 6000
    EXPENSE = 7000


ACCOUNT_CLASS_NAMES = {
    AccountClass.SAVINGS: "Savings/Investment",
    AccountClass.CHECKING: "Checking",
    AccountClass.CREDIT_CARD: "Credit Card",
    AccountClass.INCOME: "Income",
    AccountClass.EXPENSE: "Expense",
}

ASSET_CLASSES = (AccountClass.SAVINGS, AccountClass.CHECKING)
LIABILITY_CLASSES = (AccountClass.CREDIT_CARD,)
CATEGORY_CLASSES = (AccountClass.INCOME, AccountClass.EXPENSE)

# Classes below this code carry a balance; income and expense categories do not.
BALANCE_BEARING_LIMIT = 6000


def account_type_name(account_class: int) -> str:
    """Return the display name for an account class code."""
    try:
        return ACCOUNT_CLASS_NAMES[AccountClass(account_class)]
    except ValueError:
        return f"Unknown ({account_class})"


def is_balance_bearing(account_class: int) -> bool:
    """Return True for asset and liability classes."""
    return account_class < BALANCE_BEARING_LIMIT


def is_debit_class(account_class: int) -> bool:
    """Every class is debit-natured except credit cards."""
    return account_class != AccountClass.CREDIT_CARD


def entity_type_for_class(account_class: int) -> EntityType:
    """Pick the ZACCOUNT discriminator for a new account of the given class."""
    if account_class in CATEGORY_CLASSES:
        return EntityType.CATEGORY
    return EntityType.PRIMARY_ACCOUNT
