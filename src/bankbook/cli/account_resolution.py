"""Account lookup for CLI arguments."""

from __future__ import annotations

import click

from bankbook.cli.error_handling import handle_domain_error
from bankbook.domain.account import AccountService
from bankbook.domain.errors import DomainError
from bankbook.utils.account_resolver import resolve_account


def resolve_account_or_exit(ctx: click.Context, accounts: AccountService, reference: str | int) -> int:
    """Turn an account ID, name or full name into an account ID.

    Unknown references end the command through handle_domain_error.
    """
    try:
        return resolve_account(accounts, reference)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
