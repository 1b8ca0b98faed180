"""Account management commands."""

import click

from bankbook.cli.account_resolution import resolve_account_or_exit
from bankbook.cli.error_handling import handle_domain_error
from bankbook.database.constants import AccountClass, is_balance_bearing
from bankbook.domain.errors import DomainError
from bankbook.utils.date_parser import PERIODS, get_date_range, parse_date

ACCOUNT_CLASS_CHOICES = {
    "checking": AccountClass.CHECKING,
    "savings": AccountClass.SAVINGS,
    "credit-card": AccountClass.CREDIT_CARD,
    "income": AccountClass.INCOME,
    "expense": AccountClass.EXPENSE,
}


@click.group()
def account_group():
    """Manage accounts and categories."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--class",
    "account_class",
    type=click.Choice(list(ACCOUNT_CLASS_CHOICES)),
    default="checking",
    show_default=True,
    help="Account class; income and expense create categories",
)
@click.option("--currency", help="Currency code (defaults to the ledger's first currency)")
@click.option("--full-name", help="Hierarchical name, e.g. 'Expenses:Groceries'")
@click.option("--hidden", is_flag=True, help="Hide the account from default listings")
@click.pass_context
def create_account(
    ctx, name: str, account_class: str, currency: str | None, full_name: str | None, hidden: bool
):
    """Create a new account or category.

    Examples:
        bankbook account create "Checking"
        bankbook account create "Visa" --class credit-card
        bankbook account create "Groceries" --class expense --full-name "Expenses:Groceries"
    """
    ledger = ctx.obj["ledger"]
    try:
        account_id = ledger.accounts.create_account(
            name=name,
            account_class=ACCOUNT_CLASS_CHOICES[account_class],
            currency_code=currency,
            hidden=hidden,
            full_name=full_name,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.option("--all", "include_hidden", is_flag=True, help="Include hidden accounts")
@click.pass_context
def list_accounts(ctx, include_hidden: bool):
    """List accounts with their balances."""
    ledger = ctx.obj["ledger"]

    accounts = ledger.accounts.list_accounts(include_hidden=include_hidden)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        line = f"ID: {acc.id:3d} | {acc.full_name:30s} | {acc.account_type:18s}"
        if is_balance_bearing(acc.account_class):
            line += f" | {ledger.accounts.get_balance(acc.id):12,.2f}"
        click.echo(line)


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def account_balance(ctx, account: str):
    """Show the balance of an account.

    ACCOUNT can be an account name, full name or ID.
    """
    ledger = ctx.obj["ledger"]
    account_id = resolve_account_or_exit(ctx, ledger.accounts, account)
    account_obj = ledger.accounts.require_account(account_id)
    balance = ledger.accounts.get_balance(account_id)
    click.echo(f"{account_obj.name}: {balance:,.2f}")


@account_group.command("net-worth")
@click.pass_context
def net_worth(ctx):
    """Show assets, liabilities and net worth."""
    result = ctx.obj["ledger"].accounts.net_worth()
    click.echo(f"Assets:      {result.assets:12,.2f}")
    click.echo(f"Liabilities: {result.liabilities:12,.2f}")
    click.echo(f"Net worth:   {result.net_worth:12,.2f}")


@account_group.command("categories")
@click.argument("kind", type=click.Choice(["expense", "income"]))
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", type=click.Choice(PERIODS), help="Named period; overrides start/end dates")
@click.pass_context
def category_totals(ctx, kind: str, start_date: str | None, end_date: str | None, period: str | None):
    """Show totals per income or expense category, largest first."""
    ledger = ctx.obj["ledger"]
    try:
        if period:
            start, end = get_date_range(period)
        else:
            start = parse_date(start_date) if start_date else None
            end = parse_date(end_date) if end_date else None
        rows = ledger.accounts.category_analysis(kind, start_date=start, end_date=end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo(f"No {kind} found.")
        return

    for row in rows:
        click.echo(f"{row.category:30s} {row.total:12,.2f}  ({row.transaction_count} transactions)")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
