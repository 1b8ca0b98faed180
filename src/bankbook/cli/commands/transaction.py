"""Transaction management commands."""

import click

from bankbook.cli.account_resolution import resolve_account_or_exit
from bankbook.cli.error_handling import handle_domain_error
from bankbook.database.store import UNSET
from bankbook.domain.entities import LineItemInput
from bankbook.domain.errors import DomainError
from bankbook.utils.amount_parser import parse_amount
from bankbook.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


def _print_transaction(txn) -> None:
    status = " [cleared]" if txn.cleared else ""
    click.echo(f"\nTransaction ID: {txn.id}{status}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Title: {txn.title}")
    if txn.note:
        click.echo(f"  Note: {txn.note}")
    if txn.transaction_type:
        click.echo(f"  Type: {txn.transaction_type}")
    for item in txn.line_items:
        memo = f"  ({item.memo})" if item.memo else ""
        click.echo(
            f"  {item.account_name or item.account_id:24} {item.amount:12,.2f}"
            f"  balance {item.running_balance or 0:12,.2f}{memo}"
        )


@transaction_group.command("add")
@click.option("--title", required=True, help="Payee or description")
@click.option("--date", "txn_date", default="today", show_default=True, help="Date (YYYY-MM-DD or relative)")
@click.option(
    "--split",
    "splits",
    multiple=True,
    required=True,
    help="Line item as ACCOUNT=AMOUNT; repeat for each leg",
)
@click.option("--note", help="Note")
@click.option("--type", "transaction_type", help="Transaction type name or short code")
@click.pass_context
def add_transaction(
    ctx, title: str, txn_date: str, splits: tuple[str, ...], note: str | None, transaction_type: str | None
):
    """Add a transaction with one or more line items.

    Examples:
        bankbook transaction add --title "Supermarket" --date 2024-01-15 \\
            --split Checking=-50 --split Groceries=50
    """
    ledger = ctx.obj["ledger"]

    line_items = []
    for split in splits:
        account, sep, amount = split.rpartition("=")
        if not sep or not account:
            click.echo(f"Error: Invalid split '{split}'; expected ACCOUNT=AMOUNT", err=True)
            ctx.exit(1)
        account_id = resolve_account_or_exit(ctx, ledger.accounts, account)
        try:
            line_items.append(LineItemInput(account_id=account_id, amount=parse_amount(amount)))
        except DomainError as e:
            handle_domain_error(ctx, e)

    try:
        created = ledger.transactions.create_transaction(
            title=title,
            date=parse_date(txn_date),
            line_items=line_items,
            note=note,
            transaction_type=transaction_type,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {created.transaction_id} with {len(created.line_item_ids)} line item(s)")


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show a transaction and its line items."""
    try:
        txn = ctx.obj["ledger"].transactions.require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _print_transaction(txn)


@transaction_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--search", help="Only transactions whose title or note contains this text")
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum number of transactions")
@click.pass_context
def list_transactions(
    ctx, account: str | None, start_date: str | None, end_date: str | None, search: str | None, limit: int
):
    """List transactions, newest first."""
    ledger = ctx.obj["ledger"]

    if search:
        transactions = ledger.transactions.search_transactions(search, limit=limit)
    else:
        account_id = resolve_account_or_exit(ctx, ledger.accounts, account) if account else None
        try:
            transactions = ledger.transactions.list_transactions(
                account_id=account_id,
                start_date=parse_date(start_date) if start_date else None,
                end_date=parse_date(end_date) if end_date else None,
                limit=limit,
            )
        except DomainError as e:
            handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    for txn in transactions:
        total = sum(item.amount for item in txn.line_items if item.amount > 0)
        click.echo(f"ID: {txn.id:5d} | {txn.date} | {txn.title:30s} | {total:12,.2f}")


@transaction_group.command("edit")
@click.argument("transaction_id", type=int)
@click.option("--title", help="New title")
@click.option("--date", "txn_date", help="New date (YYYY-MM-DD or relative)")
@click.option("--note", help="New note")
@click.option("--cleared/--uncleared", default=None, help="Set or clear the cleared flag")
@click.pass_context
def edit_transaction(
    ctx, transaction_id: int, title: str | None, txn_date: str | None, note: str | None, cleared: bool | None
):
    """Update the given fields of a transaction.

    Changing the date recalculates running balances of every account involved.
    """
    ledger = ctx.obj["ledger"]
    try:
        changed = ledger.transactions.update_transaction(
            transaction_id,
            title=title if title is not None else UNSET,
            date=parse_date(txn_date) if txn_date is not None else UNSET,
            note=note if note is not None else UNSET,
            cleared=cleared if cleared is not None else UNSET,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not changed:
        click.echo(f"Error: Transaction {transaction_id} not found or nothing to update", err=True)
        ctx.exit(1)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction with its line items and tag associations."""
    ledger = ctx.obj["ledger"]
    txn = ledger.transactions.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Delete transaction {transaction_id} '{txn.title}' ({txn.date})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        ledger.transactions.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("recalc")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def recalculate(ctx, account: str):
    """Recalculate the running balances of an account."""
    ledger = ctx.obj["ledger"]
    account_id = resolve_account_or_exit(ctx, ledger.accounts, account)
    try:
        count = ledger.line_items.recalculate_running_balances(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recalculated {count} line item(s)")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
