"""Tag commands."""

import click

from bankbook.cli.error_handling import handle_domain_error
from bankbook.domain.errors import DomainError


@click.group()
def tag_group():
    """Manage tags on transactions."""
    pass


@tag_group.command("create")
@click.argument("name")
@click.pass_context
def create_tag(ctx, name: str):
    """Create a tag (returns the existing tag if the name is already used)."""
    try:
        tag_id = ctx.obj["ledger"].tags.create_tag(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Tag '{name}' (ID: {tag_id})")


@tag_group.command("list")
@click.pass_context
def list_tags(ctx):
    """List tags."""
    tags = ctx.obj["ledger"].tags.list_tags()
    if not tags:
        click.echo("No tags found.")
        return
    for tag in tags:
        click.echo(f"ID: {tag.id:3d} | {tag.name}")


@tag_group.command("add")
@click.argument("transaction_id", type=int)
@click.argument("name")
@click.pass_context
def tag_transaction(ctx, transaction_id: int, name: str):
    """Tag every line item of a transaction, creating the tag if needed."""
    ledger = ctx.obj["ledger"]
    if ledger.transactions.get_transaction(transaction_id) is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    try:
        tag_id = ledger.tags.create_tag(name)
        count = ledger.tags.tag_transaction(transaction_id, tag_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Tagged {count} line item(s) with '{name}'")


@tag_group.command("remove")
@click.argument("transaction_id", type=int)
@click.argument("name")
@click.pass_context
def untag_transaction(ctx, transaction_id: int, name: str):
    """Remove a tag from every line item of a transaction."""
    ledger = ctx.obj["ledger"]
    tag = ledger.tags.get_by_name(name)
    if tag is None:
        click.echo(f"Error: Tag '{name}' not found", err=True)
        ctx.exit(1)

    try:
        count = ledger.tags.untag_transaction(transaction_id, tag.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Removed '{tag.name}' from {count} line item(s)")


def register_commands(cli):
    """Register tag commands with main CLI."""
    cli.add_command(tag_group, name="tag")
