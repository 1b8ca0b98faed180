"""Main CLI entry point."""

import logging

import click

from bankbook.cli.commands import account, rule, schedule, tag, transaction
from bankbook.cli.error_handling import handle_domain_error
from bankbook.database.factories import LEDGER_ENV_VAR
from bankbook.domain.errors import DomainError
from bankbook.ledger import Ledger


@click.group()
@click.option(
    "--file",
    "ledger_file",
    type=click.Path(),
    envvar=LEDGER_ENV_VAR,
    help=f"Path to the ledger file or package directory (overrides {LEDGER_ENV_VAR})",
)
@click.option("--readonly", is_flag=True, help="Open the ledger read-only")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, ledger_file: str | None, readonly: bool, verbose: bool):
    """Bankbook - personal finance ledger.

    Record transactions across accounts and categories while keeping
    running balances consistent.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)

    # Open the ledger only when actually running a command
    if ctx.invoked_subcommand is not None:
        try:
            ledger = Ledger.open(ledger_file, readonly=readonly)
        except DomainError as e:
            handle_domain_error(ctx, e)
        ctx.obj["ledger"] = ledger
        ctx.call_on_close(ledger.close)


account.register_commands(cli)
transaction.register_commands(cli)
tag.register_commands(cli)
rule.register_commands(cli)
schedule.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
