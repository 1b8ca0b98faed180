"""CLI error rendering."""

import logging

import click

from bankbook.domain.errors import DomainError, IntegrityViolation, NotFoundError

logger = logging.getLogger(__name__)

_PREFIXES = {
    NotFoundError: "Not found",
    IntegrityViolation: "Integrity error",
}


def error_prefix(error: Exception) -> str:
    for error_type, prefix in _PREFIXES.items():
        if isinstance(error, error_type):
            return prefix
    return "Error"


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print a ledger error to stderr and exit with status 1.

    The traceback is only logged at debug level (``--verbose``).
    """
    logger.debug("Command %s failed", ctx.command_path, exc_info=error)
    click.echo(f"{error_prefix(error)}: {error}", err=True)
    ctx.exit(1)
