"""Scheduled transaction commands."""

import click

from bankbook.cli.error_handling import handle_domain_error
from bankbook.domain.errors import DomainError


@click.group()
def schedule_group():
    """Manage scheduled transactions."""
    pass


@schedule_group.command("list")
@click.pass_context
def list_schedules(ctx):
    """List schedules by start date."""
    schedules = ctx.obj["ledger"].schedules.list_schedules()
    if not schedules:
        click.echo("No scheduled transactions found.")
        return
    for sched in schedules:
        amount = f"{sched.amount:,.2f}" if sched.amount is not None else "-"
        click.echo(
            f"ID: {sched.id:3d} | {sched.template_title or '':30s} | {amount:>12s}"
            f" | next {sched.next_date} | every {sched.repeat_multiplier} x {sched.repeat_interval}"
        )


@schedule_group.command("delete")
@click.argument("schedule_id", type=int)
@click.pass_context
def delete_schedule(ctx, schedule_id: int):
    """Delete a schedule and its recurring transaction."""
    try:
        deleted = ctx.obj["ledger"].schedules.delete_schedule(schedule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not deleted:
        click.echo(f"Error: Schedule {schedule_id} not found", err=True)
        ctx.exit(1)
    click.echo(f"Deleted schedule {schedule_id}")


def register_commands(cli):
    """Register schedule commands with main CLI."""
    cli.add_command(schedule_group, name="schedule")
