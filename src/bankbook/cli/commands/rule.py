"""Import rule commands."""

import click


@click.group()
def rule_group():
    """Inspect import rules."""
    pass


@rule_group.command("list")
@click.pass_context
def list_rules(ctx):
    """List import rules by template title."""
    rules = ctx.obj["ledger"].import_rules.list_rules()
    if not rules:
        click.echo("No import rules found.")
        return
    for rule in rules:
        click.echo(f"ID: {rule.id:3d} | {rule.template_title or '':30s} | {rule.pattern}")


@rule_group.command("match")
@click.argument("description")
@click.pass_context
def match_rules(ctx, description: str):
    """Show the import rules whose pattern matches DESCRIPTION.

    Examples:
        bankbook rule match "CARD PAYMENT WALMART 1234"
    """
    matches = ctx.obj["ledger"].import_rules.match(description)
    if not matches:
        click.echo("No matching rules.")
        return
    for rule in matches:
        click.echo(f"Rule {rule.id}: {rule.template_title} (pattern: {rule.pattern})")


def register_commands(cli):
    """Register import rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
