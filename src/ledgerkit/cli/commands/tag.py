"""Transaction tagging commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.tags import TransactionTagService


@click.group()
def tag_group():
    """Tag transactions."""
    pass


@tag_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show(ctx, transaction_id: int):
    """Show the tags of a transaction."""
    service = TransactionTagService(ctx.obj["store"])

    try:
        tags = service.get_tags(ctx.obj["user_id"], transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not tags:
        click.echo(f"Transaction {transaction_id} has no tags.")
        return

    for t in tags:
        click.echo(f"{t.id:>6}  {t.name}")


@tag_group.command("set")
@click.argument("transaction_id", type=int)
@click.argument("tag_ids", nargs=-1, type=int)
@click.pass_context
def set_tags(ctx, transaction_id: int, tag_ids: tuple[int, ...]):
    """Replace the tags of a transaction (no TAG_IDS clears them)."""
    service = TransactionTagService(ctx.obj["store"])

    try:
        tags = service.set_tags(ctx.obj["user_id"], transaction_id, list(tag_ids))
    except DomainError as e:
        handle_domain_error(ctx, e)

    if tags:
        click.echo(f"Tagged transaction {transaction_id}: {', '.join(t.name for t in tags)}")
    else:
        click.echo(f"Cleared tags of transaction {transaction_id}")


def register_commands(cli):
    """Register tag commands with main CLI."""
    cli.add_command(tag_group, name="tag")
