"""Transfer matching commands."""

import click

from ledgerkit.cli.formatting import format_transaction
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.config import DEFAULT_DATE_WINDOW_DAYS, DEFAULT_MATCH_BATCH_SIZE
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.transfers import TransferService


@click.group()
def transfer_group():
    """Detect and link transfers between accounts."""
    pass


@transfer_group.command("candidates")
@click.argument("transaction_id", type=int)
@click.option(
    "--window",
    type=click.IntRange(min=0),
    default=DEFAULT_DATE_WINDOW_DAYS,
    show_default=True,
    help="Days either side of the transaction date",
)
@click.pass_context
def candidates(ctx, transaction_id: int, window: int):
    """List possible transfer partners for a transaction."""
    service = TransferService(ctx.obj["store"])

    try:
        matches = service.find_candidates(ctx.obj["user_id"], transaction_id, date_window_days=window)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not matches:
        click.echo(f"No transfer candidates found for transaction {transaction_id}.")
        return

    click.echo(f"\nCandidates for transaction {transaction_id}:")
    for txn in matches:
        click.echo(format_transaction(txn))


@transfer_group.command("link")
@click.argument("transaction_id", type=int)
@click.argument("target_id", type=int)
@click.pass_context
def link(ctx, transaction_id: int, target_id: int):
    """Link two transactions as a transfer pair."""
    service = TransferService(ctx.obj["store"])

    try:
        service.link(ctx.obj["user_id"], transaction_id, target_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Linked transactions {transaction_id} and {target_id}")


@transfer_group.command("unlink")
@click.argument("transaction_id", type=int)
@click.pass_context
def unlink(ctx, transaction_id: int):
    """Remove the transfer link of a transaction."""
    service = TransferService(ctx.obj["store"])

    try:
        partner_id = service.unlink(ctx.obj["user_id"], transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if partner_id is None:
        click.echo(f"Transaction {transaction_id} is not linked.")
    else:
        click.echo(f"Unlinked transactions {transaction_id} and {partner_id}")


@transfer_group.command("match")
@click.option(
    "--window",
    type=click.IntRange(min=0),
    default=DEFAULT_DATE_WINDOW_DAYS,
    show_default=True,
    help="Days either side of each transaction date",
)
@click.option(
    "--batch-size",
    type=click.IntRange(min=1),
    default=DEFAULT_MATCH_BATCH_SIZE,
    show_default=True,
    help="Transactions fetched per page",
)
@click.pass_context
def match(ctx, window: int, batch_size: int):
    """Link every unambiguous transfer pair in the ledger."""
    service = TransferService(ctx.obj["store"])

    try:
        result = service.bulk_match(
            ctx.obj["user_id"], date_window_days=window, batch_size=batch_size
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Auto-matched: {result.auto_matched_count}")
    for pair in result.auto_matched:
        click.echo(f"  {pair.transaction.id} <-> {pair.linked_to.id}")

    click.echo(f"Needs review: {result.needs_review_count}")
    for group in result.needs_review:
        candidate_ids = ", ".join(str(c.id) for c in group.candidates)
        click.echo(f"  {group.transaction.id}: candidates {candidate_ids}")


def register_commands(cli):
    """Register transfer commands with main CLI."""
    cli.add_command(transfer_group, name="transfer")
