"""Split transaction commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.formatting import format_amount
from ledgerkit.domain.entities import SplitItem, SplitPatch
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.splits import SplitService
from ledgerkit.utils.amount_parser import parse_amount


def parse_split_arg(arg: str) -> SplitItem:
    """Parse a ``CATEGORY:AMOUNT[:DESCRIPTION]`` argument.

    An empty category (``:12.50``) leaves the part uncategorized.

    Raises:
        ValueError: If the argument is malformed
    """
    parts = arg.split(":", 2)
    if len(parts) < 2:
        raise ValueError(f"Invalid split '{arg}': expected CATEGORY:AMOUNT[:DESCRIPTION]")

    category_str, amount_str = parts[0].strip(), parts[1]
    category_id = None
    if category_str:
        try:
            category_id = int(category_str)
        except ValueError:
            raise ValueError(f"Invalid category ID '{category_str}' in split '{arg}'")

    description = parts[2] if len(parts) == 3 and parts[2] else None
    return SplitItem(category_id=category_id, amount=parse_amount(amount_str), description=description)


@click.group()
def split_group():
    """Split transactions across categories."""
    pass


@split_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show(ctx, transaction_id: int):
    """Show the splits of a transaction."""
    service = SplitService(ctx.obj["store"])

    try:
        splits = service.get_splits(ctx.obj["user_id"], transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not splits:
        click.echo(f"Transaction {transaction_id} is not split.")
        return

    click.echo(f"\nSplits for transaction {transaction_id}:")
    click.echo(f"{'ID':>6}  {'Category':<10} {'Amount':>12}  Description")
    for s in splits:
        category = str(s.category_id) if s.category_id is not None else "-"
        click.echo(f"{s.id:>6}  {category:<10} {format_amount(s.amount):>12}  {s.description or ''}")


@split_group.command("set")
@click.argument("transaction_id", type=int)
@click.argument("splits", nargs=-1, required=True)
@click.pass_context
def set_splits(ctx, transaction_id: int, splits: tuple[str, ...]):
    """Split a transaction, replacing any existing splits.

    Each SPLITS argument has the form CATEGORY:AMOUNT[:DESCRIPTION].
    """
    service = SplitService(ctx.obj["store"])

    try:
        items = [parse_split_arg(arg) for arg in splits]
        created = service.split(ctx.obj["user_id"], transaction_id, items)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Split transaction {transaction_id} into {len(created)} parts")


@split_group.command("clear")
@click.argument("transaction_id", type=int)
@click.option("--category", "category_id", type=int, help="Category to assign after removing splits")
@click.pass_context
def clear(ctx, transaction_id: int, category_id: int | None):
    """Remove all splits from a transaction."""
    service = SplitService(ctx.obj["store"])

    try:
        service.unsplit(ctx.obj["user_id"], transaction_id, category_id=category_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Removed splits from transaction {transaction_id}")


@split_group.command("update")
@click.argument("split_id", type=int)
@click.option("--amount", help="New amount for the split")
@click.option("--category", "category_id", type=int, help="New category ID")
@click.option("--clear-category", is_flag=True, help="Leave the split uncategorized")
@click.option("--description", help="New description (empty string clears it)")
@click.pass_context
def update(
    ctx,
    split_id: int,
    amount: str | None,
    category_id: int | None,
    clear_category: bool,
    description: str | None,
):
    """Update a single split."""
    service = SplitService(ctx.obj["store"])

    if category_id is not None and clear_category:
        click.echo("Error: --category and --clear-category cannot be combined.", err=True)
        ctx.exit(1)

    try:
        patch = SplitPatch(
            category_id=category_id,
            amount=parse_amount(amount) if amount is not None else None,
            description=description or None,
            clear_category=clear_category,
            update_description=description is not None,
        )
        updated = service.update_split(ctx.obj["user_id"], split_id, patch)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated split {split_id} ({format_amount(updated.amount)})")


def register_commands(cli):
    """Register split commands with main CLI."""
    cli.add_command(split_group, name="split")
