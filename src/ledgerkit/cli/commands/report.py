"""Spending report commands."""

from datetime import datetime

import click

from ledgerkit.cli.date_filters import date_range_options, resolve_cli_date_range
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.formatting import format_amount
from ledgerkit.config import (
    DEFAULT_COMBINATION_LIMIT,
    DEFAULT_MIN_COMBINATION_SIZE,
    DEFAULT_VENDOR_LIMIT,
)
from ledgerkit.domain.entities import TagFilter, TransactionType
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.spending import SpendingService

type_option = click.option(
    "--type",
    "txn_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    default=TransactionType.DEBIT.value,
    show_default=True,
    help="Transaction type to report on",
)
account_option = click.option("--account", "account_id", type=int, help="Limit to one account ID")
category_option = click.option("--category", "category_id", type=int, help="Limit to one category ID")
tag_options = [
    click.option("--tag", "tag_ids", type=int, multiple=True, help="Only transactions with this tag ID (repeatable)"),
    click.option("--exclude-untagged", is_flag=True, help="With --tag, drop transactions that have no tags"),
]
split_parents_option = click.option(
    "--include-split-parents", is_flag=True, help="Count split transactions at their full amount"
)


def with_tag_options(func):
    for option in reversed(tag_options):
        func = option(func)
    return func


def _tag_filter(tag_ids: tuple[int, ...], exclude_untagged: bool) -> TagFilter | None:
    if not tag_ids:
        return None
    return TagFilter(tag_ids=tuple(tag_ids), include_untagged=not exclude_untagged)


def _header(title: str, date_range) -> None:
    click.echo(f"\n{title} ({date_range.start.isoformat()} to {date_range.end.isoformat()}):")
    click.echo("-" * 80)


@click.group()
def report_group():
    """Spending reports."""
    pass


@report_group.command("categories")
@date_range_options
@type_option
@account_option
@with_tag_options
@click.pass_context
def categories(ctx, start_date, end_date, period_flags, txn_type, account_id, tag_ids, exclude_untagged):
    """Spending per category, with split transactions attributed per split."""
    store = ctx.obj["store"]
    user_id = ctx.obj["user_id"]
    service = SpendingService(store)
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    try:
        totals = service.spending_by_category(
            user_id,
            date_range,
            type=TransactionType(txn_type.lower()),
            tag_filter=_tag_filter(tag_ids, exclude_untagged),
            account_id=account_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not totals:
        click.echo("No transactions found.")
        return

    names = {c.id: c.name for c in store.list_categories(user_id)}
    _header("Spending by Category", date_range)
    for row in totals:
        name = names.get(row.category_id, "Uncategorized")
        click.echo(f"{name:<50} {row.count:>6} {format_amount(row.total):>20}")


@report_group.command("vendors")
@date_range_options
@type_option
@account_option
@click.option("--limit", type=click.IntRange(min=1), default=DEFAULT_VENDOR_LIMIT, show_default=True)
@split_parents_option
@click.pass_context
def vendors(ctx, start_date, end_date, period_flags, txn_type, account_id, limit, include_split_parents):
    """Top vendors by amount."""
    service = SpendingService(ctx.obj["store"])
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    try:
        totals = service.spending_by_vendor(
            ctx.obj["user_id"],
            date_range,
            type=TransactionType(txn_type.lower()),
            account_id=account_id,
            limit=limit,
            include_split_parents=include_split_parents,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not totals:
        click.echo("No transactions found.")
        return

    _header("Spending by Vendor", date_range)
    for row in totals:
        click.echo(f"{row.key:<50} {row.count:>6} {format_amount(row.total):>20}")


@report_group.command("months")
@date_range_options
@type_option
@account_option
@with_tag_options
@split_parents_option
@click.pass_context
def months(
    ctx, start_date, end_date, period_flags, txn_type, account_id, tag_ids, exclude_untagged, include_split_parents
):
    """Spending per month."""
    service = SpendingService(ctx.obj["store"])
    date_range = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags,
        default_period="this-year",
    )

    try:
        totals = service.spending_by_month(
            ctx.obj["user_id"],
            date_range,
            type=TransactionType(txn_type.lower()),
            account_id=account_id,
            tag_filter=_tag_filter(tag_ids, exclude_untagged),
            include_split_parents=include_split_parents,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not totals:
        click.echo("No transactions found.")
        return

    _header("Spending by Month", date_range)
    for row in totals:
        click.echo(f"{row.key:<50} {row.count:>6} {format_amount(row.total):>20}")


@report_group.command("cash-flow")
@date_range_options
@account_option
@with_tag_options
@click.pass_context
def cash_flow(ctx, start_date, end_date, period_flags, account_id, tag_ids, exclude_untagged):
    """Income, expenses, and net per month."""
    service = SpendingService(ctx.obj["store"])
    date_range = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags,
        default_period="this-year",
    )

    try:
        flows = service.cash_flow_by_month(
            ctx.obj["user_id"],
            date_range,
            account_id=account_id,
            tag_filter=_tag_filter(tag_ids, exclude_untagged),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    _header("Cash Flow", date_range)
    click.echo(f"{'Month':<20} {'Income':>18} {'Expenses':>18} {'Net':>18}")
    for row in flows:
        click.echo(
            f"{row.month:<20} {format_amount(row.income):>18} "
            f"{format_amount(row.expenses):>18} {format_amount(row.net):>18}"
        )


@report_group.command("tags")
@click.argument("tag_set_id", type=int)
@date_range_options
@type_option
@account_option
@category_option
@click.pass_context
def tags(ctx, tag_set_id, start_date, end_date, period_flags, txn_type, account_id, category_id):
    """Spending breakdown across the tags of a tag set."""
    service = SpendingService(ctx.obj["store"])
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    try:
        totals = service.spending_by_tag(
            ctx.obj["user_id"],
            tag_set_id,
            date_range,
            type=TransactionType(txn_type.lower()),
            account_id=account_id,
            category_id=category_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not totals:
        click.echo("No tagged transactions found.")
        return

    _header("Spending by Tag", date_range)
    for row in totals:
        click.echo(
            f"{row.name:<40} {row.count:>6} {format_amount(row.total):>20} {row.percentage:>7}%"
        )


@report_group.command("combinations")
@date_range_options
@type_option
@account_option
@category_option
@click.option("--min-size", type=click.IntRange(min=1), default=DEFAULT_MIN_COMBINATION_SIZE, show_default=True)
@click.option("--limit", type=click.IntRange(min=1), default=DEFAULT_COMBINATION_LIMIT, show_default=True)
@click.pass_context
def combinations(ctx, start_date, end_date, period_flags, txn_type, account_id, category_id, min_size, limit):
    """Spending per exact combination of tags."""
    service = SpendingService(ctx.obj["store"])
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    try:
        combos = service.tag_combinations(
            ctx.obj["user_id"],
            date_range,
            account_id=account_id,
            category_id=category_id,
            min_size=min_size,
            limit=limit,
            type=TransactionType(txn_type.lower()),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not combos:
        click.echo("No tag combinations found.")
        return

    _header("Spending by Tag Combination", date_range)
    for combo in combos:
        label = " + ".join(combo.tag_names)
        click.echo(f"{label:<50} {combo.count:>6} {format_amount(combo.total):>20}")


@report_group.command("crosstab")
@click.argument("row_tag_set_id", type=int)
@click.argument("column_tag_set_id", type=int)
@date_range_options
@type_option
@account_option
@category_option
@click.pass_context
def crosstab(
    ctx, row_tag_set_id, column_tag_set_id, start_date, end_date, period_flags, txn_type, account_id, category_id
):
    """Pivot spending across two tag sets."""
    service = SpendingService(ctx.obj["store"])
    date_range = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    try:
        table = service.cross_tabulation(
            ctx.obj["user_id"],
            row_tag_set_id,
            column_tag_set_id,
            date_range,
            account_id=account_id,
            category_id=category_id,
            type=TransactionType(txn_type.lower()),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    def cell(amount) -> str:
        label = format_amount(amount) if amount is not None else "-"
        return f"{label:>16}"

    _header(f"{table.tag_set_1.name} x {table.tag_set_2.name}", date_range)
    click.echo(f"{'':<20}" + "".join(f"{c.name:>16}" for c in table.columns) + f"{'Total':>16}")
    for row in table.rows:
        values = [table.cells.get((row.id, c.id)) for c in table.columns]
        cells = "".join(cell(v.total if v else None) for v in values)
        click.echo(f"{row.name:<20}{cells}{cell(table.row_totals.get(row.id))}")
    totals = "".join(cell(table.column_totals.get(c.id)) for c in table.columns)
    click.echo(f"{'Total':<20}{totals}{cell(table.grand_total)}")


@report_group.command("trend")
@click.argument("tag_ids", type=int, nargs=-1, required=True)
@date_range_options
@type_option
@account_option
@click.pass_context
def trend(ctx, tag_ids, start_date, end_date, period_flags, txn_type, account_id):
    """Monthly spending trend for one or more tags."""
    service = SpendingService(ctx.obj["store"])
    date_range = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags,
        default_period="this-year",
    )

    try:
        trends = service.tag_trend_by_month(
            ctx.obj["user_id"],
            tag_ids,
            date_range,
            account_id=account_id,
            type=TransactionType(txn_type.lower()),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    for series in trends:
        click.echo(f"\n{series.tag.name}:")
        for month in series.months:
            label = datetime.strptime(month.key, "%Y-%m").strftime("%b %Y")
            click.echo(f"  {label:<12} {format_amount(month.total):>16}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
