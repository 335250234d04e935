"""Budget alert commands."""

import click

from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.formatting import format_amount
from ledgerkit.domain.budget_alerts import BudgetAlertService
from ledgerkit.domain.errors import DomainError


def _print_statuses(statuses) -> None:
    click.echo(f"{'Category':<30} {'Period':<18} {'Spent':>14} {'Budget':>14} {'Left':>14} {'%':>7}  Status")
    click.echo("-" * 110)
    for s in statuses:
        click.echo(
            f"{s.category_name:<30} {s.window.label:<18} {format_amount(s.spent):>14} "
            f"{format_amount(s.budget_amount):>14} {format_amount(s.remaining):>14} "
            f"{s.percentage:>7}  {s.severity.value}"
        )


@click.group()
def budget_group():
    """Check category budgets."""
    pass


@budget_group.command("alerts")
@click.pass_context
def alerts(ctx):
    """Show categories near or over budget."""
    service = BudgetAlertService(ctx.obj["store"])

    try:
        results = service.get_alerts(ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not results:
        click.echo("No budget alerts.")
        return

    _print_statuses(results)


@budget_group.command("status")
@click.pass_context
def status(ctx):
    """Show every budgeted category."""
    service = BudgetAlertService(ctx.obj["store"])

    try:
        results = service.get_status(ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not results:
        click.echo("No categories have a budget.")
        return

    _print_statuses(results)


@budget_group.command("summary")
@click.pass_context
def summary(ctx):
    """Show overall budget totals."""
    service = BudgetAlertService(ctx.obj["store"])

    try:
        result = service.get_summary(ctx.obj["user_id"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Budgeted categories: {result.total_categories}")
    click.echo(f"Total budget:        {format_amount(result.total_budget)}")
    click.echo(f"Total spent:         {format_amount(result.total_spent)}")
    click.echo(f"Remaining:           {format_amount(result.total_remaining)}")
    click.echo(f"Used:                {result.overall_percentage}%")
    click.echo(
        f"Over budget: {result.over_budget_count}  "
        f"Warning: {result.warning_count}  On track: {result.on_track_count}"
    )


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
