"""CLI helpers for date range resolution."""

import functools
from datetime import date

import click

from ledgerkit.domain.entities import DateRange
from ledgerkit.utils.date_parser import PERIODS, get_date_range, parse_date


def date_range_options(func):
    """Add --start-date/--end-date and one flag per named period to a command.

    The wrapped command receives ``start_date``, ``end_date`` and a
    ``period_flags`` dict keyed by period name.
    """
    flag_names = {name: name.replace("-", "_") for name in PERIODS}

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        kwargs["period_flags"] = {name: kwargs.pop(param) for name, param in flag_names.items()}
        return func(*args, **kwargs)

    for name in reversed(list(PERIODS)):
        wrapper = click.option(
            f"--{name}", is_flag=True, help=f"Limit to {name.replace('-', ' ')}"
        )(wrapper)
    wrapper = click.option(
        "--end-date", help="End date (YYYY-MM-DD or relative like 'today')"
    )(wrapper)
    wrapper = click.option(
        "--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')"
    )(wrapper)
    return wrapper


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_period: str = "this-month",
) -> DateRange:
    """Resolve the CLI date range from period flags or explicit dates.

    With neither, ``default_period`` is used. A lone --end-date starts the
    range on January 1 of that year; a lone --start-date ends it today.
    """
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo(
            f"Error: Only one period option ({', '.join('--' + p for p in PERIODS)}) "
            "can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --last-year, etc.) cannot be combined "
            "with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])
    if not start_date and not end_date:
        return get_date_range(default_period)

    start = end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    end = end or date.today()
    start = start or end.replace(month=1, day=1)
    try:
        return DateRange(start, end)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
