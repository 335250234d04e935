"""Budget period window calculation."""

from datetime import date

from dateutil.relativedelta import MO, relativedelta

from ledgerkit.domain.entities import BudgetPeriod, BudgetWindow


def period_window(period: BudgetPeriod, today: date) -> BudgetWindow:
    """Get the window of the budget period containing ``today``.

    Weekly windows run Monday through Sunday. Monthly, quarterly, and yearly
    windows follow the calendar.

    Args:
        period: Budget period
        today: Reference date

    Returns:
        BudgetWindow with inclusive start and end dates and a display label

    Examples:
        >>> period_window(BudgetPeriod.MONTHLY, date(2025, 1, 15)).label
        'January 2025'
        >>> period_window(BudgetPeriod.WEEKLY, date(2025, 1, 8)).label
        'Week of Jan 6'
    """
    period = BudgetPeriod(period)

    if period == BudgetPeriod.WEEKLY:
        start = today + relativedelta(weekday=MO(-1))
        end = start + relativedelta(days=6)
        label = f"Week of {start.strftime('%b')} {start.day}"
    elif period == BudgetPeriod.QUARTERLY:
        quarter = (today.month - 1) // 3 + 1
        start = date(today.year, 3 * quarter - 2, 1)
        end = start + relativedelta(months=3, days=-1)
        label = f"Q{quarter} {today.year}"
    elif period == BudgetPeriod.YEARLY:
        start = date(today.year, 1, 1)
        end = date(today.year, 12, 31)
        label = str(today.year)
    else:
        start = today.replace(day=1)
        end = start + relativedelta(months=1, days=-1)
        label = start.strftime("%B %Y")

    return BudgetWindow(period=period, start=start, end=end, label=label)
