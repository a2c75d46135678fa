"""
Spending against the user's budget. Spending is the cost of raw products
purchased in a calendar period. Alerts are produced elsewhere; here they are
only filtered and acknowledged.
"""
from dataclasses import dataclass, replace
from datetime import date
from operator import attrgetter
from typing import Optional

from .records import to_float
from .windows import SUNDAY, monthly_buckets, weekly_buckets


SPENDING_MONTHS = 6

purchase_date = attrgetter('purchase_date')


@dataclass(frozen=True)
class MonthSpending:
    month: date
    spending: float


@dataclass(frozen=True)
class BudgetStatus:
    monthly_budget: float
    monthly_spending: float
    monthly_percent_used: float
    monthly_remaining: float
    weekly_budget: Optional[float]
    weekly_spending: float
    weekly_percent_used: float
    alert_threshold: float
    threshold_reached: bool
    over_budget: bool


def monthly_spending(raw_products, as_of, months=SPENDING_MONTHS):
    return [
        MonthSpending(month=bucket.start, spending=bucket.total('cost'))
        for bucket in monthly_buckets(raw_products, months, as_of, key=purchase_date)
    ]


def current_month_spending(raw_products, as_of):
    return monthly_buckets(raw_products, 1, as_of, key=purchase_date)[0].total('cost')


def current_week_spending(raw_products, as_of, week_starts_on=SUNDAY):
    buckets = weekly_buckets(raw_products, 1, as_of, key=purchase_date, week_starts_on=week_starts_on)
    return buckets[0].total('cost')


def percent_used(spent, limit):
    """Share of `limit` spent, capped at 100. 0 when there is no limit."""
    if not limit or limit <= 0:
        return 0.0
    return min(spent / limit * 100, 100.0)


def budget_status(settings, raw_products, as_of):
    month_spent = current_month_spending(raw_products, as_of)
    week_spent = current_week_spending(raw_products, as_of)
    if settings is None:
        return BudgetStatus(
            monthly_budget=0.0,
            monthly_spending=month_spent,
            monthly_percent_used=0.0,
            monthly_remaining=0.0,
            weekly_budget=None,
            weekly_spending=week_spent,
            weekly_percent_used=0.0,
            alert_threshold=0.0,
            threshold_reached=False,
            over_budget=False,
        )

    monthly_budget = to_float(settings.monthly_budget)
    weekly_budget = settings.weekly_budget
    monthly_percent = percent_used(month_spent, monthly_budget)
    weekly_percent = percent_used(week_spent, to_float(weekly_budget))
    threshold = to_float(settings.alert_threshold)
    over = (monthly_budget > 0 and month_spent > monthly_budget) or (
        weekly_budget is not None and to_float(weekly_budget) > 0 and week_spent > to_float(weekly_budget)
    )
    return BudgetStatus(
        monthly_budget=monthly_budget,
        monthly_spending=month_spent,
        monthly_percent_used=monthly_percent,
        monthly_remaining=max(monthly_budget - month_spent, 0.0),
        weekly_budget=to_float(weekly_budget) if weekly_budget is not None else None,
        weekly_spending=week_spent,
        weekly_percent_used=weekly_percent,
        alert_threshold=threshold,
        threshold_reached=threshold > 0 and max(monthly_percent, weekly_percent) >= threshold,
        over_budget=over,
    )


def open_alerts(alerts):
    return [a for a in alerts if not a.acknowledged]


def acknowledge_alert(alert, as_of):
    """The alert marked acknowledged. Already acknowledged alerts are returned as-is."""
    if alert.acknowledged:
        return alert
    return replace(alert, acknowledged=True, acknowledged_at=as_of)
