"""
Consumption rollups for the dashboard charts and KPI cards.
"""
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date

from .catalog import CONSUMPTION_METHODS, parse_method
from .records import to_float
from .windows import SUNDAY, daily_buckets, weekly_buckets


CHART_DAYS = 30
RECENT_DAYS = 7
TREND_WEEKS = 12
TOP_PRODUCTS = 5


@dataclass(frozen=True)
class DailyPoint:
    date: date
    amount: float
    count: int


@dataclass(frozen=True)
class WeeklyPoint:
    week_start: date
    grams: float
    sessions: int
    avg_rating: float


@dataclass(frozen=True)
class ProductTotal:
    product: str
    amount: float
    count: int


@dataclass(frozen=True)
class MethodUsage:
    method: str
    efficiency: float
    total_grams: float
    effective_grams: float
    sessions: int


@dataclass(frozen=True)
class ConsumptionSummary:
    total_entries: int
    total_amount: float
    days_with_data: int
    average_daily: float


def daily_consumption(entries, as_of, days=CHART_DAYS):
    return [
        DailyPoint(date=bucket.start, amount=bucket.amount, count=bucket.count)
        for bucket in daily_buckets(entries, days, as_of)
    ]


def _average_over_active_days(points):
    active = [p for p in points if p.amount > 0]
    if not active:
        return 0.0
    return sum(p.amount for p in active) / len(active)


def average_daily(points, recent_days=RECENT_DAYS):
    """
    Average grams per day counting only days that have data. The most recent
    `recent_days` points are used when any of them has data, otherwise the
    whole series.
    """
    recent = points[-recent_days:] if recent_days > 0 else []
    if any(p.amount > 0 for p in recent):
        return _average_over_active_days(recent)
    return _average_over_active_days(points)


def consumption_summary(entries, as_of, days=CHART_DAYS, recent_days=RECENT_DAYS):
    points = daily_consumption(entries, as_of, days)
    return ConsumptionSummary(
        total_entries=len(entries),
        total_amount=sum(to_float(e.amount) for e in entries),
        days_with_data=sum(1 for p in points if p.amount > 0),
        average_daily=average_daily(points, recent_days),
    )


def top_products(entries, limit=TOP_PRODUCTS):
    totals = OrderedDict()
    for entry in entries:
        amount, count = totals.get(entry.product_name, (0.0, 0))
        totals[entry.product_name] = (amount + to_float(entry.amount), count + 1)
    ranked = sorted(
        (ProductTotal(product, amount, count) for product, (amount, count) in totals.items()),
        key=lambda p: p.amount,
        reverse=True,
    )
    return ranked[:limit]


def method_comparison(entries, methods=CONSUMPTION_METHODS):
    """Grams and effective grams per catalog method, skipping unused methods."""
    usage = []
    for method, info in methods.items():
        matching = [e for e in entries if parse_method(e.consumption_method) == method]
        if not matching:
            continue
        total = sum(to_float(e.amount) for e in matching)
        usage.append(MethodUsage(
            method=method.value,
            efficiency=info.efficiency,
            total_grams=total,
            effective_grams=total * info.efficiency,
            sessions=len(matching),
        ))
    return usage


def weekly_trend(entries, as_of, weeks=TREND_WEEKS, week_starts_on=SUNDAY):
    return [
        WeeklyPoint(
            week_start=bucket.start,
            grams=bucket.amount,
            sessions=bucket.count,
            avg_rating=bucket.average_rating,
        )
        for bucket in weekly_buckets(entries, weeks, as_of, week_starts_on=week_starts_on)
    ]
