"""
Calendar bucketing and trailing windows over timestamped records.

Everything is anchored to an explicit `as_of` datetime. Calendar days, weeks
and months are those of `as_of`'s timezone: aware timestamps are converted to
it before their date is taken, naive timestamps are read as already local.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone as dt_timezone
from operator import attrgetter

from .records import to_float


SUNDAY = 6
MONDAY = 0

consumed_at = attrgetter('consumed_at')


@dataclass(frozen=True)
class Bucket:
    """Records falling in [start, end], both inclusive calendar dates."""

    start: date
    end: date
    records: tuple = ()

    @property
    def count(self):
        return len(self.records)

    @property
    def amount(self):
        return sum(to_float(getattr(record, 'amount', 0)) for record in self.records)

    def total(self, attr):
        return sum(to_float(getattr(record, attr, 0)) for record in self.records)

    @property
    def average_rating(self):
        ratings = [r.rating for r in self.records if getattr(r, 'rating', None) is not None]
        if not ratings:
            return 0.0
        return sum(ratings) / len(ratings)


def align(moment, as_of):
    """Return `moment` comparable with `as_of` (both aware or both naive)."""
    if isinstance(moment, date) and not isinstance(moment, datetime):
        moment = datetime.combine(moment, datetime.min.time())
    aware_as_of = as_of.tzinfo is not None
    aware_moment = moment.tzinfo is not None
    if aware_as_of and not aware_moment:
        return moment.replace(tzinfo=as_of.tzinfo)
    if aware_moment and not aware_as_of:
        return moment.astimezone(dt_timezone.utc).replace(tzinfo=None)
    if aware_moment:
        return moment.astimezone(as_of.tzinfo)
    return moment


def comparable(moment):
    """Naive UTC form of `moment`, for ordering a mix of aware and naive timestamps."""
    return align(moment, datetime.min)


def local_date(moment, as_of):
    """Calendar date of `moment` in the timezone of `as_of`."""
    if isinstance(moment, date) and not isinstance(moment, datetime):
        return moment
    return align(moment, as_of).date()


def start_of_week(day, week_starts_on=SUNDAY):
    return day - timedelta(days=(day.weekday() - week_starts_on) % 7)


def start_of_month(day):
    return day.replace(day=1)


def add_months(day, months):
    month_index = day.month - 1 + months
    return date(day.year + month_index // 12, month_index % 12 + 1, 1)


def _fill(spans, records, as_of, key):
    """Drop each record into the span containing its local date."""
    grouped = [[] for _ in spans]
    if spans:
        first, last = spans[0][0], spans[-1][1]
        for record in records:
            moment = key(record)
            if moment is None:
                continue
            day = local_date(moment, as_of)
            if day < first or day > last:
                continue
            for index, (start, end) in enumerate(spans):
                if start <= day <= end:
                    grouped[index].append(record)
                    break
    return [Bucket(start, end, tuple(items)) for (start, end), items in zip(spans, grouped)]


def daily_buckets(records, window_days, as_of, key=consumed_at):
    """
    One bucket per calendar day covering the `window_days` days that end on
    `as_of`'s date, oldest first. Days without data get an empty bucket.
    """
    today = local_date(as_of, as_of)
    spans = []
    for offset in range(max(window_days, 0) - 1, -1, -1):
        day = today - timedelta(days=offset)
        spans.append((day, day))
    return _fill(spans, records, as_of, key)


def weekly_buckets(records, weeks, as_of, key=consumed_at, week_starts_on=SUNDAY):
    """
    One bucket per calendar week, the last one being the week containing
    `as_of`, oldest first.
    """
    current = start_of_week(local_date(as_of, as_of), week_starts_on)
    spans = []
    for offset in range(max(weeks, 0) - 1, -1, -1):
        start = current - timedelta(weeks=offset)
        spans.append((start, start + timedelta(days=6)))
    return _fill(spans, records, as_of, key)


def monthly_buckets(records, months, as_of, key=consumed_at):
    """One bucket per calendar month ending with `as_of`'s month, oldest first."""
    current = start_of_month(local_date(as_of, as_of))
    spans = []
    for offset in range(max(months, 0) - 1, -1, -1):
        start = add_months(current, -offset)
        spans.append((start, add_months(start, 1) - timedelta(days=1)))
    return _fill(spans, records, as_of, key)


def trailing(records, as_of, days, key=consumed_at):
    """Records whose timestamp lies in the rolling window [as_of - days, as_of]."""
    since = as_of - timedelta(days=days)
    selected = []
    for record in records:
        moment = key(record)
        if moment is None:
            continue
        moment = align(moment, as_of)
        if since <= moment <= as_of:
            selected.append(record)
    return selected
