"""
Tolerance trajectory from the user's periodic check-ins.

The newest `window` check-ins are compared against the `window` before them.
Without an older group there is nothing to compare against, so both changes
are reported as 0 rather than inventing a trend.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .records import ToleranceTracking, to_float
from .windows import align, local_date


CHART_LIMIT = 20


@dataclass(frozen=True)
class TolerancePolicy:
    window: int = 5
    # A break is suggested above this baseline increase (percent)...
    increase_threshold: float = 50.0
    # ...or below this effectiveness change (percent)
    effectiveness_threshold: float = -20.0


DEFAULT_POLICY = TolerancePolicy()


@dataclass(frozen=True)
class ToleranceInsights:
    tolerance_increase_percent: float
    effectiveness_change_percent: float
    recent_avg_baseline: float
    recent_avg_effectiveness: float
    older_avg_baseline: float
    older_avg_effectiveness: float
    needs_break: bool
    active_break: Optional[ToleranceTracking]
    sample_size: int


@dataclass(frozen=True)
class TolerancePoint:
    date: Optional[date]
    baseline: float
    effectiveness: float


def newest_first(records):
    """Check-ins sorted by tracking_date, newest first; undated ones last."""
    dated = [r for r in records if r.tracking_date is not None]
    undated = [r for r in records if r.tracking_date is None]
    return sorted(dated, key=lambda r: r.tracking_date, reverse=True) + undated


def _mean(values):
    return sum(values) / len(values) if values else 0.0


def _percent_change(recent, older):
    if older == 0:
        return 0.0
    return (recent - older) / older * 100


def is_active_break(record, as_of):
    """A break has started and has either no end or ends after `as_of`."""
    if record.tolerance_break_start is None:
        return False
    end = record.tolerance_break_end
    if end is None:
        return True
    if isinstance(end, datetime):
        return align(end, as_of) > as_of
    return end > local_date(as_of, as_of)


def active_break(records, as_of):
    for record in newest_first(records):
        if is_active_break(record, as_of):
            return record
    return None


def tolerance_insights(records, as_of, policy=DEFAULT_POLICY):
    ordered = newest_first(records)
    recent = ordered[:policy.window]
    older = ordered[policy.window:policy.window * 2]

    recent_baseline = _mean([to_float(r.baseline_amount) for r in recent])
    recent_effectiveness = _mean([to_float(r.effectiveness_rating) for r in recent])
    if older:
        older_baseline = _mean([to_float(r.baseline_amount) for r in older])
        older_effectiveness = _mean([to_float(r.effectiveness_rating) for r in older])
    else:
        older_baseline = recent_baseline
        older_effectiveness = recent_effectiveness

    increase = _percent_change(recent_baseline, older_baseline)
    effectiveness_change = _percent_change(recent_effectiveness, older_effectiveness)

    return ToleranceInsights(
        tolerance_increase_percent=increase,
        effectiveness_change_percent=effectiveness_change,
        recent_avg_baseline=recent_baseline,
        recent_avg_effectiveness=recent_effectiveness,
        older_avg_baseline=older_baseline,
        older_avg_effectiveness=older_effectiveness,
        needs_break=(increase > policy.increase_threshold
                     or effectiveness_change < policy.effectiveness_threshold),
        active_break=active_break(ordered, as_of),
        sample_size=len(ordered),
    )


def tolerance_chart(records, limit=CHART_LIMIT):
    """The newest `limit` check-ins, oldest first, for plotting."""
    return [
        TolerancePoint(
            date=r.tracking_date,
            baseline=to_float(r.baseline_amount),
            effectiveness=to_float(r.effectiveness_rating),
        )
        for r in reversed(newest_first(records)[:limit])
    ]
