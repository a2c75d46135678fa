"""
Mood deltas and their correlation with strain and consumption method.

A delta is positive when the user felt better afterwards. For dimensions where
a lower score is better (stress, anxiety, pain) the delta is pre - post, for
the others it is post - pre.

Mood records move through NoRecord -> PrePending -> Complete, and never back.
"""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from .catalog import MOOD_DIMENSIONS, parse_method
from .records import to_float, to_int, to_text
from .windows import align, comparable, trailing


TREND_LIMIT = 20
PENDING_WINDOW_HOURS = 24


class MoodStatus(Enum):
    NO_RECORD = 'no_record'
    PRE_PENDING = 'pre_pending'
    COMPLETE = 'complete'


class InvalidMoodTransition(ValueError):
    pass


@dataclass(frozen=True)
class MoodDelta:
    energy_change: float
    happiness_change: float
    stress_change: float
    focus_change: float
    anxiety_change: float
    pain_change: float

    def get(self, dimension):
        return getattr(self, f'{dimension}_change')


@dataclass(frozen=True)
class MoodTrendPoint:
    created_at: Optional[datetime]
    delta: MoodDelta


@dataclass(frozen=True)
class MoodCorrelation:
    strain_name: str
    consumption_method: Optional[str]
    avg_energy_change: float
    avg_happiness_change: float
    avg_stress_change: float
    avg_focus_change: float
    avg_anxiety_change: float
    avg_pain_change: float
    sessions_count: int

    @classmethod
    def from_mapping(cls, data):
        """Build from a cached correlation row; an empty method means none was logged."""
        values = {f'avg_{d}_change': to_float(data.get(f'avg_{d}_change')) for d in MOOD_DIMENSIONS}
        return cls(
            strain_name=to_text(data.get('strain_name')),
            consumption_method=parse_method(data.get('consumption_method')),
            sessions_count=to_int(data.get('sessions_count')),
            **values
        )


@dataclass(frozen=True)
class PendingPostMood:
    mood: object
    entry: object
    hours_since_consumption: int


@dataclass(frozen=True)
class PendingMoodUpdates:
    pre_mood: tuple = ()
    post_mood: tuple = ()


def is_complete(mood):
    return mood.post_mood_energy is not None


def mood_status(mood):
    if mood is None:
        return MoodStatus.NO_RECORD
    if is_complete(mood):
        return MoodStatus.COMPLETE
    return MoodStatus.PRE_PENDING


def complete_mood(mood, **post_values):
    """
    Return a copy of a pending record with the post-session fields filled in.

    `post_values` holds post_mood_* scores and any of the effect fields
    (effects_onset_minutes, experience_rating, side_effects, ...). All six
    post_mood_* scores are required.
    """
    if mood_status(mood) is MoodStatus.COMPLETE:
        raise InvalidMoodTransition(f"Mood record {mood.id} already has post-session scores")
    missing = [d for d in MOOD_DIMENSIONS if post_values.get(f'post_mood_{d}') is None]
    if missing:
        raise InvalidMoodTransition(f"Missing post-session scores: {', '.join(missing)}")
    if 'side_effects' in post_values:
        post_values['side_effects'] = frozenset(post_values['side_effects'] or ())
    return replace(mood, **post_values)


def mood_delta(mood):
    """Sign-normalised deltas for a complete record, None while pending."""
    if not is_complete(mood):
        return None
    changes = {}
    for dimension, info in MOOD_DIMENSIONS.items():
        pre = getattr(mood, f'pre_mood_{dimension}') or 0
        post = getattr(mood, f'post_mood_{dimension}')
        if post is None:
            post = pre
        changes[f'{dimension}_change'] = float(pre - post if info.lower_is_better else post - pre)
    return MoodDelta(**changes)


def _newest_first(moods):
    return sorted(
        moods,
        key=lambda m: (m.created_at is not None, comparable(m.created_at) if m.created_at else datetime.min),
        reverse=True,
    )


def mood_trend(moods, limit=TREND_LIMIT):
    """Deltas of the newest `limit` complete sessions, oldest first."""
    complete = [m for m in _newest_first(moods) if is_complete(m)][:limit]
    return [MoodTrendPoint(created_at=m.created_at, delta=mood_delta(m)) for m in reversed(complete)]


def average_happiness_improvement(moods):
    deltas = [mood_delta(m).happiness_change for m in moods if is_complete(m)]
    if not deltas:
        return 0.0
    return sum(deltas) / len(deltas)


def mood_correlations(moods, entries):
    """
    Average deltas grouped by (strain, method) of the linked consumption
    entry, best average happiness change first. Pending records and records
    whose entry isn't in `entries` are left out.
    """
    entries_by_id = {e.id: e for e in entries}
    groups = {}
    for mood in moods:
        if not is_complete(mood):
            continue
        entry = entries_by_id.get(mood.consumption_entry_id)
        if entry is None:
            continue
        key = (entry.product_name, entry.consumption_method)
        groups.setdefault(key, []).append(mood_delta(mood))

    correlations = []
    for (strain, method), deltas in groups.items():
        averages = {
            f'avg_{dimension}_change': sum(d.get(dimension) for d in deltas) / len(deltas)
            for dimension in MOOD_DIMENSIONS
        }
        correlations.append(MoodCorrelation(
            strain_name=strain,
            consumption_method=method,
            sessions_count=len(deltas),
            **averages
        ))
    correlations.sort(key=lambda c: c.avg_happiness_change, reverse=True)
    return correlations


def best_strain(correlations):
    """Correlation group with the highest average happiness change, or None."""
    best = None
    for correlation in correlations:
        if best is None or correlation.avg_happiness_change > best.avg_happiness_change:
            best = correlation
    return best


def _hours_between(later, earlier):
    return max(int((later - earlier) / timedelta(hours=1)), 0)


def pending_mood_updates(entries, moods, as_of, window_hours=PENDING_WINDOW_HOURS):
    """
    Sessions waiting on mood data: recent entries with no mood record at all,
    and mood records still missing their post-session scores (annotated with
    whole hours elapsed since consumption).
    """
    tracked = {m.consumption_entry_id for m in moods}
    recent = trailing(entries, as_of, days=window_hours / 24)
    pre_pending = [e for e in recent if e.id not in tracked]

    entries_by_id = {e.id: e for e in entries}
    post_pending = []
    for mood in _newest_first(moods):
        if is_complete(mood):
            continue
        entry = entries_by_id.get(mood.consumption_entry_id)
        started = entry.consumed_at if entry is not None and entry.consumed_at else mood.created_at
        hours = _hours_between(as_of, align(started, as_of)) if started is not None else 0
        post_pending.append(PendingPostMood(mood=mood, entry=entry, hours_since_consumption=hours))

    return PendingMoodUpdates(pre_mood=tuple(pre_pending), post_mood=tuple(post_pending))
