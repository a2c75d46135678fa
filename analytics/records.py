"""
Immutable value records consumed by the analytics core.

Each record has a `from_mapping()` constructor that accepts whatever the data
store hands back (ORM `.values()` rows, decoded JSON, form data) and coerces
it. Dirty values fall back to a default instead of raising: a missing or
unparsable number becomes 0 (or None for optional fields), an unknown
consumption method becomes None, an unparsable timestamp becomes None.
"""
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone as dt_timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from .catalog import parse_method


class AlertType(str, Enum):
    BUDGET_EXCEEDED = 'budget_exceeded'
    MONTHLY_THRESHOLD = 'monthly_threshold'
    WEEKLY_THRESHOLD = 'weekly_threshold'


def to_float(value, default=0.0):
    """Parse a number, returning `default` for None, junk, NaN and infinities."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, InvalidOperation):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def to_optional_float(value):
    if value is None or value == '':
        return None
    return to_float(value, default=None)


def to_int(value, default=0):
    number = to_float(value, default=None)
    if number is None:
        return default
    return int(number)


def to_optional_int(value):
    if value is None or value == '':
        return None
    return to_int(value, default=None)


def to_datetime(value):
    """
    Parse a timestamp. Dates become midnight of that day; ISO strings with a
    trailing 'Z' are read as UTC. Returns None when the value can't be read.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    try:
        text = str(value).strip()
        if text.endswith('Z'):
            return datetime.fromisoformat(text[:-1]).replace(tzinfo=dt_timezone.utc)
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    moment = to_datetime(value)
    return moment.date() if moment else None


def to_text(value, default=''):
    if value is None:
        return default
    return str(value)


def to_optional_text(value):
    if value is None or value == '':
        return None
    return str(value)


def _coerce_id(value):
    # Ids are opaque; ORM integer keys and UUID strings both pass through
    if isinstance(value, Decimal):
        return int(value)
    return value


@dataclass(frozen=True)
class ConsumptionEntry:
    """A single logged session. `amount` is always grams."""

    id: object
    product_name: str
    amount: float
    consumed_at: Optional[datetime]
    unit: str = 'g'
    consumption_method: Optional[str] = None
    consumable_id: object = None
    units_consumed: Optional[float] = None
    rating: Optional[int] = None
    notes: str = ''
    created_at: Optional[datetime] = None

    @classmethod
    def from_mapping(cls, data):
        method = parse_method(data.get('consumption_method'))
        return cls(
            id=_coerce_id(data.get('id')),
            product_name=to_text(data.get('product_name')),
            amount=to_float(data.get('amount')),
            consumed_at=to_datetime(data.get('consumed_at')),
            unit=to_text(data.get('unit'), 'g') or 'g',
            consumption_method=method.value if method else None,
            consumable_id=_coerce_id(data.get('consumable_id')),
            units_consumed=to_optional_float(data.get('units_consumed')),
            rating=to_optional_int(data.get('rating')),
            notes=to_text(data.get('notes')),
            created_at=to_datetime(data.get('created_at')),
        )


@dataclass(frozen=True)
class RawProduct:
    id: object
    strain_name: str
    current_amount: float
    original_amount: float
    product_type: str = 'Flower-Buds'
    source: str = ''
    quality_notes: str = ''
    thc_content: Optional[float] = None
    cbd_content: Optional[float] = None
    cost: Optional[float] = None
    purchase_date: Optional[date] = None

    @classmethod
    def from_mapping(cls, data):
        return cls(
            id=_coerce_id(data.get('id')),
            strain_name=to_text(data.get('strain_name')),
            current_amount=to_float(data.get('current_amount')),
            original_amount=to_float(data.get('original_amount')),
            product_type=to_text(data.get('product_type'), 'Flower-Buds'),
            source=to_text(data.get('source')),
            quality_notes=to_text(data.get('quality_notes')),
            thc_content=to_optional_float(data.get('thc_content')),
            cbd_content=to_optional_float(data.get('cbd_content')),
            cost=to_optional_float(data.get('cost')),
            purchase_date=to_date(data.get('purchase_date')),
        )


@dataclass(frozen=True)
class Consumable:
    """Discrete units converted from a raw product (joints, carts, edibles)."""

    id: object
    consumable_type: str
    name: str
    quantity: int
    grams_per_unit: Optional[float] = None
    cost_per_unit: Optional[float] = None
    source_strain: Optional[str] = None
    thc_content: Optional[float] = None
    notes: str = ''

    @classmethod
    def from_mapping(cls, data):
        grams_per_unit = to_optional_float(data.get('grams_per_unit'))
        if grams_per_unit is not None and grams_per_unit <= 0:
            grams_per_unit = None
        return cls(
            id=_coerce_id(data.get('id')),
            consumable_type=to_text(data.get('consumable_type')),
            name=to_text(data.get('name')),
            quantity=to_int(data.get('quantity')),
            grams_per_unit=grams_per_unit,
            cost_per_unit=to_optional_float(data.get('cost_per_unit')),
            source_strain=to_optional_text(data.get('source_strain')),
            thc_content=to_optional_float(data.get('thc_content')),
            notes=to_text(data.get('notes')),
        )


@dataclass(frozen=True)
class ToleranceTracking:
    id: object
    tracking_date: Optional[date]
    baseline_amount: float
    effectiveness_rating: float
    tolerance_break_start: Optional[date] = None
    tolerance_break_end: Optional[date] = None
    notes: str = ''

    @property
    def has_break(self):
        return self.tolerance_break_start is not None

    @classmethod
    def from_mapping(cls, data):
        return cls(
            id=_coerce_id(data.get('id')),
            tracking_date=to_date(data.get('tracking_date')),
            baseline_amount=to_float(data.get('baseline_amount')),
            effectiveness_rating=to_float(data.get('effectiveness_rating')),
            tolerance_break_start=to_date(data.get('tolerance_break_start')),
            tolerance_break_end=to_date(data.get('tolerance_break_end')),
            notes=to_text(data.get('notes')),
        )


@dataclass(frozen=True)
class BudgetSettings:
    monthly_budget: float
    weekly_budget: Optional[float] = None
    alert_threshold: float = 80.0
    email_alerts: bool = True
    push_alerts: bool = False

    @classmethod
    def from_mapping(cls, data):
        return cls(
            monthly_budget=to_float(data.get('monthly_budget')),
            weekly_budget=to_optional_float(data.get('weekly_budget')),
            alert_threshold=to_float(data.get('alert_threshold'), 80.0),
            email_alerts=bool(data.get('email_alerts', True)),
            push_alerts=bool(data.get('push_alerts', False)),
        )


@dataclass(frozen=True)
class BudgetAlert:
    id: object
    alert_type: AlertType
    current_spending: float
    budget_limit: float
    percentage_used: float
    acknowledged: bool = False
    alert_date: Optional[datetime] = None
    acknowledged_at: Optional[datetime] = None

    @classmethod
    def from_mapping(cls, data):
        try:
            alert_type = AlertType(data.get('alert_type'))
        except ValueError:
            alert_type = AlertType.BUDGET_EXCEEDED
        return cls(
            id=_coerce_id(data.get('id')),
            alert_type=alert_type,
            current_spending=to_float(data.get('current_spending')),
            budget_limit=to_float(data.get('budget_limit')),
            percentage_used=to_float(data.get('percentage_used')),
            acknowledged=bool(data.get('acknowledged', False)),
            alert_date=to_datetime(data.get('alert_date')),
            acknowledged_at=to_datetime(data.get('acknowledged_at')),
        )


@dataclass(frozen=True)
class MoodTracking:
    """
    Mood check-in attached to a consumption entry.

    Created with the pre_mood_* scores; the post_mood_* scores stay None
    until the single post-session update.
    """

    id: object
    consumption_entry_id: object
    pre_mood_energy: int
    pre_mood_happiness: int
    pre_mood_stress: int
    pre_mood_focus: int
    pre_mood_anxiety: int
    pre_mood_pain: int
    post_mood_energy: Optional[int] = None
    post_mood_happiness: Optional[int] = None
    post_mood_stress: Optional[int] = None
    post_mood_focus: Optional[int] = None
    post_mood_anxiety: Optional[int] = None
    post_mood_pain: Optional[int] = None
    effects_onset_minutes: Optional[int] = None
    effects_duration_minutes: Optional[int] = None
    effects_intensity: Optional[int] = None
    experience_rating: Optional[int] = None
    side_effects: frozenset = field(default_factory=frozenset)
    environment: str = ''
    activity: str = ''
    mood_notes: str = ''
    created_at: Optional[datetime] = None

    @classmethod
    def from_mapping(cls, data):
        values = {
            'id': _coerce_id(data.get('id')),
            'consumption_entry_id': _coerce_id(data.get('consumption_entry_id')),
            'effects_onset_minutes': to_optional_int(data.get('effects_onset_minutes')),
            'effects_duration_minutes': to_optional_int(data.get('effects_duration_minutes')),
            'effects_intensity': to_optional_int(data.get('effects_intensity')),
            'experience_rating': to_optional_int(data.get('experience_rating')),
            'side_effects': frozenset(data.get('side_effects') or ()),
            'environment': to_text(data.get('environment')),
            'activity': to_text(data.get('activity')),
            'mood_notes': to_text(data.get('mood_notes')),
            'created_at': to_datetime(data.get('created_at')),
        }
        for dimension in ('energy', 'happiness', 'stress', 'focus', 'anxiety', 'pain'):
            values[f'pre_mood_{dimension}'] = to_int(data.get(f'pre_mood_{dimension}'), 5)
            values[f'post_mood_{dimension}'] = to_optional_int(data.get(f'post_mood_{dimension}'))
        return cls(**values)
