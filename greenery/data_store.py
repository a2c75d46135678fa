"""
Loads a user's rows from the database as analytics records.

The analytics package never touches the ORM: views call
`load_user_records(user)` once per request and hand the plain records over.
"""
from dataclasses import dataclass
from typing import Optional

from analytics import records
from analytics.mood import MoodCorrelation


@dataclass(frozen=True)
class UserRecords:
    entries: tuple = ()
    raw_products: tuple = ()
    consumables: tuple = ()
    tolerance: tuple = ()
    moods: tuple = ()
    mood_correlations: tuple = ()
    budget_alerts: tuple = ()
    budget_settings: Optional[records.BudgetSettings] = None


def list_records(queryset, record_class):
    return tuple(record_class.from_mapping(row) for row in queryset.values())


def load_user_records(user):
    from budget.models import BudgetAlert, BudgetSettings
    from consumption.models import Consumable, ConsumptionEntry, RawProduct
    from mood.models import MoodCorrelation as CachedCorrelation, MoodTracking
    from tolerance.models import ToleranceTracking

    settings_row = BudgetSettings.objects.filter(user=user).values().first()

    return UserRecords(
        entries=list_records(ConsumptionEntry.objects.filter(user=user), records.ConsumptionEntry),
        raw_products=list_records(RawProduct.objects.filter(user=user), records.RawProduct),
        # Archived consumables are kept for history but no longer count as stock
        consumables=list_records(
            Consumable.objects.filter(user=user, is_archived=False),
            records.Consumable,
        ),
        tolerance=list_records(
            ToleranceTracking.objects.filter(user=user).order_by('-tracking_date', '-created_at'),
            records.ToleranceTracking,
        ),
        moods=list_records(MoodTracking.objects.filter(user=user), records.MoodTracking),
        mood_correlations=list_records(
            CachedCorrelation.objects.filter(user=user).order_by('-avg_happiness_change', 'id'),
            MoodCorrelation,
        ),
        budget_alerts=list_records(BudgetAlert.objects.filter(user=user), records.BudgetAlert),
        budget_settings=records.BudgetSettings.from_mapping(settings_row) if settings_row else None,
    )
