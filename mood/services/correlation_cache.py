"""
Rebuilds the MoodCorrelation cache for a user from their complete mood
check-ins.
"""
import logging

from django.db import transaction

from analytics.mood import mood_correlations
from greenery.data_store import load_user_records
from mood.models import MoodCorrelation

logger = logging.getLogger(__name__)


def refresh_correlations(user):
    """
    Replace the user's cached correlations with freshly computed ones.
    Returns the number of (strain, method) groups written.
    """
    data = load_user_records(user)
    correlations = mood_correlations(data.moods, data.entries)

    with transaction.atomic():
        MoodCorrelation.objects.filter(user=user).delete()
        MoodCorrelation.objects.bulk_create([
            MoodCorrelation(
                user=user,
                strain_name=c.strain_name,
                consumption_method=c.consumption_method.value if c.consumption_method else '',
                avg_energy_change=c.avg_energy_change,
                avg_happiness_change=c.avg_happiness_change,
                avg_stress_change=c.avg_stress_change,
                avg_focus_change=c.avg_focus_change,
                avg_anxiety_change=c.avg_anxiety_change,
                avg_pain_change=c.avg_pain_change,
                sessions_count=c.sessions_count,
            )
            for c in correlations
        ])

    logger.info("Refreshed %d mood correlation(s) for user %s", len(correlations), user.pk)
    return len(correlations)
