from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from analytics.catalog import MOOD_DIMENSIONS
from analytics.mood import InvalidMoodTransition, MoodStatus, mood_status


def mood_scale(**kwargs):
    return models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(10)],
        **kwargs
    )


class MoodTracking(models.Model):
    """
    Mood before and after a consumption session.

    Created with the pre_mood_* scores; post_mood_* stay empty until the
    single post-session update (see record_post_mood).
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='mood_checkins'
    )
    consumption_entry = models.OneToOneField(
        'consumption.ConsumptionEntry',
        on_delete=models.CASCADE,
        related_name='mood'
    )

    pre_mood_energy = mood_scale()
    pre_mood_happiness = mood_scale()
    pre_mood_stress = mood_scale()
    pre_mood_focus = mood_scale()
    pre_mood_anxiety = mood_scale()
    pre_mood_pain = mood_scale()

    post_mood_energy = mood_scale(null=True, blank=True)
    post_mood_happiness = mood_scale(null=True, blank=True)
    post_mood_stress = mood_scale(null=True, blank=True)
    post_mood_focus = mood_scale(null=True, blank=True)
    post_mood_anxiety = mood_scale(null=True, blank=True)
    post_mood_pain = mood_scale(null=True, blank=True)

    effects_onset_minutes = models.PositiveIntegerField(null=True, blank=True)
    effects_duration_minutes = models.PositiveIntegerField(null=True, blank=True)
    effects_intensity = mood_scale(null=True, blank=True)
    experience_rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    side_effects = models.JSONField(
        default=list,
        blank=True,
        help_text="Side effect tags (e.g., 'dryMouth', 'hunger')"
    )
    environment = models.CharField(max_length=50, blank=True, default='')
    activity = models.CharField(max_length=50, blank=True, default='')
    mood_notes = models.TextField(blank=True, default='')

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Mood Check-in'
        verbose_name_plural = 'Mood Check-ins'

    def __str__(self):
        return f"Mood for entry {self.consumption_entry_id} ({self.status.value})"

    @property
    def status(self):
        return mood_status(self)

    def record_post_mood(self, **values):
        """
        Fill in the post-session scores and save. Raises InvalidMoodTransition
        if they were already recorded or any post_mood_* score is missing.
        """
        if self.status is MoodStatus.COMPLETE:
            raise InvalidMoodTransition("Post-session mood has already been recorded")
        missing = [d for d in MOOD_DIMENSIONS if values.get(f'post_mood_{d}') is None]
        if missing:
            raise InvalidMoodTransition(f"Missing post-session scores: {', '.join(missing)}")
        for field, value in values.items():
            setattr(self, field, value)
        self.save()


class MoodCorrelation(models.Model):
    """
    Cached average mood deltas per (strain, consumption method), served by
    the mood overview. Rebuilt from complete MoodTracking rows whenever a
    check-in is completed or a session is edited or deleted; never edited by hand.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='mood_correlations'
    )
    strain_name = models.CharField(max_length=255)
    consumption_method = models.CharField(max_length=20, blank=True, default='')
    avg_energy_change = models.FloatField(default=0)
    avg_happiness_change = models.FloatField(default=0)
    avg_stress_change = models.FloatField(default=0)
    avg_focus_change = models.FloatField(default=0)
    avg_anxiety_change = models.FloatField(default=0)
    avg_pain_change = models.FloatField(default=0)
    sessions_count = models.PositiveIntegerField(default=0)
    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-avg_happiness_change']
        unique_together = ['user', 'strain_name', 'consumption_method']
        verbose_name = 'Mood Correlation'
        verbose_name_plural = 'Mood Correlations'

    def __str__(self):
        method = self.consumption_method or 'any method'
        return f"{self.strain_name} ({method}): {self.sessions_count} sessions"
