from django.conf import settings
from django.db import models


class ToleranceTracking(models.Model):
    """
    A tolerance check-in: how much it currently takes (baseline_amount) and
    how well it works (effectiveness_rating). Optionally records a planned
    tolerance break.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tolerance_checkins'
    )
    tracking_date = models.DateField(db_index=True)
    baseline_amount = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        help_text="Grams needed for the usual effect"
    )
    effectiveness_rating = models.PositiveSmallIntegerField(
        help_text="1-10"
    )
    tolerance_break_start = models.DateField(null=True, blank=True)
    tolerance_break_end = models.DateField(
        null=True,
        blank=True,
        help_text="Leave empty for an open-ended break"
    )
    notes = models.TextField(blank=True, default='')

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-tracking_date', '-created_at']
        verbose_name = 'Tolerance Check-in'
        verbose_name_plural = 'Tolerance Check-ins'

    def __str__(self):
        return f"{self.baseline_amount}g @ {self.effectiveness_rating}/10 on {self.tracking_date.strftime('%Y-%m-%d')}"
