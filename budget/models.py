from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from analytics.records import AlertType


ALERT_TYPE_CHOICES = [
    (AlertType.BUDGET_EXCEEDED.value, 'Budget exceeded'),
    (AlertType.MONTHLY_THRESHOLD.value, 'Monthly threshold reached'),
    (AlertType.WEEKLY_THRESHOLD.value, 'Weekly threshold reached'),
]


class BudgetSettings(models.Model):
    """
    One row per user. Spending is measured from raw product purchase costs.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='budget_settings'
    )
    monthly_budget = models.DecimalField(max_digits=8, decimal_places=2)
    weekly_budget = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True
    )
    alert_threshold = models.PositiveSmallIntegerField(
        default=80,
        validators=[MinValueValidator(1), MaxValueValidator(100)],
        help_text="Percent of the budget that triggers an alert"
    )
    email_alerts = models.BooleanField(default=True)
    push_alerts = models.BooleanField(default=False)

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Budget Settings'
        verbose_name_plural = 'Budget Settings'

    def __str__(self):
        return f"{self.user} budget: {self.monthly_budget}/month"


class BudgetAlert(models.Model):
    """
    Raised when spending crosses the alert threshold. Alerts are created by
    whatever watches spending; this app only lists and acknowledges them.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='budget_alerts'
    )
    alert_type = models.CharField(max_length=30, choices=ALERT_TYPE_CHOICES)
    current_spending = models.DecimalField(max_digits=8, decimal_places=2)
    budget_limit = models.DecimalField(max_digits=8, decimal_places=2)
    percentage_used = models.DecimalField(max_digits=5, decimal_places=2)
    alert_date = models.DateTimeField(auto_now_add=True, db_index=True)
    acknowledged = models.BooleanField(default=False)
    acknowledged_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-alert_date']
        verbose_name = 'Budget Alert'
        verbose_name_plural = 'Budget Alerts'

    def __str__(self):
        return f"{self.get_alert_type_display()} ({self.percentage_used}%)"
