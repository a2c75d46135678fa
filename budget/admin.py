from django.contrib import admin
from .models import BudgetAlert, BudgetSettings


@admin.register(BudgetSettings)
class BudgetSettingsAdmin(admin.ModelAdmin):
    list_display = ['user', 'monthly_budget', 'weekly_budget', 'alert_threshold', 'email_alerts', 'push_alerts']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(BudgetAlert)
class BudgetAlertAdmin(admin.ModelAdmin):
    list_display = ['alert_date', 'alert_type', 'current_spending', 'budget_limit', 'percentage_used', 'acknowledged', 'user']
    list_filter = ['alert_type', 'acknowledged', 'user']
    readonly_fields = ['alert_date', 'acknowledged_at']
    date_hierarchy = 'alert_date'
