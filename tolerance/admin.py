from django.contrib import admin
from .models import ToleranceTracking


@admin.register(ToleranceTracking)
class ToleranceTrackingAdmin(admin.ModelAdmin):
    list_display = ['tracking_date', 'baseline_amount', 'effectiveness_rating', 'tolerance_break_start', 'tolerance_break_end', 'user']
    list_filter = ['user']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'tracking_date'

    fieldsets = (
        ('Check-in', {
            'fields': ('user', 'tracking_date', 'baseline_amount', 'effectiveness_rating', 'notes')
        }),
        ('Tolerance Break', {
            'fields': ('tolerance_break_start', 'tolerance_break_end')
        }),
        ('Audit Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
