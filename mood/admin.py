from django.contrib import admin
from .models import MoodCorrelation, MoodTracking


@admin.register(MoodTracking)
class MoodTrackingAdmin(admin.ModelAdmin):
    list_display = ['consumption_entry', 'status_display', 'pre_mood_happiness', 'post_mood_happiness', 'experience_rating', 'created_at']
    list_filter = ['user', 'environment', 'activity']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Session', {
            'fields': ('user', 'consumption_entry', 'environment', 'activity')
        }),
        ('Before', {
            'fields': ('pre_mood_energy', 'pre_mood_happiness', 'pre_mood_stress',
                       'pre_mood_focus', 'pre_mood_anxiety', 'pre_mood_pain')
        }),
        ('After', {
            'fields': ('post_mood_energy', 'post_mood_happiness', 'post_mood_stress',
                       'post_mood_focus', 'post_mood_anxiety', 'post_mood_pain')
        }),
        ('Effects', {
            'fields': ('effects_onset_minutes', 'effects_duration_minutes', 'effects_intensity',
                       'experience_rating', 'side_effects', 'mood_notes')
        }),
        ('Audit Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def status_display(self, obj):
        return obj.status.value.replace('_', ' ')
    status_display.short_description = 'Status'


@admin.register(MoodCorrelation)
class MoodCorrelationAdmin(admin.ModelAdmin):
    list_display = ['strain_name', 'consumption_method', 'avg_happiness_change', 'avg_stress_change', 'sessions_count', 'last_updated']
    list_filter = ['user', 'consumption_method']
    search_fields = ['strain_name']
    readonly_fields = ['last_updated']
