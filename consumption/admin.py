from django.contrib import admin
from .models import Consumable, ConsumptionEntry, RawProduct


@admin.register(ConsumptionEntry)
class ConsumptionEntryAdmin(admin.ModelAdmin):
    list_display = ['consumed_at', 'product_name', 'amount', 'consumption_method', 'rating', 'user']
    list_filter = ['consumption_method', 'user']
    search_fields = ['product_name', 'notes']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'consumed_at'

    fieldsets = (
        ('Session', {
            'fields': ('user', 'product_name', 'amount', 'unit', 'consumption_method', 'consumed_at')
        }),
        ('Consumable', {
            'fields': ('consumable', 'units_consumed')
        }),
        ('Feedback', {
            'fields': ('rating', 'notes')
        }),
        ('Audit Information', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(RawProduct)
class RawProductAdmin(admin.ModelAdmin):
    list_display = ['strain_name', 'product_type', 'current_amount', 'original_amount', 'remaining_display', 'cost', 'purchase_date']
    list_filter = ['product_type', 'user']
    search_fields = ['strain_name', 'source']
    readonly_fields = ['created_at', 'updated_at', 'remaining_display']
    date_hierarchy = 'purchase_date'

    def remaining_display(self, obj):
        """Remaining stock as a percentage of the purchase"""
        if obj.original_amount:
            return f"{obj.current_amount / obj.original_amount * 100:.0f}%"
        return "-"
    remaining_display.short_description = 'Remaining'


@admin.register(Consumable)
class ConsumableAdmin(admin.ModelAdmin):
    list_display = ['name', 'consumable_type', 'quantity', 'grams_per_unit', 'cost_per_unit', 'source_strain', 'is_archived']
    list_filter = ['consumable_type', 'is_archived', 'user']
    search_fields = ['name', 'source_strain']
    readonly_fields = ['created_at', 'updated_at']
