from django.conf import settings
from django.db import models

from analytics.catalog import CONSUMABLE_TYPES, CONSUMPTION_METHODS, RAW_PRODUCT_TYPES


METHOD_CHOICES = [(method.value, info.label) for method, info in CONSUMPTION_METHODS.items()]
RAW_PRODUCT_TYPE_CHOICES = [(key, info.label) for key, info in RAW_PRODUCT_TYPES.items()]
CONSUMABLE_TYPE_CHOICES = [(key, info.label) for key, info in CONSUMABLE_TYPES.items()]


class RawProduct(models.Model):
    """
    Bulk product as purchased (flower, hash). Depletes as it is converted
    into consumables or consumed directly.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='raw_products'
    )
    product_type = models.CharField(
        max_length=50,
        choices=RAW_PRODUCT_TYPE_CHOICES,
        default='Flower-Buds'
    )
    strain_name = models.CharField(
        max_length=255,
        help_text="Strain name; consumption entries are matched to it by product name"
    )
    source = models.CharField(
        max_length=255,
        blank=True,
        default='',
        help_text="Where it was bought (e.g., 'Local Dispensary')"
    )
    quality_notes = models.TextField(blank=True, default='')
    thc_content = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="THC content in percent"
    )
    cbd_content = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="CBD content in percent"
    )
    current_amount = models.DecimalField(
        max_digits=8,
        decimal_places=3,
        help_text="Grams remaining"
    )
    original_amount = models.DecimalField(
        max_digits=8,
        decimal_places=3,
        help_text="Grams purchased"
    )
    cost = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Purchase price"
    )
    purchase_date = models.DateField(db_index=True)

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-purchase_date', 'strain_name']
        verbose_name = 'Raw Product'
        verbose_name_plural = 'Raw Products'

    def __str__(self):
        return f"{self.strain_name} ({self.current_amount}g of {self.original_amount}g)"


class Consumable(models.Model):
    """
    Discrete units (joints, cartridges, edibles) converted from a raw product.
    quantity * grams_per_unit is the grams left.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='consumables'
    )
    consumable_type = models.CharField(
        max_length=50,
        choices=CONSUMABLE_TYPE_CHOICES
    )
    name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=0)
    grams_per_unit = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        null=True,
        blank=True
    )
    cost_per_unit = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True
    )
    source_strain = models.CharField(
        max_length=255,
        blank=True,
        default='',
        help_text="Strain name of the raw product it was made from"
    )
    thc_content = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True
    )
    notes = models.TextField(blank=True, default='')
    is_archived = models.BooleanField(
        default=False,
        help_text="Archived consumables stay in history but leave the inventory"
    )

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'Consumable'
        verbose_name_plural = 'Consumables'

    def __str__(self):
        return f"{self.name} ({self.quantity} left)"


class ConsumptionEntry(models.Model):
    """
    A single logged session. amount is always in grams, whatever the method.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='consumption_entries'
    )
    product_name = models.CharField(max_length=255)
    amount = models.DecimalField(
        max_digits=7,
        decimal_places=3,
        help_text="Grams consumed"
    )
    unit = models.CharField(max_length=10, default='g')
    consumption_method = models.CharField(
        max_length=20,
        choices=METHOD_CHOICES,
        blank=True,
        default=''
    )
    consumable = models.ForeignKey(
        Consumable,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='entries'
    )
    units_consumed = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        null=True,
        blank=True
    )
    rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        help_text="1-5"
    )
    notes = models.TextField(blank=True, default='')
    consumed_at = models.DateTimeField(db_index=True)

    # Audit fields
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-consumed_at']
        verbose_name = 'Consumption Entry'
        verbose_name_plural = 'Consumption Entries'

    def __str__(self):
        return f"{self.product_name}: {self.amount}g on {self.consumed_at.strftime('%Y-%m-%d %H:%M')}"
