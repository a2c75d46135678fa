"""
Inventory projection: remaining stock, pricing and days until depletion.

Consumption velocity comes from the trailing LOOKBACK_WEEKS of entries,
averaged over the weeks the data actually covers rather than a fixed four so
that a new user with one week of history isn't reported at a quarter of their
real rate.
"""
import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import timedelta

from .catalog import CONSUMABLE_TYPES, DEFAULT_GRAMS_PER_UNIT, default_grams_per_unit
from .records import to_float
from .windows import align, consumed_at, trailing


LOOKBACK_WEEKS = 4
WEEKS_PER_MONTH = 4.3

# Reported when there is stock but no consumption to deplete it
NO_CONSUMPTION_DAYS = 999

LOW_STOCK_RATIO = 0.2


@dataclass(frozen=True)
class PredictiveMetrics:
    weekly_consumption: float
    daily_consumption: float
    weekly_cost: float
    monthly_projection: float
    raw_inventory: float
    consumable_inventory: float
    total_inventory: float
    inventory_days_remaining: int
    weeks_covered: int
    restock: tuple = ()


@dataclass(frozen=True)
class ProductStock:
    id: object
    strain_name: str
    current_amount: float
    original_amount: float
    remaining_percent: float
    low_stock: bool


@dataclass(frozen=True)
class InventorySummary:
    total_value: float
    total_weight: float
    products: tuple = ()


@dataclass(frozen=True)
class ConversionPreview:
    units: int
    grams_per_unit: float
    grams_used: float
    cost_per_unit: float


def consumable_grams(consumable):
    """Grams left in a consumable; missing grams_per_unit uses the 0.5g fallback."""
    grams_per_unit = to_float(consumable.grams_per_unit) or DEFAULT_GRAMS_PER_UNIT
    return max(to_float(consumable.quantity), 0.0) * grams_per_unit


def total_inventory(raw_products, consumables):
    """Return (raw grams, consumable grams). Negative stock counts as empty."""
    raw = sum(max(to_float(p.current_amount), 0.0) for p in raw_products)
    converted = sum(consumable_grams(c) for c in consumables)
    return raw, converted


def elapsed_weeks(entries, as_of, max_weeks=LOOKBACK_WEEKS):
    """
    Whole weeks between the oldest entry and `as_of`, between 1 and
    `max_weeks`. `entries` should already be limited to the lookback window.
    """
    oldest = None
    for entry in entries:
        if entry.consumed_at is None:
            continue
        moment = align(entry.consumed_at, as_of)
        if oldest is None or moment < oldest:
            oldest = moment
    if oldest is None:
        return 1
    weeks = math.ceil((as_of - oldest) / timedelta(weeks=1))
    return min(max_weeks, max(1, weeks))


def strain_prices(raw_products):
    """
    Price per gram by strain name, weighted by purchase size:
    total cost over total grams bought. Strains with no cost are omitted.
    """
    cost = defaultdict(float)
    grams = defaultdict(float)
    for product in raw_products:
        if product.cost is None:
            continue
        cost[product.strain_name] += to_float(product.cost)
        grams[product.strain_name] += max(to_float(product.original_amount), 0.0)
    return {
        strain: cost[strain] / grams[strain]
        for strain in cost
        if grams[strain] > 0
    }


def entry_cost(entry, consumables_by_id, prices):
    consumable = consumables_by_id.get(entry.consumable_id) if entry.consumable_id is not None else None
    if consumable is not None:
        cost_per_unit = to_float(consumable.cost_per_unit)
        if entry.units_consumed is not None:
            units = to_float(entry.units_consumed)
        else:
            grams_per_unit = to_float(consumable.grams_per_unit) or DEFAULT_GRAMS_PER_UNIT
            units = to_float(entry.amount) / grams_per_unit
        return units * cost_per_unit
    return to_float(entry.amount) * prices.get(entry.product_name, 0.0)


def weekly_cost(entries, consumables, raw_products, weeks):
    consumables_by_id = {c.id: c for c in consumables}
    prices = strain_prices(raw_products)
    total = sum(entry_cost(entry, consumables_by_id, prices) for entry in entries)
    return total / max(weeks, 1)


def days_remaining(inventory, daily_consumption):
    if daily_consumption > 0:
        return int(round(inventory / daily_consumption))
    if inventory > 0:
        return NO_CONSUMPTION_DAYS
    return 0


def restock_recommendations(raw_products, weekly_consumption):
    """Raw products holding less than a week of consumption."""
    return [p for p in raw_products if to_float(p.current_amount) < weekly_consumption]


def project_inventory(entries, raw_products, consumables, as_of, lookback_weeks=LOOKBACK_WEEKS):
    recent = trailing(entries, as_of, days=lookback_weeks * 7, key=consumed_at)
    weeks = elapsed_weeks(recent, as_of, max_weeks=lookback_weeks)

    weekly_consumption = sum(max(to_float(e.amount), 0.0) for e in recent) / weeks
    daily_consumption = weekly_consumption / 7

    raw, converted = total_inventory(raw_products, consumables)
    stock = raw + converted

    cost = weekly_cost(recent, consumables, raw_products, weeks)

    return PredictiveMetrics(
        weekly_consumption=weekly_consumption,
        daily_consumption=daily_consumption,
        weekly_cost=cost,
        monthly_projection=cost * WEEKS_PER_MONTH,
        raw_inventory=raw,
        consumable_inventory=converted,
        total_inventory=stock,
        inventory_days_remaining=days_remaining(stock, daily_consumption),
        weeks_covered=weeks,
        restock=tuple(restock_recommendations(raw_products, weekly_consumption)),
    )


def remaining_percent(product):
    original = to_float(product.original_amount)
    if original <= 0:
        return 0.0
    return max(to_float(product.current_amount), 0.0) / original * 100


def is_low_stock(product, ratio=LOW_STOCK_RATIO):
    return remaining_percent(product) < ratio * 100


def inventory_summary(raw_products):
    products = tuple(
        ProductStock(
            id=p.id,
            strain_name=p.strain_name,
            current_amount=to_float(p.current_amount),
            original_amount=to_float(p.original_amount),
            remaining_percent=remaining_percent(p),
            low_stock=is_low_stock(p),
        )
        for p in raw_products
    )
    return InventorySummary(
        total_value=sum(to_float(p.cost) for p in raw_products),
        total_weight=sum(max(to_float(p.current_amount), 0.0) for p in raw_products),
        products=products,
    )


def conversion_preview(raw_product, consumable_type, grams_per_unit=None,
                       consumable_types=CONSUMABLE_TYPES):
    """
    How many units of `consumable_type` the raw product's remaining stock
    makes, and what each unit costs at the product's purchase price per gram.
    """
    grams_per_unit = to_float(grams_per_unit) or default_grams_per_unit(consumable_type, consumable_types)
    available = max(to_float(raw_product.current_amount), 0.0)
    # Round before flooring so 1.8 / 0.6 counts as 3 units, not 2.999...
    units = math.floor(round(available / grams_per_unit, 9))
    original = to_float(raw_product.original_amount)
    price_per_gram = to_float(raw_product.cost) / original if original > 0 else 0.0
    return ConversionPreview(
        units=units,
        grams_per_unit=grams_per_unit,
        grams_used=units * grams_per_unit,
        cost_per_unit=price_per_gram * grams_per_unit,
    )
