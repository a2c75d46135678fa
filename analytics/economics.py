"""
Per-strain cost/benefit figures.

Consumption entries only carry a display name, so entries and raw products
are joined on `product_name == strain_name`. Every raw product sharing the
name contributes its cost and THC content; repeat purchases are summed.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .catalog import CONSUMPTION_METHODS, DEFAULT_METHOD_EFFICIENCY, DEFAULT_THC_CONTENT, method_efficiency
from .records import to_float
from .windows import comparable


@dataclass(frozen=True)
class StrainAnalytics:
    strain: str
    total_grams: float
    total_cost: float
    avg_thc_content: float
    avg_efficiency: float
    price_per_gram: float
    cost_per_mg_thc: float
    effective_thc_consumed_mg: float
    sessions_count: int
    avg_rating: float
    last_used: Optional[datetime]


class _StrainTotals:
    def __init__(self):
        self.grams = 0.0
        self.cost = 0.0
        self.thc_samples = []
        self.efficiencies = []
        self.sessions = 0
        self.ratings = []
        self.last_used = None

    def add_entry(self, entry, efficiency):
        self.grams += to_float(entry.amount)
        self.efficiencies.append(efficiency)
        self.sessions += 1
        if entry.rating is not None:
            self.ratings.append(entry.rating)
        if entry.consumed_at is not None and (
            self.last_used is None or comparable(entry.consumed_at) > comparable(self.last_used)
        ):
            self.last_used = entry.consumed_at


def _mean(values, default):
    if not values:
        return default
    return sum(values) / len(values)


def strain_analytics(entries, raw_products, methods=CONSUMPTION_METHODS) -> List[StrainAnalytics]:
    """
    Per-strain totals sorted by grams consumed, largest first. Strains with
    equal totals keep the order in which they first appear in `entries`.
    """
    totals = {}
    for entry in entries:
        strain = totals.setdefault(entry.product_name, _StrainTotals())
        strain.add_entry(entry, method_efficiency(entry.consumption_method, methods))

    for product in raw_products:
        strain = totals.get(product.strain_name)
        if strain is None:
            continue
        strain.cost += to_float(product.cost)
        if product.thc_content:
            strain.thc_samples.append(to_float(product.thc_content))

    results = []
    for name, strain in totals.items():
        avg_thc = _mean(strain.thc_samples, DEFAULT_THC_CONTENT)
        avg_efficiency = _mean(strain.efficiencies, DEFAULT_METHOD_EFFICIENCY)
        effective_mg = strain.grams * (avg_thc / 100) * avg_efficiency * 1000
        results.append(StrainAnalytics(
            strain=name,
            total_grams=strain.grams,
            total_cost=strain.cost,
            avg_thc_content=avg_thc,
            avg_efficiency=avg_efficiency,
            price_per_gram=strain.cost / strain.grams if strain.grams > 0 else 0.0,
            cost_per_mg_thc=strain.cost / effective_mg if effective_mg > 0 else 0.0,
            effective_thc_consumed_mg=effective_mg,
            sessions_count=strain.sessions,
            avg_rating=_mean(strain.ratings, 0.0),
            last_used=strain.last_used,
        ))

    results.sort(key=lambda s: s.total_grams, reverse=True)
    return results


def average_cost_per_mg_thc(analytics):
    """Unweighted mean of cost_per_mg_thc across strains, 0 for no strains."""
    return _mean([s.cost_per_mg_thc for s in analytics], 0.0)
