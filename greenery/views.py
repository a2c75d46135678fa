"""
Read-only JSON endpoints behind the dashboard.

Each view loads the user's rows once, works out `as_of` in the user's
timezone and hands both to the analytics package. Window sizes come from
settings.GREENERY_ANALYTICS.
"""
import logging
from dataclasses import asdict, is_dataclass
from enum import Enum

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.core.serializers.json import DjangoJSONEncoder
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from analytics import budget, economics, inventory, mood, tolerance, trends
from greenery.data_store import load_user_records
from greenery.request_utils import json_error
from greenery.timezone_utils import get_as_of

logger = logging.getLogger(__name__)


class AnalyticsJSONEncoder(DjangoJSONEncoder):
    """DjangoJSONEncoder that also understands enums and tag sets."""

    def default(self, o):
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, (set, frozenset)):
            return sorted(o)
        return super().default(o)


def serialize(value):
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    return value


def analytics_response(payload):
    body = {'success': True}
    body.update({key: serialize(value) for key, value in payload.items()})
    return JsonResponse(body, encoder=AnalyticsJSONEncoder)


def window(name):
    return settings.GREENERY_ANALYTICS[name]


def inventory_payload(data, as_of):
    return {
        'predictive': inventory.project_inventory(
            data.entries, data.raw_products, data.consumables, as_of,
            lookback_weeks=window('LOOKBACK_WEEKS'),
        ),
        'inventory': inventory.inventory_summary(data.raw_products),
    }


def analytics_payload(data, as_of):
    daily = trends.daily_consumption(data.entries, as_of, days=window('CHART_DAYS'))
    strains = economics.strain_analytics(data.entries, data.raw_products)
    return {
        'summary': trends.consumption_summary(data.entries, as_of, days=window('CHART_DAYS')),
        'daily': daily,
        'weekly': trends.weekly_trend(data.entries, as_of, weeks=window('TREND_WEEKS')),
        'top_products': trends.top_products(data.entries),
        'methods': trends.method_comparison(data.entries),
        'strains': strains,
        'average_cost_per_mg_thc': economics.average_cost_per_mg_thc(strains),
    }


def tolerance_payload(data, as_of):
    return {
        'insights': tolerance.tolerance_insights(data.tolerance, as_of),
        'chart': tolerance.tolerance_chart(data.tolerance),
        'active_break': tolerance.active_break(data.tolerance, as_of),
    }


def mood_payload(data, as_of):
    pending = mood.pending_mood_updates(
        data.entries, data.moods, as_of, window_hours=window('PENDING_MOOD_HOURS'),
    )
    return {
        'trend': mood.mood_trend(data.moods),
        'correlations': data.mood_correlations,
        'best_strain': mood.best_strain(data.mood_correlations),
        'average_happiness_improvement': mood.average_happiness_improvement(data.moods),
        'pending': pending,
    }


def budget_payload(data, as_of):
    return {
        'status': budget.budget_status(data.budget_settings, data.raw_products, as_of),
        'monthly_spending': budget.monthly_spending(data.raw_products, as_of, months=window('SPENDING_MONTHS')),
        'open_alerts': budget.open_alerts(data.budget_alerts),
    }


def analytics_view(build, description):
    """Wrap a payload builder as a logged-in GET endpoint."""

    @login_required
    @require_http_methods(["GET"])
    def view(request):
        try:
            as_of = get_as_of(request)
            payload = build(load_user_records(request.user), as_of)
            payload['as_of'] = as_of
            return analytics_response(payload)
        except Exception as e:
            logger.exception("Error building %s", description)
            return json_error(f'Error building {description}: {str(e)}', status=500)

    view.__name__ = build.__name__.replace('_payload', '')
    view.__doc__ = f"JSON {description} for the logged-in user."
    return view


def dashboard_payload(data, as_of):
    payload = {}
    for build in (inventory_payload, analytics_payload, tolerance_payload, mood_payload, budget_payload):
        payload.update(build(data, as_of))
    return payload


dashboard = analytics_view(dashboard_payload, 'dashboard')
consumption_analytics = analytics_view(analytics_payload, 'consumption analytics')
inventory_overview = analytics_view(inventory_payload, 'inventory overview')
tolerance_overview = analytics_view(tolerance_payload, 'tolerance overview')
mood_overview = analytics_view(mood_payload, 'mood overview')
budget_overview = analytics_view(budget_payload, 'budget overview')
