import logging

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from analytics import budget, records
from greenery.request_utils import json_error, parse_decimal, parse_int, parse_json_body, validation_message
from greenery.timezone_utils import get_as_of
from .models import BudgetAlert, BudgetSettings

logger = logging.getLogger(__name__)


@login_required
@require_http_methods(["POST"])
def update_settings(request):
    """
    AJAX endpoint to create or update the user's budget.

    Expects JSON data:
        - monthly_budget: number
        - weekly_budget: number (optional, null clears it)
        - alert_threshold: integer 1-100 (default 80)
        - email_alerts, push_alerts: booleans (optional)
    """
    try:
        data = parse_json_body(request)

        values = {
            'monthly_budget': parse_decimal(data, 'monthly_budget', minimum=0),
            'weekly_budget': parse_decimal(data, 'weekly_budget', required=False, minimum=0),
            'alert_threshold': parse_int(data, 'alert_threshold', required=False, minimum=1, maximum=100) or 80,
        }
        for flag in ('email_alerts', 'push_alerts'):
            if flag in data:
                values[flag] = bool(data[flag])

        settings, created = BudgetSettings.objects.update_or_create(
            user=request.user,
            defaults=values,
        )

        return JsonResponse({
            'success': True,
            'message': 'Budget created' if created else 'Budget updated',
            'monthly_budget': float(settings.monthly_budget),
            'weekly_budget': float(settings.weekly_budget) if settings.weekly_budget is not None else None,
            'alert_threshold': settings.alert_threshold,
        })

    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error updating budget settings")
        return json_error(f'Error updating budget: {str(e)}', status=500)


@login_required
@require_http_methods(["POST"])
def acknowledge_alert(request, alert_id):
    """
    AJAX endpoint to acknowledge a budget alert. Acknowledging twice is a no-op.
    """
    try:
        alert = BudgetAlert.objects.filter(user=request.user, id=alert_id).first()
        if alert is None:
            return json_error('Alert not found', status=404)

        acknowledged = budget.acknowledge_alert(
            records.BudgetAlert.from_mapping(vars(alert)),
            get_as_of(request),
        )
        if not alert.acknowledged:
            alert.acknowledged = acknowledged.acknowledged
            alert.acknowledged_at = acknowledged.acknowledged_at
            alert.save(update_fields=['acknowledged', 'acknowledged_at'])

        return JsonResponse({
            'success': True,
            'message': 'Alert acknowledged',
            'alert_id': alert.id,
            'acknowledged_at': alert.acknowledged_at.isoformat() if alert.acknowledged_at else None,
        })

    except Exception as e:
        logger.exception("Error acknowledging budget alert")
        return json_error(f'Error acknowledging alert: {str(e)}', status=500)
