import logging

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from greenery.request_utils import json_error, parse_day, parse_decimal, parse_int, parse_json_body, validation_message
from greenery.timezone_utils import get_as_of
from .models import ToleranceTracking

logger = logging.getLogger(__name__)


@login_required
@require_http_methods(["POST"])
def add_checkin(request):
    """
    AJAX endpoint to record a tolerance check-in.

    Expects JSON data:
        - baseline_amount: number - grams needed for the usual effect
        - effectiveness_rating: integer 1-10
        - tracking_date: YYYY-MM-DD (default: today)
        - tolerance_break_start / tolerance_break_end: YYYY-MM-DD (optional)
        - notes: string

    Returns JSON:
        - success: boolean
        - message: string
        - checkin_id: integer (if successful)
    """
    try:
        data = parse_json_body(request)

        baseline_amount = parse_decimal(data, 'baseline_amount', positive=True)
        effectiveness_rating = parse_int(data, 'effectiveness_rating', minimum=1, maximum=10)
        tracking_date = parse_day(data, 'tracking_date', required=False) or get_as_of(request).date()
        break_start = parse_day(data, 'tolerance_break_start', required=False)
        break_end = parse_day(data, 'tolerance_break_end', required=False)

        if break_end and not break_start:
            return json_error('tolerance_break_end requires tolerance_break_start')
        if break_start and break_end and break_end < break_start:
            return json_error('tolerance_break_end must be on or after tolerance_break_start')

        checkin = ToleranceTracking.objects.create(
            user=request.user,
            tracking_date=tracking_date,
            baseline_amount=baseline_amount,
            effectiveness_rating=effectiveness_rating,
            tolerance_break_start=break_start,
            tolerance_break_end=break_end,
            notes=data.get('notes') or '',
        )

        return JsonResponse({
            'success': True,
            'message': f'Tolerance check-in saved for {tracking_date.strftime("%B %d, %Y")}',
            'checkin_id': checkin.id,
        })

    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error saving tolerance check-in")
        return json_error(f'Error saving check-in: {str(e)}', status=500)
