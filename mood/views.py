import logging

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from analytics.catalog import ACTIVITIES, ENVIRONMENTS, MOOD_DIMENSIONS, SIDE_EFFECTS
from analytics.mood import InvalidMoodTransition
from consumption.models import ConsumptionEntry
from greenery.request_utils import json_error, parse_int, parse_json_body, validation_message
from .models import MoodTracking
from .services.correlation_cache import refresh_correlations

logger = logging.getLogger(__name__)

ALREADY_TRACKED = 'Mood is already being tracked for this session'


def _scores(data, prefix):
    return {
        f'{prefix}_{dimension}': parse_int(data, dimension, minimum=1, maximum=10)
        for dimension in MOOD_DIMENSIONS
    }


def _choice(data, field, choices):
    value = data.get(field) or ''
    if value and value not in choices:
        raise ValidationError(f'Unknown {field}: {value}')
    return value


@login_required
@require_http_methods(["POST"])
def add_pre_mood(request):
    """
    AJAX endpoint to record how the user feels before a session.

    Expects JSON data:
        - consumption_entry_id: integer
        - energy, happiness, stress, focus, anxiety, pain: integers 1-10
        - environment, activity: catalog keys (optional)
        - mood_notes: string (optional)

    Returns JSON:
        - success: boolean
        - message: string
        - mood_id: integer (if successful)
    """
    try:
        data = parse_json_body(request)
        entry_id = parse_int(data, 'consumption_entry_id')
        scores = _scores(data, 'pre_mood')
        environment = _choice(data, 'environment', ENVIRONMENTS)
        activity = _choice(data, 'activity', ACTIVITIES)

        with transaction.atomic():
            entry = ConsumptionEntry.objects.select_for_update().filter(user=request.user, id=entry_id).first()
            if entry is None:
                return json_error('Consumption entry not found', status=404)
            if MoodTracking.objects.filter(consumption_entry=entry).exists():
                return json_error(ALREADY_TRACKED, status=409)

            mood = MoodTracking.objects.create(
                user=request.user,
                consumption_entry=entry,
                environment=environment,
                activity=activity,
                mood_notes=data.get('mood_notes') or '',
                **scores
            )

        return JsonResponse({
            'success': True,
            'message': f'Pre-session mood saved for {entry.product_name}',
            'mood_id': mood.id,
            'status': mood.status.value,
        })

    except IntegrityError:
        return json_error(ALREADY_TRACKED, status=409)
    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error saving pre-session mood")
        return json_error(f'Error saving mood: {str(e)}', status=500)


@login_required
@require_http_methods(["POST"])
def update_post_mood(request, mood_id):
    """
    AJAX endpoint to complete a mood check-in after the session.

    Expects JSON data:
        - energy, happiness, stress, focus, anxiety, pain: integers 1-10
        - effects_onset_minutes, effects_duration_minutes: integers (optional)
        - effects_intensity: integer 1-10 (optional)
        - experience_rating: integer 1-5 (optional)
        - side_effects: list of side effect keys (optional)

    Completing a check-in refreshes the user's mood correlations. A check-in
    can only be completed once (409 afterwards).
    """
    try:
        data = parse_json_body(request)
        values = _scores(data, 'post_mood')
        values.update({
            'effects_onset_minutes': parse_int(data, 'effects_onset_minutes', required=False, minimum=0),
            'effects_duration_minutes': parse_int(data, 'effects_duration_minutes', required=False, minimum=0),
            'effects_intensity': parse_int(data, 'effects_intensity', required=False, minimum=1, maximum=10),
            'experience_rating': parse_int(data, 'experience_rating', required=False, minimum=1, maximum=5),
        })
        side_effects = data.get('side_effects') or []
        if not isinstance(side_effects, list):
            return json_error('side_effects must be a list')
        unknown = [tag for tag in side_effects if tag not in SIDE_EFFECTS]
        if unknown:
            return json_error(f"Unknown side effects: {', '.join(map(str, unknown))}")
        values['side_effects'] = side_effects
        if 'mood_notes' in data:
            values['mood_notes'] = data.get('mood_notes') or ''

        with transaction.atomic():
            mood = MoodTracking.objects.select_for_update().filter(user=request.user, id=mood_id).first()
            if mood is None:
                return json_error('Mood check-in not found', status=404)
            mood.record_post_mood(**values)

        refresh_correlations(request.user)

        return JsonResponse({
            'success': True,
            'message': 'Post-session mood saved',
            'mood_id': mood.id,
            'status': mood.status.value,
        })

    except InvalidMoodTransition as e:
        return json_error(str(e), status=409)
    except ValidationError as e:
        return json_error(validation_message(e))
    except Exception as e:
        logger.exception("Error saving post-session mood")
        return json_error(f'Error saving mood: {str(e)}', status=500)
