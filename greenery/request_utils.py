"""
Parsing helpers shared by the JSON endpoints.

Each helper raises django.core.exceptions.ValidationError with a message fit
to return to the client; the views turn it into a 400 response.
"""
import json
from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


def json_error(message, status=400):
    return JsonResponse({'success': False, 'message': message}, status=status)


def parse_json_body(request):
    try:
        data = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError('Request body must be valid JSON')
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def parse_decimal(data, field, required=True, positive=False, minimum=None, maximum=None):
    value = data.get(field)
    if value is None or value == '':
        if required:
            raise ValidationError(f'{field} is required')
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f'Invalid {field}')
    if not number.is_finite():
        raise ValidationError(f'Invalid {field}')
    if positive and number <= 0:
        raise ValidationError(f'{field} must be greater than 0')
    if minimum is not None and number < minimum:
        raise ValidationError(f'{field} must be at least {minimum}')
    if maximum is not None and number > maximum:
        raise ValidationError(f'{field} must be at most {maximum}')
    return number


def parse_int(data, field, required=True, minimum=None, maximum=None):
    value = data.get(field)
    if value is None or value == '':
        if required:
            raise ValidationError(f'{field} is required')
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {field}')
    if minimum is not None and number < minimum:
        raise ValidationError(f'{field} must be between {minimum} and {maximum}'
                              if maximum is not None else f'{field} must be at least {minimum}')
    if maximum is not None and number > maximum:
        raise ValidationError(f'{field} must be between {minimum} and {maximum}'
                              if minimum is not None else f'{field} must be at most {maximum}')
    return number


def parse_timestamp(data, field, tz=None, default_now=True):
    """
    ISO datetime (or date) from the request. Naive values are read in `tz`
    (a pytz timezone, usually the user's), or the current timezone if not given.
    """
    value = data.get(field)
    if not value:
        if default_now:
            return timezone.now()
        return None
    try:
        moment = parse_datetime(str(value))
        day = None if moment else parse_date(str(value))
    except ValueError:
        raise ValidationError(f'Invalid {field}. Use ISO 8601 format')
    if moment is None:
        if day is None:
            raise ValidationError(f'Invalid {field}. Use ISO 8601 format')
        moment = datetime.combine(day, datetime.min.time())
    if timezone.is_naive(moment):
        moment = tz.localize(moment) if tz is not None else timezone.make_aware(moment)
    return moment


def parse_day(data, field, required=True):
    value = data.get(field)
    if not value:
        if required:
            raise ValidationError(f'{field} is required')
        return None
    try:
        day = parse_date(str(value))
    except ValueError:
        day = None
    if day is None:
        raise ValidationError(f'Invalid {field}. Use YYYY-MM-DD')
    return day


def validation_message(error):
    return '; '.join(error.messages)
