import pytz
from django.utils import timezone


def get_user_timezone(request):
    """
    Get the user's timezone from the cookie set by JavaScript.
    Falls back to UTC if no timezone is set.
    """
    user_tz_name = request.COOKIES.get('user_timezone', 'UTC')
    try:
        return pytz.timezone(user_tz_name)
    except pytz.exceptions.UnknownTimeZoneError:
        return pytz.UTC


def get_as_of(request):
    """
    The moment analytics are computed for: now, in the user's timezone.
    Calendar days, weeks and months in the analytics follow this timezone.
    """
    return timezone.now().astimezone(get_user_timezone(request))
