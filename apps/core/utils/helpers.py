"""
Helper utilities
"""
from datetime import date, datetime, time
from typing import Dict, Any
import secrets

from django.utils import timezone


def generate_transaction_ref(prefix: str = 'PAY') -> str:
    """
    Generate a payment reference such as PAY_3FA85F64
    """
    return f"{prefix}_{secrets.token_hex(4).upper()}"


def format_error_response(message: str, errors: Dict[str, Any] = None, error_kind: str = None) -> Dict[str, Any]:
    """
    Format error response
    """
    response = {
        'error': True,
        'message': message,
    }
    if error_kind:
        response['error_kind'] = error_kind
    if errors:
        response['errors'] = errors
    return response


def local_datetime(day: date, at: time) -> datetime:
    """
    Combine a calendar date and a time of day into an aware datetime in the
    project time zone.
    """
    return timezone.make_aware(datetime.combine(day, at), timezone.get_default_timezone())


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward negative infinity"""
    return int((end - start).total_seconds() // 60)
