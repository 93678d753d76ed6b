"""
Custom validators
"""
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from apps.core.utils.constants import ALLOWED_DURATION_MINUTES


def validate_appointment_duration(value):
    """
    Appointments are sold in fixed packages only
    """
    if value not in ALLOWED_DURATION_MINUTES:
        allowed = ', '.join(str(minutes) for minutes in ALLOWED_DURATION_MINUTES)
        raise ValidationError(
            _('Duration must be one of: %(allowed)s minutes.'),
            params={'allowed': allowed},
        )


def validate_non_negative_decimal(value):
    """
    Validate that a money amount is not negative
    """
    if value < 0:
        raise ValidationError(
            _('Value must not be negative.')
        )
