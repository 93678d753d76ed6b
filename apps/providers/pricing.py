"""
Provider rate lookup used for booking prices.
"""
from decimal import Decimal

from django.conf import settings

from .models import ProviderSpecialty


def provider_base_rate(provider_id) -> Decimal:
    """
    Hourly base rate of a provider.

    The first configured specialty (oldest row) is the pricing basis.
    Providers without any specialty fall back to DEFAULT_PROVIDER_BASE_RATE.
    """
    specialty = (
        ProviderSpecialty.objects
        .filter(provider_id=provider_id)
        .order_by('created_at', 'id')
        .only('min_price')
        .first()
    )
    if specialty is None:
        return Decimal(str(settings.DEFAULT_PROVIDER_BASE_RATE))
    return specialty.min_price
