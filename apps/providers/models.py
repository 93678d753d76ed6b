"""
Specialization and provider rate models
"""
from django.conf import settings
from django.db import models

from apps.core.models import BaseModel
from apps.core.validators import validate_non_negative_decimal


class Specialization(BaseModel):
    """
    A practice area a provider can offer consultations in
    """
    name = models.CharField(max_length=150, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        db_table = 'specializations'
        verbose_name = 'Specialization'
        verbose_name_plural = 'Specializations'
        ordering = ['name']

    def __str__(self):
        return self.name


class ProviderSpecialty(BaseModel):
    """
    A provider's hourly rate for one specialization.

    The oldest row per provider is the pricing basis for bookings.
    """
    provider = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='specialties'
    )
    specialization = models.ForeignKey(
        Specialization,
        on_delete=models.PROTECT,
        related_name='provider_specialties'
    )

    # Hourly base rate before the service fee
    min_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[validate_non_negative_decimal]
    )

    class Meta:
        db_table = 'provider_specialties'
        verbose_name = 'Provider Specialty'
        verbose_name_plural = 'Provider Specialties'
        ordering = ['created_at', 'id']
        unique_together = ['provider', 'specialization']
        indexes = [
            models.Index(fields=['provider', 'created_at'], name='provider_spec_created_idx'),
        ]

    def __str__(self):
        return f"{self.provider} - {self.specialization.name} ({self.min_price})"
