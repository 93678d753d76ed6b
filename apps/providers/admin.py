"""
Providers admin configuration
"""
from django.contrib import admin
from .models import Specialization, ProviderSpecialty


@admin.register(Specialization)
class SpecializationAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(ProviderSpecialty)
class ProviderSpecialtyAdmin(admin.ModelAdmin):
    """
    Admin configuration for provider rates
    """
    list_display = ['provider', 'specialization', 'min_price', 'created_at']
    list_filter = ['specialization']
    search_fields = ['provider__email', 'specialization__name']
    readonly_fields = ['id', 'created_at', 'updated_at']
