from django.contrib import admin
from .models import AvailabilitySlot


@admin.register(AvailabilitySlot)
class AvailabilitySlotAdmin(admin.ModelAdmin):
    list_display = ['provider', 'date', 'start_time', 'end_time', 'is_available']
    list_filter = ['is_available', 'date']
    search_fields = ['provider__email']
    ordering = ['-date', 'start_time']
