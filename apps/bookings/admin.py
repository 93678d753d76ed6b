from django.contrib import admin
from .models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ['id', 'customer', 'provider', 'slot', 'start_time', 'duration_minutes', 'status']
    search_fields = ['customer__email', 'provider__email', 'package_name']
    list_filter = ['status', 'duration_minutes', 'created_at']
    readonly_fields = ['commission_fee', 'created_at', 'updated_at']
