"""
Admin configuration for notifications app.
"""
from django.contrib import admin
from apps.notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin for in-app notifications."""
    list_display = [
        'id', 'user', 'notification_type',
        'is_read', 'is_sent_email', 'created_at'
    ]
    list_filter = ['notification_type', 'is_read', 'created_at']
    search_fields = ['user__email', 'message']
    readonly_fields = ['created_at', 'updated_at', 'read_at']
    ordering = ['-created_at']
