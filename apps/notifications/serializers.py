"""
Serializers for notifications API.
"""
from rest_framework import serializers
from apps.notifications.models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Serializer for in-app notifications."""

    notification_type_display = serializers.CharField(
        source='get_notification_type_display',
        read_only=True,
        help_text='Human-readable notification type'
    )

    class Meta:
        model = Notification
        fields = [
            'id',
            'message',
            'link',
            'notification_type',
            'notification_type_display',
            'is_read',
            'read_at',
            'created_at',
        ]
        read_only_fields = fields


class NotificationCountSerializer(serializers.Serializer):
    """Serializer for the unread counter."""

    unread = serializers.IntegerField(help_text='Number of unread notifications')


class UpdatedCountResponseSerializer(serializers.Serializer):
    """Response serializer for bulk read/delete operations."""

    success = serializers.BooleanField()
    message = serializers.CharField(help_text='Success message')
    count = serializers.IntegerField(help_text='Number of notifications affected')
