"""
API views for the in-app notification center.

Every view is scoped to the requesting user; notifications of other users
are reported as not found.
"""
from rest_framework import status, views
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiResponse

from apps.core.messages import NOTIFICATIONS_API
from apps.core.utils.helpers import format_error_response
from apps.notifications.models import Notification
from apps.notifications.serializers import (
    NotificationSerializer,
    NotificationCountSerializer,
    UpdatedCountResponseSerializer,
)

LATEST_NOTIFICATIONS_LIMIT = 20


class NotificationListView(views.APIView):
    """
    GET: latest notifications of the current user
    DELETE: remove all of them
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=['Notifications'],
        summary='List notifications',
        description=f'Latest {LATEST_NOTIFICATIONS_LIMIT} notifications, newest first.',
        responses={200: NotificationSerializer(many=True)}
    )
    def get(self, request):
        notifications = Notification.objects.filter(
            user=request.user
        ).order_by('-created_at')[:LATEST_NOTIFICATIONS_LIMIT]
        return Response(NotificationSerializer(notifications, many=True).data)

    @extend_schema(
        tags=['Notifications'],
        summary='Delete all notifications',
        responses={200: UpdatedCountResponseSerializer}
    )
    def delete(self, request):
        deleted_count, _ = Notification.objects.filter(user=request.user).delete()
        return Response({
            'success': True,
            'message': NOTIFICATIONS_API['all_deleted'],
            'count': deleted_count,
        })


class NotificationCountView(views.APIView):
    """Unread counter for the notification bell"""
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=['Notifications'],
        summary='Unread notification count',
        responses={200: NotificationCountSerializer}
    )
    def get(self, request):
        unread = Notification.objects.filter(user=request.user, is_read=False).count()
        return Response({'unread': unread})


class NotificationMarkReadView(views.APIView):
    """Mark a single notification as read"""
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=['Notifications'],
        summary='Mark notification as read',
        request=None,
        responses={
            200: NotificationSerializer,
            404: OpenApiResponse(description='Notification not found')
        }
    )
    def put(self, request, pk):
        notification = Notification.objects.filter(pk=pk, user=request.user).first()
        if notification is None:
            return Response(
                format_error_response(NOTIFICATIONS_API['not_found']),
                status=status.HTTP_404_NOT_FOUND
            )

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=['is_read', 'read_at', 'updated_at'])

        return Response(NotificationSerializer(notification).data)


class NotificationMarkAllReadView(views.APIView):
    """Mark every unread notification of the current user as read"""
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=['Notifications'],
        summary='Mark all notifications as read',
        request=None,
        responses={200: UpdatedCountResponseSerializer}
    )
    def put(self, request):
        updated_count = Notification.objects.filter(
            user=request.user,
            is_read=False
        ).update(is_read=True, read_at=timezone.now())

        return Response({
            'success': True,
            'message': NOTIFICATIONS_API['all_read'],
            'count': updated_count,
        })


class DeleteNotificationView(views.APIView):
    """Delete a single notification"""
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=['Notifications'],
        summary='Delete notification',
        responses={
            200: UpdatedCountResponseSerializer,
            404: OpenApiResponse(description='Notification not found')
        }
    )
    def delete(self, request, pk):
        deleted_count, _ = Notification.objects.filter(pk=pk, user=request.user).delete()
        if not deleted_count:
            return Response(
                format_error_response(NOTIFICATIONS_API['not_found']),
                status=status.HTTP_404_NOT_FOUND
            )
        return Response({
            'success': True,
            'message': NOTIFICATIONS_API['deleted'],
            'count': deleted_count,
        })
