"""
URL routes for notifications API.
"""
from django.urls import path
from apps.notifications.views import (
    NotificationListView,
    NotificationCountView,
    NotificationMarkReadView,
    NotificationMarkAllReadView,
    DeleteNotificationView,
)

app_name = 'notifications'

urlpatterns = [
    path('', NotificationListView.as_view(), name='list'),
    path('unread-count/', NotificationCountView.as_view(), name='unread-count'),
    path('mark-all-read/', NotificationMarkAllReadView.as_view(), name='mark-all-read'),
    path('<uuid:pk>/mark-read/', NotificationMarkReadView.as_view(), name='mark-read'),
    path('<uuid:pk>/', DeleteNotificationView.as_view(), name='delete'),
]
