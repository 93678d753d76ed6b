import logging

import pytest
from django.urls import reverse

from apps.notifications.models import Notification, NotificationType
from apps.notifications.services.sink import (
    DatabaseNotificationSink,
    NotificationEvent,
    deliver,
    get_notification_sink,
)
from tests.conftest import FailingSink, RecordingSink

pytestmark = pytest.mark.django_db


def test_database_sink_persists_notification(customer):
    DatabaseNotificationSink().notify(customer.pk, 'Your appointment was confirmed.', link='/customer/my-appointments/1')

    notification = Notification.objects.get(user=customer)
    assert notification.message == 'Your appointment was confirmed.'
    assert notification.link == '/customer/my-appointments/1'
    assert notification.notification_type == NotificationType.SYSTEM
    assert notification.is_read is False


def test_sink_class_comes_from_settings(settings):
    settings.NOTIFICATION_SINK_CLASS = 'tests.conftest.RecordingSink'

    assert isinstance(get_notification_sink(), RecordingSink)


def test_deliver_logs_and_continues_on_failure(customer, caplog):
    events = [NotificationEvent(user_id=customer.pk, message='one'), NotificationEvent(user_id=customer.pk, message='two')]

    with caplog.at_level(logging.WARNING, logger='apps.notifications.services.sink'):
        delivered = deliver(FailingSink(), events)

    assert delivered == 0
    assert caplog.text.count('Failed to deliver notification') == 2


class TestNotificationCenter:

    @pytest.fixture
    def notifications(self, customer, other_customer):
        sink = DatabaseNotificationSink()
        for index in range(3):
            sink.notify(customer.pk, f'Message {index}')
        sink.notify(other_customer.pk, 'Not yours')
        return Notification.objects.filter(user=customer)

    @pytest.fixture
    def client(self, api_client, customer):
        api_client.force_authenticate(user=customer)
        return api_client

    def test_list_only_own_notifications(self, client, notifications):
        response = client.get(reverse('notifications:list'))

        assert response.status_code == 200
        assert len(response.data) == 3
        assert all(item['message'].startswith('Message') for item in response.data)

    def test_list_is_limited_to_latest_twenty(self, client, customer):
        sink = DatabaseNotificationSink()
        for index in range(25):
            sink.notify(customer.pk, f'Message {index}')

        assert len(client.get(reverse('notifications:list')).data) == 20

    def test_unread_count_and_mark_read(self, client, notifications):
        target = notifications.first()

        assert client.get(reverse('notifications:unread-count')).data == {'unread': 3}

        response = client.put(reverse('notifications:mark-read', args=[target.pk]))
        assert response.status_code == 200
        assert response.data['is_read'] is True
        assert client.get(reverse('notifications:unread-count')).data == {'unread': 2}

    def test_mark_all_read(self, client, notifications, other_customer):
        response = client.put(reverse('notifications:mark-all-read'))

        assert response.data['count'] == 3
        assert not Notification.objects.filter(is_read=False).exclude(user=other_customer).exists()
        assert Notification.objects.get(user=other_customer).is_read is False

    def test_delete_one_and_all(self, client, notifications, other_customer):
        target = notifications.first()

        assert client.delete(reverse('notifications:delete', args=[target.pk])).status_code == 200
        assert notifications.count() == 2

        response = client.delete(reverse('notifications:list'))
        assert response.data['count'] == 2
        assert Notification.objects.filter(user=other_customer).count() == 1

    def test_other_users_notification_is_not_found(self, client, other_customer, notifications):
        foreign = Notification.objects.get(user=other_customer)

        assert client.put(reverse('notifications:mark-read', args=[foreign.pk])).status_code == 404
        assert client.delete(reverse('notifications:delete', args=[foreign.pk])).status_code == 404

    def test_requires_authentication(self, api_client):
        assert api_client.get(reverse('notifications:list')).status_code == 401
