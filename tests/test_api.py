from datetime import date, datetime, time, timezone as dt_timezone

import pytest
from django.urls import reverse

from apps.bookings.models import Appointment
from apps.core.utils.constants import (
    APPOINTMENT_STATUS_CANCELLED,
    APPOINTMENT_STATUS_COMPLETED,
    APPOINTMENT_STATUS_CONFIRMED,
    APPOINTMENT_STATUS_PENDING,
    APPOINTMENT_STATUS_REFUND_PENDING,
)
from apps.payments.models import Invoice, ProviderEarnings
from apps.schedules.models import AvailabilitySlot

pytestmark = pytest.mark.django_db

NOTE = 'Need advice on my yearly tax return.'


@pytest.fixture
def as_provider(api_client, provider):
    api_client.force_authenticate(user=provider)
    return api_client


@pytest.fixture
def as_customer(api_client, customer):
    api_client.force_authenticate(user=customer)
    return api_client


def booking_payload(slot, start='10:00', duration=60, **overrides):
    payload = {
        'slot_id': str(slot.pk),
        'package_name': 'Video call',
        'start_time': start,
        'duration': duration,
        'note': NOTE,
        'payment_method': 'card',
    }
    payload.update(overrides)
    return payload


class TestAvailabilityAPI:

    def test_create_slots_reports_counts(self, as_provider, provider, make_slot, far_future):
        make_slot(day=far_future)

        response = as_provider.post(reverse('schedules:availability-list'), {
            'dates': [far_future.isoformat(), '2099-06-02', '2020-01-01'],
            'start_time': '10:00',
            'end_time': '13:00',
        }, format='json')

        assert response.status_code == 201
        assert response.data['created'] == 1
        assert response.data['skipped'] == 1
        assert response.data['past_skipped'] == 1
        assert AvailabilitySlot.objects.filter(provider=provider).count() == 2

    def test_create_rejects_end_before_start(self, as_provider, far_future):
        response = as_provider.post(reverse('schedules:availability-list'), {
            'dates': [far_future.isoformat()],
            'start_time': '13:00',
            'end_time': '10:00',
        }, format='json')

        assert response.status_code == 422
        assert response.data['error_kind'] == 'validation'

    def test_list_upcoming_and_history(self, as_provider, make_slot, far_future):
        upcoming = make_slot(day=far_future)
        past = make_slot(day=date(2020, 1, 6))

        response = as_provider.get(reverse('schedules:availability-list'))
        assert [item['id'] for item in response.data] == [str(upcoming.pk)]

        response = as_provider.get(reverse('schedules:availability-list'), {'type': 'history'})
        assert [item['id'] for item in response.data] == [str(past.pk)]

    def test_customers_cannot_manage_slots(self, as_customer):
        response = as_customer.get(reverse('schedules:availability-list'))

        assert response.status_code == 403

    def test_update_onto_another_slot_conflicts(self, as_provider, make_slot, far_future):
        make_slot(day=far_future, start=time(9), end=time(12))
        afternoon = make_slot(day=far_future, start=time(14), end=time(17))

        response = as_provider.put(
            reverse('schedules:availability-detail', args=[afternoon.pk]),
            {'start_time': '11:00', 'end_time': '15:00'},
            format='json',
        )

        assert response.status_code == 409
        assert response.data['error_kind'] == 'conflict'

    def test_update_moves_slot(self, as_provider, make_slot, far_future):
        slot = make_slot(day=far_future)

        response = as_provider.put(
            reverse('schedules:availability-detail', args=[slot.pk]),
            {'start_time': '13:00', 'end_time': '15:00'},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['slot']['start_time'] == '13:00:00'

    def test_delete_slot(self, as_provider, make_slot, far_future):
        slot = make_slot(day=far_future)

        response = as_provider.delete(reverse('schedules:availability-detail', args=[slot.pk]))

        assert response.status_code == 200
        assert not AvailabilitySlot.objects.filter(pk=slot.pk).exists()

    def test_delete_slot_with_pending_request_fails(self, as_provider, make_slot, make_appointment, far_future):
        slot = make_slot(day=far_future)
        make_appointment(slot)

        response = as_provider.delete(reverse('schedules:availability-detail', args=[slot.pk]))

        assert response.status_code == 400
        assert AvailabilitySlot.objects.filter(pk=slot.pk).exists()

    def test_other_providers_slot_is_not_found(self, as_provider, make_slot, other_provider, far_future):
        slot = make_slot(day=far_future, owner=other_provider)

        response = as_provider.delete(reverse('schedules:availability-detail', args=[slot.pk]))

        assert response.status_code == 404

    def test_malformed_slot_id_is_not_found(self, as_provider):
        assert as_provider.delete('/api/v1/availability/not-a-uuid/').status_code == 404
        assert as_provider.put(
            '/api/v1/availability/not-a-uuid/',
            {'start_time': '10:00', 'end_time': '12:00'},
            format='json',
        ).status_code == 404


class TestAppointmentAPI:

    def test_book_appointment(self, as_customer, make_slot, specialty, far_future):
        slot = make_slot(day=far_future)

        response = as_customer.post(reverse('bookings:appointment-list'), booking_payload(slot), format='json')

        assert response.status_code == 201
        assert response.data['total_amount'] == '330.00'
        assert response.data['appointment']['status'] == APPOINTMENT_STATUS_PENDING
        assert response.data['appointment']['display_fees']['service_fee'] == '30.00'

    def test_overlapping_booking_conflicts(self, as_customer, make_slot, specialty, far_future):
        slot = make_slot(day=far_future)
        as_customer.post(reverse('bookings:appointment-list'), booking_payload(slot), format='json')

        response = as_customer.post(
            reverse('bookings:appointment-list'),
            booking_payload(slot, start='10:30'),
            format='json',
        )

        assert response.status_code == 409
        assert Appointment.objects.count() == 1

    def test_unsupported_duration_is_rejected(self, as_customer, make_slot, far_future):
        slot = make_slot(day=far_future)

        response = as_customer.post(
            reverse('bookings:appointment-list'),
            booking_payload(slot, duration=45),
            format='json',
        )

        assert response.status_code == 422
        assert 'duration' in response.data['errors']

    def test_providers_cannot_book(self, as_provider, make_slot, far_future):
        slot = make_slot(day=far_future)

        response = as_provider.post(reverse('bookings:appointment-list'), booking_payload(slot), format='json')

        assert response.status_code == 403

    def test_list_is_paginated_and_filterable(self, as_customer, make_slot, make_appointment, far_future):
        slot = make_slot(day=far_future, start=time(8), end=time(20))
        for hour in range(8, 20):
            make_appointment(slot, start=time(hour))
        Appointment.objects.filter(start_time=time(8)).update(status=APPOINTMENT_STATUS_CONFIRMED)

        response = as_customer.get(reverse('bookings:appointment-list'))
        assert response.data['count'] == 12
        assert len(response.data['results']) == 10

        response = as_customer.get(reverse('bookings:appointment-list'), {'status': APPOINTMENT_STATUS_CONFIRMED})
        assert response.data['count'] == 1
        assert response.data['results'][0]['total_amount'] == '330.00'

    def test_detail_shows_available_actions(self, as_customer, make_slot, make_appointment, far_future):
        appointment = make_appointment(make_slot(day=far_future))

        response = as_customer.get(reverse('bookings:appointment-detail', args=[appointment.pk]))

        assert response.status_code == 200
        assert response.data['can_cancel'] is True
        assert response.data['can_complete'] is False
        assert response.data['display_fees'] == {
            'consultation_fee': '300.00',
            'service_fee': '30.00',
            'total': '330.00',
            'refund_amount': '0.00',
        }

    def test_detail_hidden_from_other_customers(self, api_client, other_customer, make_slot, make_appointment, far_future):
        appointment = make_appointment(make_slot(day=far_future))
        api_client.force_authenticate(user=other_customer)

        response = api_client.get(reverse('bookings:appointment-detail', args=[appointment.pk]))

        assert response.status_code == 404

    def test_malformed_appointment_id_is_not_found(self, as_customer):
        assert as_customer.get('/api/v1/appointments/not-a-uuid/').status_code == 404
        assert as_customer.put(
            '/api/v1/appointments/not-a-uuid/cancel/',
            {'reason': 'My plans have changed, sorry.'},
            format='json',
        ).status_code == 404

    def test_provider_approves_once(self, as_provider, make_slot, make_appointment, far_future):
        appointment = make_appointment(make_slot(day=far_future))
        url = reverse('bookings:appointment-detail', args=[appointment.pk])

        response = as_provider.put(url, {'action': 'approve'}, format='json')
        assert response.status_code == 200
        assert response.data['appointment']['status'] == APPOINTMENT_STATUS_CONFIRMED

        response = as_provider.put(url, {'action': 'approve'}, format='json')
        assert response.status_code == 409

    def test_unknown_decision_is_rejected(self, as_provider, make_slot, make_appointment, far_future):
        appointment = make_appointment(make_slot(day=far_future))

        response = as_provider.put(
            reverse('bookings:appointment-detail', args=[appointment.pk]),
            {'action': 'maybe'},
            format='json',
        )

        assert response.status_code == 422

    def test_customer_cancels(self, as_customer, make_slot, make_appointment, far_future):
        appointment = make_appointment(make_slot(day=far_future), status=APPOINTMENT_STATUS_CONFIRMED)

        response = as_customer.put(
            reverse('bookings:appointment-cancel', args=[appointment.pk]),
            {'reason': 'My plans have changed, sorry.'},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['appointment']['status'] == APPOINTMENT_STATUS_REFUND_PENDING
        assert response.data['appointment']['invoice']['refund_amount'] == '300.00'

    def test_cancel_reason_too_short(self, as_customer, make_slot, make_appointment, far_future):
        appointment = make_appointment(make_slot(day=far_future))

        response = as_customer.put(
            reverse('bookings:appointment-cancel', args=[appointment.pk]),
            {'reason': 'nope'},
            format='json',
        )

        assert response.status_code == 422

    def test_cancel_unpaid_request(self, as_customer, make_slot, make_appointment, far_future):
        appointment = make_appointment(make_slot(day=far_future), amount=None)

        response = as_customer.put(
            reverse('bookings:appointment-cancel', args=[appointment.pk]),
            {'reason': 'My plans have changed, sorry.'},
            format='json',
        )

        assert response.status_code == 200
        assert response.data['appointment']['status'] == APPOINTMENT_STATUS_CANCELLED

    def test_complete_before_end_fails(self, as_provider, make_slot, make_appointment, far_future):
        appointment = make_appointment(make_slot(day=far_future), status=APPOINTMENT_STATUS_CONFIRMED)

        response = as_provider.post(reverse('bookings:appointment-complete', args=[appointment.pk]))

        assert response.status_code == 400

    def test_complete_after_end_pays_provider(self, as_provider, provider, make_slot, make_appointment):
        appointment = make_appointment(make_slot(day=date(2020, 1, 6)), status=APPOINTMENT_STATUS_CONFIRMED)

        response = as_provider.post(reverse('bookings:appointment-complete', args=[appointment.pk]))

        assert response.status_code == 200
        assert response.data['commission'] == '60.00'
        assert response.data['provider_net'] == '240.00'
        assert response.data['appointment']['status'] == APPOINTMENT_STATUS_COMPLETED

        response = as_provider.get(reverse('payments:provider-earnings'))
        assert response.data['total_completed_matches'] == 1
        assert response.data['total_net_paid'] == '240.00'

    def test_listing_resolves_expired_requests(self, as_customer, make_slot, make_appointment):
        appointment = make_appointment(make_slot(day=date(2020, 1, 6)))

        response = as_customer.get(reverse('bookings:appointment-list'))

        assert response.data['results'][0]['status'] == APPOINTMENT_STATUS_REFUND_PENDING
        invoice = Invoice.objects.get(appointment=appointment)
        assert invoice.refund_amount == invoice.amount


class TestProviderScheduleAPI:

    def test_public_schedule(self, api_client, provider, specialty, make_slot, make_appointment, far_future):
        slot = make_slot(day=far_future)
        make_appointment(slot, start=time(10))
        make_slot(day=date(2020, 1, 6))

        response = api_client.get(reverse('schedules:provider-schedule', args=[provider.pk]))

        assert response.status_code == 200
        assert response.data['provider']['full_name'] == 'Dana Reyes'
        assert [item['id'] for item in response.data['slots']] == [str(slot.pk)]
        assert response.data['occupied'][0]['start_time'] == '10:00:00'
        assert response.data['occupied'][0]['end_time'] == '11:00:00'
        assert response.data['price_list'] == [
            {'duration_minutes': 60, 'price': '330.00'},
            {'duration_minutes': 120, 'price': '660.00'},
        ]
        assert response.data['service_fee_rate'] == 10

    def test_inactive_provider_is_forbidden(self, api_client, provider):
        provider.is_active = False
        provider.save(update_fields=['is_active'])

        response = api_client.get(reverse('schedules:provider-schedule', args=[provider.pk]))

        assert response.status_code == 403

    def test_customer_id_is_not_a_provider(self, api_client, customer):
        response = api_client.get(reverse('schedules:provider-schedule', args=[customer.pk]))

        assert response.status_code == 403


class TestInvoiceHistoryAPI:

    def test_lists_own_invoices_newest_first(self, as_customer, customer, make_slot, make_appointment, far_future, other_customer):
        slot = make_slot(day=far_future)
        older = make_appointment(slot, start=time(9))
        newer = make_appointment(slot, start=time(10), amount='660.00')
        make_appointment(slot, start=time(11), owner=other_customer)
        Invoice.objects.filter(appointment=older).update(created_at=datetime(2030, 1, 1, tzinfo=dt_timezone.utc))
        Invoice.objects.filter(appointment=newer).update(created_at=datetime(2030, 1, 2, tzinfo=dt_timezone.utc))

        response = as_customer.get(reverse('payments:invoice-list'))

        assert response.status_code == 200
        assert response.data['count'] == 2
        latest, earliest = response.data['results']
        assert latest['appointment_id'] == str(newer.pk)
        assert earliest['appointment_id'] == str(older.pk)
        assert latest['provider_name'] == 'Dana Reyes'
        assert latest['display_fees'] == {
            'consultation_fee': '600.00',
            'service_fee': '60.00',
            'total': '660.00',
            'refund_amount': '0.00',
        }

    def test_invoice_of_deleted_appointment_has_no_breakdown(self, as_customer, make_slot, make_appointment, far_future):
        appointment = make_appointment(make_slot(day=far_future))
        appointment.delete()

        [invoice] = as_customer.get(reverse('payments:invoice-list')).data['results']

        assert invoice['appointment_id'] is None
        assert invoice['provider_name'] is None
        assert invoice['display_fees'] is None
        assert invoice['amount'] == '330.00'

    def test_providers_have_no_invoice_history(self, as_provider):
        assert as_provider.get(reverse('payments:invoice-list')).status_code == 403


class TestEarningsAPI:

    def test_provider_without_completed_sessions(self, as_provider, provider):
        response = as_provider.get(reverse('payments:provider-earnings'))

        assert response.status_code == 200
        assert response.data['total_completed_matches'] == 0
        assert response.data['total_net_paid'] == '0.00'
        assert not ProviderEarnings.objects.filter(provider=provider).exists()

    def test_customers_have_no_earnings(self, as_customer):
        assert as_customer.get(reverse('payments:provider-earnings')).status_code == 403


class TestAuthenticationAPI:

    def test_token_obtain_and_me(self, api_client, customer):
        response = api_client.post(reverse('token-obtain'), {
            'email': 'customer@example.com',
            'password': 'secret-pass',
        }, format='json')
        assert response.status_code == 200

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = api_client.get(reverse('current-user'))

        assert response.status_code == 200
        assert response.data['email'] == 'customer@example.com'
        assert response.data['role'] == 'customer'
        assert response.data['full_name'] == 'Sam Lee'

    def test_me_requires_authentication(self, api_client):
        assert api_client.get(reverse('current-user')).status_code == 401
