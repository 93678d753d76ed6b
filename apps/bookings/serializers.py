"""
Appointment serializers
"""
from django.utils import timezone
from rest_framework import serializers
from drf_spectacular.utils import extend_schema_field

from apps.core.utils.constants import (
    ALLOWED_DURATION_MINUTES,
    DECISIONS,
    MAX_CANCEL_REASON_LENGTH,
    MIN_CANCEL_REASON_LENGTH,
    MIN_NOTE_LENGTH,
)
from apps.payments.serializers import InvoiceSerializer
from .models import Appointment
from .services import lifecycle


class AppointmentCreateSerializer(serializers.Serializer):
    """Input for a booking request"""
    slot_id = serializers.UUIDField()
    package_name = serializers.CharField(max_length=100)
    start_time = serializers.TimeField(help_text='Time of day inside the slot, e.g. 09:30')
    duration = serializers.ChoiceField(
        choices=ALLOWED_DURATION_MINUTES,
        help_text='Session length in minutes'
    )
    note = serializers.CharField(min_length=MIN_NOTE_LENGTH)
    payment_method = serializers.CharField(max_length=50)


class AppointmentDecisionSerializer(serializers.Serializer):
    """Provider approves or rejects a pending request"""
    action = serializers.ChoiceField(choices=DECISIONS)


class AppointmentCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(
        min_length=MIN_CANCEL_REASON_LENGTH,
        max_length=MAX_CANCEL_REASON_LENGTH
    )


class AppointmentListSerializer(serializers.ModelSerializer):
    """Compact appointment for lists"""
    date = serializers.DateField(source='slot.date', read_only=True)
    end_time = serializers.TimeField(read_only=True)
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)
    provider_name = serializers.CharField(source='provider.full_name', read_only=True)
    total_amount = serializers.SerializerMethodField()

    @extend_schema_field(serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True))
    def get_total_amount(self, obj):
        invoice = getattr(obj, 'invoice', None)
        return str(invoice.amount) if invoice is not None else None

    class Meta:
        model = Appointment
        fields = [
            'id', 'slot', 'date', 'start_time', 'end_time', 'duration_minutes',
            'package_name', 'status', 'customer', 'customer_name',
            'provider', 'provider_name', 'total_amount', 'created_at'
        ]
        read_only_fields = fields


class AppointmentDetailSerializer(AppointmentListSerializer):
    """
    Full appointment with the actions available to the viewer and the
    invoice fee breakdown.

    Pass `now` in the serializer context to evaluate the rules at a given time.
    """
    invoice = serializers.SerializerMethodField()
    can_cancel = serializers.SerializerMethodField()
    can_complete = serializers.SerializerMethodField()
    is_refund_case = serializers.BooleanField(read_only=True)
    display_fees = serializers.SerializerMethodField()

    def _now(self):
        return self.context.get('now') or timezone.now()

    @extend_schema_field(InvoiceSerializer(allow_null=True))
    def get_invoice(self, obj):
        invoice = getattr(obj, 'invoice', None)
        return InvoiceSerializer(invoice).data if invoice is not None else None

    @extend_schema_field(serializers.BooleanField)
    def get_can_cancel(self, obj):
        return lifecycle.can_cancel(obj, self._now())

    @extend_schema_field(serializers.BooleanField)
    def get_can_complete(self, obj):
        return lifecycle.can_complete(obj, self._now())

    @extend_schema_field(serializers.DictField(child=serializers.CharField(), allow_null=True))
    def get_display_fees(self, obj):
        fees = lifecycle.display_fees(obj)
        if fees is None:
            return None
        return {name: str(amount) for name, amount in fees.items()}

    class Meta(AppointmentListSerializer.Meta):
        fields = AppointmentListSerializer.Meta.fields + [
            'note', 'commission_fee', 'invoice',
            'can_cancel', 'can_complete', 'is_refund_case', 'display_fees', 'updated_at'
        ]
        read_only_fields = fields
