"""
Payment serializers
"""
from rest_framework import serializers
from drf_spectacular.utils import extend_schema_field

from . import settlement
from .models import Invoice, ProviderEarnings


class InvoiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Invoice
        fields = [
            'id', 'amount', 'refund_amount', 'status',
            'transaction_ref', 'payment_method', 'created_at',
        ]
        read_only_fields = fields


class InvoiceHistorySerializer(InvoiceSerializer):
    """
    Invoice in the payment history. Appointment invoices carry the display
    breakdown of their total.
    """
    appointment_id = serializers.UUIDField(read_only=True, allow_null=True)
    provider_name = serializers.CharField(source='appointment.provider.full_name', read_only=True, default=None)
    display_fees = serializers.SerializerMethodField()

    @extend_schema_field(serializers.DictField(child=serializers.CharField(), allow_null=True))
    def get_display_fees(self, obj):
        if obj.appointment_id is None:
            return None
        fees = settlement.fee_breakdown(obj.amount, obj.refund_amount)
        return {name: str(amount) for name, amount in fees.items()}

    class Meta(InvoiceSerializer.Meta):
        fields = InvoiceSerializer.Meta.fields + ['appointment_id', 'provider_name', 'display_fees']
        read_only_fields = fields


class ProviderEarningsSerializer(serializers.ModelSerializer):
    """Earnings summary for the requesting provider"""
    provider_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = ProviderEarnings
        fields = ['provider_id', 'total_completed_matches', 'total_net_paid', 'updated_at']
        read_only_fields = fields
