"""
Availability slot serializers
"""
from rest_framework import serializers
from drf_spectacular.utils import extend_schema_field

from apps.core.utils.constants import SLOT_LIST_MODES
from .models import AvailabilitySlot


class AvailabilitySlotSerializer(serializers.ModelSerializer):
    """Serializer for AvailabilitySlot model"""
    is_booked = serializers.SerializerMethodField()

    @extend_schema_field(serializers.BooleanField)
    def get_is_booked(self, obj):
        return bool(getattr(obj, 'is_booked', False))

    class Meta:
        model = AvailabilitySlot
        fields = ['id', 'date', 'start_time', 'end_time', 'is_available', 'is_booked', 'created_at']
        read_only_fields = fields


class SlotListQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=SLOT_LIST_MODES, required=False)


class SlotCreateSerializer(serializers.Serializer):
    """Create the same working hours on several dates"""
    dates = serializers.ListField(
        child=serializers.DateField(),
        allow_empty=False,
        help_text='Dates to open, e.g. ["2030-01-07", "2030-01-09"]'
    )
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()

    def validate(self, data):
        if data['start_time'] >= data['end_time']:
            raise serializers.ValidationError("End time must be after start time")
        return data


class SlotUpdateSerializer(serializers.Serializer):
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()


class SlotCreateResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    message = serializers.CharField()
    created = serializers.IntegerField()
    skipped = serializers.IntegerField(help_text='Dates skipped because an overlapping slot exists')
    past_skipped = serializers.IntegerField(help_text='Dates skipped because the start time has passed')


class ProviderInfoSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    full_name = serializers.CharField()
    email = serializers.EmailField()


class OccupiedIntervalSerializer(serializers.Serializer):
    slot_id = serializers.UUIDField()
    date = serializers.DateField()
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    status = serializers.CharField()


class PriceSerializer(serializers.Serializer):
    duration_minutes = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)


class ProviderScheduleSerializer(serializers.Serializer):
    """Everything the booking page needs for one provider"""
    provider = ProviderInfoSerializer()
    slots = AvailabilitySlotSerializer(many=True)
    occupied = OccupiedIntervalSerializer(many=True)
    price_list = PriceSerializer(many=True)
    service_fee_rate = serializers.IntegerField(help_text='Service fee in percent')
    server_time = serializers.DateTimeField()
