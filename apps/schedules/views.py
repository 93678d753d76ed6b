"""
Availability views
"""
from rest_framework import viewsets, status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse, OpenApiTypes

from apps.bookings.services.expiration import ExpirationSweeper
from apps.core.permissions import IsProvider
from apps.core.results import Actor, result_response
from apps.core.serializers import ErrorResponseSerializer, SuccessResponseSerializer
from apps.core.utils.constants import SLOT_LIST_UPCOMING, UUID_LOOKUP_REGEX
from .serializers import (
    AvailabilitySlotSerializer,
    SlotListQuerySerializer,
    SlotCreateSerializer,
    SlotCreateResponseSerializer,
    SlotUpdateSerializer,
    ProviderScheduleSerializer,
)
from .services.slot_registry import SlotRegistry


class AvailabilityViewSet(viewsets.GenericViewSet):
    """
    ViewSet for a provider's own availability slots.
    """
    permission_classes = [IsAuthenticated, IsProvider]
    lookup_value_regex = UUID_LOOKUP_REGEX
    serializer_class = AvailabilitySlotSerializer

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        ExpirationSweeper().sweep(provider_id=request.user.pk)

    @extend_schema(
        summary="List my slots",
        description="Upcoming slots soonest first, or past slots most recent first with type=history.",
        parameters=[
            OpenApiParameter('type', OpenApiTypes.STR, enum=['upcoming', 'history'], description='Listing mode'),
        ],
        responses={200: AvailabilitySlotSerializer(many=True)},
    )
    def list(self, request):
        query = SlotListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        mode = query.validated_data.get('type', SLOT_LIST_UPCOMING)

        result = SlotRegistry().list_slots(Actor.from_user(request.user), mode)
        if not result.ok:
            return result_response(result)
        return Response(AvailabilitySlotSerializer(result.data['slots'], many=True).data)

    @extend_schema(
        summary="Open slots on several dates",
        description="""
        Create the same working hours on each given date.
        Dates already in the past and dates with an overlapping slot are skipped.
        """,
        request=SlotCreateSerializer,
        responses={
            201: SlotCreateResponseSerializer,
            403: ErrorResponseSerializer,
            422: ErrorResponseSerializer,
        },
    )
    def create(self, request):
        serializer = SlotCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = SlotRegistry().create_slots(
            Actor.from_user(request.user),
            data['dates'],
            data['start_time'],
            data['end_time'],
        )
        return result_response(result, success_status=status.HTTP_201_CREATED, **result.data)

    @extend_schema(
        summary="Move a slot",
        description="Change the hours of a slot that has no bookings yet.",
        request=SlotUpdateSerializer,
        responses={
            200: AvailabilitySlotSerializer,
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
    )
    def update(self, request, pk=None):
        serializer = SlotUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = SlotRegistry().update_slot(
            Actor.from_user(request.user),
            pk,
            serializer.validated_data['start_time'],
            serializer.validated_data['end_time'],
        )
        if not result.ok:
            return result_response(result)
        return result_response(result, slot=AvailabilitySlotSerializer(result.data['slot']).data)

    @extend_schema(
        summary="Delete a slot",
        description="Slots with pending or confirmed appointments cannot be deleted.",
        responses={
            200: SuccessResponseSerializer,
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
    )
    def destroy(self, request, pk=None):
        result = SlotRegistry().delete_slot(Actor.from_user(request.user), pk)
        return result_response(result)


class ProviderScheduleView(APIView):
    """
    Public booking schedule of a provider
    """
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Provider booking schedule",
        description="Open slots, already occupied intervals and package prices of a provider.",
        responses={
            200: ProviderScheduleSerializer,
            403: OpenApiResponse(description="Provider inactive or unknown")
        },
    )
    def get(self, request, provider_id):
        ExpirationSweeper().sweep(provider_id=provider_id)

        result = SlotRegistry().provider_schedule(provider_id)
        if not result.ok:
            return result_response(result)
        return Response(ProviderScheduleSerializer(result.data).data)
