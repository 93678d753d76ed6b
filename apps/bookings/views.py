"""
Appointment views
"""
import logging

from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from django_filters.rest_framework import DjangoFilterBackend
from django.utils import timezone

from apps.core.pagination import AppointmentResultsSetPagination
from apps.core.results import Actor, result_response
from apps.core.utils.constants import UUID_LOOKUP_REGEX
from apps.core.serializers import ErrorResponseSerializer, SuccessResponseSerializer
from .models import Appointment
from .serializers import (
    AppointmentCreateSerializer,
    AppointmentDecisionSerializer,
    AppointmentCancelSerializer,
    AppointmentListSerializer,
    AppointmentDetailSerializer,
)
from .services.booking_engine import BookingEngine
from .services.expiration import ExpirationSweeper
from .services.lifecycle import AppointmentLifecycle

logger = logging.getLogger(__name__)


def sweep_for_user(user):
    """Resolve expired requests the user can see before serving them"""
    actor = Actor.from_user(user)
    if actor.is_provider:
        return ExpirationSweeper().sweep(provider_id=user.pk)
    if actor.is_customer:
        return ExpirationSweeper().sweep(customer_id=user.pk)
    return ExpirationSweeper().sweep()


class AppointmentViewSet(viewsets.GenericViewSet,
                         mixins.ListModelMixin,
                         mixins.RetrieveModelMixin):
    """
    ViewSet for appointments.

    Customers book and cancel; providers approve, reject and complete.
    Each party only ever sees its own appointments.
    """
    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_LOOKUP_REGEX
    pagination_class = AppointmentResultsSetPagination
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['status']

    def get_serializer_class(self):
        if self.action == 'list':
            return AppointmentListSerializer
        if self.action == 'create':
            return AppointmentCreateSerializer
        if self.action == 'update':
            return AppointmentDecisionSerializer
        if self.action == 'cancel':
            return AppointmentCancelSerializer
        return AppointmentDetailSerializer

    def get_queryset(self):
        # Handle schema generation
        if getattr(self, 'swagger_fake_view', False):
            return Appointment.objects.none()

        return (
            Appointment.objects
            .for_user(self.request.user)
            .select_related('slot', 'customer', 'provider', 'invoice')
            .order_by('-created_at')
        )

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        sweep_for_user(request.user)

    def _detail(self, appointment):
        appointment = self.get_queryset().get(pk=appointment.pk)
        return AppointmentDetailSerializer(appointment, context={'now': timezone.now()}).data

    @extend_schema(
        summary="List appointments",
        description="Appointments of the current user, newest first, 10 per page.",
        parameters=[
            OpenApiParameter('status', str, description='Filter by status'),
        ],
        responses={200: AppointmentListSerializer(many=True)},
        tags=['Appointments']
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        summary="Get appointment details",
        description="Appointment with can_cancel, can_complete, is_refund_case and the fee breakdown.",
        responses={
            200: AppointmentDetailSerializer,
            404: OpenApiResponse(description="Appointment not found")
        },
        tags=['Appointments']
    )
    def retrieve(self, request, *args, **kwargs):
        appointment = self.get_object()
        serializer = AppointmentDetailSerializer(appointment, context={'now': timezone.now()})
        return Response(serializer.data)

    @extend_schema(
        summary="Book an appointment",
        description="""
        Reserve part of a provider's availability slot.

        The interval [start_time, start_time + duration) must fit inside the
        slot and must not overlap another pending, confirmed or completed
        appointment. The payment is recorded as an invoice.
        """,
        request=AppointmentCreateSerializer,
        responses={
            201: AppointmentDetailSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
            422: ErrorResponseSerializer,
        },
        tags=['Appointments - Customer']
    )
    def create(self, request):
        serializer = AppointmentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = BookingEngine().reserve(
            Actor.from_user(request.user),
            slot_id=data['slot_id'],
            package_name=data['package_name'],
            start_time=data['start_time'],
            duration_minutes=data['duration'],
            note=data['note'],
            payment_method=data['payment_method'],
        )
        if not result.ok:
            return result_response(result)

        return result_response(
            result,
            success_status=status.HTTP_201_CREATED,
            appointment=self._detail(result.data['appointment']),
            total_amount=str(result.data['total_amount']),
        )

    @extend_schema(
        summary="Approve or reject a request",
        description="Provider decision on a pending appointment. Rejecting a paid request refunds it in full.",
        request=AppointmentDecisionSerializer,
        responses={
            200: SuccessResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
            422: ErrorResponseSerializer,
        },
        tags=['Appointments - Provider']
    )
    def update(self, request, pk=None):
        serializer = AppointmentDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AppointmentLifecycle().decide(
            pk,
            Actor.from_user(request.user),
            serializer.validated_data['action'],
        )
        if not result.ok:
            return result_response(result)
        return result_response(result, appointment=self._detail(result.data['appointment']))

    @extend_schema(
        summary="Cancel an appointment",
        description="""
        Customer cancellation, allowed up to 24 hours before the start.
        A paid appointment is refunded without the 10% service fee.
        """,
        request=AppointmentCancelSerializer,
        responses={
            200: SuccessResponseSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            422: ErrorResponseSerializer,
        },
        tags=['Appointments - Customer']
    )
    @action(detail=True, methods=['put'])
    def cancel(self, request, pk=None):
        serializer = AppointmentCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AppointmentLifecycle().cancel_by_customer(
            pk,
            Actor.from_user(request.user),
            serializer.validated_data['reason'],
        )
        if not result.ok:
            return result_response(result)
        return result_response(result, appointment=self._detail(result.data['appointment']))

    @extend_schema(
        summary="Complete an appointment",
        description="Close a confirmed session after its end time and credit the provider.",
        request=None,
        responses={
            200: SuccessResponseSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=['Appointments - Provider']
    )
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        result = AppointmentLifecycle().complete(pk, Actor.from_user(request.user))
        if not result.ok:
            return result_response(result)
        return result_response(
            result,
            appointment=self._detail(result.data['appointment']),
            commission=str(result.data['commission']),
            provider_net=str(result.data['provider_net']),
        )
