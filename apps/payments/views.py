"""
Payment views
"""
from decimal import Decimal

from rest_framework import mixins, viewsets
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema, OpenApiResponse

from apps.core.pagination import AppointmentResultsSetPagination
from apps.core.permissions import IsCustomer, IsProvider
from .models import Invoice, ProviderEarnings
from .serializers import InvoiceHistorySerializer, ProviderEarningsSerializer


class ProviderEarningsView(APIView):
    """
    Earnings summary of the requesting provider
    """
    permission_classes = [IsAuthenticated, IsProvider]

    @extend_schema(
        summary="Get my earnings",
        description="Completed sessions and total net amount paid to the requesting provider.",
        responses={
            200: ProviderEarningsSerializer,
            403: OpenApiResponse(description="Not a provider")
        },
        tags=['Payments - Provider']
    )
    def get(self, request):
        earnings = ProviderEarnings.objects.filter(provider=request.user).first()
        if earnings is None:
            # Nothing completed yet
            return Response({
                'provider_id': str(request.user.pk),
                'total_completed_matches': 0,
                'total_net_paid': str(Decimal('0.00')),
                'updated_at': None,
            })
        return Response(ProviderEarningsSerializer(earnings).data)


class InvoiceViewSet(viewsets.GenericViewSet, mixins.ListModelMixin):
    """
    Payment history of the requesting customer, newest first
    """
    permission_classes = [IsAuthenticated, IsCustomer]
    serializer_class = InvoiceHistorySerializer
    pagination_class = AppointmentResultsSetPagination

    def get_queryset(self):
        # Handle schema generation
        if getattr(self, 'swagger_fake_view', False):
            return Invoice.objects.none()

        return (
            Invoice.objects
            .filter(user=self.request.user)
            .select_related('appointment__provider')
            .order_by('-created_at')
        )

    @extend_schema(
        summary="List my invoices",
        description="Invoices of the requesting customer with the consultation and service fee of each booking.",
        responses={
            200: InvoiceHistorySerializer(many=True),
            403: OpenApiResponse(description="Not a customer")
        },
        tags=['Payments - Customer']
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)
