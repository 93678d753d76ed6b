"""
Payment app admin interface.
"""
from django.contrib import admin
from .models import Invoice, ProviderEarnings


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """Admin interface for invoices. Amounts are read-only."""
    list_display = [
        'transaction_ref', 'user', 'appointment', 'amount',
        'refund_amount', 'status', 'payment_method', 'created_at'
    ]
    list_filter = ['status', 'payment_method', 'created_at']
    search_fields = ['transaction_ref', 'user__email']
    readonly_fields = [
        'transaction_ref', 'user', 'appointment', 'amount',
        'created_at', 'updated_at'
    ]
    ordering = ['-created_at']

    def has_add_permission(self, request):
        """Invoices are created by the booking engine."""
        return False


@admin.register(ProviderEarnings)
class ProviderEarningsAdmin(admin.ModelAdmin):
    """Admin interface for provider earnings (read-only)."""
    list_display = ['provider', 'total_completed_matches', 'total_net_paid', 'updated_at']
    search_fields = ['provider__email']
    readonly_fields = ['provider', 'total_completed_matches', 'total_net_paid', 'created_at', 'updated_at']

    def has_add_permission(self, request):
        return False
