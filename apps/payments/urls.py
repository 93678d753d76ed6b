"""
Payment app URLs.
"""
from django.urls import path
from rest_framework.routers import DefaultRouter

from . import views

app_name = 'payments'

router = DefaultRouter()
router.register(r'invoices', views.InvoiceViewSet, basename='invoice')

urlpatterns = [
    path('earnings/', views.ProviderEarningsView.as_view(), name='provider-earnings'),
] + router.urls
