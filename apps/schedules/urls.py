from django.urls import path
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'schedules'

router = DefaultRouter()
router.register(r'availability', views.AvailabilityViewSet, basename='availability')

urlpatterns = router.urls + [
    path('providers/<uuid:provider_id>/schedule/', views.ProviderScheduleView.as_view(), name='provider-schedule'),
]
