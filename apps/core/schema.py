"""
Custom AutoSchema for automatic tag assignment
"""
from drf_spectacular.openapi import AutoSchema


class CustomAutoSchema(AutoSchema):
    """
    Custom schema that automatically assigns tags based on ViewSet and action
    """

    def get_tags(self):
        """Auto-assign tags based on ViewSet class and action"""
        tags = super().get_tags()

        if tags:
            return tags

        view = self.view
        view_name = view.__class__.__name__
        action = getattr(view, 'action', None)

        tag_mapping = {
            'AvailabilityViewSet': ['Availability - Provider'],
            'ProviderScheduleView': ['Availability - Public'],
            'AppointmentViewSet': self._get_appointment_tag(action),
            'ProviderEarningsView': ['Payments - Provider'],
        }

        return tag_mapping.get(view_name, ['api'])

    def _get_appointment_tag(self, action):
        """Get tag for appointment endpoints"""
        customer_actions = ['create', 'cancel']
        provider_actions = ['update', 'complete']

        if action in customer_actions:
            return ['Appointments - Customer']
        elif action in provider_actions:
            return ['Appointments - Provider']
        return ['Appointments']
