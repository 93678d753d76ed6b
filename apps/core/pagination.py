"""
Custom pagination classes
"""
from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """
    Standard pagination with 20 items per page
    """
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class AppointmentResultsSetPagination(PageNumberPagination):
    """
    Appointment lists are paged 10 at a time
    """
    page_size = 10
    page_size_query_param = 'page_size'
    max_page_size = 50
