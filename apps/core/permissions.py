"""
Custom permissions for the consultation booking API
"""
from rest_framework import permissions

from apps.core.utils.constants import USER_ROLE_CUSTOMER, USER_ROLE_PROVIDER


class IsProvider(permissions.BasePermission):
    """Permission check for service providers"""
    message = "Only providers can perform this action"

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role == USER_ROLE_PROVIDER
        )


class IsCustomer(permissions.BasePermission):
    """Permission check for customers"""
    message = "Only customers can perform this action"

    def has_permission(self, request, view):
        return (
            request.user and
            request.user.is_authenticated and
            request.user.role == USER_ROLE_CUSTOMER
        )
