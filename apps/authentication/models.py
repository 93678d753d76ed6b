"""
User model for providers, customers and admins
"""
import uuid

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from apps.core.utils.constants import (
    USER_ROLES,
    USER_ROLE_CUSTOMER,
    USER_ROLE_PROVIDER,
)
from .managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """
    Platform user. Identity and profile management live outside the booking
    engine; it only needs the role and whether the account is active.
    A provider with is_active=False is treated as deactivated and cannot be booked.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Basic fields
    email = models.EmailField(unique=True, db_index=True)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)

    # User role
    role = models.CharField(
        max_length=20,
        choices=USER_ROLES,
        default=USER_ROLE_CUSTOMER,
        db_index=True
    )

    # Status
    is_active = models.BooleanField(default=True)

    # Admin fields
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['-created_at']

    def __str__(self):
        return self.email

    @property
    def full_name(self):
        """Return user's full name"""
        return f"{self.first_name} {self.last_name}".strip() or self.email

    def is_provider(self):
        return self.role == USER_ROLE_PROVIDER

    def is_customer(self):
        return self.role == USER_ROLE_CUSTOMER
