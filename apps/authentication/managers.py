"""
Custom user manager
"""
from django.contrib.auth.base_user import BaseUserManager

from apps.core.utils.constants import USER_ROLE_ADMIN


class UserManager(BaseUserManager):
    """
    User manager keyed on email.
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a user.
        """
        if not email:
            raise ValueError('The Email field must be set')

        extra_fields.setdefault('is_active', True)

        user = self.model(
            email=self.normalize_email(email),
            **extra_fields
        )

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create and save a superuser with email and password.
        """
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', USER_ROLE_ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password=password, **extra_fields)
