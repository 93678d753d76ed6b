"""
Authentication admin configuration
"""
from django.contrib import admin
from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """
    Admin configuration for User model
    """
    list_display = ['email', 'full_name', 'role', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'created_at']
    search_fields = ['email', 'first_name', 'last_name']
    ordering = ['-created_at']

    fieldsets = (
        ('Account', {
            'fields': ('id', 'email')
        }),
        ('Personal Info', {
            'fields': ('first_name', 'last_name')
        }),
        ('Role & Status', {
            'fields': ('role', 'is_active', 'is_staff')
        }),
        ('Timestamps', {
            'fields': ('created_at',)
        }),
    )

    readonly_fields = ['id', 'created_at']
