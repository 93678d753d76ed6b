"""
Authentication serializers
"""
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from drf_spectacular.utils import extend_schema_field

from .models import User


class UserSerializer(serializers.ModelSerializer):
    """
    User serializer for API responses.
    """
    full_name = serializers.SerializerMethodField()

    @extend_schema_field(serializers.CharField)
    def get_full_name(self, obj):
        return obj.full_name

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'first_name',
            'last_name',
            'full_name',
            'role',
            'is_active',
            'created_at',
        ]
        read_only_fields = fields


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """JWT token serializer that embeds the user's role"""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserSerializer(self.user).data
        return data
