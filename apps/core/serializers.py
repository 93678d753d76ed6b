"""
Core serializers
"""
from rest_framework import serializers


class SuccessResponseSerializer(serializers.Serializer):
    """Standard success response with message"""
    success = serializers.BooleanField(default=True)
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response with error kind and message"""
    error = serializers.BooleanField(default=True)
    message = serializers.CharField()
    error_kind = serializers.CharField(required=False)
    status_code = serializers.IntegerField()
