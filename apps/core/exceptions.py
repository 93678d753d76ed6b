"""
Custom exception handler
"""
from rest_framework.views import exception_handler
from rest_framework.exceptions import ValidationError
from rest_framework import status

from apps.core.results import ErrorKind


def custom_exception_handler(exc, context):
    """
    Custom exception handler that adds additional context.

    Serializer validation failures are reported as 422 so clients can tell
    malformed input apart from business-rule rejections (400).
    """
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ValidationError):
            response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

        message = str(exc)
        if isinstance(response.data, dict) and 'detail' in response.data:
            message = response.data['detail']
        elif isinstance(exc, ValidationError):
            message = 'The submitted data is invalid.'

        custom_response_data = {
            'error': True,
            'message': message,
            'status_code': response.status_code,
        }
        if isinstance(exc, ValidationError):
            custom_response_data['error_kind'] = ErrorKind.VALIDATION.value

        # Add field errors if present
        if isinstance(response.data, dict) and 'detail' not in response.data:
            custom_response_data['errors'] = response.data
        elif isinstance(response.data, list):
            custom_response_data['errors'] = {'non_field_errors': response.data}

        response.data = custom_response_data

    return response
