"""
Explicit outcome values returned by the booking services.

Services never raise for business-rule failures. They return a ServiceResult
carrying an ErrorKind, and the DRF layer maps the kind to an HTTP status with
result_response().
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from rest_framework import status
from rest_framework.response import Response

from apps.core.utils.constants import USER_ROLE_CUSTOMER, USER_ROLE_PROVIDER
from apps.core.utils.helpers import format_error_response


class ErrorKind(str, Enum):
    """Failure categories a client can act on differently"""
    VALIDATION = 'validation'
    FORBIDDEN = 'forbidden'
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    PRECONDITION = 'precondition'
    INFRASTRUCTURE = 'infrastructure'


ERROR_KIND_STATUS = {
    ErrorKind.VALIDATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.PRECONDITION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INFRASTRUCTURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class Actor:
    """The user on whose behalf a service call runs."""
    user_id: UUID
    role: str

    @classmethod
    def from_user(cls, user) -> 'Actor':
        return cls(user_id=user.pk, role=user.role)

    @property
    def is_provider(self) -> bool:
        return self.role == USER_ROLE_PROVIDER

    @property
    def is_customer(self) -> bool:
        return self.role == USER_ROLE_CUSTOMER


@dataclass
class ServiceResult:
    """Outcome of a service operation."""
    ok: bool
    message: str = ''
    data: Dict[str, Any] = field(default_factory=dict)
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, message: str = '', **data) -> 'ServiceResult':
        return cls(ok=True, message=message, data=data)

    @classmethod
    def failure(cls, error_kind: ErrorKind, message: str, **data) -> 'ServiceResult':
        return cls(ok=False, message=message, data=data, error_kind=error_kind)

    @property
    def http_status(self) -> Optional[int]:
        if self.ok:
            return None
        return ERROR_KIND_STATUS[self.error_kind]


def result_response(result: ServiceResult, success_status: int = status.HTTP_200_OK, **extra) -> Response:
    """
    Render a ServiceResult with the project's response envelope.

    Extra keyword arguments are merged into the success body.
    """
    if result.ok:
        body = {'success': True, 'message': result.message}
        body.update(extra)
        return Response(body, status=success_status)

    body = format_error_response(result.message, error_kind=result.error_kind.value)
    body['status_code'] = result.http_status
    body.update(result.data)
    return Response(body, status=result.http_status)
