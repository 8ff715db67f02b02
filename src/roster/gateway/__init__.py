"""Student Gateway - Authenticated CRUD calls against the student API."""

from roster.gateway.exceptions import (
    AuthorizationDeniedError,
    GatewayError,
    RequestFailedError,
)
from roster.gateway.gateway import AUTH_DENIED_STATUSES, StudentGateway
from roster.gateway.models import StudentRecord, coerce_age

__all__ = [
    "AUTH_DENIED_STATUSES",
    "AuthorizationDeniedError",
    "GatewayError",
    "RequestFailedError",
    "StudentGateway",
    "StudentRecord",
    "coerce_age",
]
