"""
Domain exceptions raised by the service layer.

Services never raise ``HTTPException`` directly. Each exception carries the
HTTP status and machine-readable code it is rendered with; the handlers in
``zenith.main`` translate them into the uniform error body.
"""

from typing import Any, Dict, Optional

from fastapi import status


class ZenithError(Exception):
    """Base exception for business rule violations."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(ZenithError):
    """Raised when a requested entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "RESOURCE_NOT_FOUND"

    @classmethod
    def for_id(cls, resource: str, resource_id: Any) -> "ResourceNotFoundError":
        return cls(f"{resource} not found with id: {resource_id}")


class DuplicateResourceError(ZenithError):
    status_code = status.HTTP_409_CONFLICT
    code = "DUPLICATE_RESOURCE"


class ResourceInUseError(ZenithError):
    """Raised when deleting an entity that other records still reference."""

    status_code = status.HTTP_409_CONFLICT
    code = "RESOURCE_HAS_DEPENDENTS"


class UnauthorizedError(ZenithError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"


class ForbiddenError(ZenithError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class ValidationError(ZenithError):
    """Malformed input or an illegal parameter combination."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
