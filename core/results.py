from dataclasses import dataclass, field
from typing import Any

from django.db import models
from rest_framework import status
from rest_framework.response import Response


class ErrorKind(models.TextChoices):
    VALIDATION_ERROR = "VALIDATION_ERROR", "Validation error"
    NOT_FOUND = "NOT_FOUND", "Not found"
    INVALID_STATE = "INVALID_STATE", "Invalid state"
    SAFETY_VIOLATION = "SAFETY_VIOLATION", "Safety violation"
    DATABASE_ERROR = "DATABASE_ERROR", "Database error"
    PROCESSING_ERROR = "PROCESSING_ERROR", "Processing error"
    INTERNAL_ERROR = "INTERNAL_ERROR", "Internal error"


HTTP_STATUS_BY_KIND = {
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.SAFETY_VIOLATION: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


@dataclass
class ServiceResult:
    """
    Tagged outcome of a service operation.

    Expected business-rule failures travel as ``success=False`` results, never
    as exceptions. Only persistence faults escape the service layer.
    """
    success: bool
    data: Any = None
    warnings: list = field(default_factory=list)
    error: str | None = None
    message: str = ""
    details: Any = None
    allowed_transitions: list | None = None

    @classmethod
    def ok(cls, data=None, warnings=None) -> "ServiceResult":
        return cls(success=True, data=data, warnings=list(warnings or []))

    @classmethod
    def fail(cls, error: str, message: str = "", *, details=None, allowed_transitions=None) -> "ServiceResult":
        return cls(
            success=False,
            error=str(error),
            message=message,
            details=details,
            allowed_transitions=allowed_transitions,
        )

    def to_dict(self) -> dict:
        if self.success:
            out = {"success": True, "data": self.data}
            if self.warnings:
                out["warnings"] = self.warnings
            return out

        out = {"success": False, "error": self.error, "message": self.message}
        if self.details is not None:
            out["details"] = self.details
        if self.allowed_transitions is not None:
            out["allowedTransitions"] = self.allowed_transitions
        return out

    @property
    def http_status(self) -> int:
        if self.success:
            return status.HTTP_200_OK
        return HTTP_STATUS_BY_KIND.get(self.error, status.HTTP_500_INTERNAL_SERVER_ERROR)


def as_response(result: ServiceResult, *, success_status: int = status.HTTP_200_OK) -> Response:
    code = success_status if result.success else result.http_status
    return Response(result.to_dict(), status=code)
