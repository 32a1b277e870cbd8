from typing import Any, Dict, Optional


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """Malformed or missing input, raised before any state change."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_ERROR",
            details=details
        )


class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: Any = None):
        message = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND",
            details={"entity": entity, "id": entity_id}
        )


class InvalidStateError(AppException):
    """The requested transition is not allowed from the current status."""
    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        error_code: str = "INVALID_STATE"
    ):
        super().__init__(
            message=message,
            status_code=409,
            error_code=error_code,
            details={"current_status": current_status} if current_status else None
        )
        self.current_status = current_status


class RecordLockedError(InvalidStateError):
    def __init__(self, entity: str, current_status: str):
        super().__init__(
            message=f"{entity} is locked in status '{current_status}' and cannot be modified",
            current_status=current_status,
            error_code="RECORD_LOCKED"
        )


class ConflictError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=409,
            error_code="CONFLICT",
            details=details
        )


class PersistenceError(AppException):
    """The storage layer failed. The original error is chained, not interpreted."""
    def __init__(self, message: str = "The data store could not complete the operation"):
        super().__init__(
            message=message,
            status_code=503,
            error_code="PERSISTENCE_ERROR"
        )


class AuthenticationError(AppException):
    def __init__(self, message: str = "Could not identify the acting user"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )


class AccessDeniedError(AppException):
    """Custom permission error. Named AccessDeniedError to avoid shadowing Python's built-in PermissionError."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED"
        )
