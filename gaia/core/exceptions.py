"""
GAIA exception hierarchy

Every domain error carries a human-readable message, a machine-readable code
and optional details. Route handlers let these propagate; the handlers in
`gaia.core.error_handler` turn them into `{"message": ...}` JSON bodies with
the status code declared on the class.

Exception Hierarchy:
    GaiaBaseError
    ├── ValidationError            400
    │   └── ConflictError          400
    ├── AuthenticationError        401
    ├── PermissionDeniedError      403
    ├── NotFoundError              404
    └── OrderError
        ├── OrderStateError        400
        └── OrderPersistenceError  500
"""
from typing import Any, Dict, Optional


class GaiaBaseError(Exception):
    """
    Base exception for all GAIA custom errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for logging
        details: Additional context for debugging
        status_code: HTTP status returned to API clients
    """

    default_code: str = "GAIA_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(GaiaBaseError):
    """Request payload is missing or malformed."""
    default_code = "VALIDATION_ERROR"
    status_code = 400


class ConflictError(ValidationError):
    """A unique value (email, name, section/key) is already taken."""
    default_code = "CONFLICT"


class AuthenticationError(GaiaBaseError):
    default_code = "UNAUTHORIZED"
    status_code = 401


class PermissionDeniedError(GaiaBaseError):
    default_code = "FORBIDDEN"
    status_code = 403


class NotFoundError(GaiaBaseError):
    default_code = "NOT_FOUND"
    status_code = 404


# =============================================================================
# ORDER ERRORS
# =============================================================================

class OrderError(GaiaBaseError):
    """Base exception for order workflow errors."""
    default_code = "ORDER_ERROR"


class OrderStateError(OrderError):
    """Requested transition is not allowed from the order's current status."""
    default_code = "ORDER_INVALID_STATE"
    status_code = 400

    def __init__(self, message: str, order_id: Optional[int] = None, status: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details.update({"order_id": order_id, "status": status})
        super().__init__(message, details=details, **kwargs)


class OrderPersistenceError(OrderError):
    """The order transaction failed and was rolled back."""
    default_code = "ORDER_WRITE_FAILED"
    status_code = 500
