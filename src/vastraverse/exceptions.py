from typing import Any, Dict, List, Optional
import sys
import traceback


class APIError(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        internal_message: Optional[str] = None,
    ):
        self.message = message  # User-facing message
        self.internal_message = internal_message or message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__.replace("Error", "").upper()
        self.details = details or {}

        # Stack trace of the exception being handled, if any
        self.traceback = traceback.format_exc() if sys.exc_info()[0] else None

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the JSON error envelope"""
        body: Dict[str, Any] = {
            "success": False,
            "message": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(APIError):
    """Raised when request validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, 400, "VALIDATION_ERROR", details)


class UnauthorizedError(APIError):
    """Raised when the caller is not authenticated"""

    def __init__(self, message: str = "Not authorized, no token provided"):
        super().__init__(message, 401, "UNAUTHORIZED")


class ForbiddenError(APIError):
    def __init__(self, message: str = "Access forbidden"):
        super().__init__(message, 403, "FORBIDDEN")


class NotFoundError(APIError):
    """Raised when a requested resource is not found"""

    def __init__(self, resource: str = "Resource", resource_id: Optional[Any] = None):
        message = f"{resource} not found"
        details = {"resource_id": str(resource_id)} if resource_id is not None else {}
        super().__init__(message, 404, "NOT_FOUND", details)


class ConflictError(APIError):
    """
    Raised when a write collides with existing state, e.g. a duplicate email.

    Served as 400 to keep the storefront's registration contract.
    """

    def __init__(self, message: str = "Resource conflict", conflict_field: Optional[str] = None):
        details = {"conflict_field": conflict_field} if conflict_field else {}
        super().__init__(message, 400, "CONFLICT", details)


class InsufficientStockError(APIError):
    def __init__(self, product_id: int, requested: int, available: Optional[int] = None):
        message = f"Insufficient stock for product {product_id}"
        details: Dict[str, Any] = {"product_id": product_id, "requested": requested}
        if available is not None:
            message += f". Available: {available}, requested: {requested}"
            details["available"] = available
        super().__init__(message, 400, "INSUFFICIENT_STOCK", details)


class DatabaseError(APIError):
    """Raised when database operations fail"""

    def __init__(self, message: str = "Database operation failed", operation: Optional[str] = None):
        # Internal database details are never sent to clients
        user_message = "A database error occurred. Please try again later."
        details = {"operation": operation} if operation else {}
        super().__init__(user_message, 500, "DATABASE_ERROR", details, internal_message=message)
