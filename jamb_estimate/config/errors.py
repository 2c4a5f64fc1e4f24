"""JAMB Estimate error handling.

Custom exceptions and error codes for the estimate engine.
"""

from typing import Optional, Dict, Any


# Error Codes
class ErrorCode:
    """Error code constants."""

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    QUANTITY_OUT_OF_RANGE = "QUANTITY_OUT_OF_RANGE"
    MISSING_FIELD = "MISSING_FIELD"
    UNSUPPORTED_LOCATION = "UNSUPPORTED_LOCATION"

    # Pricing Service Errors
    PRICING_REQUEST_FAILED = "PRICING_REQUEST_FAILED"
    PRICING_TIMEOUT = "PRICING_TIMEOUT"
    PRICING_INVALID_RESPONSE = "PRICING_INVALID_RESPONSE"
    FINISHING_MATERIALS_FAILED = "FINISHING_MATERIALS_FAILED"

    # Order Service Errors
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ORDER_REQUEST_FAILED = "ORDER_REQUEST_FAILED"
    ORDER_INVALID_RESPONSE = "ORDER_INVALID_RESPONSE"

    # Session Store Errors
    SESSION_STORE_ERROR = "SESSION_STORE_ERROR"
    SESSION_SNAPSHOT_VERSION = "SESSION_SNAPSHOT_VERSION"


class EstimateError(Exception):
    """Base exception for estimate engine errors.

    Provides structured error information for callers.

    Attributes:
        code: Error code from ErrorCode constants
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize EstimateError.

        Args:
            code: Error code from ErrorCode constants
            message: Human-readable error message
            details: Additional error context
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API response.

        Returns:
            Dictionary with code, message, and details.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(EstimateError):
    """Validation-specific error."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details={**(details or {}), "field": field} if field else details
        )
        self.field = field


class UnsupportedLocationError(EstimateError):
    """Pricing is not available for the given postal code / country."""

    def __init__(self, message: str, zipcode: str = "", country: str = ""):
        super().__init__(
            code=ErrorCode.UNSUPPORTED_LOCATION,
            message=message,
            details={"zipcode": zipcode, "country": country}
        )


class PricingGatewayError(EstimateError):
    """Remote pricing service error."""

    def __init__(
        self,
        code: str,
        message: str,
        work_code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            details={**(details or {}), "work_code": work_code, "status_code": status_code}
        )
        self.work_code = work_code
        self.status_code = status_code


class OrderServiceError(EstimateError):
    """Composite order service error."""

    def __init__(
        self,
        code: str,
        message: str,
        order_code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            details={**(details or {}), "order_code": order_code, "status_code": status_code}
        )
        self.order_code = order_code
        self.status_code = status_code


class SessionStoreError(EstimateError):
    """Session store read/write error."""

    def __init__(self, message: str, key: Optional[str] = None, code: str = ErrorCode.SESSION_STORE_ERROR):
        super().__init__(
            code=code,
            message=message,
            details={"key": key} if key else None
        )
        self.key = key
