"""
PrintShip Exception Hierarchy

All exceptions carry a code, message and details so they can be logged and
rendered the same way.

Exception Hierarchy:
    PrintShipError
    ├── ValidationError
    │   └── UnknownOptionError
    ├── CourierError
    │   ├── CourierAuthError
    │   └── CourierResponseError
    └── ShipmentError
        ├── ShipmentNotSupportedError
        └── UnknownCourierError
"""
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class PrintShipError(Exception):
    """
    Base exception for all PrintShip errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging
        status_code: HTTP status used when the error escapes a route
    """

    default_code: str = "PRINTSHIP_ERROR"
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
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================

class ValidationError(PrintShipError):
    """Bad request shape or values."""
    default_code = "VALIDATION_ERROR"
    status_code = 400


class UnknownOptionError(ValidationError):
    """A print option is not one of the published option keys."""
    default_code = "UNKNOWN_OPTION"

    def __init__(self, option: str, value: Any, **kwargs):
        self.option = option
        self.value = value
        details = kwargs.pop("details", {})
        details.update({"option": option, "value": value})
        super().__init__(f"Unknown {option}: {value}", details=details, **kwargs)


# =============================================================================
# COURIER ERRORS
# =============================================================================

class CourierError(PrintShipError):
    """Base exception for courier integration errors."""
    default_code = "COURIER_ERROR"
    status_code = 502

    def __init__(self, message: str, courier_id: Optional[str] = None, **kwargs):
        self.courier_id = courier_id
        details = kwargs.pop("details", {})
        details["courier_id"] = courier_id
        super().__init__(message, details=details, **kwargs)


class CourierAuthError(CourierError):
    """Missing or rejected courier credentials."""
    default_code = "COURIER_AUTH_FAILED"


class CourierResponseError(CourierError):
    """Courier answered with a non-2xx status or an unusable body."""
    default_code = "COURIER_BAD_RESPONSE"


# =============================================================================
# SHIPMENT ERRORS
# =============================================================================

class ShipmentError(PrintShipError):
    """Shipment booking/cancellation failures."""
    default_code = "SHIPMENT_FAILED"
    status_code = 502


class ShipmentNotSupportedError(ShipmentError):
    """Courier has no shipment-booking capability."""
    default_code = "SHIPMENT_NOT_SUPPORTED"
    status_code = 400


class UnknownCourierError(ShipmentError):
    """Courier id does not match any registered adapter."""
    default_code = "UNKNOWN_COURIER"
    status_code = 400
