from typing import Optional, Dict, Any, List
import traceback
import sys


class StorefrontError(Exception):
    def __init__(self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        internal_message: Optional[str] = None):
        self.message = message  # User-facing message
        self.internal_message = internal_message or message  # Internal/debug message
        self.error_code = error_code or self.__class__.__name__.replace('Error', '').upper()
        self.details = details or {}

        # Capture stack trace for debugging
        self.traceback = traceback.format_exc() if sys.exc_info()[0] else None

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for display layers"""
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


class ValidationError(StorefrontError):
    """Raised when caller input cannot be normalized"""

    def __init__(
        self,
        message: str = "Validation failed",
        field_errors: Optional[List[Dict[str, str]]] = None
    ):
        details = {"field_errors": field_errors} if field_errors else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class StorageError(StorefrontError):
    """Raised when the durable cart storage cannot be read or written"""

    READ_OPERATIONS = ("SELECT", "READ")

    def __init__(self, message: str = "Storage operation failed", operation: Optional[str] = None):
        # Don't expose driver details to users
        if operation in self.READ_OPERATIONS:
            user_message = "Your saved cart could not be read on this device."
        else:
            user_message = "Your cart could not be saved on this device."
        details = {"operation": operation} if operation else {}
        super().__init__(
            user_message,
            "STORAGE_ERROR",
            details,
            internal_message=message  # Keep original message for logging
        )


class ItemLookupError(StorefrontError):
    """Raised when the item service fails (distinct from an item not being found)"""

    def __init__(
        self,
        service_name: str,
        message: str = "Item service unavailable",
        status_code: Optional[int] = None
    ):
        details: Dict[str, Any] = {"service": service_name}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, "ITEM_LOOKUP_ERROR", details)
        self.status_code = status_code
