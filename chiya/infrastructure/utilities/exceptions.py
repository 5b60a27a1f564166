"""
Custom exceptions for the Chiya ordering platform
"""

import logging
import traceback

logger = logging.getLogger(__name__)


class ChiyaError(Exception):
    """Base exception for the ordering platform"""

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message)
        self.user_message = user_message or "An error occurred. Please try again."
        self.error_code = error_code or "GENERAL_ERROR"


class DatabaseError(ChiyaError):
    """Database-related errors"""

    def __init__(self, message: str, operation: str = None):
        super().__init__(
            message,
            "Sorry, there was a problem with our system. Please try again in a moment.",
            "DATABASE_ERROR",
        )
        self.operation = operation


class ExternalServiceError(ChiyaError):
    """Identity provider, blob storage or changefeed failures"""

    def __init__(self, message: str, service: str = None):
        super().__init__(
            message,
            "A connected service is not responding. Please try again.",
            "EXTERNAL_SERVICE_ERROR",
        )
        self.service = service


class ValidationError(ChiyaError):
    """Input validation errors"""

    def __init__(self, message: str, field: str = None):
        super().__init__(
            message, message, "VALIDATION_ERROR"  # Validation errors are user-friendly
        )
        self.field = field


class CartEmptyError(ValidationError):
    """Cart is empty when operation requires items"""

    def __init__(self):
        super().__init__("Your cart is empty. Please add some items first.", "cart")


class InvalidTableNumberError(ValidationError):
    """Table number missing, non-numeric or outside the shop's range"""

    def __init__(self, value, table_count: int | None = None):
        if table_count:
            message = f"Please enter a valid table number (1-{table_count})."
        else:
            message = "Please enter a valid table number."
        super().__init__(message, "table_number")
        self.value = value


class BusinessLogicError(ChiyaError):
    """Business rule violations"""

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message, user_message or message, "BUSINESS_ERROR")


class ShopClosedError(BusinessLogicError):
    """Shop is not accepting orders"""

    def __init__(self, shop_name: str):
        super().__init__(
            f"Shop closed: {shop_name}",
            f"{shop_name} is currently closed and not accepting orders.",
        )


class ShopNotFoundError(BusinessLogicError):
    """Shop could not be resolved"""

    def __init__(self, reference: str):
        super().__init__(
            f"Shop not found: {reference}", "This shop could not be found."
        )


class OrderNotFoundError(BusinessLogicError):
    """Order not found"""

    def __init__(self, order_id: str):
        super().__init__(f"Order not found: {order_id}", "Order not found.")
        self.order_id = order_id


class MenuItemNotFoundError(BusinessLogicError):
    """Menu item not found"""

    def __init__(self, item_id: str):
        super().__init__(
            f"Menu item not found: {item_id}", "This menu item no longer exists."
        )


class InvalidStatusTransitionError(BusinessLogicError):
    """Requested status change is not allowed by the workflow"""

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Invalid status transition: {current} -> {target}",
            f"An order that is {current} cannot be moved to {target}.",
        )
        self.current = current
        self.target = target


class OrderCreationError(DatabaseError):
    """Order creation failed"""

    def __init__(self, reason: str = None):
        super().__init__(f"Order creation failed: {reason}", "create_order")
        self.user_message = "Sorry, we couldn't place your order. Please try again."


class AuthorizationError(ChiyaError):
    """Principal lacks the admin role for the requested shop"""

    def __init__(self, message: str = "You do not have admin access."):
        super().__init__(message, "You do not have admin access.", "AUTHORIZATION_ERROR")


# pylint: disable=too-few-public-methods
class ErrorReporter:
    """Error reporting and monitoring class"""

    @staticmethod
    def report_critical_error(error: Exception):
        """Report critical errors to monitoring system"""
        logger.critical(
            "CRITICAL ERROR: %s",
            error,
            extra={
                "error_type": type(error).__name__,
                "traceback": traceback.format_exc(),
            },
        )

    @staticmethod
    def report_business_error(error: ChiyaError, context: str):
        """Report handled errors for analysis"""
        logger.info(
            "Handled error: %s - %s",
            error.error_code,
            error,
            extra={
                "error_code": error.error_code,
                "context": context,
                "error_type": type(error).__name__,
            },
        )
