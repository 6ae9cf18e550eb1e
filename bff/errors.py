"""
Common Errors

Error constants and the application exception hierarchy. Every exception
carries {status_code, code, message} so the HTTP layer can render it
without inspecting its shape.
"""

from typing import Any

# Request errors
ERROR_INVALID_REQUEST = "Invalid request"
ERROR_VALIDATION_FAILED = "Validation failed"
ERROR_CART_ITEMS_REQUIRED = "Cart items are required"
ERROR_ORDER_ID_REQUIRED = "Order ID is required"
ERROR_EMAIL_REQUIRED = "Email is required"
ERROR_REVIEW_FIELDS_REQUIRED = "All fields are required"
ERROR_ORDER_ITEMS_REQUIRED = "Order must contain at least one item"
ERROR_BILLING_REQUIRED = "Billing information is required"
ERROR_REFUND_AMOUNT_REQUIRED = "Refund amount is required"

# Auth errors
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_FORBIDDEN = "Forbidden"
ERROR_API_KEY_REQUIRED = "API key is required"
ERROR_API_KEY_INVALID = "Invalid API key"

# Upstream errors
ERROR_UPSTREAM = "WooCommerce API error"
ERROR_UPSTREAM_UNAVAILABLE = "WooCommerce service unavailable"
ERROR_SYNC_TIMEOUT = "Cart sync timed out"

# Payment errors
ERROR_PAYMENT_UNCONFIGURED = "Payment service unavailable (Configuration missing)"
ERROR_PAYMENT_FAILED = "Payment creation failed"
ERROR_ORDER_NOT_FOUND = "Order not found or WC error"

# Generic errors
ERROR_INTERNAL = "Internal server error"
ERROR_NOT_FOUND = "Resource not found"
ERROR_PRODUCT_NOT_FOUND = "Product not found"


class AppError(Exception):
    """Base error rendered as {success: false, message, code}."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = "internal_error",
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details


class ValidationError(AppError):
    def __init__(self, message: str = ERROR_VALIDATION_FAILED, errors: list | None = None):
        super().__init__(message, 400, "validation_error")
        self.errors = errors or []


class UnauthorizedError(AppError):
    def __init__(self, message: str = ERROR_UNAUTHORIZED, code: str = "unauthorized"):
        super().__init__(message, 401, code)


class ForbiddenError(AppError):
    def __init__(self, message: str = ERROR_FORBIDDEN, code: str = "forbidden"):
        super().__init__(message, 403, code)


class NotFoundError(AppError):
    def __init__(self, message: str = ERROR_NOT_FOUND, code: str = "not_found"):
        super().__init__(message, 404, code)
