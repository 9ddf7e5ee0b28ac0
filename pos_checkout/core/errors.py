"""
Error taxonomy for the cart and checkout engine.

Every failure carries a stable ``code`` and an HTTP-style ``status_code`` so
that adapters can report it without knowing the concrete class. Cart state is
never modified on any of these paths, which makes retrying always safe.
"""

from typing import Any, Optional


class PosError(Exception):
    """Base class for all cart/checkout errors"""

    code = "POS_ERROR"
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.code,
            "message": self.message,
            **self.details,
        }


# ==================== Local validation ====================

class ValidationError(PosError):
    """Detected locally; the action is blocked before any network call"""

    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Invalid data"


class EmptyCart(ValidationError):
    code = "EMPTY_CART"
    default_message = "Cart is empty"


class NonPositiveTotal(ValidationError):
    code = "NON_POSITIVE_TOTAL"

    def __init__(self, total: int):
        super().__init__(f"Order total must be positive, got {total}", total=total)


class InvalidDiscount(ValidationError):
    code = "INVALID_DISCOUNT"
    default_message = "Invalid discount"


class InvalidQuantity(ValidationError):
    code = "INVALID_QUANTITY"
    default_message = "Quantity must be a positive integer"


class InvalidCustomer(ValidationError):
    code = "INVALID_CUSTOMER"
    default_message = "Invalid customer information"


class InsufficientPayment(ValidationError):
    code = "INSUFFICIENT_PAYMENT"

    def __init__(self, amount_paid: int, total: int):
        super().__init__(
            f"Amount paid {amount_paid} does not cover the total {total}",
            amount_paid=amount_paid,
            total=total,
        )


class MalformedProduct(ValidationError):
    code = "MALFORMED_PRODUCT"
    default_message = "Catalog returned a malformed product record"


class NotFoundError(PosError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


# ==================== Stock / concurrency ====================

class StockExceeded(PosError):
    """Advisory stock pre-check failed"""

    code = "STOCK_EXCEEDED"
    status_code = 409

    def __init__(self, product_id: str, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Only {available} left in stock for {product_id} (requested {requested})",
            product_id=product_id,
            requested=requested,
            available=available,
        )


class AlreadySubmitting(PosError):
    code = "ALREADY_SUBMITTING"
    status_code = 409
    default_message = "A checkout is already in progress"


class InvalidTransition(PosError):
    code = "INVALID_TRANSITION"
    status_code = 409

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change order status from {current} to {target}",
            current=current,
            target=target,
        )


# ==================== Backend ====================

class NetworkError(PosError):
    """The backend could not be reached; retry is safe"""

    code = "NETWORK_ERROR"
    status_code = 503
    default_message = "Could not reach the order service"


class ServerRejection(PosError):
    """The backend refused the request; message is surfaced verbatim"""

    code = "SERVER_REJECTION"
    status_code = 422
    default_message = "Request rejected by the order service"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None, **details: Any):
        super().__init__(message, **details)
        if status_code is not None:
            self.status_code = status_code
