"""
Checkout and order error taxonomy

Every error raised by the order services is an OrderError. The HTTP layer
renders them with their own status code, so callers can tell exactly which
precondition failed (which product, which store, which delivery method).
"""
from typing import Any, Dict, Optional


class OrderError(Exception):
    """Base class for typed order errors"""

    status_code = 500
    code = "order_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        return {"status": "error", "code": self.code, "detail": self.message, **self.details}


class BadRequestError(OrderError):
    """Empty cart, missing selections or inconsistent cart lines"""

    status_code = 400
    code = "bad_request"


class InvalidDeliveryMethodError(BadRequestError):
    code = "invalid_delivery_method"

    def __init__(self, store_id: int, delivery_method: Optional[str]):
        super().__init__(
            f"Invalid or missing delivery method ('{delivery_method}') for store ID: {store_id}. "
            f"Must be 'standard' or 'express'.",
            store_id=store_id,
            delivery_method=delivery_method,
        )


class NotFoundError(OrderError):
    status_code = 404
    code = "not_found"

    def __init__(self, entity: str, entity_id: Any, message: Optional[str] = None):
        super().__init__(
            message or f"{entity} not found for ID: {entity_id}",
            entity=entity,
            id=entity_id,
        )


class InsufficientStockError(OrderError):
    """Requested quantity exceeds available inventory (conflict)"""

    status_code = 409
    code = "insufficient_stock"

    def __init__(self, product_id: int, product_name: Optional[str], requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product: {product_name} (ID: {product_id}). Only {available} available.",
            product_id=product_id,
            product_name=product_name,
            requested=requested,
            available=available,
        )


class InternalError(OrderError):
    status_code = 500
    code = "internal_error"


class OrderPersistedButFetchFailedError(InternalError):
    """The order committed, only reading it back failed. Do not resubmit."""

    code = "order_persisted_fetch_failed"

    def __init__(self, order_id: int):
        super().__init__(
            "Order was created successfully, but failed to retrieve the final details.",
            order_id=order_id,
        )
