"""
Catalog Domain Models

Cart lines, product summaries and delivery quotes used during checkout.
"""
from typing import Optional

from pydantic import Field

from marketplace.domain.base import ApiModel, Money


class CartItem(ApiModel):
    """
    One line of the buyer's cart as submitted at checkout

    Fields:
        product_id: Catalog product ID
        quantity: Units requested (> 0)
        unit_price_snapshot: Price the buyer saw when adding to cart; this is
            what gets billed, not the live catalog price
        store_id: Store that sells the product
    """

    product_id: int = Field(..., description="Product ID")
    quantity: int = Field(..., gt=0, description="Quantity must be a positive number")
    unit_price_snapshot: Money = Field(..., ge=0, description="Price snapshot cannot be negative")
    store_id: int = Field(..., description="Owning store ID")


class ProductSummary(ApiModel):
    """Live product data attached to order lines for display"""

    id: int
    name: str
    image_url: Optional[str] = None


class DeliveryQuote(ApiModel):
    """Delivery price and ETA of one store for one method, frozen at checkout"""

    store_id: int
    store_name: Optional[str] = None
    method: str
    price: Money
    eta_days: Optional[int] = None
