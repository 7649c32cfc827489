"""
Order Domain Models

Represents the checkout request and the materialized order graph
(Order -> SellerOrder -> SellerOrderItem) returned to callers.
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import Field

from marketplace.domain.base import ApiModel, Money
from marketplace.domain.catalog import CartItem, ProductSummary


class SellerOrderStatus(str, Enum):
    """
    Fulfillment states of a seller order.

    Checkout always creates PROCESSING; later states are set by the seller.
    """
    PROCESSING = "Processing"
    PACKAGING = "Packaging"
    READY_FOR_PICKUP = "Ready for Pickup"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class CreateOrderRequest(ApiModel):
    """
    Checkout request

    Fields:
        cart_items: Flat list of cart lines, possibly from several stores
        delivery_selections: store_id -> 'standard' | 'express'
        pickup_area: Selected pickup area
        pickup_point: Selected pickup point
        payment_ref: Reference of the already captured charge
        frontend_grand_total: Total shown to the buyer (advisory only)
    """

    cart_items: List[CartItem] = Field(default_factory=list)
    delivery_selections: Dict[int, str] = Field(default_factory=dict)
    pickup_area: str = Field(..., min_length=1, description="Pickup area must be selected")
    pickup_point: str = Field(..., min_length=1, description="Pickup point must be selected")
    payment_ref: str = Field(..., min_length=1, description="Payment reference is missing")
    frontend_grand_total: Money = Field(..., ge=0)


class SellerOrderItem(ApiModel):
    id: int
    seller_order_id: int
    product_id: int
    quantity_ordered: int
    unit_price_snapshot: Money
    product_name_snapshot: Optional[str] = None
    product: Optional[ProductSummary] = None


class SellerOrder(ApiModel):
    id: int
    order_id: int
    seller_id: str
    store_id: int
    delivery_method: str
    delivery_price: Money
    delivery_eta_snapshot: Optional[int] = None
    items_subtotal: Money
    seller_total: Money
    status: str
    items: List[SellerOrderItem] = Field(default_factory=list)


class Order(ApiModel):
    id: int
    buyer_id: str
    order_date: datetime
    grand_total: Money
    pickup_area: Optional[str] = None
    pickup_point: Optional[str] = None
    payment_reference: Optional[str] = None
    seller_orders: List[SellerOrder] = Field(default_factory=list)


class StatusUpdate(ApiModel):
    status: SellerOrderStatus


class SellerEarnings(ApiModel):
    total_earnings: Money
