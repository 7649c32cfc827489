"""
Domain Layer - Business Entities

Pydantic models for checkout requests and the materialized order graph.
These models enforce type safety and validation across the application.
"""
from marketplace.domain.catalog import CartItem, DeliveryQuote, ProductSummary
from marketplace.domain.order import (
    CreateOrderRequest,
    Order,
    SellerOrder,
    SellerOrderItem,
    SellerEarnings,
    SellerOrderStatus,
    StatusUpdate,
)

__all__ = [
    'CartItem',
    'DeliveryQuote',
    'ProductSummary',
    'CreateOrderRequest',
    'Order',
    'SellerOrder',
    'SellerOrderItem',
    'SellerEarnings',
    'SellerOrderStatus',
    'StatusUpdate',
]
