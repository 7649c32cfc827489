"""
Database models
"""
from .catalog import Store, Product
from .cart import CartItem
from .order import Order, SellerOrder, SellerOrderItem

__all__ = [
    "Store",
    "Product",
    "CartItem",
    "Order",
    "SellerOrder",
    "SellerOrderItem",
]
