"""
Repository Layer - Data Access

This layer handles all database queries for one SQLAlchemy session.
Every repository works inside the caller's transaction and never commits.
"""
from marketplace.repositories.product_repository import ProductRepository
from marketplace.repositories.store_repository import StoreRepository
from marketplace.repositories.cart_repository import CartRepository
from marketplace.repositories.order_repository import OrderRepository

__all__ = [
    'ProductRepository',
    'StoreRepository',
    'CartRepository',
    'OrderRepository',
]
