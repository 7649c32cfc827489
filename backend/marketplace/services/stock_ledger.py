"""
Stock Ledger
Sole authority on whether enough stock is available, and the only writer of
Product.quantity_available during checkout.

Deductions are executed on the caller's session, so they commit or roll back
together with the order that caused them.
"""
import logging
from typing import Dict, Iterable

from marketplace.core.exceptions import InsufficientStockError, NotFoundError
from marketplace.models.catalog import Product
from marketplace.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class StockLedger:

    def __init__(self, products: ProductRepository):
        self.products = products

    def fetch_products(self, product_ids: Iterable[int], for_update: bool = True) -> Dict[int, Product]:
        """
        Load (and lock) every requested product

        Raises:
            NotFoundError: for the first requested ID missing from the result
        """
        requested = list(dict.fromkeys(product_ids))
        found = self.products.fetch_by_ids(requested, for_update=for_update)

        if len(found) != len(requested):
            missing = [pid for pid in requested if pid not in found]
            logger.error(f"Products not found: {missing}")
            raise NotFoundError("Product", missing[0], f"Product details not found for product ID: {missing[0]}")

        return found

    @staticmethod
    def reserve_and_deduct(product_id: int, quantity_needed: int, current_quantity: int,
                           product_name: str = None) -> int:
        """
        Pure availability check

        Returns:
            The quantity left after the deduction

        Raises:
            InsufficientStockError: quantity_needed > current_quantity
        """
        if quantity_needed > current_quantity:
            logger.warning(
                f"Insufficient stock for product {product_id} ({product_name}). "
                f"Required: {quantity_needed}, Available: {current_quantity}"
            )
            raise InsufficientStockError(product_id, product_name, quantity_needed, current_quantity)
        return current_quantity - quantity_needed

    def check_available(self, product: Product, quantity: int) -> int:
        return self.reserve_and_deduct(product.id, quantity, product.quantity_available, product.name)

    def deduct(self, product: Product, quantity: int) -> int:
        """
        Persist a deduction inside the current transaction

        Returns:
            New quantity_available

        Raises:
            InsufficientStockError: the stock was consumed by a concurrent
                checkout after it was checked
        """
        new_quantity = self.check_available(product, quantity)
        logger.debug(f"Updating stock for product {product.id} from {product.quantity_available} to {new_quantity}")

        if not self.products.decrement_quantity(product, quantity):
            current = self.products.current_quantity(product.id)
            logger.warning(f"Stock for product {product.id} changed concurrently, {current} left")
            raise InsufficientStockError(product.id, product.name, quantity, current)

        return new_quantity
