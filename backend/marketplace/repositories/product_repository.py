"""
Product Repository - Data Access Layer for Products

Bulk reads for checkout and the race-safe stock decrement.
"""
from typing import Dict, Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from marketplace.models.catalog import Product


class ProductRepository:
    """
    Repository for Product data access

    All queries for products are centralized here.
    """

    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, product_id: int) -> Optional[Product]:
        return self.session.get(Product, product_id)

    def fetch_by_ids(self, product_ids: Iterable[int], for_update: bool = False) -> Dict[int, Product]:
        """
        Fetch products by ID in one query

        Args:
            product_ids: IDs to load (duplicates are ignored)
            for_update: Lock the rows until the transaction ends
                (SELECT ... FOR UPDATE; a no-op on SQLite)

        Returns:
            Dict of product_id -> Product. Missing IDs are simply absent,
            callers compare against the requested set.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}

        # Sorted IDs keep lock acquisition order stable across transactions
        stmt = select(Product).where(Product.id.in_(ids)).order_by(Product.id)
        if for_update:
            stmt = stmt.with_for_update()

        return {product.id: product for product in self.session.scalars(stmt)}

    def decrement_quantity(self, product: Product, quantity: int) -> bool:
        """
        Compare-and-swap stock decrement

        Executes UPDATE ... SET quantity_available = quantity_available - :q
        WHERE id = :id AND quantity_available >= :q, so a concurrent checkout
        that already consumed the stock makes this one fail instead of
        driving the quantity negative.

        Returns:
            True if the row was decremented, False if stock was insufficient
        """
        result = self.session.execute(
            update(Product)
            .where(Product.id == product.id, Product.quantity_available >= quantity)
            .values(quantity_available=Product.quantity_available - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False

        # Keep the in-memory row in step without marking it dirty
        set_committed_value(product, "quantity_available", product.quantity_available - quantity)
        return True

    def update_quantity(self, product_id: int, new_quantity: int) -> None:
        """Set the absolute quantity (catalog maintenance, not used by checkout)"""
        if new_quantity < 0:
            raise ValueError("quantity_available cannot be negative")
        self.session.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(quantity_available=new_quantity)
            .execution_options(synchronize_session=False)
        )

    def current_quantity(self, product_id: int) -> int:
        """Fresh read of quantity_available"""
        quantity = self.session.scalar(
            select(Product.quantity_available)
            .where(Product.id == product_id)
        )
        return quantity or 0
