"""
Cart Repository - the buyer's server-side cart

Reading happens before checkout; clearing happens inside the checkout
transaction so it rolls back together with the order.
"""
import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from marketplace.domain.catalog import CartItem
from marketplace.models.cart import CartItem as CartItemRow
from marketplace.models.catalog import Product

logger = logging.getLogger(__name__)


class CartRepository:

    def __init__(self, session: Session):
        self.session = session

    def read_cart(self, buyer_id: str) -> List[CartItem]:
        """
        Read the buyer's cart as checkout lines

        The owning store comes from the product row; the cart price is the
        snapshot that will be billed.
        """
        stmt = (
            select(CartItemRow, Product.store_id)
            .join(Product, Product.id == CartItemRow.product_id)
            .where(CartItemRow.user_id == buyer_id)
            .order_by(CartItemRow.created_at, CartItemRow.id)
        )
        return [
            CartItem(
                product_id=row.product_id,
                quantity=row.quantity,
                unit_price_snapshot=row.price,
                store_id=store_id,
            )
            for row, store_id in self.session.execute(stmt)
        ]

    def clear(self, buyer_id: str) -> int:
        """
        Delete every cart row of the buyer

        Returns:
            Number of rows deleted
        """
        result = self.session.execute(
            delete(CartItemRow)
            .where(CartItemRow.user_id == buyer_id)
            .execution_options(synchronize_session=False)
        )
        deleted = result.rowcount or 0
        logger.info(f"Deleted {deleted} cart items for user {buyer_id}")
        return deleted
