"""
Order Repository - Data Access Layer for Orders

Writes the Order -> SellerOrder -> SellerOrderItem graph and reads it back
with related products eagerly loaded (no N+1 on the order pages).
"""
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from marketplace.models.order import Order, SellerOrder, SellerOrderItem


class OrderRepository:
    """
    Repository for Order data access

    All queries for orders and seller orders are centralized here.
    """

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Writes (inside the checkout transaction)
    # ------------------------------------------------------------------

    def add_order(self, order: Order) -> Order:
        """Persist the order row and assign its ID"""
        self.session.add(order)
        self.session.flush()
        return order

    def add_seller_order(self, seller_order: SellerOrder) -> SellerOrder:
        self.session.add(seller_order)
        self.session.flush()
        return seller_order

    def add_items(self, items: List[SellerOrderItem]) -> List[SellerOrderItem]:
        self.session.add_all(items)
        self.session.flush()
        return items

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    def _with_graph(stmt):
        return stmt.options(
            selectinload(Order.seller_orders)
            .selectinload(SellerOrder.items)
            .selectinload(SellerOrderItem.product)
        )

    def find_by_id(self, order_id: int) -> Optional[Order]:
        """
        Find order by ID with seller orders, items and products

        Args:
            order_id: Internal order ID

        Returns:
            Order with all related data or None if not found
        """
        stmt = self._with_graph(select(Order).where(Order.id == order_id))
        return self.session.scalars(stmt).first()

    def find_by_buyer(self, buyer_id: str) -> List[Order]:
        """Orders of one buyer, newest first"""
        stmt = self._with_graph(
            select(Order)
            .where(Order.buyer_id == buyer_id)
            .order_by(Order.order_date.desc(), Order.id.desc())
        )
        return list(self.session.scalars(stmt))

    def find_seller_orders(self, seller_id: str) -> List[SellerOrder]:
        """Seller orders of one seller with their items, newest first"""
        stmt = (
            select(SellerOrder)
            .where(SellerOrder.seller_id == seller_id)
            .options(selectinload(SellerOrder.items).selectinload(SellerOrderItem.product))
            .order_by(SellerOrder.id.desc())
        )
        return list(self.session.scalars(stmt))

    def find_seller_order(self, seller_order_id: int, seller_id: str) -> Optional[SellerOrder]:
        """Seller order by ID, only if it belongs to the given seller"""
        stmt = (
            select(SellerOrder)
            .where(SellerOrder.id == seller_order_id, SellerOrder.seller_id == seller_id)
            .options(selectinload(SellerOrder.items).selectinload(SellerOrderItem.product))
        )
        return self.session.scalars(stmt).first()

    def sum_seller_totals(self, seller_id: str, status: Optional[str] = None) -> Decimal:
        """
        Sum of seller_total for one seller

        Args:
            seller_id: Seller user ID
            status: Optional status filter

        Returns:
            Total as Decimal, 0 when the seller has no matching orders
        """
        stmt = select(func.sum(SellerOrder.seller_total)).where(SellerOrder.seller_id == seller_id)
        if status:
            stmt = stmt.where(SellerOrder.status == status)

        total = self.session.scalar(stmt)
        return Decimal(str(total)) if total is not None else Decimal("0")
