"""
Seller Order Service
Seller-side views of the orders split out at checkout, plus the fulfillment
status updates sellers make afterwards.

Status updates never touch stock or totals.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from marketplace.core.database import SessionLocal, SessionMaker, session_scope
from marketplace.core.exceptions import BadRequestError, InternalError, NotFoundError
from marketplace.domain.order import SellerOrder, SellerOrderStatus
from marketplace.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class SellerOrderService:

    def __init__(self, session_maker: Optional[SessionMaker] = None):
        self._session_maker = session_maker or SessionLocal

    def list_seller_orders(self, seller_id: str) -> List[SellerOrder]:
        logger.info(f"Finding seller orders for seller user ID: {seller_id}")
        try:
            with session_scope(self._session_maker) as session:
                rows = OrderRepository(session).find_seller_orders(seller_id)
                seller_orders = [SellerOrder.model_validate(row) for row in rows]
        except Exception as e:
            logger.error(f"Failed to find seller orders for seller user ID: {seller_id}. Error: {e}")
            raise InternalError("Failed to retrieve seller orders.") from e

        logger.info(f"Found {len(seller_orders)} seller orders for seller user ID: {seller_id}")
        return seller_orders

    def calculate_seller_earnings(self, seller_id: str, status: Optional[str] = None) -> Decimal:
        """
        Sum of seller totals, optionally only for one status

        Returns:
            Decimal total, 0 when the seller has no matching orders
        """
        logger.info(f"Calculating earnings for seller: {seller_id}, status filter: {status or 'None'}")
        try:
            with session_scope(self._session_maker) as session:
                total = OrderRepository(session).sum_seller_totals(seller_id, status)
        except Exception as e:
            logger.error(f"Failed to calculate earnings for seller {seller_id}. Error: {e}")
            raise InternalError("Failed to calculate seller earnings.") from e

        logger.info(f"Calculated earnings for seller {seller_id} (status: {status or 'All'}): {total}")
        return total

    def update_status(self, seller_order_id: int, seller_id: str, status) -> SellerOrder:
        """
        Move a seller order to a new fulfillment status

        Raises:
            BadRequestError: unknown status value
            NotFoundError: no such seller order for this seller
        """
        try:
            new_status = SellerOrderStatus(status)
        except ValueError:
            raise BadRequestError(f"Invalid status value provided: {status}", status=status) from None

        logger.info(
            f"Attempting to update status for sellerOrder ID: {seller_order_id} "
            f"by seller: {seller_id} to status: {new_status.value}"
        )

        with session_scope(self._session_maker) as session:
            row = OrderRepository(session).find_seller_order(seller_order_id, seller_id)
            if row is None:
                logger.warning(f"SellerOrder with ID {seller_order_id} not found or not owned by seller {seller_id}.")
                raise NotFoundError(
                    "SellerOrder",
                    seller_order_id,
                    f"Seller order with ID {seller_order_id} not found or access denied.",
                )

            row.status = new_status.value
            session.flush()
            updated = SellerOrder.model_validate(row)

        logger.info(f"Successfully updated status for sellerOrder ID: {seller_order_id} to {new_status.value}")
        return updated
