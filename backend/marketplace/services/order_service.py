"""
Order Service
Checkout commit: turns a multi-seller cart into one Order split into
SellerOrders, deducts stock and clears the cart in a single transaction.

Flow:
1. Reject empty carts
2. Group lines per store (FulfillmentSplitter)
3. Bulk-load products (locked) and stores
4. Per store: resolve delivery, check stock per line, compute totals
5. Soft-verify the frontend total (backend total always wins)
6-7. Persist Order, SellerOrders and SellerOrderItems
8. Deduct stock
9. Clear the buyer's cart
10. Commit (any failure above rolls everything back)
11. Re-read the committed graph outside the write transaction

Checkout is not idempotent: resubmitting the same cart creates a new Order.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence

from marketplace.core.config import settings
from marketplace.core.database import SessionLocal, SessionMaker, session_scope
from marketplace.core.exceptions import (
    BadRequestError,
    InternalError,
    NotFoundError,
    OrderError,
    OrderPersistedButFetchFailedError,
)
from marketplace.domain.base import quantize_money
from marketplace.domain.catalog import CartItem
from marketplace.domain.order import Order, SellerOrderStatus
from marketplace.models import catalog as catalog_models
from marketplace.models import order as order_models
from marketplace.repositories.cart_repository import CartRepository
from marketplace.repositories.order_repository import OrderRepository
from marketplace.repositories.product_repository import ProductRepository
from marketplace.repositories.store_repository import StoreRepository
from marketplace.services.delivery_pricer import DeliveryPricer
from marketplace.services.fulfillment_splitter import FulfillmentGroup, FulfillmentSplitter
from marketplace.services.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


class OrderService:
    """
    Buyer-side order operations

    Args:
        session_maker: Session factory; each call opens its own unit of work
    """

    def __init__(self, session_maker: Optional[SessionMaker] = None):
        self._session_maker = session_maker or SessionLocal

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def create_order(
        self,
        buyer_id: str,
        cart_items: Sequence[CartItem],
        delivery_selections: Mapping,
        pickup_area: str,
        pickup_point: str,
        payment_ref: str,
        frontend_grand_total,
    ) -> Order:
        """
        Commit a checkout and return the materialized order graph

        Raises:
            BadRequestError: empty cart, missing/invalid delivery method,
                inconsistent cart lines
            NotFoundError: unknown product or store
            InsufficientStockError: a line exceeds available stock
            InternalError: unexpected failure, nothing was persisted
            OrderPersistedButFetchFailedError: the order committed but could
                not be read back
        """
        logger.info(f"createOrder entered for user: {buyer_id}")

        if not cart_items:
            raise BadRequestError("Cart cannot be empty")

        try:
            with session_scope(self._session_maker) as session:
                logger.info(f"Transaction started for user: {buyer_id}")
                order_id = self._commit_order(
                    session,
                    buyer_id=buyer_id,
                    cart_items=cart_items,
                    delivery_selections=delivery_selections,
                    pickup_area=pickup_area,
                    pickup_point=pickup_point,
                    payment_ref=payment_ref,
                    frontend_grand_total=frontend_grand_total,
                )
                logger.info(f"Attempting to commit transaction for user: {buyer_id}")
        except OrderError as e:
            logger.warning(f"Transaction rolled back for user {buyer_id}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Transaction rolled back for user {buyer_id}: {e}", exc_info=True)
            raise InternalError("Failed to create order due to an unexpected internal error.") from e

        logger.info(f"Transaction committed successfully for user: {buyer_id}, order ID: {order_id}")
        return self._fetch_committed(order_id)

    def _commit_order(
        self,
        session,
        *,
        buyer_id: str,
        cart_items: Sequence[CartItem],
        delivery_selections: Mapping,
        pickup_area: str,
        pickup_point: str,
        payment_ref: str,
        frontend_grand_total,
    ) -> int:
        """Steps 2-9 on one session. Returns the new order ID."""
        orders = OrderRepository(session)
        ledger = StockLedger(ProductRepository(session))

        # --- 2. Group per store ---
        groups = FulfillmentSplitter.build_groups(cart_items)
        store_ids = [group.store_id for group in groups]
        product_ids = FulfillmentSplitter.product_ids(cart_items)

        # --- 3. Fetch required data within the transaction ---
        products = ledger.fetch_products(product_ids)
        stores = StoreRepository(session).fetch_by_ids(store_ids)
        pricer = DeliveryPricer(stores)

        # --- 4. Validate and calculate totals ---
        grand_total = Decimal("0.00")
        for group in groups:
            method = self._selection_for(delivery_selections, group.store_id)
            group.delivery = pricer.resolve(group.store_id, method)
            logger.debug(f"Processing store {group.store_id} with {method} delivery")

            for line in group.items:
                product = products[line.product_id]
                if product.store_id != group.store_id:
                    raise BadRequestError(
                        f"Product ID: {product.id} is not sold by store ID: {group.store_id}",
                        product_id=product.id,
                        store_id=group.store_id,
                    )
                ledger.check_available(product, line.quantity)
                self._warn_on_price_drift(buyer_id, product, line)

            grand_total += group.seller_total

        grand_total = quantize_money(grand_total)

        # --- 5. Soft verification of the frontend total ---
        if frontend_grand_total is not None:
            frontend_total = quantize_money(frontend_grand_total)
            if abs(grand_total - frontend_total) > settings.GRAND_TOTAL_TOLERANCE:
                logger.warning(
                    f"Grand total mismatch! Backend calculated: {grand_total}, "
                    f"Frontend sent: {frontend_total} for user {buyer_id}. Proceeding with backend total."
                )

        # --- 6. Main order row ---
        order = orders.add_order(order_models.Order(
            buyer_id=buyer_id,
            order_date=datetime.now(timezone.utc),
            grand_total=grand_total,
            pickup_area=pickup_area,
            pickup_point=pickup_point,
            payment_reference=payment_ref,
        ))
        logger.info(f"Created Order ID: {order.id} for user {buyer_id}")

        # --- 7. Seller orders and their items ---
        for group in groups:
            self._persist_seller_order(orders, order.id, stores[group.store_id], group, products)

        # --- 8. Stock deduction ---
        for group in groups:
            for line in group.items:
                ledger.deduct(products[line.product_id], line.quantity)

        # --- 9. Clear the buyer's cart ---
        CartRepository(session).clear(buyer_id)

        return order.id

    @staticmethod
    def _selection_for(delivery_selections: Mapping, store_id: int) -> Optional[str]:
        # JSON object keys arrive as strings when callers bypass the request model
        selections = delivery_selections or {}
        if store_id in selections:
            return selections[store_id]
        return selections.get(str(store_id))

    @staticmethod
    def _warn_on_price_drift(buyer_id: str, product: catalog_models.Product, line: CartItem) -> None:
        live_price = quantize_money(product.price)
        if abs(live_price - quantize_money(line.unit_price_snapshot)) > settings.PRICE_SNAPSHOT_TOLERANCE:
            logger.warning(
                f"Price snapshot drift for product {product.id}: snapshot {line.unit_price_snapshot}, "
                f"live {live_price} (user {buyer_id}). Billing the snapshot."
            )

    @staticmethod
    def _persist_seller_order(
        orders: OrderRepository,
        order_id: int,
        store: catalog_models.Store,
        group: FulfillmentGroup,
        products: Dict[int, catalog_models.Product],
    ) -> None:
        logger.debug(f"Creating SellerOrder for store {store.id} (Seller: {store.owner_user_id}) linked to Order {order_id}")
        seller_order = orders.add_seller_order(order_models.SellerOrder(
            order_id=order_id,
            seller_id=store.owner_user_id,
            store_id=store.id,
            delivery_method=group.delivery.method,
            delivery_price=group.delivery_price,
            delivery_eta_snapshot=group.delivery.eta_days,
            items_subtotal=group.items_subtotal,
            seller_total=group.seller_total,
            status=SellerOrderStatus.PROCESSING.value,
        ))

        items = orders.add_items([
            order_models.SellerOrderItem(
                seller_order_id=seller_order.id,
                product_id=line.product_id,
                quantity_ordered=line.quantity,
                unit_price_snapshot=quantize_money(line.unit_price_snapshot),
                product_name_snapshot=products[line.product_id].name,
            )
            for line in group.items
        ])
        logger.info(f"Saved {len(items)} items for SellerOrder ID: {seller_order.id}")

    def _fetch_committed(self, order_id: int) -> Order:
        logger.info(f"Attempting final fetch for Order ID: {order_id}")
        try:
            with session_scope(self._session_maker) as session:
                row = OrderRepository(session).find_by_id(order_id)
                if row is None:
                    raise LookupError(f"Order {order_id} not visible after commit")
                order = Order.model_validate(row)
        except Exception as e:
            logger.error(f"FAILED to fetch final order details after commit for Order ID: {order_id}. Error: {e}")
            raise OrderPersistedButFetchFailedError(order_id) from e

        logger.info(f"Successfully fetched final order details for Order ID: {order_id}")
        return order

    # ------------------------------------------------------------------
    # Buyer reads
    # ------------------------------------------------------------------

    def get_order(self, order_id: int, buyer_id: Optional[str] = None) -> Order:
        """
        One order graph

        Args:
            order_id: Order ID
            buyer_id: When given, orders of other buyers are reported as not found
        """
        with session_scope(self._session_maker) as session:
            row = OrderRepository(session).find_by_id(order_id)
            if row is None or (buyer_id is not None and row.buyer_id != buyer_id):
                raise NotFoundError("Order", order_id)
            return Order.model_validate(row)

    def list_buyer_orders(self, buyer_id: str) -> List[Order]:
        """Orders placed by one buyer, newest first"""
        logger.info(f"Finding orders for buyer user ID: {buyer_id}")
        try:
            with session_scope(self._session_maker) as session:
                orders = [Order.model_validate(row) for row in OrderRepository(session).find_by_buyer(buyer_id)]
        except Exception as e:
            logger.error(f"Failed to find orders for buyer user ID: {buyer_id}. Error: {e}")
            raise InternalError("Failed to retrieve buyer orders.") from e

        logger.info(f"Found {len(orders)} orders for buyer user ID: {buyer_id}")
        return orders
