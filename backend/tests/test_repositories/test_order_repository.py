"""
Tests for OrderRepository
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from marketplace.core.database import session_scope
from marketplace.models import Order, SellerOrder, SellerOrderItem
from marketplace.repositories.order_repository import OrderRepository

from factories import BUYER_ID, LAMP, MUG, S1, S2, SELLER_1, SELLER_2


def _write_order(session, order_date, seller_status="Processing"):
    """One order: S1 sells 2 mugs with 50.00 delivery, S2 one lamp for free"""
    repo = OrderRepository(session)
    order = repo.add_order(Order(
        buyer_id=BUYER_ID,
        order_date=order_date,
        grand_total=Decimal("200.75"),
        pickup_area="Central",
        pickup_point="Main Library",
        payment_reference="ch_test_123",
    ))
    for seller_id, store_id, product_id, qty, price, delivery in (
        (SELLER_1, S1, MUG, 2, Decimal("25.00"), Decimal("50.00")),
        (SELLER_2, S2, LAMP, 1, Decimal("100.75"), Decimal("0.00")),
    ):
        subtotal = price * qty
        seller_order = repo.add_seller_order(SellerOrder(
            order_id=order.id,
            seller_id=seller_id,
            store_id=store_id,
            delivery_method="standard",
            delivery_price=delivery,
            delivery_eta_snapshot=3,
            items_subtotal=subtotal,
            seller_total=subtotal + delivery,
            status=seller_status,
        ))
        repo.add_items([SellerOrderItem(
            seller_order_id=seller_order.id,
            product_id=product_id,
            quantity_ordered=qty,
            unit_price_snapshot=price,
            product_name_snapshot=f"product {product_id}",
        )])
    return order.id


@pytest.fixture
def order_ids(session_maker, catalog):
    now = datetime.now(timezone.utc)
    with session_scope(session_maker) as session:
        older = _write_order(session, now - timedelta(days=1), seller_status="Delivered")
        newer = _write_order(session, now)
    return older, newer


class TestOrderRepository:
    """Test OrderRepository methods"""

    def test_add_order_assigns_id(self, session_maker, catalog):
        with session_scope(session_maker) as session:
            order_id = _write_order(session, datetime.now(timezone.utc))

        assert order_id is not None

    def test_find_by_id_loads_full_graph(self, session_maker, order_ids):
        with session_scope(session_maker) as session:
            order = OrderRepository(session).find_by_id(order_ids[0])

        # Graph stays usable after the session closed
        assert len(order.seller_orders) == 2
        items = [item for so in order.seller_orders for item in so.items]
        assert {item.product.name for item in items} == {"Handmade Mug", "Desk Lamp"}

    def test_find_by_id_missing(self, session_maker, catalog):
        with session_scope(session_maker) as session:
            assert OrderRepository(session).find_by_id(404) is None

    def test_find_by_buyer_newest_first(self, session_maker, order_ids):
        older, newer = order_ids
        with session_scope(session_maker) as session:
            orders = OrderRepository(session).find_by_buyer(BUYER_ID)

        assert [o.id for o in orders] == [newer, older]


class TestSellerQueries:

    def test_find_seller_orders(self, session_maker, order_ids):
        with session_scope(session_maker) as session:
            seller_orders = OrderRepository(session).find_seller_orders(SELLER_1)

        assert len(seller_orders) == 2
        assert all(so.store_id == S1 for so in seller_orders)
        assert seller_orders[0].items[0].product_id == MUG

    def test_find_seller_order_checks_owner(self, session_maker, order_ids):
        with session_scope(session_maker) as session:
            repo = OrderRepository(session)
            seller_order_id = repo.find_seller_orders(SELLER_1)[0].id

            assert repo.find_seller_order(seller_order_id, SELLER_1) is not None
            assert repo.find_seller_order(seller_order_id, SELLER_2) is None

    def test_sum_seller_totals(self, session_maker, order_ids):
        with session_scope(session_maker) as session:
            repo = OrderRepository(session)

            assert repo.sum_seller_totals(SELLER_1) == Decimal("200.00")
            assert repo.sum_seller_totals(SELLER_1, "Delivered") == Decimal("100.00")
            assert repo.sum_seller_totals(SELLER_2, "Shipped") == Decimal("0")
            assert repo.sum_seller_totals("auth0|nobody") == Decimal("0")
