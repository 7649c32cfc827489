"""
Pytest fixtures and configuration for Marketplace Backend tests

Each test gets a fresh in-memory SQLite database with the schema created and
a small two-store catalog seeded.
"""
import uuid
from decimal import Decimal

import pytest
from jose import jwt
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.core.config import settings
from marketplace.core.database import init_db, session_scope
from marketplace.models import CartItem as CartItemRow
from marketplace.models import Order, Product, SellerOrder, SellerOrderItem, Store

from factories import BUYER_ID, LAMP, MUG, S1, S2, SELLER_1, SELLER_2, TEST_AUTH_SECRET, TOWEL, line


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_maker(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def catalog(session_maker):
    """
    Two stores:
        S1 (seller-1): standard 50.00 / 3 days, express 80.00 / 1 day
        S2 (seller-2): standard 0.00 / 5 days, express 25.00 / 2 days
    Products:
        MUG   (S1) 25.00, 10 in stock
        TOWEL (S1) 12.50, 2 in stock
        LAMP  (S2) 100.75, 5 in stock
    The buyer has two rows in the server-side cart.
    """
    with session_scope(session_maker) as session:
        session.add_all([
            Store(id=S1, owner_user_id=SELLER_1, store_name="Clay Corner",
                  standard_price=Decimal("50.00"), standard_eta_days=3,
                  express_price=Decimal("80.00"), express_eta_days=1),
            Store(id=S2, owner_user_id=SELLER_2, store_name="Bright Lights",
                  standard_price=Decimal("0.00"), standard_eta_days=5,
                  express_price=Decimal("25.00"), express_eta_days=2),
        ])
        session.flush()
        session.add_all([
            Product(id=MUG, name="Handmade Mug", price=Decimal("25.00"), quantity_available=10,
                    store_id=S1, image_url="https://img.example/mug.png"),
            Product(id=TOWEL, name="Tea Towel", price=Decimal("12.50"), quantity_available=2,
                    store_id=S1),
            Product(id=LAMP, name="Desk Lamp", price=Decimal("100.75"), quantity_available=5,
                    store_id=S2, image_url="https://img.example/lamp.png"),
        ])
        session.flush()
        session.add_all([
            CartItemRow(id=str(uuid.uuid4()), user_id=BUYER_ID, product_id=MUG, name="Handmade Mug",
                        price=Decimal("25.00"), quantity=2),
            CartItemRow(id=str(uuid.uuid4()), user_id=BUYER_ID, product_id=LAMP, name="Desk Lamp",
                        price=Decimal("100.75"), quantity=1),
        ])
    return {"stores": [S1, S2], "products": [MUG, TOWEL, LAMP]}


@pytest.fixture
def db(session_maker):
    """Read helpers that always open a fresh session (post-transaction state)"""

    class _Db:
        def quantity(self, product_id):
            with session_scope(session_maker) as session:
                return session.get(Product, product_id).quantity_available

        def count(self, model):
            with session_scope(session_maker) as session:
                return session.scalar(select(func.count()).select_from(model))

        def cart_size(self, user_id=BUYER_ID):
            with session_scope(session_maker) as session:
                return session.scalar(
                    select(func.count()).select_from(CartItemRow).where(CartItemRow.user_id == user_id)
                )

        def nothing_persisted(self):
            return (
                self.count(Order) == 0
                and self.count(SellerOrder) == 0
                and self.count(SellerOrderItem) == 0
            )

    return _Db()


@pytest.fixture
def scenario_a_cart():
    """S1: 2 x 25.00 mugs, S2: 1 x 100.75 lamp"""
    return [line(MUG, 2, "25.00", S1), line(LAMP, 1, "100.75", S2)]


@pytest.fixture
def checkout_kwargs(scenario_a_cart):
    return {
        "buyer_id": BUYER_ID,
        "cart_items": scenario_a_cart,
        "delivery_selections": {S1: "standard", S2: "standard"},
        "pickup_area": "Central",
        "pickup_point": "Main Library",
        "payment_ref": "ch_test_123",
        "frontend_grand_total": Decimal("200.75"),
    }


# ----------------------------------------------------------------------
# API fixtures
# ----------------------------------------------------------------------

@pytest.fixture
def auth_headers(monkeypatch):
    """Factory: bearer headers for a given user id"""
    monkeypatch.setattr(settings, "AUTH_SECRET", TEST_AUTH_SECRET)

    def _headers(user_id=BUYER_ID):
        token = jwt.encode({"sub": user_id, "email": f"{user_id}@example.com"}, TEST_AUTH_SECRET, algorithm="HS256")
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def client(session_maker):
    from fastapi.testclient import TestClient

    from marketplace.core.database import get_session_maker
    from marketplace.main import app

    app.dependency_overrides[get_session_maker] = lambda: session_maker
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
