#!/usr/bin/env python3
"""
Create the Marketplace schema (and optionally a demo catalog)
=============================================================

Creates every table registered on the SQLAlchemy metadata in the database
pointed to by DATABASE_URL. With --seed, two demo stores with a few products
and a cart for a demo buyer are added so checkout can be tried locally.

Usage:
    python3 scripts/init_db.py
    python3 scripts/init_db.py --seed --buyer "auth0|demo-buyer"
"""
import argparse
import os
import sys
import uuid
from decimal import Decimal

from dotenv import load_dotenv

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.abspath(os.path.join(SCRIPT_DIR, '..'))
sys.path.insert(0, BACKEND_DIR)

load_dotenv(os.path.join(BACKEND_DIR, '.env'))

from marketplace.core.config import settings  # noqa: E402
from marketplace.core.database import init_db, session_scope  # noqa: E402
from marketplace.models import CartItem, Product, Store  # noqa: E402


def seed_demo_catalog(buyer_id: str) -> None:
    """Two stores, four products and a two-line cart for buyer_id"""
    with session_scope() as session:
        if session.query(Store).count():
            print("  ⚠️  Stores already exist, skipping seed")
            return

        pottery = Store(owner_user_id="auth0|demo-seller-1", store_name="Clay Corner",
                        standard_price=Decimal("50.00"), standard_eta_days=3,
                        express_price=Decimal("80.00"), express_eta_days=1)
        lighting = Store(owner_user_id="auth0|demo-seller-2", store_name="Bright Lights",
                         standard_price=Decimal("0.00"), standard_eta_days=5,
                         express_price=Decimal("25.00"), express_eta_days=2)
        session.add_all([pottery, lighting])
        session.flush()

        mug = Product(name="Handmade Mug", price=Decimal("25.00"), quantity_available=10, store_id=pottery.id)
        bowl = Product(name="Serving Bowl", price=Decimal("42.00"), quantity_available=4, store_id=pottery.id)
        lamp = Product(name="Desk Lamp", price=Decimal("100.75"), quantity_available=5, store_id=lighting.id)
        bulb = Product(name="LED Bulb", price=Decimal("6.50"), quantity_available=50, store_id=lighting.id)
        session.add_all([mug, bowl, lamp, bulb])
        session.flush()

        session.add_all([
            CartItem(id=str(uuid.uuid4()), user_id=buyer_id, product_id=mug.id,
                     name=mug.name, price=mug.price, quantity=2),
            CartItem(id=str(uuid.uuid4()), user_id=buyer_id, product_id=lamp.id,
                     name=lamp.name, price=lamp.price, quantity=1),
        ])

    print(f"  ✅ Seeded 2 stores, 4 products and a cart for {buyer_id}")


def main():
    parser = argparse.ArgumentParser(description="Create the Marketplace database schema")
    parser.add_argument("--seed", action="store_true", help="Insert a demo catalog and cart")
    parser.add_argument("--buyer", default="auth0|demo-buyer", help="User id that owns the demo cart")
    args = parser.parse_args()

    print(f"🗄️  Creating tables on {settings.DATABASE_URL.split('@')[-1]}")
    init_db()
    print("  ✅ Schema ready")

    if args.seed:
        print("🌱 Seeding demo data...")
        seed_demo_catalog(args.buyer)


if __name__ == "__main__":
    main()
