"""
Order models: one Order per checkout, split into one SellerOrder per store
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from marketplace.core.database import Base


class Order(Base):
    """
    Buyer-facing order. grand_total is the sum of its seller totals.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    buyer_id = Column(String(255), nullable=False, index=True)
    order_date = Column(DateTime(timezone=True), nullable=False, index=True)
    grand_total = Column(Numeric(12, 2), nullable=False)
    pickup_area = Column(String(255))
    pickup_point = Column(String(255))

    # Reference of the already captured charge. Not unique: checkout is not idempotent.
    payment_reference = Column(String(255))

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    seller_orders = relationship(
        "SellerOrder",
        back_populates="order",
        order_by="SellerOrder.id",
        cascade="all, delete-orphan",
    )


class SellerOrder(Base):
    """
    Per-seller fulfillment unit. seller_total = items_subtotal + delivery_price.
    """
    __tablename__ = "seller_orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    seller_id = Column(String(255), nullable=False, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)

    # Delivery snapshot
    delivery_method = Column(String(100), nullable=False)
    delivery_price = Column(Numeric(12, 2), nullable=False)
    delivery_eta_snapshot = Column(Integer)

    # Amounts
    items_subtotal = Column(Numeric(12, 2), nullable=False)
    seller_total = Column(Numeric(12, 2), nullable=False)

    status = Column(String(50), nullable=False, default="Processing", index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    order = relationship("Order", back_populates="seller_orders")
    items = relationship(
        "SellerOrderItem",
        back_populates="seller_order",
        order_by="SellerOrderItem.id",
        cascade="all, delete-orphan",
    )


class SellerOrderItem(Base):
    """
    Order line. Price and name are copied at commit time and never re-derived.
    """
    __tablename__ = "seller_order_items"

    id = Column(Integer, primary_key=True, index=True)
    seller_order_id = Column(Integer, ForeignKey("seller_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    quantity_ordered = Column(Integer, nullable=False)
    unit_price_snapshot = Column(Numeric(12, 2), nullable=False)
    product_name_snapshot = Column(String(255))

    seller_order = relationship("SellerOrder", back_populates="items")
    product = relationship("Product")
