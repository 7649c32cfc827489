"""
Catalog models: stores and their products
"""
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from marketplace.core.database import Base


class Store(Base):
    """
    A seller's storefront. Carries the delivery options offered at checkout.
    """
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    owner_user_id = Column(String(255), nullable=False, unique=True, index=True)
    store_name = Column(String(255), nullable=False)

    # Delivery options
    standard_price = Column(Numeric(12, 2), nullable=False)
    standard_eta_days = Column(Integer, nullable=False)
    express_price = Column(Numeric(12, 2), nullable=False)
    express_eta_days = Column(Integer, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    products = relationship("Product", back_populates="store")


class Product(Base):
    """
    Catalog product. quantity_available is the only column checkout mutates.
    """
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity_available >= 0", name="ck_products_quantity_available_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(String(100))
    price = Column(Numeric(12, 2), nullable=False)
    quantity_available = Column(Integer, nullable=False, default=0)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    image_url = Column(String(1024))
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    store = relationship("Store", back_populates="products")
