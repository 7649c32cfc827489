"""
Fulfillment Splitter
Groups a flat cart into one fulfillment group per store and prices each group
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from marketplace.core.exceptions import BadRequestError
from marketplace.domain.base import quantize_money
from marketplace.domain.catalog import CartItem, DeliveryQuote


@dataclass
class FulfillmentGroup:
    """
    Cart lines of one store plus the delivery option chosen for it

    items_subtotal is computed from the caller's price snapshots, never from
    the live catalog price.
    """
    store_id: int
    items: List[CartItem] = field(default_factory=list)
    delivery: Optional[DeliveryQuote] = None

    @property
    def items_subtotal(self) -> Decimal:
        return quantize_money(sum(
            (item.unit_price_snapshot * item.quantity for item in self.items),
            Decimal("0"),
        ))

    @property
    def delivery_price(self) -> Decimal:
        return quantize_money(self.delivery.price) if self.delivery else Decimal("0.00")

    @property
    def seller_total(self) -> Decimal:
        return quantize_money(self.items_subtotal + self.delivery_price)


class FulfillmentSplitter:
    """Pure grouping helpers, no I/O"""

    @staticmethod
    def split(cart_items: Iterable[CartItem]) -> Dict[int, List[CartItem]]:
        """
        Group cart lines by store_id

        Stores keep the order in which they first appear in the cart.
        An empty cart gives an empty dict.
        """
        groups: Dict[int, List[CartItem]] = {}
        for item in cart_items:
            groups.setdefault(item.store_id, []).append(item)
        return groups

    @staticmethod
    def product_ids(cart_items: Iterable[CartItem]) -> List[int]:
        """Distinct product IDs in first-seen order"""
        return list(dict.fromkeys(item.product_id for item in cart_items))

    @staticmethod
    def consolidate(items: Iterable[CartItem]) -> List[CartItem]:
        """
        Merge lines of the same product into one line

        Price snapshots are rounded to cents here, so subtotals and the
        stored item prices are computed from the same value.

        Raises:
            BadRequestError: if the same product carries two different
                price snapshots
        """
        merged: Dict[int, CartItem] = {}
        for item in items:
            price = quantize_money(item.unit_price_snapshot)
            existing = merged.get(item.product_id)
            if existing is None:
                merged[item.product_id] = item.model_copy(update={"unit_price_snapshot": price})
                continue

            if existing.unit_price_snapshot != price:
                raise BadRequestError(
                    f"Conflicting price snapshots for product ID: {item.product_id}",
                    product_id=item.product_id,
                )
            merged[item.product_id] = existing.model_copy(
                update={"quantity": existing.quantity + item.quantity}
            )
        return list(merged.values())

    @classmethod
    def build_groups(cls, cart_items: Iterable[CartItem]) -> List[FulfillmentGroup]:
        """Split by store and consolidate each group's lines"""
        return [
            FulfillmentGroup(store_id=store_id, items=cls.consolidate(items))
            for store_id, items in cls.split(cart_items).items()
        ]
