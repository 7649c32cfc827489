"""
Delivery Pricer
Resolves a store's delivery price and ETA for the method the buyer picked
"""
from typing import Dict, Iterable, Mapping, Optional

from marketplace.core.exceptions import InvalidDeliveryMethodError, NotFoundError
from marketplace.domain.base import quantize_money
from marketplace.domain.catalog import DeliveryQuote
from marketplace.models.catalog import Store

STANDARD = "standard"
EXPRESS = "express"
DELIVERY_METHODS = (STANDARD, EXPRESS)


class DeliveryPricer:
    """
    Prices delivery from a pre-fetched set of stores

    Args:
        stores: store_id -> Store, loaded once per checkout
    """

    def __init__(self, stores: Mapping[int, Store]):
        self._stores = stores

    def _store(self, store_id: int) -> Store:
        store = self._stores.get(store_id)
        if store is None:
            raise NotFoundError("Store", store_id, f"Store details not found for store ID: {store_id}")
        return store

    def resolve(self, store_id: int, delivery_method: Optional[str]) -> DeliveryQuote:
        """
        Snapshot the price and ETA for one store and method

        Raises:
            NotFoundError: store not in the pre-fetched set
            InvalidDeliveryMethodError: method missing or not standard/express
        """
        store = self._store(store_id)
        if delivery_method not in DELIVERY_METHODS:
            raise InvalidDeliveryMethodError(store_id, delivery_method)

        if delivery_method == STANDARD:
            price, eta_days = store.standard_price, store.standard_eta_days
        else:
            price, eta_days = store.express_price, store.express_eta_days

        return DeliveryQuote(
            store_id=store_id,
            store_name=store.store_name,
            method=delivery_method,
            price=quantize_money(price),
            eta_days=eta_days,
        )

    def options(self, store_id: int) -> Dict[str, DeliveryQuote]:
        """Every delivery option of one store (checkout page display)"""
        return {method: self.resolve(store_id, method) for method in DELIVERY_METHODS}

    def options_for(self, store_ids: Iterable[int]) -> Dict[int, Dict[str, DeliveryQuote]]:
        """Options of every known store; unknown IDs are left out of the result"""
        return {
            store_id: self.options(store_id)
            for store_id in dict.fromkeys(store_ids)
            if store_id in self._stores
        }
