"""
Store Repository - Data Access Layer for Stores
"""
from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from marketplace.models.catalog import Store


class StoreRepository:
    """Read-only access to stores and their delivery options"""

    def __init__(self, session: Session):
        self.session = session

    def fetch_by_ids(self, store_ids: Iterable[int]) -> Dict[int, Store]:
        """
        Fetch stores by ID in one query

        Returns:
            Dict of store_id -> Store. Missing IDs are absent.
        """
        ids = sorted(set(store_ids))
        if not ids:
            return {}

        stmt = select(Store).where(Store.id.in_(ids))
        return {store.id: store for store in self.session.scalars(stmt)}
