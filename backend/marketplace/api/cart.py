"""
Cart API Endpoints
Read-only view of the buyer's server-side cart and the delivery options of
the stores in it
"""
from typing import Dict, List

from fastapi import APIRouter, Depends, Query

from marketplace.core.auth import TokenUser, get_current_user
from marketplace.core.database import SessionMaker, get_session_maker, session_scope
from marketplace.domain.catalog import CartItem, DeliveryQuote
from marketplace.repositories.cart_repository import CartRepository
from marketplace.repositories.store_repository import StoreRepository
from marketplace.services.delivery_pricer import DeliveryPricer

router = APIRouter()


@router.get("", response_model=List[CartItem])
def get_cart(
    user: TokenUser = Depends(get_current_user),
    session_maker: SessionMaker = Depends(get_session_maker),
):
    with session_scope(session_maker) as session:
        return CartRepository(session).read_cart(user.id)


@router.get("/delivery-options", response_model=Dict[int, Dict[str, DeliveryQuote]])
def get_delivery_options(
    store_ids: List[int] = Query(..., alias="storeIds", description="Stores present in the cart"),
    user: TokenUser = Depends(get_current_user),
    session_maker: SessionMaker = Depends(get_session_maker),
):
    """
    Standard and express price/ETA per store, as checkout will price them

    Unknown store IDs are omitted from the response.
    """
    with session_scope(session_maker) as session:
        pricer = DeliveryPricer(StoreRepository(session).fetch_by_ids(store_ids))
        return pricer.options_for(store_ids)
