"""
Seller Orders API Endpoints
Orders split out for the current seller, earnings and status updates
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from marketplace.core.auth import TokenUser, get_current_user
from marketplace.core.database import SessionMaker, get_session_maker
from marketplace.domain.order import SellerEarnings, SellerOrder, StatusUpdate
from marketplace.services.seller_order_service import SellerOrderService

router = APIRouter()


def get_seller_order_service(session_maker: SessionMaker = Depends(get_session_maker)) -> SellerOrderService:
    return SellerOrderService(session_maker)


@router.get("", response_model=List[SellerOrder])
def list_seller_orders(
    user: TokenUser = Depends(get_current_user),
    service: SellerOrderService = Depends(get_seller_order_service),
):
    return service.list_seller_orders(user.id)


@router.get("/earnings", response_model=SellerEarnings)
def get_earnings(
    status: Optional[str] = Query(None, description="Only count seller orders in this status"),
    user: TokenUser = Depends(get_current_user),
    service: SellerOrderService = Depends(get_seller_order_service),
):
    total = service.calculate_seller_earnings(user.id, status)
    return SellerEarnings(total_earnings=total)


@router.patch("/{seller_order_id}/status", response_model=SellerOrder)
def update_status(
    seller_order_id: int,
    update: StatusUpdate,
    user: TokenUser = Depends(get_current_user),
    service: SellerOrderService = Depends(get_seller_order_service),
):
    """Fulfillment status update by the owning seller"""
    return service.update_status(seller_order_id, user.id, update.status)
