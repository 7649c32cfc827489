"""
Orders API Endpoints
Checkout commit and the buyer's order history
"""
from typing import List

from fastapi import APIRouter, Depends, status

from marketplace.core.auth import TokenUser, get_current_user
from marketplace.core.database import SessionMaker, get_session_maker
from marketplace.domain.order import CreateOrderRequest, Order
from marketplace.services.order_service import OrderService

router = APIRouter()


def get_order_service(session_maker: SessionMaker = Depends(get_session_maker)) -> OrderService:
    return OrderService(session_maker)


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
def create_order(
    request: CreateOrderRequest,
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """
    Checkout: create one order from a multi-seller cart

    The backend total is authoritative; frontendGrandTotal is only compared
    against it. Not idempotent: every successful call creates a new order.
    """
    return service.create_order(
        buyer_id=user.id,
        cart_items=request.cart_items,
        delivery_selections=request.delivery_selections,
        pickup_area=request.pickup_area,
        pickup_point=request.pickup_point,
        payment_ref=request.payment_ref,
        frontend_grand_total=request.frontend_grand_total,
    )


@router.get("", response_model=List[Order])
def list_my_orders(
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Orders placed by the current buyer, newest first"""
    return service.list_buyer_orders(user.id)


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: int,
    user: TokenUser = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """One of the current buyer's orders"""
    return service.get_order(order_id, buyer_id=user.id)
