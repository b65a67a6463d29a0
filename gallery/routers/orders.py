# gallery/routers/orders.py
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from gallery.core.database import get_db
from gallery.core.dependencies import get_current_admin, get_current_user
from gallery.models.user import User
from gallery.schemas.order import (
    OrderResponse,
    ShippingUpdateRequest,
    ShippingUpdateResponse,
)
from gallery.services.order import OrderService
from gallery.utils.mailer import send_shipping_email

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[OrderResponse])
def get_my_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return OrderService(db).get_user_orders(current_user)


@router.post("/shipping", response_model=ShippingUpdateResponse)
def update_shipping(
    payload: ShippingUpdateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """Mark an order shipped and email the customer. Admin only."""
    result = OrderService(db).mark_shipped(payload)
    order = result["order"]

    if order.user:
        background_tasks.add_task(
            send_shipping_email,
            order.user.email,
            order.order_number,
            order.tracking_number,
            order.carrier,
            result["tracking_url"],
            order.estimated_delivery,
        )
    return result


@router.get("/shipping", response_model=OrderResponse)
def get_shipping_status(
    order_number: str = Query(..., alias="orderNumber", min_length=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return OrderService(db).get_order_for(order_number, current_user)
