# gallery/routers/checkout.py
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request
from sqlalchemy.orm import Session

from gallery.core.database import get_db
from gallery.core.dependencies import get_optional_user
from gallery.models.user import User
from gallery.schemas.order import CheckoutRequest, CheckoutResponse, WebhookAck
from gallery.services.order import CheckoutService, OrderService, order_summary
from gallery.utils.mailer import send_admin_order_email, send_order_confirmation_email
from gallery.utils.payment import stripe_service
from gallery.utils.tg_service import notify_admin_new_order

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Checkout"])


@router.post("/checkout", response_model=CheckoutResponse)
def create_checkout_session(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Start a hosted checkout. Guests may check out without an account."""
    return CheckoutService(db).create_checkout(payload, current_user)


@router.post("/stripe/webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    db: Session = Depends(get_db),
):
    """
    Payment processor callback. The raw body is needed for signature
    verification, so it is read directly instead of parsed into a schema.
    """
    payload = await request.body()
    event = stripe_service.construct_event(payload, stripe_signature)

    event_type = event["type"]
    if event_type != "checkout.session.completed":
        logger.info(f"Unhandled webhook event type: {event_type}")
        return {"received": True}

    session_id = event["data"]["object"]["id"]
    session = stripe_service.retrieve_session(session_id)
    order = OrderService(db).record_checkout(session)

    if order:
        summary = order_summary(order)
        customer = order.user
        background_tasks.add_task(send_order_confirmation_email, customer.email, summary)
        background_tasks.add_task(
            send_admin_order_email, summary, customer.name, customer.email
        )
        background_tasks.add_task(notify_admin_new_order, summary, customer.email)

    return {"received": True}
