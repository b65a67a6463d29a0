# gallery/services/order.py
import logging
import re
import secrets
import string
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from sqlalchemy.orm import Session, selectinload

from gallery.core.decorator import NotFound, ValidationFailed, db_exception
from gallery.models.order import ORDER_CONFIRMED, ORDER_SHIPPED, Order, OrderItem
from gallery.models.user import USER_ROLE, User
from gallery.schemas.order import CheckoutRequest, ShippingUpdateRequest
from gallery.utils.payment import stripe_service

logger = logging.getLogger(__name__)

TRACKING_URLS = {
    "ups": "https://www.ups.com/track?tracknum={}",
    "fedex": "https://www.fedex.com/fedextrack/?tracknumber={}",
    "usps": "https://tools.usps.com/go/TrackConfirmAction?qtc_tLabels1={}",
    "dhl": "https://www.dhl.com/en/express/tracking.html?AWB={}",
}
GENERIC_TRACKING_URL = "https://www.google.com/search?q=track+package+{}"

SIZE_PATTERN = re.compile(r'(\d+x\d+|\d+"\s*x\s*\d+")', re.IGNORECASE)


def generate_tracking_url(carrier: str, tracking_number: str) -> str:
    normalized = re.sub(r"\s+", "", carrier or "").lower()
    template = TRACKING_URLS.get(normalized, GENERIC_TRACKING_URL)
    return template.format(quote(tracking_number, safe=""))


def generate_order_number() -> str:
    """137-<last 8 digits of ms timestamp>-<4 upper alphanumerics>"""
    timestamp = str(int(time.time() * 1000))[-8:]
    alphabet = string.ascii_uppercase + string.digits
    suffix = "".join(secrets.choice(alphabet) for _ in range(4))
    return f"137-{timestamp}-{suffix}"


def _field(obj: Any, key: str, default: Any = None) -> Any:
    """Read a key from a Stripe object or plain dict."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        value = obj.get(key)
    else:
        value = getattr(obj, key, None)
    return default if value is None else value


def format_shipping_address(address: Any) -> str:
    if not address:
        return "No shipping address provided"
    parts = [
        _field(address, key)
        for key in ("line1", "line2", "city", "state", "postal_code", "country")
    ]
    return ", ".join(str(p) for p in parts if p)


def _shipping_address_of(session: Any) -> str:
    details = (
        _field(session, "shipping_details")
        or _field(_field(session, "collected_information"), "shipping_details")
        or _field(session, "shipping")
    )
    return format_shipping_address(_field(details, "address"))


def order_summary(order: Order) -> Dict[str, Any]:
    """Plain dict of an order for emails and notifications."""
    return {
        "order_number": order.order_number,
        "total_amount": float(order.total_amount),
        "currency": order.currency,
        "shipping_address": order.shipping_address,
        "items": [
            {
                "title": item.title,
                "type": item.type,
                "size": item.size,
                "quantity": item.quantity,
                "price": float(item.price),
            }
            for item in order.items
        ],
    }


class CheckoutService:
    def __init__(self, db: Session):
        self.db = db

    def create_checkout(self, request: CheckoutRequest, user: Optional[User]) -> dict:
        if not request.items:
            raise ValidationFailed("Invalid items")

        return stripe_service.create_checkout_session(
            items=[item.model_dump() for item in request.items],
            user_id=user.id if user else None,
            customer_email=user.email if user else None,
            success_url=request.success_url,
            cancel_url=request.cancel_url,
        )


class OrderService:
    def __init__(self, db: Session):
        self.db = db

    def _unique_order_number(self) -> str:
        while True:
            number = generate_order_number()
            exists = self.db.query(Order.id).filter(Order.order_number == number).first()
            if not exists:
                return number

    def _find_or_create_customer(self, email: str, name: str) -> User:
        email = email.lower()
        user = self.db.query(User).filter(User.email == email).first()
        if user:
            return user

        user = User(email=email, name=name or "Customer", role=USER_ROLE)
        self.db.add(user)
        self.db.flush()
        logger.info(f"Guest customer created for {email}")
        return user

    @staticmethod
    def _line_items(session: Any) -> List[Dict[str, Any]]:
        items = []
        for line in _field(_field(session, "line_items"), "data", []):
            price = _field(line, "price")
            product = _field(price, "product")
            metadata = _field(product, "metadata", {}) if not isinstance(product, str) else {}
            description = _field(line, "description", "")
            quantity = _field(line, "quantity", 1) or 1
            amount_total = _field(line, "amount_total", 0)
            size_match = SIZE_PATTERN.search(description or "")

            items.append(
                {
                    "title": (
                        _field(product, "name")
                        if product is not None and not isinstance(product, str)
                        else None
                    )
                    or description
                    or "Artwork print",
                    "type": (_field(metadata, "type") or "PRINT").upper(),
                    "size": _field(metadata, "size")
                    or (size_match.group(0) if size_match else "Standard"),
                    "quantity": quantity,
                    "price": Decimal(amount_total) / 100 / quantity,
                    "artwork_id": _field(metadata, "artworkId") or None,
                }
            )
        return items

    def record_checkout(self, session: Any) -> Optional[Order]:
        """
        Save the order for a completed checkout session.

        Stripe retries webhooks, so a session that already has an order
        returns None instead of creating a duplicate.
        """
        session_id = _field(session, "id")
        existing = (
            self.db.query(Order).filter(Order.stripe_session_id == session_id).first()
        )
        if existing:
            logger.info(f"Checkout session {session_id} already recorded as {existing.order_number}")
            return None

        customer = _field(session, "customer_details")
        email = _field(customer, "email") or _field(session, "customer_email")
        if not email:
            logger.error(f"No customer email found in session {session_id}")
            return None

        user = self._find_or_create_customer(email, _field(customer, "name", "Customer"))
        line_items = self._line_items(session)

        order = Order(
            order_number=self._unique_order_number(),
            user_id=user.id,
            status=ORDER_CONFIRMED,
            total_amount=Decimal(_field(session, "amount_total", 0)) / 100,
            currency=_field(session, "currency", "usd"),
            shipping_address=_shipping_address_of(session),
            stripe_session_id=session_id,
        )
        for line in line_items:
            order.items.append(
                OrderItem(
                    type=line["type"],
                    title=line["title"],
                    size=line["size"],
                    quantity=line["quantity"],
                    price=line["price"],
                    product_details={
                        "artworkId": line["artwork_id"],
                        "title": line["title"],
                        "size": line["size"],
                    },
                )
            )

        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)

        logger.info(f"✅ Order {order.order_number} recorded for {user.email}")
        return order

    # ==================== Fulfilment ====================

    def _get_order(self, order_number: str) -> Optional[Order]:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items), selectinload(Order.user))
            .filter(Order.order_number == order_number)
            .first()
        )

    @db_exception
    def mark_shipped(self, request: ShippingUpdateRequest) -> Dict[str, Any]:
        order = self._get_order(request.order_number)
        if not order:
            raise NotFound("Order not found")

        order.status = ORDER_SHIPPED
        order.tracking_number = request.tracking_number
        order.carrier = request.carrier
        order.estimated_delivery = request.estimated_delivery
        order.shipped_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(order)

        tracking_url = generate_tracking_url(request.carrier, request.tracking_number)
        logger.info(f"Order {order.order_number} shipped via {request.carrier}")

        return {
            "success": True,
            "message": "Order marked as shipped",
            "tracking_url": tracking_url,
            "order": order,
        }

    def get_order_for(self, order_number: str, user: User) -> Order:
        """Users may only read their own orders; admins may read any."""
        order = self._get_order(order_number)
        if not order or (not user.is_admin and order.user_id != user.id):
            raise NotFound("Order not found")
        return order

    def get_user_orders(self, user: User) -> List[Order]:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.user_id == user.id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
