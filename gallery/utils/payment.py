# gallery/utils/payment.py
"""
Thin adapter over the Stripe SDK: checkout sessions and webhook events.
"""

import logging
from typing import Any, Dict, List, Optional

import stripe
from fastapi import HTTPException

from gallery.core.config import settings
from gallery.core.decorator import ValidationFailed

logger = logging.getLogger(__name__)


def to_cents(amount: float) -> int:
    """Dollar amount to integer cents, rounding half up."""
    return int(round(amount * 100 + 1e-9))


def build_line_items(items: List[Dict[str, Any]], currency: str) -> List[Dict[str, Any]]:
    line_items = []
    for item in items:
        product_data: Dict[str, Any] = {
            "name": item["name"],
            "metadata": {
                "artworkId": str(item.get("artwork_id") or ""),
                "type": item.get("type") or "PRINT",
                "size": item.get("size") or "",
            },
        }
        if item.get("description"):
            product_data["description"] = item["description"]
        if item.get("images"):
            product_data["images"] = item["images"][:8]

        line_items.append(
            {
                "price_data": {
                    "currency": currency,
                    "product_data": product_data,
                    "unit_amount": to_cents(item["price"]),
                },
                "quantity": item.get("quantity") or 1,
            }
        )
    return line_items


class StripeService:
    """Checkout session creation and webhook verification."""

    def __init__(self):
        self.api_key = settings.stripe_secret_key
        self.webhook_secret = settings.stripe_webhook_secret
        self.currency = settings.payment_currency

        if not self.api_key:
            logger.warning("STRIPE_SECRET_KEY not configured. Checkout is disabled.")

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _require_configured(self):
        if not self.is_configured():
            raise HTTPException(
                status_code=500, detail="Payment processor is not configured"
            )

    def create_checkout_session(
        self,
        items: List[Dict[str, Any]],
        user_id: Optional[int] = None,
        customer_email: Optional[str] = None,
        success_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
    ) -> Dict[str, Optional[str]]:
        """
        Create a hosted checkout session.

        Returns:
            {"session_id": ..., "url": ...}
        """
        self._require_configured()

        params: Dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": build_line_items(items, self.currency),
            "mode": "payment",
            "success_url": success_url
            or f"{settings.frontend_url}/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": cancel_url or f"{settings.frontend_url}/cart",
            "metadata": {"userId": str(user_id) if user_id else "guest"},
            "shipping_address_collection": {
                "allowed_countries": settings.shipping_countries
            },
            "billing_address_collection": "required",
        }
        if customer_email:
            params["customer_email"] = customer_email

        try:
            session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed: {e}")
            raise HTTPException(
                status_code=500, detail="Failed to create checkout session"
            )

        logger.info(f"Checkout session {session.id} created for {params['metadata']['userId']}")
        return {"session_id": session.id, "url": session.url}

    def construct_event(self, payload: bytes, signature: Optional[str]):
        """
        Verify a webhook payload against its Stripe-Signature header.

        Raises:
            ValidationFailed: If the signature is missing or invalid
        """
        if not signature or not self.webhook_secret:
            raise ValidationFailed("Invalid signature")

        try:
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise ValidationFailed("Invalid signature")

    def retrieve_session(self, session_id: str):
        """Fetch a checkout session with its line items expanded."""
        self._require_configured()
        return stripe.checkout.Session.retrieve(
            session_id,
            api_key=self.api_key,
            expand=["line_items", "line_items.data.price.product"],
        )


stripe_service = StripeService()
