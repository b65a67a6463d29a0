"""
Transactional email: welcome, order confirmation, shipping and admin notices.

Messages go out over SMTP in a worker thread. Every public sender is
best-effort: failures are logged and never propagate to the caller.
"""

import asyncio
import logging
import smtplib
import ssl
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Dict, List, Tuple

from gallery.core.config import settings

logger = logging.getLogger(__name__)

_WRAPPER = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; background: #0a0a0a; color: #e2e8f0; padding: 20px; border-radius: 12px;">
  <h1 style="color: #a855f7; text-align: center;">{app_name}</h1>
  {body}
  <p style="text-align: center; color: #9ca3af; font-size: 0.8em;">&copy; {year} {app_name}</p>
</div>
"""


def _wrap(body: str) -> str:
    return _WRAPPER.format(
        app_name=escape(settings.app_name), body=body, year=datetime.utcnow().year
    )


def build_welcome_email(name: str) -> Tuple[str, str, str]:
    """Welcome mail subject/text/HTML"""
    gallery_url = f"{settings.frontend_url}/gallery"
    subject = f"🌟 Welcome to the Cosmic Community - {settings.app_name}"
    text = (
        f"Welcome, {name}! You have successfully joined our cosmic community. "
        f"Visit {gallery_url} to start exploring consciousness-inspired artwork."
    )
    html = _wrap(
        f"""
        <h2 style="color: #e879f9;">🌟 Welcome to the Cosmic Community!</h2>
        <p>Greetings, {escape(name)}. You've joined a gallery where art transcends dimensions.</p>
        <ul>
          <li>🎨 Explore consciousness-inspired artwork</li>
          <li>✨ Channel favourite pieces into your collection</li>
          <li>🌌 Blend artworks with AI-powered synthesis</li>
          <li>📦 Order prints delivered to your realm</li>
        </ul>
        <p><a href="{gallery_url}" style="color: #06b6d4;">🚀 Start Exploring</a></p>
        """
    )
    return subject, text, html


def _format_money(amount: float, currency: str = "usd") -> str:
    symbol = "$" if currency.lower() == "usd" else f"{currency.upper()} "
    return f"{symbol}{amount:,.2f}"


def build_order_confirmation_email(order_data: Dict) -> Tuple[str, str, str]:
    """Order confirmation subject/text/HTML from an order summary dict."""
    number = order_data["order_number"]
    total = _format_money(order_data["total_amount"], order_data.get("currency", "usd"))
    items: List[Dict] = order_data.get("items", [])

    rows = "".join(
        f"<p><strong>{escape(item['title'])}</strong><br>"
        f"{escape(item.get('type') or 'PRINT')} - {escape(item.get('size') or 'standard')}<br>"
        f"{_format_money(item['price'])} x {item['quantity']}</p>"
        for item in items
    )

    subject = f"🎯 Your Cosmic Order is Confirmed - Order #{number}"
    text = (
        f"Your order #{number} has been confirmed! Total: {total}. "
        f"Expected delivery: 7-14 business days. Thank you for supporting {settings.app_name}!"
    )
    html = _wrap(
        f"""
        <h2 style="color: #06b6d4;">🎯 Order Confirmed!</h2>
        <p><strong>Order Number:</strong> #{escape(number)}</p>
        {rows}
        <h3 style="color: #a855f7;">Total: {total}</h3>
        <p><strong>Shipping Address:</strong> {escape(order_data.get('shipping_address') or '')}</p>
        <p>You'll receive tracking information once your items ship.</p>
        """
    )
    return subject, text, html


def build_shipping_email(
    order_number: str,
    tracking_number: str,
    carrier: str,
    tracking_url: str,
    estimated_delivery: str,
) -> Tuple[str, str, str]:
    """Shipping notification subject/text/HTML"""
    subject = f"📦 Your Cosmic Art is on the Way - Order #{order_number}"
    text = (
        f"Your order #{order_number} has shipped! Tracking: {tracking_number}. "
        f"Estimated delivery: {estimated_delivery}. Track at: {tracking_url}"
    )
    html = _wrap(
        f"""
        <h2 style="color: #22c55e;">📦 Your Order Has Shipped!</h2>
        <p><strong>Order Number:</strong> #{escape(order_number)}</p>
        <p><strong>Tracking Number:</strong> {escape(tracking_number)}</p>
        <p><strong>Carrier:</strong> {escape(carrier)}</p>
        <p><strong>Estimated Delivery:</strong> {escape(estimated_delivery)}</p>
        <p><a href="{tracking_url}" style="color: #06b6d4;">🔍 Track Your Package</a></p>
        """
    )
    return subject, text, html


def build_admin_order_email(order_data: Dict, customer_name: str, customer_email: str):
    number = order_data["order_number"]
    total = _format_money(order_data["total_amount"], order_data.get("currency", "usd"))
    subject = f"🛍️ New Cosmic Order Received - #{number}"
    text = (
        f"New order #{number} from {customer_name} ({customer_email}). "
        f"Total: {total}. Items: {len(order_data.get('items', []))}"
    )
    html = _wrap(f"<p>{escape(text)}</p>")
    return subject, text, html


def _send_email_sync(to_email: str, subject: str, text: str, html: str) -> None:
    """Blocking SMTP send (runs in the thread pool)"""
    if not settings.mail_host:
        # Development: log instead of sending
        logger.info(
            "[DEV] Email not sent (SMTP not configured) -> subject: %s, to: %s",
            subject,
            to_email,
        )
        return

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{settings.mail_from_name} <{settings.mail_from_address}>"
    msg["To"] = to_email
    msg.attach(MIMEText(text, "plain", "utf-8"))
    msg.attach(MIMEText(html, "html", "utf-8"))

    context = ssl.create_default_context()
    if settings.mail_encryption == "ssl":
        with smtplib.SMTP_SSL(
            settings.mail_host, settings.mail_port, context=context
        ) as server:
            if settings.mail_username and settings.mail_password:
                server.login(settings.mail_username, settings.mail_password)
            server.sendmail(settings.mail_from_address, [to_email], msg.as_string())
    else:
        with smtplib.SMTP(settings.mail_host, settings.mail_port) as server:
            if settings.mail_encryption == "tls":
                server.starttls(context=context)
            if settings.mail_username and settings.mail_password:
                server.login(settings.mail_username, settings.mail_password)
            server.sendmail(settings.mail_from_address, [to_email], msg.as_string())


async def _deliver(to_email: str, message: Tuple[str, str, str]) -> bool:
    subject, text, html = message
    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(None, _send_email_sync, to_email, subject, text, html)
        logger.info(f"Email '{subject}' sent to {to_email}")
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email '{subject}' to {to_email}: {e}")
        return False


async def send_welcome_email(to_email: str, name: str) -> bool:
    return await _deliver(to_email, build_welcome_email(name))


async def send_order_confirmation_email(to_email: str, order_data: Dict) -> bool:
    return await _deliver(to_email, build_order_confirmation_email(order_data))


async def send_shipping_email(
    to_email: str,
    order_number: str,
    tracking_number: str,
    carrier: str,
    tracking_url: str,
    estimated_delivery: str,
) -> bool:
    return await _deliver(
        to_email,
        build_shipping_email(
            order_number, tracking_number, carrier, tracking_url, estimated_delivery
        ),
    )


async def send_admin_order_email(
    order_data: Dict, customer_name: str, customer_email: str
) -> bool:
    if not settings.admin_notification_email:
        return False
    return await _deliver(
        settings.admin_notification_email,
        build_admin_order_email(order_data, customer_name, customer_email),
    )
