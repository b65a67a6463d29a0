# gallery/schemas/order.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from gallery.schemas.common import CamelModel

# ==================== Checkout ====================


class CheckoutItem(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., gt=0)
    quantity: int = Field(1, ge=1, le=100)
    description: Optional[str] = None
    images: List[str] = []
    artwork_id: Optional[int] = None
    type: str = "PRINT"
    size: Optional[str] = None


class CheckoutRequest(CamelModel):
    items: Optional[List[CheckoutItem]] = None
    success_url: Optional[str] = None
    cancel_url: Optional[str] = None


class CheckoutResponse(CamelModel):
    session_id: str
    url: Optional[str] = None


class WebhookAck(CamelModel):
    received: bool = True


# ==================== Orders ====================


class OrderItemResponse(CamelModel):
    id: int
    type: str
    title: str
    size: Optional[str] = None
    quantity: int
    price: float
    product_details: Optional[Dict[str, Any]] = None


class OrderResponse(CamelModel):
    id: int
    order_number: str
    status: str
    total_amount: float
    currency: str
    shipping_address: Optional[str] = None
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    estimated_delivery: Optional[str] = None
    shipped_at: Optional[datetime] = None
    created_at: datetime
    items: List[OrderItemResponse] = []


class ShippingUpdateRequest(CamelModel):
    order_number: str = Field(..., min_length=1)
    tracking_number: str = Field(..., min_length=1)
    carrier: str = Field(..., min_length=1)
    estimated_delivery: Optional[str] = None


class ShippingUpdateResponse(CamelModel):
    success: bool = True
    message: str
    tracking_url: str
    order: OrderResponse
