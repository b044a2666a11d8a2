"""Order intent snapshot handed to the order subsystem at checkout."""

import uuid
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from cart_service.models.cart import CartItem
from cart_service.utils.helpers import get_current_timestamp


class ConfirmationType(str, Enum):
    """How the customer confirms delivery of the order."""
    SIGNATURE = "SIGNATURE"
    OTP = "OTP"
    NONE = "NONE"

    @property
    def requires_signature(self) -> bool:
        return self is ConfirmationType.SIGNATURE


class Location(BaseModel):
    """Geographic location model."""
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class DeliveryAddress(BaseModel):
    """Shipping address forwarded to the order subsystem."""
    street: str
    city: str
    state: Optional[str] = None
    country: str
    postal_code: Optional[str] = None


def generate_event_id() -> str:
    """Generate a unique event ID."""
    return str(uuid.uuid4())


class OrderIntent(BaseModel):
    """Write-once checkout snapshot."""
    event_id: str = Field(default_factory=generate_event_id)
    customer_id: str
    cart_id: str
    items: List[CartItem]
    sub_total: Decimal
    discount_amount: Decimal
    total_price: Decimal
    applied_promo_code: Optional[str] = None

    # Confirmation metadata
    confirmation_type: ConfirmationType
    signature: Optional[str] = None
    delivery_address: Optional[DeliveryAddress] = None
    location: Optional[Location] = None

    created_at: datetime = Field(default_factory=get_current_timestamp)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "event_id": "5a3c1d7e-2f4b-4e8a-9c61-0d2b7f8e4a90",
                "customer_id": "cust123",
                "cart_id": "0b8f7c5e-6d0a-4c5e-9b56-1f3c2a7d9e10",
                "items": [
                    {"product_id": "prod123", "quantity": 2, "unit_price": "10.00"}
                ],
                "sub_total": "20.00",
                "discount_amount": "2.00",
                "total_price": "18.00",
                "applied_promo_code": "SAVE10",
                "confirmation_type": "SIGNATURE",
                "signature": "data:image/png;base64,iVBORw0..."
            }
        }
