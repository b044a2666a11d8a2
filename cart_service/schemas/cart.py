from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from cart_service.models.cart import Cart
from cart_service.models.order_intent import ConfirmationType, DeliveryAddress, Location


class AddToCartRequest(BaseModel):
    """Schema for adding a product to cart."""
    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    unit_price: Decimal = Field(ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "product_id": "prod123",
                "quantity": 2,
                "unit_price": "10.50"
            }
        }


class CheckoutRequest(BaseModel):
    """Schema for checking out the active cart."""
    confirmation_type: ConfirmationType
    signature: Optional[str] = None
    delivery_address: Optional[DeliveryAddress] = None
    location: Optional[Location] = None

    class Config:
        json_schema_extra = {
            "example": {
                "confirmation_type": "SIGNATURE",
                "signature": "data:image/png;base64,iVBORw0...",
                "delivery_address": {
                    "street": "12 Rue du Commerce",
                    "city": "Abidjan",
                    "country": "CI"
                },
                "location": {"lat": 5.3599, "lng": -4.0083}
            }
        }


class CartItemResponse(BaseModel):
    """Schema for cart item response."""
    product_id: str
    quantity: int
    unit_price: Decimal
    item_total: Decimal

    class Config:
        from_attributes = True


class CartResponse(BaseModel):
    """Schema for cart response."""
    id: str
    customer_id: str
    items: List[CartItemResponse]
    archived: bool
    applied_promo_code: Optional[str] = None
    sub_total: Decimal
    discount_amount: Decimal
    total_price: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartResponse":
        return cls.model_validate(cart, from_attributes=True)
