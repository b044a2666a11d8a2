"""Promo code model, owned by the promotions subsystem and read-only here."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from cart_service.utils.helpers import ensure_utc, get_current_timestamp
from cart_service.utils.money import to_decimal


class DiscountType(str, Enum):
    """Discount type enumeration."""
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


class PromoCode(BaseModel):
    """Promo code definition for MongoDB."""
    id: Optional[str] = Field(None, alias="_id")
    code: str = Field(min_length=1)
    description: Optional[str] = None
    discount_type: DiscountType
    discount_value: Decimal = Field(gt=0)
    active: bool = True
    expiry_date: Optional[datetime] = None
    # Stored by the promotions subsystem but not enforced by the cart.
    minimum_purchase_amount: Optional[Decimal] = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("discount_value", "minimum_purchase_amount", mode="before")
    @classmethod
    def coerce_decimal(cls, value):
        return to_decimal(value) if value is not None else value

    @field_validator("expiry_date")
    @classmethod
    def expiry_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else value

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expiry_date is None:
            return False
        return self.expiry_date < (now or get_current_timestamp())

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "code": "SAVE10",
                "description": "10% off the whole cart",
                "discount_type": "PERCENTAGE",
                "discount_value": "10",
                "active": True,
                "expiry_date": "2026-12-31T23:59:59Z"
            }
        }
