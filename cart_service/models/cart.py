from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from cart_service.utils.helpers import generate_cart_id, get_current_timestamp
from cart_service.utils.money import ZERO, to_decimal


class CartItem(BaseModel):
    """A line in a shopping cart. Product ids are unique within a cart."""
    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=0)
    unit_price: Decimal = Field(ge=0)

    @field_validator("product_id")
    @classmethod
    def product_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("product_id must not be blank")
        return value

    @field_validator("unit_price", mode="before")
    @classmethod
    def coerce_unit_price(cls, value):
        return to_decimal(value) if value is not None else value

    @property
    def item_total(self) -> Decimal:
        return self.unit_price * self.quantity

    class Config:
        validate_assignment = True
        json_schema_extra = {
            "example": {
                "product_id": "prod123",
                "quantity": 2,
                "unit_price": "10.50"
            }
        }


class Cart(BaseModel):
    """
    Shopping cart aggregate for MongoDB.

    ``sub_total``, ``discount_amount`` and ``total_price`` are derived by the
    recalculation engine and are never accepted from API callers.
    """
    id: str = Field(default_factory=generate_cart_id, alias="_id")
    customer_id: str = Field(min_length=1)
    items: List[CartItem] = Field(default_factory=list)
    archived: bool = False
    applied_promo_code: Optional[str] = None
    sub_total: Decimal = ZERO
    discount_amount: Decimal = ZERO
    total_price: Decimal = ZERO
    created_at: datetime = Field(default_factory=get_current_timestamp)
    updated_at: datetime = Field(default_factory=get_current_timestamp)

    def find_item(self, product_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.product_id == product_id), None)

    def index_of(self, product_id: str) -> Optional[int]:
        for index, item in enumerate(self.items):
            if item.product_id == product_id:
                return index
        return None

    def remove_item(self, product_id: str) -> Optional[CartItem]:
        """Remove and return the line for ``product_id``, if any."""
        index = self.index_of(product_id)
        if index is None:
            return None
        return self.items.pop(index)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "_id": "0b8f7c5e-6d0a-4c5e-9b56-1f3c2a7d9e10",
                "customer_id": "cust123",
                "items": [
                    {
                        "product_id": "prod123",
                        "quantity": 2,
                        "unit_price": "10.50"
                    }
                ],
                "archived": False,
                "applied_promo_code": None,
                "sub_total": "21.00",
                "discount_amount": "0.00",
                "total_price": "21.00"
            }
        }
