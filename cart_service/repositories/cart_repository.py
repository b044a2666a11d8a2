"""
Cart persistence.

The store is keyed by customer id with a secondary archived-flag index. It
is re-read at the start of every operation; there is no in-process cache.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from cart_service.models.cart import Cart
from cart_service.utils.helpers import from_bson, to_bson

logger = logging.getLogger(__name__)


class CartStore(ABC):
    """Storage interface consumed by the cart core."""

    @abstractmethod
    async def find_active(self, customer_id: str) -> Optional[Cart]:
        ...

    @abstractmethod
    async def find_archived(self, customer_id: str) -> Optional[Cart]:
        ...

    @abstractmethod
    async def find_any(self, customer_id: str) -> Optional[Cart]:
        ...

    @abstractmethod
    async def save(self, cart: Cart) -> Cart:
        ...

    @abstractmethod
    async def delete(self, cart: Cart) -> None:
        ...


class MongoCartRepository(CartStore):
    """CartStore backed by the ``carts`` MongoDB collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.carts

    async def ensure_indexes(self):
        await self.collection.create_index([("customer_id", 1), ("archived", 1)])

    @staticmethod
    def _to_document(cart: Cart) -> dict:
        return to_bson(cart.model_dump(by_alias=True))

    @staticmethod
    def _from_document(document: Optional[dict]) -> Optional[Cart]:
        if document is None:
            return None
        return Cart.model_validate(from_bson(document))

    async def find_active(self, customer_id: str) -> Optional[Cart]:
        document = await self.collection.find_one({"customer_id": customer_id, "archived": False})
        return self._from_document(document)

    async def find_archived(self, customer_id: str) -> Optional[Cart]:
        document = await self.collection.find_one({"customer_id": customer_id, "archived": True})
        return self._from_document(document)

    async def find_any(self, customer_id: str) -> Optional[Cart]:
        document = await self.collection.find_one({"customer_id": customer_id})
        return self._from_document(document)

    async def save(self, cart: Cart) -> Cart:
        await self.collection.replace_one(
            {"_id": cart.id},
            self._to_document(cart),
            upsert=True
        )
        logger.debug(f"Saved cart {cart.id} for customer {cart.customer_id}")
        return cart

    async def delete(self, cart: Cart) -> None:
        await self.collection.delete_one({"_id": cart.id})
        logger.debug(f"Deleted cart {cart.id} for customer {cart.customer_id}")
