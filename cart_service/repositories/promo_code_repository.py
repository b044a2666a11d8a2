import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from cart_service.models.promo_code import PromoCode
from cart_service.utils.helpers import from_bson

logger = logging.getLogger(__name__)


class PromoLookup(ABC):
    """Read-only view of the promotions subsystem."""

    @abstractmethod
    async def find_active_unexpired(self, code: str, now: Optional[datetime] = None) -> Optional[PromoCode]:
        """Return the active, unexpired definition for ``code`` or None."""


class MongoPromoCodeRepository(PromoLookup):
    """PromoLookup backed by the ``promo_codes`` MongoDB collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db.promo_codes

    async def ensure_indexes(self):
        await self.collection.create_index("code", unique=True)

    async def find_active_unexpired(self, code: str, now: Optional[datetime] = None) -> Optional[PromoCode]:
        document = await self.collection.find_one({"code": code.strip().upper(), "active": True})
        if document is None:
            return None

        document = from_bson(document)
        document["_id"] = str(document["_id"])
        promo = PromoCode.model_validate(document)

        if promo.is_expired(now):
            logger.debug(f"Promo code {promo.code} expired at {promo.expiry_date}")
            return None
        return promo
