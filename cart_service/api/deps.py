from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from cart_service.core.config import settings
from cart_service.core.database import get_database
from cart_service.repositories.cart_repository import MongoCartRepository
from cart_service.repositories.promo_code_repository import MongoPromoCodeRepository
from cart_service.services.cart_service import CartService
from cart_service.services.checkout_service import CheckoutService
from cart_service.services.event_publisher import EventPublisher, build_event_publisher

_publisher: Optional[EventPublisher] = None


async def get_db() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    return get_database()


async def get_customer_id(x_customer_id: Optional[str] = Header(None)) -> str:
    """
    Dependency to get the calling customer's id.

    Raises:
        HTTPException: If the X-Customer-ID header is missing or blank
    """
    if x_customer_id is None or not x_customer_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Customer ID not found in request header (X-Customer-ID)."
        )
    return x_customer_id.strip()


def get_event_publisher() -> EventPublisher:
    """Dependency to get the process-wide event publisher."""
    global _publisher
    if _publisher is None:
        _publisher = build_event_publisher(
            mode=settings.EVENT_PUBLISHER_MODE,
            base_url=settings.ORDER_SERVICE_URL,
            exchange=settings.ORDER_EVENTS_EXCHANGE,
            timeout=settings.PUBLISH_TIMEOUT_SECONDS
        )
    return _publisher


async def get_cart_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> CartService:
    return CartService(
        store=MongoCartRepository(db),
        promo_lookup=MongoPromoCodeRepository(db)
    )


async def get_checkout_service(
    cart_service: CartService = Depends(get_cart_service),
    publisher: EventPublisher = Depends(get_event_publisher)
) -> CheckoutService:
    return CheckoutService(
        cart_service=cart_service,
        publisher=publisher,
        topic=settings.ORDER_PLACED_ROUTING_KEY
    )
