"""
Checkout transition: validate, snapshot, publish, then clear.

Nothing is written to the store until the publish succeeds. If the publish
fails the stored cart is left exactly as it was and ``CheckoutPublishFailed``
is raised.
"""
import logging
from typing import Optional

from cart_service.core.exceptions import CheckoutPublishFailed, EmptyCart, EventPublishError, MissingSignature
from cart_service.models.cart import Cart
from cart_service.models.order_intent import ConfirmationType, DeliveryAddress, Location, OrderIntent
from cart_service.services.cart_service import CartService
from cart_service.services.event_publisher import EventPublisher
from cart_service.services.recalculation import recalculate_cart
from cart_service.utils.helpers import get_current_timestamp

logger = logging.getLogger(__name__)


class CheckoutService:
    """Hands a customer's active cart to the order subsystem."""

    def __init__(self, cart_service: CartService, publisher: EventPublisher, topic: str):
        self.cart_service = cart_service
        self.publisher = publisher
        self.topic = topic

    @staticmethod
    def build_intent(
        cart: Cart,
        confirmation_type: ConfirmationType,
        signature: Optional[str] = None,
        delivery_address: Optional[DeliveryAddress] = None,
        location: Optional[Location] = None
    ) -> OrderIntent:
        return OrderIntent(
            customer_id=cart.customer_id,
            cart_id=cart.id,
            items=[item.model_copy(deep=True) for item in cart.items],
            sub_total=cart.sub_total,
            discount_amount=cart.discount_amount,
            total_price=cart.total_price,
            applied_promo_code=cart.applied_promo_code,
            confirmation_type=confirmation_type,
            signature=signature,
            delivery_address=delivery_address,
            location=location
        )

    async def checkout(
        self,
        customer_id: str,
        confirmation_type: ConfirmationType,
        signature: Optional[str] = None,
        delivery_address: Optional[DeliveryAddress] = None,
        location: Optional[Location] = None
    ) -> Cart:
        """
        Check out the customer's active cart.

        Steps:
        1. Load the active cart
        2. Recalculate totals in memory
        3. Reject empty carts and missing signatures
        4. Snapshot an OrderIntent and publish it
        5. On success clear the cart and persist it
        """
        logger.debug(f"Entering checkout for customer_id: {customer_id} with confirmation type {confirmation_type}")
        cart = await self.cart_service.get_active_cart(customer_id)

        now = get_current_timestamp()
        await recalculate_cart(cart, self.cart_service.promo_lookup, now)

        if not cart.items:
            logger.warning(f"Attempted checkout for customer_id: {customer_id} with an empty cart")
            raise EmptyCart("Cannot checkout an empty cart.")

        if confirmation_type.requires_signature and (signature is None or not signature.strip()):
            raise MissingSignature(f"Signature is required for {confirmation_type.value} confirmation type")

        intent = self.build_intent(cart, confirmation_type, signature, delivery_address, location)

        logger.debug(
            f"Publishing checkout event for cart {cart.id} with totals: Sub={cart.sub_total}, "
            f"Discount={cart.discount_amount}, Total={cart.total_price}"
        )
        try:
            await self.publisher.publish(self.topic, intent)
        except EventPublishError as e:
            logger.error(f"Failed to publish checkout event for cart {cart.id}: {str(e)}")
            raise CheckoutPublishFailed("Checkout process failed: Could not publish event.") from e

        logger.info(f"Checkout event {intent.event_id} published for cart {cart.id}. Clearing cart.")
        cart.items.clear()
        cart.applied_promo_code = None
        return await self.cart_service.save_cart(cart, now)
