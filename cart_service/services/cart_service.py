import logging
from datetime import datetime
from typing import Optional

from cart_service.core.exceptions import CartNotFound, InvalidPromoCode, NoActiveCart
from cart_service.models.cart import Cart, CartItem
from cart_service.repositories.cart_repository import CartStore
from cart_service.repositories.promo_code_repository import PromoLookup
from cart_service.services.commands import AddItemCommand, RemoveItemCommand, UpdateQuantityCommand
from cart_service.services.recalculation import recalculate_cart
from cart_service.utils.helpers import get_current_timestamp

logger = logging.getLogger(__name__)


class CartService:
    """Service for cart operations."""

    def __init__(self, store: CartStore, promo_lookup: PromoLookup):
        self.store = store
        self.promo_lookup = promo_lookup

    # Lookups

    async def get_cart(self, customer_id: str) -> Cart:
        """Get the customer's cart, archived or not."""
        logger.debug(f"Entering get_cart with customer_id: {customer_id}")
        cart = await self.store.find_any(customer_id)
        if cart is None:
            logger.error(f"Cart not found for customer_id: {customer_id}")
            raise CartNotFound("Cart not found")
        return cart

    async def get_active_cart(self, customer_id: str) -> Cart:
        cart = await self.store.find_active(customer_id)
        if cart is None:
            logger.error(f"Active cart not found for customer_id: {customer_id}")
            raise NoActiveCart(f"Cart not found for customer ID: {customer_id}")
        return cart

    async def get_archived_cart(self, customer_id: str) -> Cart:
        cart = await self.store.find_archived(customer_id)
        if cart is None:
            logger.error(f"Archived cart not found for customer_id: {customer_id}")
            raise CartNotFound(f"No archived cart found for customer ID: {customer_id}")
        return cart

    async def save_cart(self, cart: Cart, now: Optional[datetime] = None) -> Cart:
        """Recalculate totals, then persist."""
        logger.debug(f"Preparing to save cart {cart.id}")
        await recalculate_cart(cart, self.promo_lookup, now)
        cart.updated_at = get_current_timestamp()
        return await self.store.save(cart)

    # Lifecycle

    async def create_cart(self, customer_id: str) -> Cart:
        """Get or create a cart for a customer."""
        logger.debug(f"Entering create_cart with customer_id: {customer_id}")
        cart = await self.store.find_any(customer_id)
        if cart is not None:
            logger.debug(f"Cart {cart.id} already exists for customer_id: {customer_id}")
            return cart

        cart = Cart(customer_id=customer_id)
        logger.info(f"Created cart {cart.id} for customer_id: {customer_id}")
        return await self.store.save(cart)

    async def delete_cart(self, customer_id: str) -> None:
        logger.debug(f"Entering delete_cart with customer_id: {customer_id}")
        cart = await self.store.find_any(customer_id)
        if cart is None:
            logger.debug(f"No cart to delete for customer_id: {customer_id}")
            return
        await self.store.delete(cart)
        logger.info(f"Deleted cart {cart.id} for customer_id: {customer_id}")

    async def clear_cart(self, customer_id: str) -> Cart:
        logger.debug(f"Entering clear_cart with customer_id: {customer_id}")
        cart = await self.get_cart(customer_id)
        cart.items.clear()
        cart.applied_promo_code = None
        return await self.save_cart(cart)

    async def archive_cart(self, customer_id: str) -> Cart:
        logger.debug(f"Entering archive_cart with customer_id: {customer_id}")
        cart = await self.get_active_cart(customer_id)
        cart.archived = True
        cart.updated_at = get_current_timestamp()
        archived = await self.store.save(cart)
        logger.info(f"Cart {cart.id} archived")
        return archived

    async def unarchive_cart(self, customer_id: str) -> Cart:
        logger.debug(f"Entering unarchive_cart with customer_id: {customer_id}")
        cart = await self.get_archived_cart(customer_id)
        cart.archived = False
        cart.updated_at = get_current_timestamp()
        active = await self.store.save(cart)
        logger.info(f"Cart {cart.id} unarchived")
        return active

    # Item mutations

    async def add_item(self, customer_id: str, item: CartItem) -> Cart:
        return await AddItemCommand(self, customer_id, item).execute()

    async def update_item_quantity(self, customer_id: str, product_id: str, quantity: int) -> Cart:
        return await UpdateQuantityCommand(self, customer_id, product_id, quantity).execute()

    async def remove_item(self, customer_id: str, product_id: str) -> Cart:
        return await RemoveItemCommand(self, customer_id, product_id).execute()

    # Promo codes

    async def apply_promo_code(self, customer_id: str, code: str) -> Cart:
        """
        Apply a promo code to the customer's active cart.

        Unknown, inactive and expired codes are rejected here. A code that
        expires after being applied is dropped silently on recalculation.
        """
        logger.debug(f"Entering apply_promo_code for customer_id: {customer_id}, code: {code}")
        cart = await self.get_active_cart(customer_id)
        normalized = code.strip().upper()

        now = get_current_timestamp()
        promo = await self.promo_lookup.find_active_unexpired(normalized, now)
        if promo is None or promo.is_expired(now):
            raise InvalidPromoCode(f"Invalid, inactive, or expired promo code: {code}")

        logger.info(f"Applying promo code '{normalized}' to cart {cart.id}")
        cart.applied_promo_code = normalized
        return await self.save_cart(cart, now)

    async def remove_promo_code(self, customer_id: str) -> Cart:
        logger.debug(f"Entering remove_promo_code for customer_id: {customer_id}")
        cart = await self.get_active_cart(customer_id)

        if cart.applied_promo_code is None:
            logger.debug(f"No promo code to remove from cart {cart.id}")
            return cart

        logger.info(f"Removing promo code '{cart.applied_promo_code}' from cart {cart.id}")
        cart.applied_promo_code = None
        return await self.save_cart(cart)
