"""
Reversible cart mutations.

A command captures only identifiers and the requested change. Both
``execute()`` and ``undo()`` re-read the customer's active cart, so they
always act on current state rather than a snapshot taken at construction.
"""
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from cart_service.core.exceptions import ProductNotFound
from cart_service.models.cart import Cart, CartItem

if TYPE_CHECKING:
    from cart_service.services.cart_service import CartService

logger = logging.getLogger(__name__)


class CartCommand(ABC):
    """A cart mutation that knows how to invert itself."""

    def __init__(self, cart_service: "CartService", customer_id: str):
        self.cart_service = cart_service
        self.customer_id = customer_id
        self.executed = False

    @abstractmethod
    async def execute(self) -> Cart:
        ...

    @abstractmethod
    async def undo(self) -> Cart:
        ...

    async def _load(self) -> Cart:
        return await self.cart_service.get_active_cart(self.customer_id)


def _insert_at(cart: Cart, index: int, item: CartItem):
    cart.items.insert(min(index, len(cart.items)), item)


class AddItemCommand(CartCommand):
    """Append a line, or grow the existing line for the same product."""

    def __init__(self, cart_service: "CartService", customer_id: str, item: CartItem):
        super().__init__(cart_service, customer_id)
        self.item = item.model_copy()

    async def execute(self) -> Cart:
        logger.debug(f"Executing AddItemCommand for customer {self.customer_id}, item: {self.item}")
        cart = await self._load()

        existing = cart.find_item(self.item.product_id)
        if existing:
            logger.debug(f"Item exists, updating quantity for product {self.item.product_id}")
            existing.quantity += self.item.quantity
        else:
            logger.debug(f"Adding new item to cart for product {self.item.product_id}")
            cart.items.append(self.item.model_copy())

        self.executed = True
        return await self.cart_service.save_cart(cart)

    async def undo(self) -> Cart:
        logger.debug(f"Undoing AddItemCommand for customer {self.customer_id}, item: {self.item}")
        cart = await self._load()
        if not self.executed:
            logger.warning(f"AddItemCommand for product {self.item.product_id} was never executed")
            return cart

        existing = cart.find_item(self.item.product_id)
        if existing is None:
            logger.warning(f"Item not found during undo for product {self.item.product_id}")
        else:
            remaining = existing.quantity - self.item.quantity
            if remaining <= 0:
                logger.debug(f"Removing item during undo for product {self.item.product_id}")
                cart.remove_item(self.item.product_id)
            else:
                existing.quantity = remaining

        self.executed = False
        return await self.cart_service.save_cart(cart)


class UpdateQuantityCommand(CartCommand):
    """Set a line's quantity; a quantity of zero or less removes the line."""

    def __init__(self, cart_service: "CartService", customer_id: str, product_id: str, new_quantity: int):
        super().__init__(cart_service, customer_id)
        self.product_id = product_id
        self.new_quantity = new_quantity
        self.previous_quantity: Optional[int] = None
        self.previous_item: Optional[CartItem] = None
        self.previous_index: Optional[int] = None

    async def execute(self) -> Cart:
        logger.debug(
            f"Executing UpdateQuantityCommand for customer {self.customer_id}, "
            f"product {self.product_id}, quantity {self.new_quantity}"
        )
        cart = await self._load()

        index = cart.index_of(self.product_id)
        if index is None:
            logger.error(f"Product {self.product_id} not found in cart {cart.id}")
            raise ProductNotFound("Product not found in cart")

        item = cart.items[index]
        self.previous_quantity = item.quantity
        self.previous_item = item.model_copy()
        self.previous_index = index

        if self.new_quantity <= 0:
            logger.debug(f"Removing item as quantity <= 0 for product {self.product_id}")
            cart.items.pop(index)
        else:
            item.quantity = self.new_quantity

        self.executed = True
        return await self.cart_service.save_cart(cart)

    async def undo(self) -> Cart:
        logger.debug(f"Undoing UpdateQuantityCommand for customer {self.customer_id}, product {self.product_id}")
        cart = await self._load()
        if not self.executed or self.previous_quantity is None:
            logger.warning(f"No previous quantity to restore for product {self.product_id}")
            return cart

        existing = cart.find_item(self.product_id)
        if self.previous_quantity <= 0:
            cart.remove_item(self.product_id)
        elif existing is not None:
            existing.quantity = self.previous_quantity
        else:
            logger.debug(f"Adding item back during undo for product {self.product_id}")
            restored = self.previous_item.model_copy()
            _insert_at(cart, self.previous_index, restored)

        self.executed = False
        return await self.cart_service.save_cart(cart)


class RemoveItemCommand(CartCommand):
    """Remove a line. Removing an absent product is a no-op."""

    def __init__(self, cart_service: "CartService", customer_id: str, product_id: str):
        super().__init__(cart_service, customer_id)
        self.product_id = product_id
        self.removed_item: Optional[CartItem] = None
        self.removed_index: Optional[int] = None

    async def execute(self) -> Cart:
        logger.debug(f"Executing RemoveItemCommand for customer {self.customer_id}, product {self.product_id}")
        cart = await self._load()

        index = cart.index_of(self.product_id)
        if index is not None:
            self.removed_item = cart.items.pop(index).model_copy()
            self.removed_index = index
            logger.debug(f"Item removed for product {self.product_id}")
        else:
            self.removed_item = None
            self.removed_index = None
            logger.warning(f"Item not found for removal, product {self.product_id}")

        self.executed = True
        return await self.cart_service.save_cart(cart)

    async def undo(self) -> Cart:
        logger.debug(f"Undoing RemoveItemCommand for customer {self.customer_id}, product {self.product_id}")
        cart = await self._load()
        if not self.executed or self.removed_item is None:
            logger.warning(f"No item to restore during undo for product {self.product_id}")
            return cart

        existing = cart.find_item(self.product_id)
        if existing is not None:
            # Re-added since removal; merge to keep product ids unique.
            existing.quantity += self.removed_item.quantity
        else:
            _insert_at(cart, self.removed_index, self.removed_item.model_copy())

        self.executed = False
        return await self.cart_service.save_cart(cart)
