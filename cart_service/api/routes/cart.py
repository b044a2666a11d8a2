import logging
from fastapi import APIRouter, Depends, Query, Response, status

from cart_service.api.deps import get_cart_service, get_checkout_service, get_customer_id
from cart_service.models.cart import CartItem
from cart_service.schemas.cart import AddToCartRequest, CartResponse, CheckoutRequest
from cart_service.services.cart_service import CartService
from cart_service.services.checkout_service import CheckoutService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create", response_model=CartResponse)
async def create_cart(
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Create a new cart for the customer or return the existing one.
    """
    cart = await cart_service.create_cart(customer_id)
    return CartResponse.from_cart(cart)


@router.get("/customer", response_model=CartResponse)
async def get_cart(
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Get the customer's cart.
    """
    cart = await cart_service.get_cart(customer_id)
    return CartResponse.from_cart(cart)


@router.delete("/customer", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cart(
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Delete the customer's cart. Deleting a missing cart is not an error.
    """
    await cart_service.delete_cart(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/items", response_model=CartResponse)
async def add_item(
    request: AddToCartRequest,
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Add an item to the cart.

    If the product is already in the cart, its quantity is increased.
    """
    item = CartItem(
        product_id=request.product_id,
        quantity=request.quantity,
        unit_price=request.unit_price
    )
    cart = await cart_service.add_item(customer_id, item)
    return CartResponse.from_cart(cart)


@router.patch("/items/{product_id}", response_model=CartResponse)
async def update_item_quantity(
    product_id: str,
    quantity: int = Query(...),
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Update the quantity of an item in the cart.

    A quantity of zero or less removes the item.
    """
    cart = await cart_service.update_item_quantity(customer_id, product_id, quantity)
    return CartResponse.from_cart(cart)


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_item(
    product_id: str,
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Remove an item from the cart.
    """
    cart = await cart_service.remove_item(customer_id, product_id)
    return CartResponse.from_cart(cart)


@router.delete("/clear", response_model=CartResponse)
async def clear_cart(
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Clear all items and the promo code from the cart.
    """
    cart = await cart_service.clear_cart(customer_id)
    return CartResponse.from_cart(cart)


@router.patch("/archive", response_model=CartResponse)
async def archive_cart(
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Archive the active cart (soft-delete).
    """
    cart = await cart_service.archive_cart(customer_id)
    return CartResponse.from_cart(cart)


@router.patch("/unarchive", response_model=CartResponse)
async def unarchive_cart(
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Unarchive a previously archived cart.
    """
    cart = await cart_service.unarchive_cart(customer_id)
    return CartResponse.from_cart(cart)


@router.post("/promo/{code}", response_model=CartResponse)
async def apply_promo_code(
    code: str,
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Apply a promo code to the active cart.
    """
    cart = await cart_service.apply_promo_code(customer_id, code)
    return CartResponse.from_cart(cart)


@router.delete("/promo", response_model=CartResponse)
async def remove_promo_code(
    customer_id: str = Depends(get_customer_id),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Remove the applied promo code from the active cart, if any.
    """
    cart = await cart_service.remove_promo_code(customer_id)
    return CartResponse.from_cart(cart)


@router.post("/checkout", response_model=CartResponse)
async def checkout(
    request: CheckoutRequest,
    customer_id: str = Depends(get_customer_id),
    checkout_service: CheckoutService = Depends(get_checkout_service)
):
    """
    Check out the active cart by handing it to the order service.

    Returns the cleared cart. If the hand-off fails the cart is unchanged.
    """
    cart = await checkout_service.checkout(
        customer_id=customer_id,
        confirmation_type=request.confirmation_type,
        signature=request.signature,
        delivery_address=request.delivery_address,
        location=request.location
    )
    logger.info(f"Cart {cart.id} checked out for customer {customer_id}")
    return CartResponse.from_cart(cart)
