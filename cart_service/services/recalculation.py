"""
Cart total recalculation.

Derives ``sub_total``, ``discount_amount`` and ``total_price`` from a cart's
items and its applied promo code. An applied code that has since expired or
disappeared is cleared silently; rejecting bad codes is the job of promo
application, not of recalculation.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from cart_service.models.cart import Cart, CartItem
from cart_service.models.promo_code import DiscountType, PromoCode
from cart_service.repositories.promo_code_repository import PromoLookup
from cart_service.utils.helpers import get_current_timestamp
from cart_service.utils.money import HUNDRED, ZERO, round_money

logger = logging.getLogger(__name__)


def calculate_sub_total(items: Iterable[CartItem]) -> Decimal:
    """Sum of line totals over lines with a positive quantity, rounded."""
    total = sum(
        (item.item_total for item in items if item.quantity > 0),
        ZERO
    )
    return round_money(total)


def calculate_discount(sub_total: Decimal, promo: Optional[PromoCode]) -> Decimal:
    """
    Discount for ``sub_total`` under ``promo``, clamped to [0, sub_total].

    Percentage discounts round the factor to 2 places before multiplying, so
    12.5% is applied as 0.13.
    """
    discount = ZERO
    if promo is not None:
        if promo.discount_type == DiscountType.PERCENTAGE:
            factor = round_money(promo.discount_value / HUNDRED)
            discount = sub_total * factor
        elif promo.discount_type == DiscountType.FIXED_AMOUNT:
            discount = promo.discount_value

    discount = max(ZERO, min(discount, sub_total))
    return round_money(discount)


def apply_totals(cart: Cart, promo: Optional[PromoCode], now: Optional[datetime] = None) -> Cart:
    """
    Write derived totals onto ``cart`` given the lookup result for its code.

    ``promo`` is None when the applied code was not found. Mutates and
    returns the cart; nothing is persisted here.
    """
    now = now or get_current_timestamp()
    sub_total = calculate_sub_total(cart.items)

    effective_promo = None
    if cart.applied_promo_code is not None:
        if promo is None:
            logger.warning(f"Applied promo code {cart.applied_promo_code} is no longer valid. Removing.")
            cart.applied_promo_code = None
        elif promo.is_expired(now):
            logger.warning(f"Applied promo code {cart.applied_promo_code} is expired. Removing.")
            cart.applied_promo_code = None
        else:
            effective_promo = promo

    discount = calculate_discount(sub_total, effective_promo)

    cart.sub_total = sub_total
    cart.discount_amount = discount
    cart.total_price = round_money(sub_total - discount)

    logger.debug(
        f"Recalculated totals for cart {cart.id}: SubTotal={cart.sub_total}, "
        f"Discount={cart.discount_amount}, Total={cart.total_price}"
    )
    return cart


async def recalculate_cart(cart: Cart, promo_lookup: PromoLookup, now: Optional[datetime] = None) -> Cart:
    """Look up the cart's applied promo code, then apply totals."""
    now = now or get_current_timestamp()
    promo = None
    if cart.applied_promo_code is not None:
        promo = await promo_lookup.find_active_unexpired(cart.applied_promo_code, now)
    return apply_totals(cart, promo, now)
