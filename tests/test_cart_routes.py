"""
Tests for cart endpoints.

Route functions are awaited directly with services wired to in-memory fakes.
"""
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException, status

from cart_service.api.deps import get_customer_id
from cart_service.api.routes.cart import (
    add_item,
    apply_promo_code,
    archive_cart,
    checkout,
    clear_cart,
    create_cart,
    delete_cart,
    get_cart,
    remove_item,
    remove_promo_code,
    unarchive_cart,
    update_item_quantity,
)
from cart_service.core.exceptions import CartNotFound, EmptyCart
from cart_service.models.cart import Cart
from cart_service.models.order_intent import ConfirmationType
from cart_service.models.promo_code import DiscountType
from cart_service.schemas.cart import AddToCartRequest, CartResponse, CheckoutRequest
from tests.factories import CUSTOMER_ID, make_promo


class TestCustomerHeader:
    """Test the X-Customer-ID dependency."""

    @pytest.mark.asyncio
    async def test_header_present(self):
        assert await get_customer_id(" cust123 ") == "cust123"

    @pytest.mark.asyncio
    async def test_header_missing(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_customer_id(None)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.asyncio
    async def test_header_blank(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_customer_id("   ")

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED


class TestCartEndpoints:
    """Test the cart lifecycle endpoints."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, cart_service):
        created = await create_cart(customer_id=CUSTOMER_ID, cart_service=cart_service)
        fetched = await get_cart(customer_id=CUSTOMER_ID, cart_service=cart_service)

        assert isinstance(created, CartResponse)
        assert created.id == fetched.id
        assert created.customer_id == CUSTOMER_ID

    @pytest.mark.asyncio
    async def test_get_missing_cart(self, cart_service):
        with pytest.raises(CartNotFound) as exc_info:
            await get_cart(customer_id=CUSTOMER_ID, cart_service=cart_service)

        assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_returns_no_content(self, cart_service, store, cart):
        response = await delete_cart(customer_id=CUSTOMER_ID, cart_service=cart_service)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert store.stored(CUSTOMER_ID) is None

    @pytest.mark.asyncio
    async def test_item_flow(self, cart_service, cart):
        request = AddToCartRequest(product_id="p1", quantity=2, unit_price=Decimal("10.50"))

        added = await add_item(request=request, customer_id=CUSTOMER_ID, cart_service=cart_service)
        assert added.total_price == Decimal("21.00")
        assert added.items[0].item_total == Decimal("21.00")

        updated = await update_item_quantity(
            product_id="p1", quantity=3, customer_id=CUSTOMER_ID, cart_service=cart_service
        )
        assert updated.total_price == Decimal("31.50")

        removed = await remove_item(product_id="p1", customer_id=CUSTOMER_ID, cart_service=cart_service)
        assert removed.items == []

    @pytest.mark.asyncio
    async def test_clear(self, cart_service, cart):
        request = AddToCartRequest(product_id="p1", quantity=1, unit_price=Decimal("4.00"))
        await add_item(request=request, customer_id=CUSTOMER_ID, cart_service=cart_service)

        cleared = await clear_cart(customer_id=CUSTOMER_ID, cart_service=cart_service)

        assert cleared.items == []
        assert cleared.total_price == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_archive_and_unarchive(self, cart_service, cart):
        archived = await archive_cart(customer_id=CUSTOMER_ID, cart_service=cart_service)
        assert archived.archived is True

        active = await unarchive_cart(customer_id=CUSTOMER_ID, cart_service=cart_service)
        assert active.archived is False

    @pytest.mark.asyncio
    async def test_promo_apply_and_remove(self, cart_service, promo_lookup, cart):
        promo_lookup.add(make_promo("SAVE10", DiscountType.PERCENTAGE, "10"))
        request = AddToCartRequest(product_id="p1", quantity=2, unit_price=Decimal("10.00"))
        await add_item(request=request, customer_id=CUSTOMER_ID, cart_service=cart_service)

        applied = await apply_promo_code(code="save10", customer_id=CUSTOMER_ID, cart_service=cart_service)
        assert applied.applied_promo_code == "SAVE10"
        assert applied.total_price == Decimal("18.00")

        removed = await remove_promo_code(customer_id=CUSTOMER_ID, cart_service=cart_service)
        assert removed.applied_promo_code is None
        assert removed.total_price == Decimal("20.00")

    def test_response_serializes_money_as_strings(self):
        response = CartResponse.from_cart(Cart(customer_id=CUSTOMER_ID))

        dumped = response.model_dump(mode="json")

        assert dumped["total_price"] == "0.00"
        assert "_id" not in dumped
        assert dumped["id"] == response.id


class TestCheckoutEndpoint:
    """Test the checkout endpoint."""

    @pytest.mark.asyncio
    async def test_checkout(self, cart_service, checkout_service, publisher, cart):
        request = AddToCartRequest(product_id="p1", quantity=1, unit_price=Decimal("9.99"))
        await add_item(request=request, customer_id=CUSTOMER_ID, cart_service=cart_service)

        result = await checkout(
            request=CheckoutRequest(confirmation_type=ConfirmationType.OTP),
            customer_id=CUSTOMER_ID,
            checkout_service=checkout_service
        )

        assert result.items == []
        assert result.total_price == Decimal("0.00")
        assert len(publisher.published) == 1

    @pytest.mark.asyncio
    async def test_checkout_passes_metadata(self):
        mock_service = MagicMock()
        mock_service.checkout = AsyncMock(return_value=Cart(customer_id=CUSTOMER_ID))
        request = CheckoutRequest(
            confirmation_type=ConfirmationType.SIGNATURE,
            signature="sig",
            location={"lat": 5.36, "lng": -4.01}
        )

        await checkout(request=request, customer_id=CUSTOMER_ID, checkout_service=mock_service)

        kwargs = mock_service.checkout.call_args.kwargs
        assert kwargs["customer_id"] == CUSTOMER_ID
        assert kwargs["confirmation_type"] == ConfirmationType.SIGNATURE
        assert kwargs["signature"] == "sig"
        assert kwargs["location"].lat == 5.36
        assert kwargs["delivery_address"] is None

    @pytest.mark.asyncio
    async def test_checkout_empty_cart(self, checkout_service, cart):
        with pytest.raises(EmptyCart) as exc_info:
            await checkout(
                request=CheckoutRequest(confirmation_type=ConfirmationType.NONE),
                customer_id=CUSTOMER_ID,
                checkout_service=checkout_service
            )

        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
