import pytest

from cart_service.models.cart import Cart
from cart_service.services.cart_service import CartService
from cart_service.services.checkout_service import CheckoutService
from tests.factories import CUSTOMER_ID, InMemoryCartStore, InMemoryPromoLookup, RecordingPublisher


@pytest.fixture
def store() -> InMemoryCartStore:
    return InMemoryCartStore()


@pytest.fixture
def promo_lookup() -> InMemoryPromoLookup:
    return InMemoryPromoLookup()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def cart_service(store, promo_lookup) -> CartService:
    return CartService(store=store, promo_lookup=promo_lookup)


@pytest.fixture
def checkout_service(cart_service, publisher) -> CheckoutService:
    return CheckoutService(cart_service=cart_service, publisher=publisher, topic="order.placed")


@pytest.fixture
def cart(store) -> Cart:
    """An empty active cart already persisted for CUSTOMER_ID."""
    return store.put(Cart(customer_id=CUSTOMER_ID))
