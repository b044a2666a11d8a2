"""
Cart error taxonomy.

Each error carries its HTTP status; service code raises them directly and
FastAPI renders them as-is.
"""
from fastapi import HTTPException, status


class CartServiceError(HTTPException):
    """Base class for errors surfaced at the cart operation boundary."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(status_code=type(self).status_code, detail=detail)

    def __str__(self) -> str:
        return self.detail


class CartNotFound(CartServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class NoActiveCart(CartNotFound):
    """The customer has no non-archived cart."""


class ProductNotFound(CartServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidPromoCode(CartServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class EmptyCart(CartServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class MissingSignature(CartServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class CheckoutPublishFailed(CartServiceError):
    """Fatal: the order intent could not be handed to the order subsystem."""
    status_code = status.HTTP_502_BAD_GATEWAY


class EventPublishError(Exception):
    """Transport-level failure raised by event publishers."""
