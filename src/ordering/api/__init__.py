"""Ordering domain API package."""

from ordering.api.routes import discount_router, order_router

__all__ = ["order_router", "discount_router"]
