"""Ordering API package."""

from ordering.api.routes import pricing_router

__all__ = ["pricing_router"]
