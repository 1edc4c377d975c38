"""Catalogue API package."""

from freshcart.catalogue.api.routes import product_router

__all__ = ["product_router"]
