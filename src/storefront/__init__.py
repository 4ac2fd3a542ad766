"""Storefront client core: cart state and catalog queries."""

__version__ = "0.1.0"
