from .item import CatalogItem
from .cart import Cart, CartLine, CartUpdate, CartView, CartViewLine
from .catalog import CatalogFacets, CatalogView, CategoryFacet, PriceBounds

__all__ = [
    "CatalogItem",
    "Cart", "CartLine", "CartUpdate", "CartView", "CartViewLine",
    "CatalogFacets", "CatalogView", "CategoryFacet", "PriceBounds"
]
