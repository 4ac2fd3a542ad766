"""
Catalog query engine.

Pure functions from (catalog, query parameters) to an ordered, filtered
catalog plus the facet data used to draw the filter controls. Nothing here
performs I/O or keeps state, so every function may be called on each
keystroke; identical inputs always give identical output order.
"""

from collections import Counter
from typing import AbstractSet, Callable, Dict, Iterable, List, Sequence, Tuple

from storefront.models.catalog import CatalogFacets, CatalogView, CategoryFacet, PriceBounds
from storefront.models.item import CatalogItem
from storefront.schemas.query_schemas import PriceRange, QueryParameters, SortKey

FEATURED_MAX_PRIORITY = 3
EMPTY_CATALOG_BOUNDS = PriceBounds(min=0.0, max=1000.0)

# sort key -> (key function, descending)
SORT_ORDERS: Dict[SortKey, Tuple[Callable[[CatalogItem], object], bool]] = {
    SortKey.NEWEST: (lambda item: item.id, True),
    SortKey.PRICE_LOW: (lambda item: item.price, False),
    SortKey.PRICE_HIGH: (lambda item: item.price, True),
    SortKey.POPULAR: (lambda item: item.priority, False),
    SortKey.NAME_AZ: (lambda item: item.name, False),
    SortKey.NAME_ZA: (lambda item: item.name, True),
}


def matches_search(item: CatalogItem, search_term: str) -> bool:
    """Case-insensitive substring match on name, description or category"""
    if not search_term:
        return True

    needle = search_term.lower()
    return (
        needle in item.name.lower()
        or needle in item.description.lower()
        or bool(item.category and needle in item.category.lower())
    )


def matches_category(item: CatalogItem, selected_categories: AbstractSet[str]) -> bool:
    return not selected_categories or item.category in selected_categories


def matches_price(item: CatalogItem, price_range: PriceRange) -> bool:
    return price_range.contains(item.price)


def matches_availability(item: CatalogItem, available_only: bool) -> bool:
    return not available_only or item.is_available


def matches(item: CatalogItem, params: QueryParameters) -> bool:
    """True when the item passes every active filter"""
    return (
        matches_search(item, params.search_term)
        and matches_category(item, params.selected_categories)
        and matches_price(item, params.price_range)
        and matches_availability(item, params.available_only)
    )


def sort_items(items: Iterable[CatalogItem], sort_key: SortKey) -> List[CatalogItem]:
    """Stable sort; items the key considers equal keep their input order"""
    key, descending = SORT_ORDERS[SortKey(sort_key)]
    # sorted() stays stable with reverse=True
    return sorted(items, key=key, reverse=descending)


def evaluate(catalog: Sequence[CatalogItem], params: QueryParameters) -> List[CatalogItem]:
    """Filter the catalog by params and order the result by params.sort_key"""
    filtered = [item for item in catalog if matches(item, params)]
    return sort_items(filtered, params.sort_key)


def is_featured(item: CatalogItem, max_priority: int = FEATURED_MAX_PRIORITY) -> bool:
    return item.priority <= max_priority and item.is_available


def partition_featured(
    items: Iterable[CatalogItem],
    max_priority: int = FEATURED_MAX_PRIORITY
) -> Tuple[List[CatalogItem], List[CatalogItem]]:
    """Split items into (featured, regular), keeping order within each"""
    featured: List[CatalogItem] = []
    regular: List[CatalogItem] = []
    for item in items:
        if is_featured(item, max_priority):
            featured.append(item)
        else:
            regular.append(item)
    return featured, regular


def derive_facets(
    catalog: Sequence[CatalogItem],
    empty_bounds: PriceBounds = EMPTY_CATALOG_BOUNDS
) -> CatalogFacets:
    """Category counts and price bounds over the full, unfiltered catalog"""
    counts = Counter(item.category for item in catalog if item.category)
    categories = [CategoryFacet(category=name, count=counts[name]) for name in sorted(counts)]

    if catalog:
        prices = [item.price for item in catalog]
        bounds = PriceBounds(min=min(prices), max=max(prices))
    else:
        bounds = empty_bounds

    return CatalogFacets(
        categories=categories,
        price_bounds=bounds,
        available_count=sum(1 for item in catalog if item.is_available)
    )


def build_view(
    catalog: Sequence[CatalogItem],
    params: QueryParameters,
    max_priority: int = FEATURED_MAX_PRIORITY
) -> CatalogView:
    """Evaluate params and group the result for display"""
    items = evaluate(catalog, params)
    featured, regular = partition_featured(items, max_priority)
    return CatalogView(items=items, featured=featured, regular=regular, total_count=len(catalog))


def default_query(facets: CatalogFacets) -> QueryParameters:
    """The "clear all filters" state, with the price range spanning the catalog"""
    return QueryParameters(
        price_range=PriceRange(min=facets.price_bounds.min, max=facets.price_bounds.max)
    )


def has_active_filters(params: QueryParameters, facets: CatalogFacets) -> bool:
    """True when params narrow or reorder the catalog compared to default_query"""
    return params != default_query(facets)
