from dataclasses import dataclass, field
from typing import List, Dict, Any

from storefront.models.item import CatalogItem


@dataclass(frozen=True)
class CategoryFacet:
    """A category present in the catalog and how many items carry it"""
    category: str
    count: int


@dataclass(frozen=True)
class PriceBounds:
    min: float
    max: float


@dataclass(frozen=True)
class CatalogFacets:
    """Summary of the full catalog used to populate filter controls"""
    categories: List[CategoryFacet]
    price_bounds: PriceBounds
    available_count: int = 0

    @property
    def category_names(self) -> List[str]:
        return [facet.category for facet in self.categories]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": [
                {"category": facet.category, "count": facet.count}
                for facet in self.categories
            ],
            "price_bounds": {"min": self.price_bounds.min, "max": self.price_bounds.max},
            "available_count": self.available_count
        }


@dataclass
class CatalogView:
    """Filtered, sorted catalog split into featured and regular sections"""
    items: List[CatalogItem] = field(default_factory=list)
    featured: List[CatalogItem] = field(default_factory=list)
    regular: List[CatalogItem] = field(default_factory=list)
    total_count: int = 0  # Size of the unfiltered catalog

    @property
    def result_count(self) -> int:
        return len(self.items)

    @property
    def available_count(self) -> int:
        return sum(1 for item in self.items if item.is_available)

    @property
    def featured_count(self) -> int:
        return len(self.featured)

    @property
    def is_filtered(self) -> bool:
        """True when some catalog items were filtered out"""
        return self.result_count != self.total_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "featured_ids": [item.id for item in self.featured],
            "regular_ids": [item.id for item in self.regular],
            "total_count": self.total_count,
            "result_count": self.result_count,
            "available_count": self.available_count,
            "featured_count": self.featured_count
        }
