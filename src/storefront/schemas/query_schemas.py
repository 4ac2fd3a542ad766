from enum import Enum
from typing import Any, Dict, FrozenSet

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from storefront.core.exceptions import ValidationError

DEFAULT_PRICE_CEILING = 10000.0


class SortKey(str, Enum):
    """Catalog orderings offered to the visitor"""
    NEWEST = "newest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    POPULAR = "popular"
    NAME_AZ = "name-az"
    NAME_ZA = "name-za"


class PriceRange(BaseModel):
    """Inclusive price window. min > max is allowed and matches nothing."""
    model_config = ConfigDict(frozen=True)

    min: float = Field(default=0.0, description="Lowest accepted price")
    max: float = Field(default=DEFAULT_PRICE_CEILING, description="Highest accepted price")

    def contains(self, price: float) -> bool:
        return self.min <= price <= self.max


class QueryParameters(BaseModel):
    """Live catalog query state owned by the UI layer"""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "searchTerm": "linen",
                "selectedCategories": ["Shirts", "Pants"],
                "priceRange": {"min": 100, "max": 900},
                "sortKey": "price-low",
                "availableOnly": True
            }
        },
    )

    search_term: str = Field(default="", alias="searchTerm", description="Free-text search")
    selected_categories: FrozenSet[str] = Field(
        default_factory=frozenset,
        alias="selectedCategories",
        description="Categories to keep; empty keeps all"
    )
    price_range: PriceRange = Field(default_factory=PriceRange, alias="priceRange")
    sort_key: SortKey = Field(default=SortKey.NEWEST, alias="sortKey")
    available_only: bool = Field(default=False, alias="availableOnly")

    @field_validator("search_term", mode="before")
    @classmethod
    def validate_search_term(cls, v):
        return "" if v is None else v


def parse_query_params(data: Dict[str, Any]) -> QueryParameters:
    """Build QueryParameters from raw UI input (snake_case or camelCase keys).

    Raises:
        ValidationError: with one field error per invalid field
    """
    try:
        return QueryParameters.model_validate(data)
    except PydanticValidationError as e:
        field_errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "code": error["type"]
            }
            for error in e.errors()
        ]
        raise ValidationError("Invalid catalog query", field_errors=field_errors)
