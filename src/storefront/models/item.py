from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class CatalogItem:
    """A purchasable item as served by the item service. Read-only to the core."""
    id: str
    name: str
    description: str
    price: float
    category: str
    priority: int  # Lower value = shown first
    is_available: bool
    image_url: str = ""
    sub_category: Optional[str] = None
    branch: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "sub_category": self.sub_category,
            "priority": self.priority,
            "is_available": self.is_available,
            "image_url": self.image_url,
            "branch": self.branch
        }
