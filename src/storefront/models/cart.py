from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any

from storefront.models.item import CatalogItem


@dataclass
class CartLine:
    """One item id to quantity record in the cart"""
    item_id: str
    quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return {"item_id": self.item_id, "quantity": self.quantity}


@dataclass
class Cart:
    """Ordered collection of cart lines, at most one per item id"""
    lines: List[CartLine] = field(default_factory=list)

    @property
    def total_lines(self) -> int:
        """Number of distinct items in cart"""
        return len(self.lines)

    @property
    def total_quantity(self) -> int:
        """Total quantity of all items"""
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return len(self.lines) == 0

    def get_line(self, item_id: str) -> Optional[CartLine]:
        """Find cart line by item id"""
        return next((line for line in self.lines if line.item_id == item_id), None)

    def remove_line(self, item_id: str) -> bool:
        """Remove line by item id"""
        original_length = len(self.lines)
        self.lines = [line for line in self.lines if line.item_id != item_id]
        return len(self.lines) < original_length

    def clear(self) -> None:
        self.lines.clear()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_lines": self.total_lines,
            "total_quantity": self.total_quantity,
            "is_empty": self.is_empty,
            "lines": [line.to_dict() for line in self.lines]
        }


@dataclass
class CartUpdate:
    """Outcome of a cart mutation.

    quantity is the resulting quantity for item_id (0 once removed).
    persisted is False when the new state could not be written to storage;
    the in-memory cart still reflects the mutation.
    """
    item_id: Optional[str]
    quantity: int
    persisted: bool = True
    warning: Optional[str] = None


@dataclass
class CartViewLine:
    """Cart line joined with its catalog record"""
    item: CatalogItem
    quantity: int

    @property
    def subtotal(self) -> float:
        return self.item.price * self.quantity


@dataclass
class CartView:
    """Cart hydrated with item details and totals for display"""
    lines: List[CartViewLine] = field(default_factory=list)
    missing_item_ids: List[str] = field(default_factory=list)  # Lookup said "not found"
    failed_item_ids: List[str] = field(default_factory=list)  # Lookup failed
    shipping: float = 0.0

    @property
    def subtotal(self) -> float:
        return sum(line.subtotal for line in self.lines)

    @property
    def total(self) -> float:
        return self.subtotal + self.shipping

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_complete(self) -> bool:
        """True when every cart line could be hydrated"""
        return not self.missing_item_ids and not self.failed_item_ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lines": [
                {
                    "item": line.item.to_dict(),
                    "quantity": line.quantity,
                    "subtotal": line.subtotal,
                }
                for line in self.lines
            ],
            "missing_item_ids": list(self.missing_item_ids),
            "failed_item_ids": list(self.failed_item_ids),
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "total": self.total,
            "total_quantity": self.total_quantity,
        }
