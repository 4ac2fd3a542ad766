from typing import Optional, Tuple
import logging

from storefront.core.exceptions import StorageError, ValidationError
from storefront.models.cart import Cart, CartLine, CartUpdate
from storefront.repositories.base import CartStore

logger = logging.getLogger(__name__)


class CartService:
    """
    Shopping cart state for one visitor session

    Responsibilities:
    - Own the canonical cart lines (one per item id, quantity >= 1)
    - Apply add/remove/set/clear mutations
    - Persist every mutation before returning
    - Derive aggregates on demand

    The store is injected; the cart is loaded from it on first use.
    """

    def __init__(self, store: CartStore):
        self.store = store
        self._cart: Optional[Cart] = None

    def load(self) -> Cart:
        """
        (Re)load the cart from storage

        Business Rules:
        - Missing or corrupt snapshot means an empty cart
        - Unreadable storage also means an empty cart, never a crash
        """
        try:
            lines = self.store.load()
        except StorageError as e:
            logger.warning(f"Could not read stored cart, starting empty: {e.internal_message}")
            lines = None

        self._cart = Cart(lines=list(lines or []))
        logger.info(f"Cart loaded with {self._cart.total_lines} lines")
        return self._cart

    @property
    def cart(self) -> Cart:
        if self._cart is None:
            return self.load()
        return self._cart

    # Commands
    def add_item(self, item_id: str, quantity: int = 1) -> CartUpdate:
        """
        Add quantity of an item, merging with an existing line

        Business Rules:
        - Non-positive quantities are clamped to 1
        - Existing line is incremented, otherwise a line is appended
        """
        self._validate_item_id(item_id)
        self._validate_quantity(quantity)

        if quantity < 1:
            logger.warning(f"Clamping add quantity {quantity} to 1 for item {item_id}")
            quantity = 1

        line = self.cart.get_line(item_id)
        if line:
            line.quantity += quantity
            logger.info(f"Increased item {item_id} to quantity {line.quantity}")
        else:
            line = CartLine(item_id=item_id, quantity=quantity)
            self.cart.lines.append(line)
            logger.info(f"Added item {item_id} with quantity {quantity}")

        return self._persist(item_id, line.quantity)

    def remove_item(self, item_id: str) -> CartUpdate:
        """Remove an item's line. Removing an absent item is a no-op."""
        self._validate_item_id(item_id)

        if self.cart.remove_line(item_id):
            logger.info(f"Removed item {item_id} from cart")

        return self._persist(item_id, 0)

    def set_quantity(self, item_id: str, quantity: int) -> CartUpdate:
        """
        Set (not increment) an item's quantity

        Business Rules:
        - Quantity 0 or below removes the item
        - Setting an item not yet in the cart creates its line
        """
        self._validate_item_id(item_id)
        self._validate_quantity(quantity)

        if quantity <= 0:
            return self.remove_item(item_id)

        line = self.cart.get_line(item_id)
        if line:
            line.quantity = quantity
        else:
            self.cart.lines.append(CartLine(item_id=item_id, quantity=quantity))

        logger.info(f"Set item {item_id} to quantity {quantity}")
        return self._persist(item_id, quantity)

    def clear(self) -> CartUpdate:
        """Remove all lines and persist the empty cart"""
        self.cart.clear()
        logger.info("Cleared cart")
        return self._persist(None, 0)

    # Queries
    def quantity_of(self, item_id: str) -> int:
        line = self.cart.get_line(item_id)
        return line.quantity if line else 0

    def contains(self, item_id: str) -> bool:
        return self.quantity_of(item_id) > 0

    def total_item_count(self) -> int:
        """Sum of quantities over all lines"""
        return self.cart.total_quantity

    def lines(self) -> Tuple[CartLine, ...]:
        """Copy of the current lines in cart order"""
        return tuple(CartLine(line.item_id, line.quantity) for line in self.cart.lines)

    # Private helpers
    def _persist(self, item_id: Optional[str], quantity: int) -> CartUpdate:
        """Write the whole cart; a failed write is reported, not raised"""
        try:
            self.store.save(list(self.cart.lines))
        except StorageError as e:
            logger.warning(f"Cart change kept in memory only: {e.internal_message}")
            return CartUpdate(item_id=item_id, quantity=quantity, persisted=False, warning=e.message)

        return CartUpdate(item_id=item_id, quantity=quantity)

    @staticmethod
    def _validate_item_id(item_id: str) -> None:
        if not isinstance(item_id, str) or not item_id:
            raise ValidationError(
                "Item id must be a non-empty string",
                field_errors=[{"field": "item_id", "message": f"Invalid item id: {item_id!r}"}]
            )

    @staticmethod
    def _validate_quantity(quantity: int) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError(
                "Quantity must be an integer",
                field_errors=[{"field": "quantity", "message": f"Invalid quantity: {quantity!r}"}]
            )
