from typing import Optional
import logging

from storefront.core.config import ShippingConfig
from storefront.core.exceptions import ItemLookupError
from storefront.models.cart import CartView, CartViewLine
from storefront.services.cart_service import CartService
from storefront.services.item_client import ItemClient

logger = logging.getLogger(__name__)


class CartViewService:
    """
    Joins cart lines with item details for the cart page

    Lookups only decorate the cart; a line whose item cannot be found or
    fetched stays in the cart and is reported separately.
    """

    def __init__(
        self,
        cart_service: CartService,
        item_client: ItemClient,
        shipping: Optional[ShippingConfig] = None
    ):
        self.cart_service = cart_service
        self.item_client = item_client
        self.shipping = shipping or ShippingConfig()

    def build_cart_view(self) -> CartView:
        view = CartView()

        for line in self.cart_service.lines():
            try:
                item = self.item_client.get_item(line.item_id)
            except ItemLookupError as e:
                logger.warning(f"Lookup failed for cart item {line.item_id}: {e.message}")
                view.failed_item_ids.append(line.item_id)
                continue

            if item is None:
                view.missing_item_ids.append(line.item_id)
                continue

            view.lines.append(CartViewLine(item=item, quantity=line.quantity))

        view.shipping = self._calculate_shipping(view.subtotal, has_lines=bool(view.lines))

        logger.info(f"Built cart view: {len(view.lines)} lines, total={view.total}")
        return view

    def _calculate_shipping(self, subtotal: float, has_lines: bool) -> float:
        """Flat fee unless the order is above the free shipping threshold"""
        if not has_lines:
            return 0.0
        if subtotal > self.shipping.free_shipping_threshold:
            return 0.0
        return self.shipping.flat_fee
