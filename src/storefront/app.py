import logging
from dataclasses import dataclass
from typing import Optional

import requests

from storefront.core.config import Config, load_config
from storefront.db import create_storage_engine
from storefront.repositories.cart_repository import SqlCartStore
from storefront.services.cart_service import CartService
from storefront.services.cart_view_service import CartViewService
from storefront.services.catalog_service import CatalogService
from storefront.services.item_client import ItemClient

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"

logger = logging.getLogger(__name__)


@dataclass
class Storefront:
    """Wired-up storefront core for one visitor session"""
    config: Config
    cart: CartService
    catalog: CatalogService
    cart_view: CartViewService
    item_client: ItemClient


def create_storefront(
    config: Optional[Config] = None,
    session: Optional[requests.Session] = None
) -> Storefront:
    """
    Storefront factory.

    Every call builds its own engine, store and services, so tests and
    separate sessions never share cart state through module globals.
    """
    config = config or load_config()

    logging.basicConfig(
        level=getattr(logging, config.app.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )

    engine = create_storage_engine(config.storage.url, echo=config.storage.echo)
    store = SqlCartStore(engine, key=config.storage.cart_key)
    item_client = ItemClient(config.item_service, session=session)

    cart = CartService(store)
    catalog = CatalogService(item_client, config.catalog, scope_key=config.item_service.store_id or None)
    cart_view = CartViewService(cart, item_client, config.shipping)

    logger.info(f"Storefront ready ({config.environment}), storage={engine.url.get_backend_name()}")

    return Storefront(
        config=config,
        cart=cart,
        catalog=catalog,
        cart_view=cart_view,
        item_client=item_client,
    )
