from dataclasses import replace
from typing import List, Optional, Sequence
import logging

from storefront.core.config import CatalogConfig
from storefront.models.catalog import CatalogFacets, CatalogView, PriceBounds
from storefront.models.item import CatalogItem
from storefront.schemas.query_schemas import QueryParameters
from storefront.services import catalog_query
from storefront.services.item_client import ItemClient

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Catalog browsing for one store/branch

    Responsibilities:
    - Load the catalog through the item client
    - Keep the facets of the loaded catalog
    - Answer queries, remembering only the latest one
    """

    def __init__(
        self,
        item_client: ItemClient,
        config: Optional[CatalogConfig] = None,
        scope_key: Optional[str] = None
    ):
        self.item_client = item_client
        self.config = config or CatalogConfig()
        self.scope_key = scope_key
        self._catalog: List[CatalogItem] = []
        self._facets = self._derive_facets([])
        self._last_params: Optional[QueryParameters] = None
        self._last_view: Optional[CatalogView] = None

    @property
    def catalog(self) -> List[CatalogItem]:
        return list(self._catalog)

    @property
    def facets(self) -> CatalogFacets:
        return self._facets

    def load_catalog(self) -> List[CatalogItem]:
        """
        Fetch the catalog and reset cached results

        Raises:
            ItemLookupError: when the item service fails
            ValidationError: when no store/branch is configured
        """
        items = self.item_client.list_items(self.scope_key)
        self.set_catalog(items)
        return self.catalog

    def set_catalog(self, items: Sequence[CatalogItem]) -> None:
        """Replace the catalog (e.g. with one fetched elsewhere)"""
        self._catalog = list(items)
        self._facets = self._derive_facets(self._catalog)
        self._last_params = None
        self._last_view = None
        logger.info(f"Catalog set with {len(self._catalog)} items, "
                    f"{len(self._facets.categories)} categories")

    def query(self, params: QueryParameters) -> CatalogView:
        """
        Filtered and sorted view; recomputed only when params change

        Callers get their own copy of the lists, so editing a returned view
        never leaks into the remembered one.
        """
        if self._last_view is not None and params == self._last_params:
            return self._copy_view(self._last_view)

        view = catalog_query.build_view(self._catalog, params, self.config.featured_max_priority)
        self._last_params = params
        self._last_view = view
        logger.debug(f"Catalog query matched {view.result_count} of {view.total_count} items")
        return self._copy_view(view)

    def reset_query(self) -> QueryParameters:
        """Parameters with every filter cleared"""
        return catalog_query.default_query(self._facets)

    def has_active_filters(self, params: QueryParameters) -> bool:
        return catalog_query.has_active_filters(params, self._facets)

    @staticmethod
    def _copy_view(view: CatalogView) -> CatalogView:
        return replace(
            view,
            items=list(view.items),
            featured=list(view.featured),
            regular=list(view.regular)
        )

    def _derive_facets(self, items: Sequence[CatalogItem]) -> CatalogFacets:
        empty_bounds = PriceBounds(min=self.config.empty_min_price, max=self.config.empty_max_price)
        return catalog_query.derive_facets(items, empty_bounds)
