from typing import Any, List, Optional
import logging

import requests
from pydantic import ValidationError as PydanticValidationError
from requests import RequestException
from requests.utils import quote
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from storefront.core.config import ItemServiceConfig
from storefront.core.exceptions import ItemLookupError, ValidationError
from storefront.models.item import CatalogItem
from storefront.schemas.item_schemas import ItemPayload

logger = logging.getLogger(__name__)

SERVICE_NAME = "item-service"


def http_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(RequestException),
    )


class ItemClient:
    """
    HTTP client for the item service

    get_item() returns None for an unknown id; every other failure
    (transport, unexpected status, bad payload) raises ItemLookupError.
    """

    def __init__(self, config: ItemServiceConfig, session: Optional[requests.Session] = None):
        self.base_url = config.base_url.rstrip("/")
        self.store_id = config.store_id
        self.timeout = config.timeout_seconds
        self.session = session or requests.Session()

    @http_retry()
    def _get(self, path: str) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.info(f"ItemClient GET {url}")

        resp = self.session.get(url, timeout=self.timeout)
        if resp.status_code >= 500:
            # Server-side failures are worth another attempt
            resp.raise_for_status()
        return resp

    def _request(self, path: str) -> requests.Response:
        try:
            return self._get(path)
        except RequestException as e:
            logger.error(f"Item service request {path} failed: {e}")
            status = e.response.status_code if e.response is not None else None
            raise ItemLookupError(SERVICE_NAME, f"Item service request failed: {e}", status)

    def get_item(self, item_id: str) -> Optional[CatalogItem]:
        """Fetch one item; None when the service does not know it"""
        resp = self._request(f"/Item/{quote(item_id, safe='')}")

        if resp.status_code == 404:
            logger.info(f"Item {item_id} not found")
            return None
        if resp.status_code != 200:
            logger.error(f"Unexpected status {resp.status_code} fetching item {item_id}")
            raise ItemLookupError(SERVICE_NAME, f"Failed to fetch item {item_id}", resp.status_code)

        return self._parse_item(self._json(resp))

    def list_items(self, scope_key: Optional[str] = None) -> List[CatalogItem]:
        """Fetch the full catalog for a store/branch (defaults to the configured store)"""
        scope = scope_key or self.store_id
        if not scope:
            raise ValidationError(
                "A store or branch is required to list items",
                field_errors=[{"field": "scope_key", "message": "Pass scope_key or set STORE_ID"}]
            )

        resp = self._request(f"/Item/branch/{quote(scope, safe='')}")

        if resp.status_code != 200:
            logger.error(f"Unexpected status {resp.status_code} listing items for {scope}")
            raise ItemLookupError(SERVICE_NAME, f"Failed to fetch items for {scope}", resp.status_code)

        data = self._json(resp)
        if not isinstance(data, list):
            raise ItemLookupError(SERVICE_NAME, "Item list payload is not a list", resp.status_code)

        items = [self._parse_item(entry) for entry in data]
        logger.info(f"Fetched {len(items)} items for {scope}")
        return items

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise ItemLookupError(SERVICE_NAME, f"Item service returned invalid JSON: {e}", resp.status_code)

    @staticmethod
    def _parse_item(data: Any) -> CatalogItem:
        try:
            return ItemPayload.model_validate(data).to_domain()
        except PydanticValidationError as e:
            logger.error(f"Invalid item payload: {e}")
            raise ItemLookupError(SERVICE_NAME, f"Invalid item payload: {e.error_count()} errors")
