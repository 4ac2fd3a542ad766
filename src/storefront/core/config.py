import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class StorageConfig:
    """Durable cart storage settings"""
    url: str
    cart_key: str = "cartItems"
    echo: bool = False  # Log SQL statements


@dataclass
class ItemServiceConfig:
    """Remote item lookup service settings"""
    base_url: str
    store_id: str = ""
    timeout_seconds: float = 5.0


@dataclass
class CatalogConfig:
    """Catalog browsing defaults"""
    featured_max_priority: int = 3
    # Bounds reported for an empty catalog
    empty_min_price: float = 0.0
    empty_max_price: float = 1000.0


@dataclass
class ShippingConfig:
    """Cart total rules"""
    free_shipping_threshold: float = 500.0
    flat_fee: float = 50.0


@dataclass
class AppConfig:
    """Application configuration"""
    environment: str = "development"  # development, staging, production
    log_level: str = "INFO"


class Config:
    def __init__(self):
        self.environment = os.getenv("ENVIRONMENT", "development")

        self.storage = StorageConfig(
            url=os.getenv("STOREFRONT_DATABASE_URL", "sqlite:///data/storefront.db"),
            cart_key=os.getenv("STOREFRONT_CART_KEY", "cartItems"),
            echo=os.getenv("STOREFRONT_DB_ECHO", "false").lower() == "true"
        )

        self.item_service = ItemServiceConfig(
            base_url=os.getenv("ITEM_SERVICE_URL", "http://localhost:5126/api"),
            store_id=os.getenv("STORE_ID", ""),
            timeout_seconds=float(os.getenv("ITEM_SERVICE_TIMEOUT", "5"))
        )

        self.catalog = CatalogConfig()

        self.shipping = ShippingConfig(
            free_shipping_threshold=float(os.getenv("FREE_SHIPPING_THRESHOLD", "500")),
            flat_fee=float(os.getenv("FLAT_SHIPPING_FEE", "50"))
        )

        self.app = AppConfig(
            environment=self.environment,
            log_level=os.getenv("LOG_LEVEL", "INFO")
        )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> None:
        """Validate critical configuration"""
        if not self.storage.url:
            raise ValueError("STOREFRONT_DATABASE_URL is required")

        if not self.item_service.base_url:
            raise ValueError("ITEM_SERVICE_URL is required")


def load_config() -> Config:
    """Read configuration from the environment (and .env, if present)"""
    config = Config()
    config.validate()
    return config
