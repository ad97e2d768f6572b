"""Widget and storefront configuration from environment variables."""

import os

# Offer
OFFER_PRODUCT_HANDLE = os.environ.get("OFFER_PRODUCT_HANDLE", "shipping-insurance")
OFFER_CATALOG_PAGE_SIZE = int(os.environ.get("OFFER_CATALOG_PAGE_SIZE", "20"))
OFFER_NOTICE_SECONDS = float(os.environ.get("OFFER_NOTICE_SECONDS", "3"))
OFFER_PLACEHOLDER_IMAGE_URL = os.environ.get(
    "OFFER_PLACEHOLDER_IMAGE_URL",
    "https://cdn.shopify.com/s/files/1/0533/2089/files/placeholder-images-image_medium.png"
    "?format=webp&v=1530129081",
)
OFFER_CURRENCY = os.environ.get("OFFER_CURRENCY", "USD")

# Storefront API, read on demand so a host app can set them after import
DEFAULT_SHOPIFY_API_VERSION = "2025-01"
STOREFRONT_ENV_REQUIREMENTS: tuple[str, ...] = ("SHOPIFY_SHOP_URL", "SHOPIFY_STOREFRONT_TOKEN")


def get_storefront_config() -> dict[str, str | None]:
    """Read storefront settings fresh from the environment."""
    return {
        "shop_url": os.environ.get("SHOPIFY_SHOP_URL") or None,
        "access_token": os.environ.get("SHOPIFY_STOREFRONT_TOKEN") or None,
        "api_version": os.environ.get("SHOPIFY_API_VERSION") or DEFAULT_SHOPIFY_API_VERSION,
    }


def validate_storefront_config() -> dict[str, str]:
    """
    Validate storefront environment configuration.

    Returns:
        Config dict with all required values present

    Raises:
        ValueError: naming the first missing variable
    """
    config = get_storefront_config()
    for env_name, key in zip(STOREFRONT_ENV_REQUIREMENTS, ("shop_url", "access_token")):
        if not config.get(key):
            raise ValueError(f"Storefront not configured: {env_name} is not set")

    shop_url = str(config["shop_url"])
    if not shop_url.startswith("http"):
        shop_url = f"https://{shop_url}"
    config["shop_url"] = shop_url.rstrip("/")
    return {k: str(v) for k, v in config.items()}
