"""Insurance cross-sell widget for storefront checkout."""

__version__ = "0.1.0"
