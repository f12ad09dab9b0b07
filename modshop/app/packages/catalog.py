"""
packages/catalog.py — Product catalog package.

Contributes the `products` table and three demo products.
Products are referenced by the main app's orders, so this package must be
registered before the main app's seed rows.
"""

from __future__ import annotations

from decimal import Decimal

from modshop.app.models.product import Product

PACKAGE_NAME = "catalog"

SEED_PRODUCTS: list[dict] = [
    {
        "id": 1,
        "name": "Premium Widget",
        "description": "High-quality widget from package",
        "price": Decimal("29.99"),
        "category": "Widgets",
    },
    {
        "id": 2,
        "name": "Deluxe Gadget",
        "description": "Advanced gadget from package",
        "price": Decimal("49.99"),
        "category": "Gadgets",
    },
    {
        "id": 3,
        "name": "Basic Tool",
        "description": "Essential tool from package",
        "price": Decimal("19.99"),
        "category": "Tools",
    },
]


def register(registry, config) -> None:
    registry.add_models(PACKAGE_NAME, Product)
    registry.add_seed_rows(PACKAGE_NAME, Product, SEED_PRODUCTS)
