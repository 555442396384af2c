"""Service for bulk product price changes."""

from __future__ import annotations

from shop.domain.models import Product


def increase_price(products: list[Product], percentage: float) -> list[Product]:
    """Raise every price by *percentage* percent, in place.

    Negative percentages lower prices; a result below zero is rejected by
    the Product validator.
    """
    for product in products:
        product.change_price(product.price * (1 + percentage / 100))
    return products
