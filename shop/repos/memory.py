"""In-memory repositories for customers, products and orders."""

from __future__ import annotations

from shop.domain.models import Customer, Order, OrderItem, Product


class CustomerRepository:
    """Dict-backed store for Customer instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Customer] = {}

    def add(self, customer: Customer) -> None:
        self._store[customer.id] = customer

    def update(self, customer: Customer) -> None:
        self._store[customer.id] = customer

    def get(self, customer_id: str) -> Customer | None:
        return self._store.get(customer_id)

    def list_all(self) -> list[Customer]:
        return list(self._store.values())


class ProductRepository:
    """Dict-backed store for Product instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Product] = {}

    def add(self, product: Product) -> None:
        self._store[product.id] = product

    def update(self, product: Product) -> None:
        self._store[product.id] = product

    def get(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._store.values())


class OrderRepository:
    """Dict-backed store for Order instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Order] = {}

    def add(self, order: Order) -> None:
        self._store[order.id] = order

    def update(self, order: Order) -> None:
        self._store[order.id] = order

    def get(self, order_id: str) -> Order | None:
        return self._store.get(order_id)

    def list_all(self) -> list[Order]:
        return list(self._store.values())

    def find_by_customer_id(self, customer_id: str) -> list[Order]:
        return [o for o in self._store.values() if o.customer_id == customer_id]

    def update_items(self, order: Order) -> None:
        """Replace the stored order's items with those of *order*."""
        stored = self._store.get(order.id)
        if stored is not None:
            stored.items = [OrderItem(**item.model_dump()) for item in order.items]
