"""Service for placing orders and totalling them."""

from __future__ import annotations

import uuid

from shop.domain.models import Customer, Order, OrderItem

REWARD_POINTS_RATIO = 0.5


def total(orders: list[Order]) -> float:
    return sum(order.total() for order in orders)


def place_order(customer: Customer, items: list[OrderItem]) -> Order:
    """Create an order for *customer* and credit its reward points.

    The customer earns half of the order total as reward points.
    """
    if not items:
        raise ValueError("Order must have at least one item")

    order = Order(id=str(uuid.uuid4()), customer_id=customer.id, items=items)
    customer.add_reward_points(order.total() * REWARD_POINTS_RATIO)
    return order
