"""FastAPI application, the entry point for the shop domain events service."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from shop.config import get_settings
from shop.domain.dispatcher import EventDispatcher
from shop.domain.events import ProductCreatedEvent
from shop.domain.handlers import HandlerRegistry
from shop.domain.models import (
    Address,
    ChangeAddressRequest,
    CreateCustomerRequest,
    CreateProductRequest,
    Customer,
    CustomerResponse,
    IncreasePriceRequest,
    Order,
    OrderItem,
    PlaceOrderRequest,
    Product,
)
from shop.log import configure_logging
from shop.repos.memory import CustomerRepository, OrderRepository, ProductRepository
from shop.services import orders as order_service
from shop.services import products as product_service

settings = get_settings()
configure_logging(settings.log_level, json=settings.log_json)

app = FastAPI(title=settings.app_title)

# ── Singletons (created at import time for simplicity) ────────────────
event_dispatcher = EventDispatcher()
customer_repo = CustomerRepository()
product_repo = ProductRepository()
order_repo = OrderRepository()

handler_registry = (
    HandlerRegistry(event_dispatcher) if settings.register_default_handlers else None
)


@app.exception_handler(ValueError)
async def domain_validation_error(request: Request, exc: ValueError) -> JSONResponse:
    """Turn entity validation failures into 400 responses."""
    if isinstance(exc, ValidationError):
        messages = [err["msg"].removeprefix("Value error, ") for err in exc.errors()]
    else:
        messages = [str(exc)]
    return JSONResponse(status_code=400, content={"detail": messages})


def _get_customer(customer_id: str) -> Customer:
    customer = customer_repo.get(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


# ── Customers ─────────────────────────────────────────────────────────


@app.post("/customers", response_model=CustomerResponse)
def create_customer(body: CreateCustomerRequest) -> Customer:
    """Create a customer; handlers for CustomerCreatedEvent run before returning."""
    customer = Customer(id=body.id, name=body.name, dispatcher=event_dispatcher)
    customer_repo.add(customer)
    return customer


@app.get("/customers", response_model=list[CustomerResponse])
def list_customers() -> list[Customer]:
    return customer_repo.list_all()


@app.get("/customers/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: str) -> Customer:
    return _get_customer(customer_id)


@app.put("/customers/{customer_id}/address", response_model=CustomerResponse)
def change_customer_address(customer_id: str, body: ChangeAddressRequest) -> Customer:
    """Move a customer; an invalid address is rejected before any event fires."""
    customer = _get_customer(customer_id)
    customer.change_address(Address(**body.model_dump()))
    customer_repo.update(customer)
    return customer


@app.post("/customers/{customer_id}/activate", response_model=CustomerResponse)
def activate_customer(customer_id: str) -> Customer:
    customer = _get_customer(customer_id)
    customer.activate()
    customer_repo.update(customer)
    return customer


@app.post("/customers/{customer_id}/deactivate", response_model=CustomerResponse)
def deactivate_customer(customer_id: str) -> Customer:
    customer = _get_customer(customer_id)
    customer.deactivate()
    customer_repo.update(customer)
    return customer


@app.get("/customers/{customer_id}/orders", response_model=list[Order])
def list_customer_orders(customer_id: str) -> list[Order]:
    _get_customer(customer_id)
    return order_repo.find_by_customer_id(customer_id)


# ── Products ──────────────────────────────────────────────────────────


@app.post("/products", response_model=Product)
def create_product(body: CreateProductRequest) -> Product:
    product = Product(id=body.id, name=body.name, price=body.price)
    product_repo.add(product)

    event_dispatcher.notify(ProductCreatedEvent(event_data=product.model_dump()))

    return product


@app.get("/products", response_model=list[Product])
def list_products() -> list[Product]:
    return product_repo.list_all()


@app.post("/products/increase-price", response_model=list[Product])
def increase_product_prices(body: IncreasePriceRequest) -> list[Product]:
    """Apply a percentage price change to the whole catalogue."""
    updated = product_service.increase_price(product_repo.list_all(), body.percentage)
    for product in updated:
        product_repo.update(product)
    return updated


# ── Orders ────────────────────────────────────────────────────────────


@app.post("/orders", response_model=Order)
def place_order(body: PlaceOrderRequest) -> Order:
    """Place an order; the customer earns half the total in reward points."""
    customer = _get_customer(body.customer_id)

    items: list[OrderItem] = []
    for line in body.items:
        product = product_repo.get(line.product_id)
        if product is None:
            raise HTTPException(
                status_code=404, detail=f"Product {line.product_id} not found"
            )
        items.append(
            OrderItem(
                name=product.name,
                price=product.price,
                product_id=product.id,
                quantity=line.quantity,
            )
        )

    order = order_service.place_order(customer, items)
    order_repo.add(order)
    customer_repo.update(customer)
    return order


# ── Events ────────────────────────────────────────────────────────────


@app.get("/events/handlers")
def list_event_handlers() -> dict[str, list[str]]:
    """Show which handler classes are registered for each event type."""
    return {
        str(event_type): [type(handler).__name__ for handler in handlers]
        for event_type, handlers in event_dispatcher.event_handlers.items()
    }
