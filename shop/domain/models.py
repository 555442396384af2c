"""Domain models for the shop: customers, products and orders."""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from shop.domain.dispatcher import EventDispatcher
from shop.domain.events import (
    CustomerAddressChangedEvent,
    CustomerCreatedEvent,
    DomainEvent,
)


def _new_id() -> str:
    return str(uuid.uuid4())


def _required(value: str, message: str) -> str:
    if not value:
        raise ValueError(message)
    return value


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


class Address(BaseModel):
    model_config = ConfigDict(frozen=True)

    street: str
    number: int
    zip: str
    city: str

    @field_validator("street")
    @classmethod
    def _street_required(cls, value: str) -> str:
        return _required(value, "Street is required")

    @field_validator("number")
    @classmethod
    def _number_required(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Number is required")
        return value

    @field_validator("zip")
    @classmethod
    def _zip_required(cls, value: str) -> str:
        return _required(value, "Zip is required")

    @field_validator("city")
    @classmethod
    def _city_required(cls, value: str) -> str:
        return _required(value, "City is required")

    def __str__(self) -> str:
        return f"{self.street}, {self.number}, {self.zip} {self.city}"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class Customer(BaseModel):
    """Customer aggregate.

    The dispatcher is optional and injected by whoever builds the customer.
    Without one, state changes simply emit nothing.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    address: Address | None = None
    active: bool = False
    reward_points: float = 0

    _dispatcher: EventDispatcher | None = PrivateAttr(default=None)

    def __init__(
        self, *, dispatcher: EventDispatcher | None = None, **data: Any
    ) -> None:
        super().__init__(**data)
        self._dispatcher = dispatcher
        self._dispatch(
            CustomerCreatedEvent(event_data={"id": self.id, "name": self.name})
        )

    @field_validator("id")
    @classmethod
    def _id_required(cls, value: str) -> str:
        return _required(value, "Id is required")

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        return _required(value, "Name is required")

    def change_name(self, name: str) -> None:
        self.name = name

    def change_address(self, address: Address) -> None:
        self.address = address
        self._dispatch(
            CustomerAddressChangedEvent(
                event_data={
                    "id": self.id,
                    "name": self.name,
                    "address": address.model_dump(),
                }
            )
        )

    def is_active(self) -> bool:
        return self.active

    def activate(self) -> None:
        if self.address is None:
            raise ValueError("Address is mandatory to activate a customer")
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    def add_reward_points(self, points: float) -> None:
        self.reward_points += points

    def _dispatch(self, event: DomainEvent) -> None:
        if self._dispatcher is not None:
            self._dispatcher.notify(event)


class Product(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id)
    name: str
    price: float

    @field_validator("id")
    @classmethod
    def _id_required(cls, value: str) -> str:
        return _required(value, "Id is required")

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        return _required(value, "Name is required")

    @field_validator("price")
    @classmethod
    def _price_not_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Price must be greater than zero")
        return value

    def change_name(self, name: str) -> None:
        self.name = name

    def change_price(self, price: float) -> None:
        self.price = price


class OrderItem(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    price: float
    product_id: str
    quantity: int

    @field_validator("quantity")
    @classmethod
    def _quantity_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Quantity must be greater than zero")
        return value

    def total(self) -> float:
        return self.price * self.quantity


class Order(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=_new_id)
    customer_id: str
    items: list[OrderItem]

    @field_validator("id")
    @classmethod
    def _id_required(cls, value: str) -> str:
        return _required(value, "Id is required")

    @field_validator("customer_id")
    @classmethod
    def _customer_id_required(cls, value: str) -> str:
        return _required(value, "CustomerId is required")

    @field_validator("items")
    @classmethod
    def _items_required(cls, value: list[OrderItem]) -> list[OrderItem]:
        if not value:
            raise ValueError("Items are required")
        return value

    def add_item(self, item: OrderItem) -> None:
        self.items = [*self.items, item]

    def remove_item(self, item_id: str) -> None:
        self.items = [item for item in self.items if item.id != item_id]

    def total(self) -> float:
        return sum(item.total() for item in self.items)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CreateCustomerRequest(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str


class ChangeAddressRequest(BaseModel):
    street: str
    number: int
    zip: str
    city: str


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: Address | None = None
    active: bool
    reward_points: float


class CreateProductRequest(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    price: float


class IncreasePriceRequest(BaseModel):
    percentage: float


class PlaceOrderItem(BaseModel):
    product_id: str
    quantity: int


class PlaceOrderRequest(BaseModel):
    customer_id: str
    items: list[PlaceOrderItem] = Field(min_length=1)
