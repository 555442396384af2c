"""Domain events emitted by customers and products."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from enum import StrEnum
from types import MappingProxyType
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventType(StrEnum):
    CUSTOMER_CREATED = "CustomerCreatedEvent"
    CUSTOMER_ADDRESS_CHANGED = "CustomerAddressChangedEvent"
    PRODUCT_CREATED = "ProductCreatedEvent"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _freeze(value: Any) -> Any:
    """Copy *value* into read-only mappings and tuples, recursively."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


class DomainEvent(BaseModel):
    """Base for all events: a fixed type identifier plus an immutable payload.

    ``event_data`` is copied into a read-only mapping on construction, so
    neither the caller nor a handler can change what later handlers see.
    """

    model_config = ConfigDict(frozen=True)

    event_type: ClassVar[EventType]

    event_data: Mapping[str, Any]
    date_time_occurred: datetime = Field(default_factory=_utcnow)

    @field_validator("event_data")
    @classmethod
    def _freeze_payload(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(value)


class CustomerCreatedEvent(DomainEvent):
    """Fired once a Customer has been constructed and validated."""

    event_type: ClassVar[EventType] = EventType.CUSTOMER_CREATED


class CustomerAddressChangedEvent(DomainEvent):
    """Fired when a Customer moves to a new Address."""

    event_type: ClassVar[EventType] = EventType.CUSTOMER_ADDRESS_CHANGED


class ProductCreatedEvent(DomainEvent):
    """Fired when a Product is added to the catalogue."""

    event_type: ClassVar[EventType] = EventType.PRODUCT_CREATED
