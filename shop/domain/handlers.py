"""Domain event handlers, wired up at application startup."""

from __future__ import annotations

import structlog

from shop.domain.dispatcher import EventDispatcher, EventHandler
from shop.domain.events import (
    CustomerAddressChangedEvent,
    CustomerCreatedEvent,
    EventType,
    ProductCreatedEvent,
)

logger = structlog.get_logger(__name__)


class SendConsoleLog1Handler:
    def handle(self, event: CustomerCreatedEvent) -> None:
        logger.info(
            "customer.created.first_console_log",
            message="This is the first console log of the event: CustomerCreated",
            customer_id=event.event_data["id"],
        )


class SendConsoleLog2Handler:
    def handle(self, event: CustomerCreatedEvent) -> None:
        logger.info(
            "customer.created.second_console_log",
            message="This is the second console log of the event: CustomerCreated",
            customer_id=event.event_data["id"],
        )


class SendConsoleLogWhenCustomerAddressIsChangedHandler:
    def handle(self, event: CustomerAddressChangedEvent) -> None:
        data = event.event_data
        address = data["address"]
        logger.info(
            "customer.address_changed",
            customer_id=data["id"],
            customer_name=data["name"],
            address=(
                f"{address['street']}, {address['number']}, "
                f"{address['zip']} {address['city']}"
            ),
        )


class SendEmailWhenProductIsCreatedHandler:
    """Stands in for a mail integration; records what would be sent."""

    def handle(self, event: ProductCreatedEvent) -> None:
        logger.info(
            "product.created.email_sent",
            product_id=event.event_data.get("id"),
            product_name=event.event_data.get("name"),
            occurred_at=event.date_time_occurred.isoformat(),
        )


class HandlerRegistry:
    """Wires the default handlers to a dispatcher."""

    def __init__(self, dispatcher: EventDispatcher) -> None:
        self.dispatcher = dispatcher
        self.customer_created_first = SendConsoleLog1Handler()
        self.customer_created_second = SendConsoleLog2Handler()
        self.customer_address_changed = (
            SendConsoleLogWhenCustomerAddressIsChangedHandler()
        )
        self.product_created = SendEmailWhenProductIsCreatedHandler()
        self._register()

    def _subscriptions(self) -> list[tuple[EventType, EventHandler]]:
        return [
            (EventType.CUSTOMER_CREATED, self.customer_created_first),
            (EventType.CUSTOMER_CREATED, self.customer_created_second),
            (EventType.CUSTOMER_ADDRESS_CHANGED, self.customer_address_changed),
            (EventType.PRODUCT_CREATED, self.product_created),
        ]

    def _register(self) -> None:
        for event_type, handler in self._subscriptions():
            self.dispatcher.register(event_type, handler)

    def unregister(self) -> None:
        """Detach exactly the handlers this registry registered."""
        for event_type, handler in self._subscriptions():
            self.dispatcher.unregister(event_type, handler)
