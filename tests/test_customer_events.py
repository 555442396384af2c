"""Tests for events raised by entities and the handlers that consume them."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from structlog.testing import capture_logs

from shop.domain.dispatcher import EventDispatcher
from shop.domain.events import (
    CustomerAddressChangedEvent,
    CustomerCreatedEvent,
    EventType,
    ProductCreatedEvent,
)
from shop.domain.handlers import (
    SendConsoleLog1Handler,
    SendConsoleLog2Handler,
    SendConsoleLogWhenCustomerAddressIsChangedHandler,
    SendEmailWhenProductIsCreatedHandler,
)
from shop.domain.models import Address, Customer


def _address() -> Address:
    return Address(street="rua do teste", number=10, zip="12345-678", city="Xique xique")


def _entries(logs: list[dict], event_name: str) -> list[dict]:
    return [entry for entry in logs if entry["event"] == event_name]


# ---------------------------------------------------------------------------
# Entity-driven dispatch
# ---------------------------------------------------------------------------


def test_customer_created_notifies_all_handlers():
    dispatcher = EventDispatcher()
    handler1 = SendConsoleLog1Handler()
    handler2 = SendConsoleLog2Handler()
    dispatcher.register("CustomerCreatedEvent", handler1)
    dispatcher.register("CustomerCreatedEvent", handler2)

    with (
        patch.object(handler1, "handle", wraps=handler1.handle) as spy1,
        patch.object(handler2, "handle", wraps=handler2.handle) as spy2,
    ):
        Customer(id="123", name="Sidenir Teste", dispatcher=dispatcher)

    spy1.assert_called_once()
    spy2.assert_called_once()
    event = spy1.call_args.args[0]
    assert isinstance(event, CustomerCreatedEvent)
    assert event.event_data == {"id": "123", "name": "Sidenir Teste"}
    assert spy2.call_args.args[0] is event


def test_customer_address_changed_notifies_handler():
    dispatcher = EventDispatcher()
    handler = SendConsoleLogWhenCustomerAddressIsChangedHandler()
    dispatcher.register("CustomerAddressChangedEvent", handler)

    customer = Customer(id="123", name="Sidenir Teste", dispatcher=dispatcher)
    with patch.object(handler, "handle", wraps=handler.handle) as spy:
        customer.change_address(_address())

    spy.assert_called_once()
    event = spy.call_args.args[0]
    assert isinstance(event, CustomerAddressChangedEvent)
    assert event.event_data == {
        "id": "123",
        "name": "Sidenir Teste",
        "address": {
            "street": "rua do teste",
            "number": 10,
            "zip": "12345-678",
            "city": "Xique xique",
        },
    }
    assert customer.address == _address()


def test_customer_without_dispatcher_does_not_fail():
    customer = Customer(id="1", name="No dispatcher")
    customer.change_address(_address())

    assert customer.address is not None


def test_separate_dispatchers_are_isolated():
    calls: list[str] = []

    class Recorder:
        def handle(self, event) -> None:
            calls.append(event.event_data["id"])

    watched = EventDispatcher()
    watched.register(EventType.CUSTOMER_CREATED, Recorder())

    Customer(id="seen", name="A", dispatcher=watched)
    Customer(id="unseen", name="B", dispatcher=EventDispatcher())

    assert calls == ["seen"]


def test_invalid_customer_dispatches_nothing():
    dispatcher = EventDispatcher()
    handler = SendConsoleLog1Handler()
    dispatcher.register(EventType.CUSTOMER_CREATED, handler)

    with patch.object(handler, "handle") as spy:
        with pytest.raises(ValidationError, match="Name is required"):
            Customer(id="123", name="", dispatcher=dispatcher)

    spy.assert_not_called()


def test_failing_handler_surfaces_from_entity_operation():
    class Broken:
        def handle(self, event) -> None:
            raise RuntimeError("mail server down")

    dispatcher = EventDispatcher()
    dispatcher.register(EventType.CUSTOMER_ADDRESS_CHANGED, Broken())
    customer = Customer(id="1", name="A", dispatcher=dispatcher)

    with pytest.raises(RuntimeError, match="mail server down"):
        customer.change_address(_address())


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


def test_event_carries_type_and_timestamp():
    before = datetime.now(timezone.utc)
    event = ProductCreatedEvent(event_data={"name": "Product 1"})

    assert event.event_type == EventType.PRODUCT_CREATED
    assert event.event_type == "ProductCreatedEvent"
    assert before <= event.date_time_occurred <= datetime.now(timezone.utc)


def test_event_is_immutable():
    event = CustomerCreatedEvent(event_data={"id": "1", "name": "A"})

    with pytest.raises(ValidationError):
        event.event_data = {"id": "2"}


def test_event_payload_cannot_be_changed():
    source = {"id": "1", "name": "A", "address": {"city": "Xique xique"}, "tags": ["x"]}
    event = CustomerCreatedEvent(event_data=source)

    with pytest.raises(TypeError):
        event.event_data["name"] = "tampered"
    with pytest.raises(TypeError):
        event.event_data["address"]["city"] = "elsewhere"

    source["name"] = "changed afterwards"
    source["address"]["city"] = "changed afterwards"
    assert event.event_data["name"] == "A"
    assert event.event_data["address"]["city"] == "Xique xique"
    assert event.event_data["tags"] == ("x",)


def test_handler_cannot_change_what_later_handlers_see():
    seen: list[tuple[str, str]] = []

    class Tamperer:
        def handle(self, event) -> None:
            event.event_data["address"]["city"] = "elsewhere"

    class Reader:
        def handle(self, event) -> None:
            seen.append((event.event_data["name"], event.event_data["address"]["city"]))

    dispatcher = EventDispatcher()
    dispatcher.register(EventType.CUSTOMER_ADDRESS_CHANGED, Reader())
    dispatcher.register(EventType.CUSTOMER_ADDRESS_CHANGED, Tamperer())
    dispatcher.register(EventType.CUSTOMER_ADDRESS_CHANGED, Reader())
    customer = Customer(id="123", name="Sidenir Teste", dispatcher=dispatcher)

    with pytest.raises(TypeError):
        customer.change_address(_address())

    assert seen == [("Sidenir Teste", "Xique xique")]


def test_dispatcher_is_keyword_only():
    with pytest.raises(TypeError):
        Customer(EventDispatcher(), id="1", name="A")


# ---------------------------------------------------------------------------
# Handler side effects
# ---------------------------------------------------------------------------


def test_console_log_handlers_log_customer_created():
    event = CustomerCreatedEvent(event_data={"id": "123", "name": "Sidenir Teste"})

    with capture_logs() as logs:
        SendConsoleLog1Handler().handle(event)
        SendConsoleLog2Handler().handle(event)

    first = _entries(logs, "customer.created.first_console_log")
    second = _entries(logs, "customer.created.second_console_log")
    assert len(first) == 1 and len(second) == 1
    assert first[0]["customer_id"] == "123"
    assert first[0]["log_level"] == "info"


def test_address_changed_handler_logs_formatted_address():
    event = CustomerAddressChangedEvent(
        event_data={
            "id": "123",
            "name": "Sidenir Teste",
            "address": _address().model_dump(),
        }
    )

    with capture_logs() as logs:
        SendConsoleLogWhenCustomerAddressIsChangedHandler().handle(event)

    [entry] = _entries(logs, "customer.address_changed")
    assert entry["customer_id"] == "123"
    assert entry["customer_name"] == "Sidenir Teste"
    assert entry["address"] == "rua do teste, 10, 12345-678 Xique xique"


def test_email_handler_logs_product_created():
    event = ProductCreatedEvent(event_data={"id": "p1", "name": "Product 1", "price": 10.0})

    with capture_logs() as logs:
        SendEmailWhenProductIsCreatedHandler().handle(event)

    [entry] = _entries(logs, "product.created.email_sent")
    assert entry["product_id"] == "p1"
    assert entry["product_name"] == "Product 1"
