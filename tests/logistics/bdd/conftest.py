"""Shared BDD fixtures and step definitions for the shipment lifecycle."""

from datetime import UTC, datetime, timedelta

import pytest
from logistics.exceptions import CompletionBlocked
from logistics.shipment.completion import CompletionConfirmations, attempt_completion
from logistics.shipment.events import (
    CustomerReferenceUpdated,
    DocumentStatusUpdated,
    ShipmentCancelled,
    ShipmentDelivered,
    ShipmentInvoiced,
    ShipmentQuoted,
    ShipmentReadyForBilling,
    ShipmentStatusChanged,
)
from logistics.shipment.payloads import BookedPayload, DeliveredPayload, InTransitPayload, PickupPayload
from logistics.shipment.shipment import Shipment
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup
_EVENT_CLASSES = {
    "ShipmentQuoted": ShipmentQuoted,
    "ShipmentStatusChanged": ShipmentStatusChanged,
    "ShipmentDelivered": ShipmentDelivered,
    "ShipmentCancelled": ShipmentCancelled,
    "ShipmentInvoiced": ShipmentInvoiced,
    "ShipmentReadyForBilling": ShipmentReadyForBilling,
    "DocumentStatusUpdated": DocumentStatusUpdated,
    "CustomerReferenceUpdated": CustomerReferenceUpdated,
}

ALL_CONFIRMED = CompletionConfirmations(extra_costs_recorded=True, documents_complete=True, cwt_validated=True)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a quoted "{service_type}" shipment'), target_fixture="shipment")
def quoted_shipment(service_type):
    shipment = Shipment.create(
        service_type=service_type,
        sla_deadline=datetime.now(UTC) + timedelta(hours=48),
        customer_reference="PO-1001",
    )
    shipment._events.clear()
    return shipment


@given("the shipment has been booked")
def shipment_booked(shipment):
    shipment.change_status(BookedPayload(courier_id="courier-1"))
    shipment._events.clear()


@given("the shipment is in transit")
def shipment_in_transit(shipment):
    shipment.change_status(BookedPayload(courier_id="courier-1"))
    shipment.change_status(PickupPayload(location="FRA"))
    shipment.change_status(InTransitPayload(flight_number="LH400"))
    shipment._events.clear()


@given("the shipment has been delivered")
def shipment_delivered(shipment):
    shipment.change_status(BookedPayload(courier_id="courier-1"))
    shipment.change_status(PickupPayload(location="FRA"))
    shipment.change_status(InTransitPayload(flight_number="LH400"))
    shipment.change_status(DeliveredPayload(pod_confirmed=True, signature="J. Doe"))
    shipment._events.clear()


@given(parsers.cfparse('the "{slot}" document is complete'))
def document_complete(shipment, slot):
    shipment.record_document(slot, "complete")
    shipment._events.clear()


@given("the customer reference is blank")
def customer_reference_blank(shipment):
    shipment.set_customer_reference("")
    shipment._events.clear()


@given("the shipment has been completed")
def shipment_completed(shipment):
    attempt_completion(shipment, ALL_CONFIRMED)
    shipment._events.clear()


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('completion is blocked by "{fields}"'))
def completion_blocked_by(error, fields):
    assert isinstance(error["exc"], CompletionBlocked), f"Expected CompletionBlocked, got {error['exc']!r}"
    assert [reason.field for reason in error["exc"].reasons] == [f.strip() for f in fields.split(",")]


@then(parsers.cfparse('the shipment status is "{status}"'))
def shipment_status_is(shipment, status):
    assert shipment.current_status == status


@then("the SLA clock is stopped")
def sla_clock_stopped(shipment):
    assert shipment.sla_closed_at is not None


@then(parsers.cfparse("a {event_type} event is raised"))
def generic_event_raised(shipment, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in shipment._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in shipment._events]}"


@then("no events are raised")
def no_events_raised(shipment):
    assert shipment._events == []
