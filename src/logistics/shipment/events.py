"""Shipment domain events — immutable facts about shipment state changes.

All events are past tense, versioned, and carry sufficient data for
downstream consumers (billing, projections, audit).
"""

from protean.fields import DateTime, Identifier, String

from logistics.domain import logistics


@logistics.event(part_of="Shipment")
class ShipmentQuoted:
    """A shipment was created in the quoted state."""

    __version__ = "v1"

    shipment_id = Identifier(required=True)
    service_type = String(required=True, max_length=10)
    sla_deadline = DateTime(required=True)
    customer_reference = String(max_length=50)
    quoted_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentStatusChanged:
    """The shipment moved along an edge of the state machine."""

    __version__ = "v1"

    shipment_id = Identifier(required=True)
    from_status = String(required=True, max_length=20)
    to_status = String(required=True, max_length=20)
    changed_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentDelivered:
    """Delivery was confirmed with proof of delivery."""

    __version__ = "v1"

    shipment_id = Identifier(required=True)
    signature = String(max_length=200)
    delivered_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentCancelled:
    """The shipment was cancelled before delivery."""

    __version__ = "v1"

    shipment_id = Identifier(required=True)
    reason = String(required=True, max_length=500)
    cancelled_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentInvoiced:
    """Billing issued the invoice; the shipment is now closed."""

    __version__ = "v1"

    shipment_id = Identifier(required=True)
    invoice_number = String(max_length=50)
    invoiced_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class ShipmentReadyForBilling:
    """The shipment passed completion and billing may generate an invoice."""

    __version__ = "v1"

    shipment_id = Identifier(required=True)
    service_type = String(required=True, max_length=10)
    customer_reference = String(required=True, max_length=50)
    completed_at = DateTime(required=True)
    ready_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class SLADeadlineRevised:
    __version__ = "v1"

    shipment_id = Identifier(required=True)
    previous_deadline = DateTime(required=True)
    new_deadline = DateTime(required=True)
    revised_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class DocumentStatusUpdated:
    __version__ = "v1"

    shipment_id = Identifier(required=True)
    slot = String(required=True, max_length=10)
    state = String(required=True, max_length=10)
    updated_at = DateTime(required=True)


@logistics.event(part_of="Shipment")
class CustomerReferenceUpdated:
    __version__ = "v1"

    shipment_id = Identifier(required=True)
    customer_reference = String(max_length=50)
    updated_at = DateTime(required=True)
