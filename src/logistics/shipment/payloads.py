"""Status-change payloads, one variant per target status.

Each variant carries exactly the side data its status needs, discriminated by
the ``status`` class attribute. There is no variant for
``document``: delivered shipments move on only through the completion
workflow.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import ClassVar

from protean.exceptions import ValidationError

from logistics.exceptions import MissingRequiredField
from logistics.shipment.types import ShipmentStatus

MAX_FLIGHT_NUMBER_LENGTH = 10


@dataclass(frozen=True)
class BookedPayload:
    status: ClassVar[ShipmentStatus] = ShipmentStatus.BOOKED

    courier_id: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class PickupPayload:
    status: ClassVar[ShipmentStatus] = ShipmentStatus.PICKUP

    location: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class InTransitPayload:
    status: ClassVar[ShipmentStatus] = ShipmentStatus.IN_TRANSIT

    flight_number: str | None = None
    estimated_arrival: datetime | None = None
    location: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class DeliveredPayload:
    status: ClassVar[ShipmentStatus] = ShipmentStatus.DELIVERED

    pod_confirmed: bool = False
    signature: str | None = None
    location: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class CancelledPayload:
    status: ClassVar[ShipmentStatus] = ShipmentStatus.CANCELLED

    reason: str = ""
    notes: str | None = None


@dataclass(frozen=True)
class InvoicedPayload:
    status: ClassVar[ShipmentStatus] = ShipmentStatus.INVOICED

    invoice_number: str | None = None
    notes: str | None = None


StatusPayload = (
    BookedPayload | PickupPayload | InTransitPayload | DeliveredPayload | CancelledPayload | InvoicedPayload
)

PAYLOAD_TYPES: dict[ShipmentStatus, type] = {
    payload_type.status: payload_type
    for payload_type in (
        BookedPayload,
        PickupPayload,
        InTransitPayload,
        DeliveredPayload,
        CancelledPayload,
        InvoicedPayload,
    )
}


def _payload_type(status: ShipmentStatus | str) -> type:
    target = ShipmentStatus(status)
    payload_type = PAYLOAD_TYPES.get(target)
    if payload_type is None:
        raise ValidationError({"status": [f"Status {target.value} cannot be set directly"]})
    return payload_type


def payload_for(status: ShipmentStatus | str, **data) -> StatusPayload:
    """Build the payload variant for ``status`` from keyword data."""
    return _payload_type(status)(**data)


def payload_from(status: ShipmentStatus | str, source) -> StatusPayload:
    """Build the payload variant for ``status`` from the attributes of ``source``.

    Only the fields the variant declares are read; unset (None) values fall
    back to the variant's defaults.
    """
    payload_type = _payload_type(status)
    data = {f.name: getattr(source, f.name, None) for f in fields(payload_type)}
    return payload_type(**{name: value for name, value in data.items() if value is not None})


def validate_payload(payload: StatusPayload, now: datetime) -> None:
    """Enforce the side data a status change must carry.

    Raises MissingRequiredField when mandatory data is absent and
    ValidationError when supplied values are out of range.
    """
    if isinstance(payload, CancelledPayload) and not payload.reason.strip():
        raise MissingRequiredField({"reason": ["A cancellation reason is required"]})

    if isinstance(payload, DeliveredPayload) and not payload.pod_confirmed:
        raise MissingRequiredField({"pod_confirmed": ["Proof of delivery must be confirmed"]})

    if isinstance(payload, InTransitPayload):
        errors: dict[str, list[str]] = {}
        if payload.flight_number and len(payload.flight_number) > MAX_FLIGHT_NUMBER_LENGTH:
            errors["flight_number"] = [f"Flight number must be at most {MAX_FLIGHT_NUMBER_LENGTH} characters"]
        if payload.estimated_arrival and payload.estimated_arrival <= now:
            errors["estimated_arrival"] = ["Estimated arrival must be in the future"]
        if errors:
            raise ValidationError(errors)
