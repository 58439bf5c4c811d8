"""Shipment aggregate (CQRS) — the root of the courier shipment lifecycle.

A shipment is quoted, booked, picked up, flown and delivered; the completion
workflow then moves it into documentation, after which billing invoices it.

State Machine:
    QUOTED → BOOKED → PICKUP → IN_TRANSIT → DELIVERED → DOCUMENT → INVOICED
    {QUOTED, BOOKED, PICKUP, IN_TRANSIT} → CANCELLED

Once INVOICED or CANCELLED the aggregate is immutable: no status, document,
reference or deadline change is accepted.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String, Text, ValueObject

from logistics.domain import logistics
from logistics.exceptions import ShipmentClosed
from logistics.shipment.documents import NFO_ONLY_DOCUMENTS, DocumentEvaluation, evaluate_documents
from logistics.shipment.events import (
    CustomerReferenceUpdated,
    DocumentStatusUpdated,
    ShipmentCancelled,
    ShipmentDelivered,
    ShipmentInvoiced,
    ShipmentQuoted,
    ShipmentReadyForBilling,
    ShipmentStatusChanged,
    SLADeadlineRevised,
)
from logistics.shipment.payloads import (
    BookedPayload,
    CancelledPayload,
    DeliveredPayload,
    InTransitPayload,
    InvoicedPayload,
    StatusPayload,
    validate_payload,
)
from logistics.shipment.sla import SLA_CLOSED_STATUSES, SLAEvaluator, SLAResult
from logistics.shipment.transitions import assert_transition
from logistics.shipment.types import (
    CLOSED_STATUSES,
    DocumentSlot,
    DocumentState,
    ServiceType,
    ShipmentPriority,
    ShipmentStatus,
)

MAX_CUSTOMER_REFERENCE_LENGTH = 50


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@logistics.value_object(part_of="Shipment")
class DocumentStatus:
    """State of each document slot."""

    awb = String(max_length=10, choices=DocumentState, default=DocumentState.MISSING.value)
    hawb = String(max_length=10, choices=DocumentState, default=DocumentState.MISSING.value)
    mawb = String(max_length=10, choices=DocumentState, default=DocumentState.MISSING.value)
    pod = String(max_length=10, choices=DocumentState, default=DocumentState.MISSING.value)

    def as_mapping(self) -> dict[str, str]:
        return {slot.value: getattr(self, slot.value) or DocumentState.MISSING.value for slot in DocumentSlot}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@logistics.entity(part_of="Shipment")
class StatusChange:
    """One accepted entry in the shipment's status history."""

    status = String(required=True, max_length=20, choices=ShipmentStatus)
    changed_at = DateTime(required=True)
    location = String(max_length=200)
    notes = Text()


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@logistics.aggregate
class Shipment:
    service_type = String(required=True, max_length=10, choices=ServiceType)
    current_status = String(
        max_length=20,
        choices=ShipmentStatus,
        default=ShipmentStatus.QUOTED.value,
    )
    priority = String(
        max_length=20,
        choices=ShipmentPriority,
        default=ShipmentPriority.STANDARD.value,
    )
    sla_deadline = DateTime(required=True)
    customer_reference = String(max_length=MAX_CUSTOMER_REFERENCE_LENGTH, default="")
    document_status = ValueObject(DocumentStatus)
    assigned_courier_id = Identifier()
    flight_number = String(max_length=10)
    estimated_arrival = DateTime()
    pod_signature = String(max_length=200)
    cancellation_reason = String(max_length=500)
    invoice_number = String(max_length=50)
    completed_at = DateTime()
    sla_closed_at = DateTime()
    status_history = HasMany(StatusChange)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        service_type: ServiceType | str,
        sla_deadline: datetime,
        customer_reference: str = "",
        priority: ShipmentPriority | str = ShipmentPriority.STANDARD,
        now: datetime | None = None,
    ):
        """Create a new shipment in the quoted state."""
        now = now or datetime.now(UTC)
        customer_reference = (customer_reference or "").strip()

        errors: dict[str, list[str]] = {}
        if sla_deadline <= now:
            errors["sla_deadline"] = ["Deadline must be in the future"]
        if len(customer_reference) > MAX_CUSTOMER_REFERENCE_LENGTH:
            errors["customer_reference"] = [
                f"Customer reference must be at most {MAX_CUSTOMER_REFERENCE_LENGTH} characters"
            ]
        if errors:
            raise ValidationError(errors)

        shipment = cls(
            service_type=ServiceType(service_type).value,
            current_status=ShipmentStatus.QUOTED.value,
            priority=ShipmentPriority(priority).value,
            sla_deadline=sla_deadline,
            customer_reference=customer_reference,
            document_status=DocumentStatus(),
            created_at=now,
            updated_at=now,
        )
        shipment.add_status_history(StatusChange(status=ShipmentStatus.QUOTED.value, changed_at=now))
        shipment.raise_(
            ShipmentQuoted(
                shipment_id=str(shipment.id),
                service_type=shipment.service_type,
                sla_deadline=sla_deadline,
                customer_reference=customer_reference,
                quoted_at=now,
            )
        )
        return shipment

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def status(self) -> ShipmentStatus:
        return ShipmentStatus(self.current_status)

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_STATUSES

    @property
    def is_active(self) -> bool:
        """Still moving physically: not yet delivered, closed or cancelled."""
        return self.status not in SLA_CLOSED_STATUSES

    @property
    def delivery_hours(self) -> int | None:
        """Hours from creation to delivery, rounded up."""
        if self.completed_at is None or self.created_at is None:
            return None
        seconds = (self.completed_at - self.created_at).total_seconds()
        return -int(-seconds // 3600)

    def documents(self) -> dict[str, str]:
        if self.document_status is None:
            return DocumentStatus().as_mapping()
        return self.document_status.as_mapping()

    def history(self) -> list[StatusChange]:
        """Status history, oldest first."""
        return sorted(self.status_history or [], key=lambda entry: entry.changed_at)

    def evaluate_documents(self) -> DocumentEvaluation:
        return evaluate_documents(self.documents(), self.service_type)

    def evaluate_sla(self, now: datetime | None = None, evaluator: SLAEvaluator | None = None) -> SLAResult:
        evaluator = evaluator or SLAEvaluator()
        return evaluator.evaluate(
            self.sla_deadline,
            self.current_status,
            now or datetime.now(UTC),
            closed_at=self.sla_closed_at,
        )

    # -------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------
    def _assert_open(self) -> None:
        if self.is_closed:
            raise ShipmentClosed(self.status)

    def _close_sla(self, now: datetime) -> None:
        if self.sla_closed_at is None:
            self.sla_closed_at = now

    def _record_history(self, status: ShipmentStatus, now: datetime, location=None, notes=None) -> None:
        self.add_status_history(
            StatusChange(status=status.value, changed_at=now, location=location, notes=notes)
        )

    # -------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------
    def change_status(self, payload: StatusPayload, now: datetime | None = None) -> None:
        """Move the shipment to ``payload.status`` with its required side data."""
        now = now or datetime.now(UTC)
        assert_transition(self.current_status, payload.status)
        validate_payload(payload, now)

        previous = self.status

        if isinstance(payload, BookedPayload):
            if payload.courier_id:
                self.assigned_courier_id = payload.courier_id
        elif isinstance(payload, InTransitPayload):
            self.flight_number = payload.flight_number
            self.estimated_arrival = payload.estimated_arrival
        elif isinstance(payload, DeliveredPayload):
            self.pod_signature = payload.signature
            if self.completed_at is None:
                self.completed_at = now
            self._close_sla(now)
        elif isinstance(payload, CancelledPayload):
            self.cancellation_reason = payload.reason.strip()
            self._close_sla(now)
        elif isinstance(payload, InvoicedPayload):
            self.invoice_number = payload.invoice_number
            self._close_sla(now)

        self.current_status = payload.status.value
        self._record_history(payload.status, now, location=getattr(payload, "location", None), notes=payload.notes)
        self.updated_at = now

        self.raise_(
            ShipmentStatusChanged(
                shipment_id=str(self.id),
                from_status=previous.value,
                to_status=payload.status.value,
                changed_at=now,
            )
        )
        if isinstance(payload, DeliveredPayload):
            self.raise_(ShipmentDelivered(shipment_id=str(self.id), signature=payload.signature, delivered_at=now))
        elif isinstance(payload, CancelledPayload):
            self.raise_(
                ShipmentCancelled(shipment_id=str(self.id), reason=self.cancellation_reason, cancelled_at=now)
            )
        elif isinstance(payload, InvoicedPayload):
            self.raise_(
                ShipmentInvoiced(shipment_id=str(self.id), invoice_number=payload.invoice_number, invoiced_at=now)
            )

    def enter_documentation_phase(self, now: datetime | None = None) -> ShipmentReadyForBilling:
        """Move a delivered shipment into documentation and signal billing.

        Only the completion workflow calls this, after every completion
        precondition has been checked. ``completed_at`` keeps the delivery
        timestamp.
        """
        now = now or datetime.now(UTC)
        assert_transition(self.current_status, ShipmentStatus.DOCUMENT)

        previous = self.status
        self.current_status = ShipmentStatus.DOCUMENT.value
        self._record_history(
            ShipmentStatus.DOCUMENT,
            now,
            notes="Shipment completed; all mandatory fields confirmed",
        )
        self.updated_at = now

        ready = ShipmentReadyForBilling(
            shipment_id=str(self.id),
            service_type=self.service_type,
            customer_reference=self.customer_reference,
            completed_at=self.completed_at or now,
            ready_at=now,
        )
        self.raise_(
            ShipmentStatusChanged(
                shipment_id=str(self.id),
                from_status=previous.value,
                to_status=ShipmentStatus.DOCUMENT.value,
                changed_at=now,
            )
        )
        self.raise_(ready)
        return ready

    # -------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------
    def revise_deadline(self, new_deadline: datetime, now: datetime | None = None) -> None:
        """Push the SLA deadline later while the shipment is still underway."""
        self._assert_open()
        if not self.is_active:
            raise ValidationError({"sla_deadline": ["Deadline can no longer be revised once delivered"]})
        if new_deadline <= self.sla_deadline:
            raise ValidationError({"sla_deadline": ["New deadline must be later than the current deadline"]})

        now = now or datetime.now(UTC)
        previous = self.sla_deadline
        self.sla_deadline = new_deadline
        self.updated_at = now
        self.raise_(
            SLADeadlineRevised(
                shipment_id=str(self.id),
                previous_deadline=previous,
                new_deadline=new_deadline,
                revised_at=now,
            )
        )

    def record_document(
        self,
        slot: DocumentSlot | str,
        state: DocumentState | str,
        now: datetime | None = None,
    ) -> None:
        """Record the state of one document slot."""
        self._assert_open()
        slot = DocumentSlot(slot)
        state = DocumentState(state)
        if self.service_type == ServiceType.OBC.value and slot in NFO_ONLY_DOCUMENTS:
            raise ValidationError({slot.value: [f"{slot.value.upper()} only applies to NFO shipments"]})

        now = now or datetime.now(UTC)
        self.document_status = DocumentStatus(**{**self.documents(), slot.value: state.value})
        self.updated_at = now
        self.raise_(
            DocumentStatusUpdated(
                shipment_id=str(self.id),
                slot=slot.value,
                state=state.value,
                updated_at=now,
            )
        )

    def set_customer_reference(self, reference: str, now: datetime | None = None) -> None:
        self._assert_open()
        reference = (reference or "").strip()
        if len(reference) > MAX_CUSTOMER_REFERENCE_LENGTH:
            raise ValidationError(
                {"customer_reference": [f"Customer reference must be at most {MAX_CUSTOMER_REFERENCE_LENGTH} characters"]}
            )

        now = now or datetime.now(UTC)
        self.customer_reference = reference
        self.updated_at = now
        self.raise_(
            CustomerReferenceUpdated(
                shipment_id=str(self.id),
                customer_reference=reference,
                updated_at=now,
            )
        )
