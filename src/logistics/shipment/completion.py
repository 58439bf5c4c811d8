"""Shipment completion — the gate between delivery and billing.

Completion moves a delivered shipment into its documentation phase, which
tells billing that an invoice may be generated. Every precondition is
checked and every failure reported together, so the caller can render the
whole checklist at once.

The handler writes the shipment first and only then hands the billing
signal to the billing channel, so a channel failure cannot undo the
transition.
"""

from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from logistics.billing import get_billing_channel
from logistics.billing.handoff import dispatch_billing_signal
from logistics.billing.port import HandoffResult
from logistics.domain import logistics
from logistics.exceptions import CompletionBlocked
from logistics.shipment.events import ShipmentReadyForBilling
from logistics.shipment.shipment import Shipment
from logistics.shipment.types import DocumentSlot, ServiceType, ShipmentStatus

logger = structlog.get_logger(__name__)

# Documents that must be complete before completion, per service type
COMPLETION_DOCUMENTS: dict[ServiceType, tuple[DocumentSlot, ...]] = {
    ServiceType.OBC: (DocumentSlot.POD,),
    ServiceType.NFO: (DocumentSlot.POD, DocumentSlot.HAWB, DocumentSlot.MAWB),
}

_DOCUMENT_MESSAGES = {
    DocumentSlot.POD: "Proof of delivery (POD) must be complete",
    DocumentSlot.HAWB: "House air waybill (HAWB) must be complete",
    DocumentSlot.MAWB: "Master air waybill (MAWB) must be complete",
}


@dataclass(frozen=True)
class CompletionConfirmations:
    """Human confirmations collected by the completion checklist."""

    extra_costs_recorded: bool = False
    documents_complete: bool = False
    cwt_validated: bool = False  # NFO only


@dataclass(frozen=True)
class BlockingReason:
    field: str
    message: str


def completion_blockers(shipment: Shipment, confirmations: CompletionConfirmations) -> list[BlockingReason]:
    """Every unmet completion precondition, in checklist order."""
    reasons: list[BlockingReason] = []

    if shipment.status != ShipmentStatus.DELIVERED:
        reasons.append(
            BlockingReason(
                "status",
                f"Shipment is not in a completable state (current status: {shipment.current_status})",
            )
        )

    if not (shipment.customer_reference or "").strip():
        reasons.append(BlockingReason("customer_reference", "Customer reference is required"))

    missing = set(shipment.evaluate_documents().missing)
    for slot in COMPLETION_DOCUMENTS[ServiceType(shipment.service_type)]:
        if slot.value in missing:
            reasons.append(BlockingReason(slot.value, _DOCUMENT_MESSAGES[slot]))

    if not confirmations.extra_costs_recorded:
        reasons.append(BlockingReason("extra_costs_recorded", "Confirm that extra costs have been recorded"))
    if not confirmations.documents_complete:
        reasons.append(BlockingReason("documents_complete", "Confirm that all documents are complete"))
    if ServiceType(shipment.service_type) == ServiceType.NFO and not confirmations.cwt_validated:
        reasons.append(
            BlockingReason("cwt_validated", "Confirm the chargeable weight pre-alert against the original calculation")
        )

    return reasons


def attempt_completion(
    shipment: Shipment,
    confirmations: CompletionConfirmations,
    now: datetime | None = None,
) -> ShipmentReadyForBilling:
    """Complete ``shipment`` or raise CompletionBlocked listing every reason.

    On success the shipment is in ``document`` and the returned event is
    the billing-ready signal. A shipment already past ``delivered`` is
    rejected as not completable; the signal is never raised twice.
    """
    reasons = completion_blockers(shipment, confirmations)
    if reasons:
        raise CompletionBlocked(reasons)
    return shipment.enter_documentation_phase(now or datetime.now(UTC))


# ---------------------------------------------------------------------------
# Command and handler
# ---------------------------------------------------------------------------
@logistics.command(part_of="Shipment")
class CompleteShipment:
    """Complete a delivered shipment and hand it over to billing."""

    shipment_id = Identifier(required=True)
    extra_costs_recorded = Boolean(default=False)
    documents_complete = Boolean(default=False)
    cwt_validated = Boolean(default=False)


@dataclass(frozen=True)
class CompletionOutcome:
    shipment_id: str
    status: str
    completed_at: datetime
    handoff: HandoffResult


@logistics.command_handler(part_of=Shipment)
class CompleteShipmentHandler:
    @handle(CompleteShipment)
    def complete_shipment(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        confirmations = CompletionConfirmations(
            extra_costs_recorded=bool(command.extra_costs_recorded),
            documents_complete=bool(command.documents_complete),
            cwt_validated=bool(command.cwt_validated),
        )

        try:
            signal = attempt_completion(shipment, confirmations)
        except CompletionBlocked as exc:
            logger.info(
                "Shipment completion blocked",
                shipment_id=str(shipment.id),
                blocking_fields=[reason.field for reason in exc.reasons],
            )
            raise

        # Raises ExpectedVersionError if the shipment moved since it was read
        repo.add(shipment)
        logger.info("Shipment completed", shipment_id=str(shipment.id), service_type=shipment.service_type)

        handoff = dispatch_billing_signal(signal, get_billing_channel())
        return CompletionOutcome(
            shipment_id=str(shipment.id),
            status=shipment.current_status,
            completed_at=signal.completed_at,
            handoff=handoff,
        )
