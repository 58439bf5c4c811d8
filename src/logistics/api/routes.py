"""FastAPI routes for the logistics domain."""

from datetime import UTC, datetime

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from logistics.api.schemas import (
    BlockingReasonResponse,
    CalculateCommissionRequest,
    CommissionAmountResponse,
    CommissionResponse,
    CompleteShipmentRequest,
    CompletionChecklistResponse,
    CompletionResponse,
    CreateShipmentRequest,
    DocumentEvaluationResponse,
    NextTaskResponse,
    OverdueShipmentResponse,
    PayCommissionRequest,
    RecordCommissionRequest,
    ReviseDeadlineRequest,
    SetCustomerReferenceRequest,
    ShipmentIdResponse,
    ShipmentResponse,
    SLAResponse,
    StatusHistoryEntryResponse,
    StatusHistoryResponse,
    StatusResponse,
    StatusUpdateRequest,
    UpdateDocumentRequest,
)
from logistics.commission.calculator import CommissionCalculator
from logistics.commission.commission import Commission
from logistics.commission.recording import PayCommission, RecordCommission
from logistics.config import get_config
from logistics.shipment.completion import CompleteShipment, CompletionConfirmations, completion_blockers
from logistics.shipment.creation import CreateShipment
from logistics.shipment.deadline import ReviseDeadline
from logistics.shipment.monitoring import overdue_shipments
from logistics.shipment.paperwork import SetCustomerReference, UpdateDocumentStatus
from logistics.shipment.shipment import Shipment
from logistics.shipment.sla import SLAEvaluator, hours_overdue
from logistics.shipment.status_updates import UpdateShipmentStatus
from logistics.shipment.tasks import next_task_for
from logistics.shipment.types import DocumentSlot


def _shipment_response(shipment: Shipment) -> ShipmentResponse:
    now = datetime.now(UTC)
    sla = shipment.evaluate_sla(now, SLAEvaluator(get_config().sla))
    documents = shipment.evaluate_documents()
    task = next_task_for(shipment.current_status, shipment.sla_deadline, shipment.priority, now)

    return ShipmentResponse(
        shipment_id=str(shipment.id),
        version=shipment._version,
        service_type=shipment.service_type,
        current_status=shipment.current_status,
        priority=shipment.priority,
        customer_reference=shipment.customer_reference or "",
        documents=shipment.documents(),
        document_evaluation=DocumentEvaluationResponse(
            completion_pct=documents.completion_pct,
            missing=documents.missing,
            all_complete=documents.all_complete,
        ),
        sla=SLAResponse(
            status=sla.status.value,
            deadline=sla.deadline,
            remaining_hours=sla.remaining_hours,
            hours_overdue=hours_overdue(shipment.sla_deadline, shipment.sla_closed_at or now),
        ),
        next_task=(
            NextTaskResponse(description=task.description, due_at=task.due_at, priority=task.priority.value)
            if task
            else None
        ),
        completed_at=shipment.completed_at,
        delivery_hours=shipment.delivery_hours,
        cancellation_reason=shipment.cancellation_reason,
    )


def _commission_response(commission: Commission) -> CommissionResponse:
    return CommissionResponse(
        commission_id=str(commission.id),
        shipment_id=commission.shipment_id,
        commission_type=commission.commission_type,
        rate=commission.rate_value,
        base_amount=commission.base_amount_value,
        commission_amount=commission.amount,
        currency=commission.currency,
        status=commission.status,
        paid_at=commission.paid_at,
    )


# ---------------------------------------------------------------------------
# Shipment Router
# ---------------------------------------------------------------------------
shipment_router = APIRouter(prefix="/shipments", tags=["shipments"])


@shipment_router.post("", status_code=201, response_model=ShipmentIdResponse)
async def create_shipment(body: CreateShipmentRequest) -> ShipmentIdResponse:
    """Create a shipment from an accepted quote."""
    command = CreateShipment(
        service_type=body.service_type.value,
        sla_deadline=body.sla_deadline,
        customer_reference=body.customer_reference,
        priority=body.priority.value,
    )
    result = current_domain.process(command, asynchronous=False)
    return ShipmentIdResponse(shipment_id=result)


@shipment_router.get("/overdue", response_model=list[OverdueShipmentResponse])
async def list_overdue_shipments(limit: int = Query(default=50, ge=1, le=500)) -> list[OverdueShipmentResponse]:
    """Active shipments past their SLA deadline, most overdue first."""
    return [
        OverdueShipmentResponse(
            shipment_id=str(item.shipment.id),
            service_type=item.shipment.service_type,
            current_status=item.shipment.current_status,
            customer_reference=item.shipment.customer_reference or "",
            sla_deadline=item.shipment.sla_deadline,
            hours_overdue=item.hours_overdue,
        )
        for item in overdue_shipments(limit=limit, evaluator=SLAEvaluator(get_config().sla))
    ]


@shipment_router.get("/{shipment_id}", response_model=ShipmentResponse)
async def get_shipment(shipment_id: str) -> ShipmentResponse:
    """Current state of a shipment with its SLA, document and next-task views."""
    return _shipment_response(current_domain.repository_for(Shipment).get(shipment_id))


@shipment_router.get("/{shipment_id}/history", response_model=StatusHistoryResponse)
async def get_status_history(shipment_id: str) -> StatusHistoryResponse:
    """Every accepted status change, oldest first."""
    shipment = current_domain.repository_for(Shipment).get(shipment_id)
    return StatusHistoryResponse(
        shipment_id=str(shipment.id),
        history=[
            StatusHistoryEntryResponse(
                status=entry.status,
                changed_at=entry.changed_at,
                location=entry.location,
                notes=entry.notes,
            )
            for entry in shipment.history()
        ],
    )


@shipment_router.put("/{shipment_id}/status", response_model=StatusResponse)
async def update_status(shipment_id: str, body: StatusUpdateRequest) -> StatusResponse:
    """Move a shipment to a new status with the data that status requires."""
    request = body.root
    command = UpdateShipmentStatus(shipment_id=shipment_id, **request.model_dump(exclude_none=True))
    result = current_domain.process(command, asynchronous=False)
    return StatusResponse(status=result)


@shipment_router.put("/{shipment_id}/documents/{slot}", response_model=ShipmentResponse)
async def update_document(shipment_id: str, slot: DocumentSlot, body: UpdateDocumentRequest) -> ShipmentResponse:
    """Record the state of one document slot."""
    command = UpdateDocumentStatus(shipment_id=shipment_id, slot=slot.value, state=body.state.value)
    current_domain.process(command, asynchronous=False)
    return _shipment_response(current_domain.repository_for(Shipment).get(shipment_id))


@shipment_router.put("/{shipment_id}/customer-reference", response_model=StatusResponse)
async def set_customer_reference(shipment_id: str, body: SetCustomerReferenceRequest) -> StatusResponse:
    command = SetCustomerReference(shipment_id=shipment_id, customer_reference=body.customer_reference)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="customer_reference_updated")


@shipment_router.put("/{shipment_id}/deadline", response_model=StatusResponse)
async def revise_deadline(shipment_id: str, body: ReviseDeadlineRequest) -> StatusResponse:
    """Push the SLA deadline later."""
    command = ReviseDeadline(shipment_id=shipment_id, new_deadline=body.new_deadline)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="deadline_revised")


@shipment_router.get("/{shipment_id}/completion-checklist", response_model=CompletionChecklistResponse)
async def completion_checklist(
    shipment_id: str,
    extra_costs_recorded: bool = False,
    documents_complete: bool = False,
    cwt_validated: bool = False,
) -> CompletionChecklistResponse:
    """Preview what still blocks completion, without changing anything."""
    shipment = current_domain.repository_for(Shipment).get(shipment_id)
    reasons = completion_blockers(
        shipment,
        CompletionConfirmations(
            extra_costs_recorded=extra_costs_recorded,
            documents_complete=documents_complete,
            cwt_validated=cwt_validated,
        ),
    )
    return CompletionChecklistResponse(
        can_complete=not reasons,
        blocking_reasons=[BlockingReasonResponse(field=r.field, message=r.message) for r in reasons],
    )


@shipment_router.post("/{shipment_id}/complete", response_model=CompletionResponse)
async def complete_shipment(shipment_id: str, body: CompleteShipmentRequest) -> CompletionResponse:
    """Complete a delivered shipment and hand it over to billing."""
    command = CompleteShipment(
        shipment_id=shipment_id,
        extra_costs_recorded=body.extra_costs_recorded,
        documents_complete=body.documents_complete,
        cwt_validated=body.cwt_validated,
    )
    outcome = current_domain.process(command, asynchronous=False)
    return CompletionResponse(
        shipment_id=outcome.shipment_id,
        status=outcome.status,
        completed_at=outcome.completed_at,
        billing_notified=outcome.handoff.success,
        billing_reference=outcome.handoff.reference,
        billing_failure=outcome.handoff.failure_reason,
    )


# ---------------------------------------------------------------------------
# Commission Router
# ---------------------------------------------------------------------------
commission_router = APIRouter(prefix="/commissions", tags=["commissions"])


@commission_router.post("", status_code=201, response_model=CommissionResponse)
async def record_commission(body: RecordCommissionRequest) -> CommissionResponse:
    """Record a commission; the amount is always recomputed server-side."""
    command = RecordCommission(
        base_amount=str(body.base_amount),
        rate=str(body.rate),
        commission_type=body.commission_type.value,
        shipment_id=body.shipment_id,
        commission_amount=str(body.commission_amount) if body.commission_amount is not None else None,
    )
    commission_id = current_domain.process(command, asynchronous=False)
    return _commission_response(current_domain.repository_for(Commission).get(commission_id))


@commission_router.post("/calculate", response_model=CommissionAmountResponse)
async def calculate_commission(body: CalculateCommissionRequest) -> CommissionAmountResponse:
    config = get_config().commission
    amount = CommissionCalculator(config).calculate(body.base_amount, body.rate, body.commission_type)
    return CommissionAmountResponse(commission_amount=amount, currency=config.currency)


@commission_router.get("/{commission_id}", response_model=CommissionResponse)
async def get_commission(commission_id: str) -> CommissionResponse:
    return _commission_response(current_domain.repository_for(Commission).get(commission_id))


@commission_router.put("/{commission_id}/pay", response_model=CommissionResponse)
async def pay_commission(commission_id: str, body: PayCommissionRequest) -> CommissionResponse:
    command = PayCommission(commission_id=commission_id, payment_reference=body.payment_reference)
    current_domain.process(command, asynchronous=False)
    return _commission_response(current_domain.repository_for(Commission).get(commission_id))
