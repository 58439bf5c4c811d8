"""Pydantic API schemas for the logistics domain.

These are the external API contracts, kept separate from domain commands.
The API layer translates between these schemas and domain commands.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import AwareDatetime, BaseModel, Field, RootModel

from logistics.commission.calculator import CommissionType
from logistics.shipment.types import DocumentState, ServiceType, ShipmentPriority


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class CreateShipmentRequest(BaseModel):
    service_type: ServiceType
    sla_deadline: AwareDatetime
    customer_reference: str = ""
    priority: ShipmentPriority = ShipmentPriority.STANDARD


class BookedRequest(BaseModel):
    status: Literal["booked"]
    courier_id: str | None = None
    notes: str | None = None


class PickupRequest(BaseModel):
    status: Literal["pickup"]
    location: str | None = None
    notes: str | None = None


class InTransitRequest(BaseModel):
    status: Literal["in_transit"]
    flight_number: str | None = None
    estimated_arrival: AwareDatetime | None = None
    location: str | None = None
    notes: str | None = None


class DeliveredRequest(BaseModel):
    status: Literal["delivered"]
    pod_confirmed: bool = False
    signature: str | None = None
    location: str | None = None
    notes: str | None = None


class CancelledRequest(BaseModel):
    status: Literal["cancelled"]
    reason: str = ""
    notes: str | None = None


class InvoicedRequest(BaseModel):
    status: Literal["invoiced"]
    invoice_number: str | None = None
    notes: str | None = None


class StatusUpdateRequest(
    RootModel[
        Annotated[
            BookedRequest | PickupRequest | InTransitRequest | DeliveredRequest | CancelledRequest | InvoicedRequest,
            Field(discriminator="status"),
        ]
    ]
):
    """One status-change request, discriminated by its `status` tag."""


class UpdateDocumentRequest(BaseModel):
    state: DocumentState


class SetCustomerReferenceRequest(BaseModel):
    customer_reference: str


class ReviseDeadlineRequest(BaseModel):
    new_deadline: AwareDatetime


class CompleteShipmentRequest(BaseModel):
    extra_costs_recorded: bool = False
    documents_complete: bool = False
    cwt_validated: bool = False


class RecordCommissionRequest(BaseModel):
    base_amount: Decimal
    rate: Decimal
    commission_type: CommissionType
    shipment_id: str | None = None
    commission_amount: Decimal | None = None


class CalculateCommissionRequest(BaseModel):
    base_amount: Decimal
    rate: Decimal
    commission_type: CommissionType


class PayCommissionRequest(BaseModel):
    payment_reference: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class ShipmentIdResponse(BaseModel):
    shipment_id: str


class StatusResponse(BaseModel):
    status: str


class SLAResponse(BaseModel):
    status: str
    deadline: datetime
    remaining_hours: int | None = None
    hours_overdue: int = 0


class DocumentEvaluationResponse(BaseModel):
    completion_pct: int
    missing: list[str]
    all_complete: bool


class NextTaskResponse(BaseModel):
    description: str
    due_at: datetime
    priority: str


class ShipmentResponse(BaseModel):
    shipment_id: str
    version: int
    service_type: str
    current_status: str
    priority: str
    customer_reference: str
    documents: dict[str, str]
    document_evaluation: DocumentEvaluationResponse
    sla: SLAResponse
    next_task: NextTaskResponse | None = None
    completed_at: datetime | None = None
    delivery_hours: int | None = None
    cancellation_reason: str | None = None


class StatusHistoryEntryResponse(BaseModel):
    status: str
    changed_at: datetime
    location: str | None = None
    notes: str | None = None


class StatusHistoryResponse(BaseModel):
    shipment_id: str
    history: list[StatusHistoryEntryResponse]


class OverdueShipmentResponse(BaseModel):
    shipment_id: str
    service_type: str
    current_status: str
    customer_reference: str
    sla_deadline: datetime
    hours_overdue: int


class BlockingReasonResponse(BaseModel):
    field: str
    message: str


class CompletionChecklistResponse(BaseModel):
    can_complete: bool
    blocking_reasons: list[BlockingReasonResponse]


class CompletionResponse(BaseModel):
    shipment_id: str
    status: str
    completed_at: datetime
    billing_notified: bool
    billing_reference: str | None = None
    billing_failure: str | None = None


class CommissionResponse(BaseModel):
    commission_id: str
    shipment_id: str | None = None
    commission_type: str
    rate: Decimal
    base_amount: Decimal
    commission_amount: Decimal
    currency: str
    status: str
    paid_at: datetime | None = None


class CommissionAmountResponse(BaseModel):
    commission_amount: Decimal
    currency: str
