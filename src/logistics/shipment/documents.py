"""Document completeness gate.

Evaluates a shipment's document slots against the set its service type
requires. HAWB and MAWB only exist for consolidated (NFO) freight; for OBC
they are skipped entirely rather than counted as missing.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from logistics.shipment.types import DocumentSlot, DocumentState, ServiceType

REQUIRED_DOCUMENTS: dict[ServiceType, tuple[DocumentSlot, ...]] = {
    ServiceType.OBC: (DocumentSlot.AWB, DocumentSlot.POD),
    ServiceType.NFO: (DocumentSlot.AWB, DocumentSlot.HAWB, DocumentSlot.MAWB, DocumentSlot.POD),
}

# Slots that only carry meaning for a given service type
NFO_ONLY_DOCUMENTS = frozenset({DocumentSlot.HAWB, DocumentSlot.MAWB})


@dataclass(frozen=True)
class DocumentEvaluation:
    completion_pct: int
    missing: list[str] = field(default_factory=list)
    all_complete: bool = False


def _state_of(doc_status: Mapping, slot: DocumentSlot) -> str:
    value = doc_status.get(slot.value, DocumentState.MISSING)
    return getattr(value, "value", value)


def evaluate_documents(doc_status: Mapping, service_type: ServiceType | str) -> DocumentEvaluation:
    """Evaluate ``doc_status`` (slot name → state) for ``service_type``.

    A slot absent from ``doc_status`` counts as missing. Only ``complete``
    satisfies a slot; ``pending`` does not. ``missing`` lists every required
    slot that is not complete, in canonical slot order.
    """
    required = REQUIRED_DOCUMENTS[ServiceType(service_type)]
    missing = [slot.value for slot in required if _state_of(doc_status, slot) != DocumentState.COMPLETE.value]
    complete = len(required) - len(missing)

    return DocumentEvaluation(
        completion_pct=(200 * complete + len(required)) // (2 * len(required)),
        missing=missing,
        all_complete=not missing,
    )
