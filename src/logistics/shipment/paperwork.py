"""Shipment paperwork — commands and handler.

Records document slot states and the customer reference that completion
requires.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.shipment.shipment import Shipment
from logistics.shipment.types import DocumentSlot, DocumentState

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Shipment")
class UpdateDocumentStatus:
    """Record the state of one document slot."""

    shipment_id = Identifier(required=True)
    slot = String(required=True, max_length=10, choices=DocumentSlot)
    state = String(required=True, max_length=10, choices=DocumentState)


@logistics.command(part_of="Shipment")
class SetCustomerReference:
    shipment_id = Identifier(required=True)
    customer_reference = String()


@logistics.command_handler(part_of=Shipment)
class PaperworkHandler:
    @handle(UpdateDocumentStatus)
    def update_document(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        shipment.record_document(command.slot, command.state)
        repo.add(shipment)
        logger.info(
            "Document status recorded",
            shipment_id=str(shipment.id),
            slot=command.slot,
            state=command.state,
        )

    @handle(SetCustomerReference)
    def set_customer_reference(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        shipment.set_customer_reference(command.customer_reference or "")
        repo.add(shipment)
