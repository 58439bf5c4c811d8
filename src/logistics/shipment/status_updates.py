"""Shipment status updates — command and handler.

Moves a shipment along the state machine with the side data its target
status requires. Only the fields of the target status's payload are read.
The documentation phase is not reachable from here; see the completion
workflow.
"""

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.shipment.payloads import payload_from
from logistics.shipment.shipment import Shipment
from logistics.shipment.types import ShipmentStatus

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Shipment")
class UpdateShipmentStatus:
    """Move a shipment to ``status`` with the data that status requires."""

    shipment_id = Identifier(required=True)
    status = String(required=True, max_length=20, choices=ShipmentStatus)
    courier_id = Identifier()
    location = String(max_length=200)
    flight_number = String(max_length=50)
    estimated_arrival = DateTime()
    pod_confirmed = Boolean()
    signature = String(max_length=200)
    reason = String(max_length=500)
    invoice_number = String(max_length=50)
    notes = Text()


@logistics.command_handler(part_of=Shipment)
class ShipmentStatusHandler:
    @handle(UpdateShipmentStatus)
    def update_status(self, command):
        payload = payload_from(command.status, command)
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        previous = shipment.current_status
        shipment.change_status(payload)
        repo.add(shipment)
        logger.info(
            "Shipment status changed",
            shipment_id=str(shipment.id),
            from_status=previous,
            to_status=shipment.current_status,
        )
        return shipment.current_status
