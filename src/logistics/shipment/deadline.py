"""SLA deadline revision — command and handler."""

import structlog
from protean import handle
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Shipment")
class ReviseDeadline:
    """Push a shipment's SLA deadline later."""

    shipment_id = Identifier(required=True)
    new_deadline = DateTime(required=True)


@logistics.command_handler(part_of=Shipment)
class ReviseDeadlineHandler:
    @handle(ReviseDeadline)
    def revise_deadline(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.get(command.shipment_id)
        previous = shipment.sla_deadline
        shipment.revise_deadline(command.new_deadline)
        repo.add(shipment)
        logger.info(
            "SLA deadline revised",
            shipment_id=str(shipment.id),
            previous_deadline=previous.isoformat(),
            new_deadline=command.new_deadline.isoformat(),
        )
