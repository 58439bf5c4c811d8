"""Shipment creation — command and handler.

Creates a new Shipment in the quoted state.
"""

import structlog
from protean import handle
from protean.fields import DateTime, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.shipment.shipment import Shipment
from logistics.shipment.types import ServiceType, ShipmentPriority

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Shipment")
class CreateShipment:
    """Create a new shipment from an accepted quote."""

    service_type = String(required=True, max_length=10, choices=ServiceType)
    sla_deadline = DateTime(required=True)
    customer_reference = String()
    priority = String(max_length=20, choices=ShipmentPriority, default=ShipmentPriority.STANDARD.value)


@logistics.command_handler(part_of=Shipment)
class CreateShipmentHandler:
    @handle(CreateShipment)
    def create_shipment(self, command):
        shipment = Shipment.create(
            service_type=command.service_type,
            sla_deadline=command.sla_deadline,
            customer_reference=command.customer_reference or "",
            priority=command.priority or ShipmentPriority.STANDARD,
        )
        current_domain.repository_for(Shipment).add(shipment)
        logger.info(
            "Shipment quoted",
            shipment_id=str(shipment.id),
            service_type=shipment.service_type,
            sla_deadline=shipment.sla_deadline.isoformat(),
        )
        return str(shipment.id)
