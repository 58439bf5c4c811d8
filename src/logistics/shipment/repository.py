"""Repository for the Shipment aggregate.

The base repository provides get/add with optimistic concurrency on the
aggregate's version; the queries below serve the monitoring views.
"""

from logistics.domain import logistics
from logistics.shipment.shipment import Shipment
from logistics.shipment.sla import SLA_CLOSED_STATUSES
from logistics.shipment.types import ShipmentStatus

ACTIVE_STATUSES = [status.value for status in ShipmentStatus if status not in SLA_CLOSED_STATUSES]


@logistics.repository(part_of=Shipment)
class ShipmentRepository:
    def find_active(self) -> list[Shipment]:
        """Shipments still moving physically, earliest deadline first."""
        return self._dao.query.filter(current_status__in=ACTIVE_STATUSES).order_by("sla_deadline").all().items
