"""Operational views over active shipments."""

from dataclasses import dataclass
from datetime import UTC, datetime

from protean.utils.globals import current_domain

from logistics.shipment.shipment import Shipment
from logistics.shipment.sla import SLAEvaluator, SLAStatus, hours_overdue


@dataclass(frozen=True)
class OverdueShipment:
    shipment: Shipment
    hours_overdue: int


def overdue_shipments(
    limit: int | None = None,
    now: datetime | None = None,
    evaluator: SLAEvaluator | None = None,
) -> list[OverdueShipment]:
    """Active shipments past their deadline, most overdue first."""
    now = now or datetime.now(UTC)
    evaluator = evaluator or SLAEvaluator()

    overdue = [
        OverdueShipment(shipment=shipment, hours_overdue=hours_overdue(shipment.sla_deadline, now))
        for shipment in current_domain.repository_for(Shipment).find_active()
        if shipment.evaluate_sla(now, evaluator).status == SLAStatus.OVERDUE
    ]
    overdue.sort(key=lambda item: item.shipment.sla_deadline)
    return overdue if limit is None else overdue[:limit]
