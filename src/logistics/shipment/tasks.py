"""The follow-up action an operator owes a shipment in each status."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from logistics.shipment.types import ShipmentPriority, ShipmentStatus


@dataclass(frozen=True)
class NextTask:
    description: str
    due_at: datetime
    priority: ShipmentPriority


# status → (description, due after, priority); None priority inherits the shipment's
_TASKS: dict[ShipmentStatus, tuple[str, timedelta | None, ShipmentPriority | None]] = {
    ShipmentStatus.QUOTED: ("Follow up on quote with customer", timedelta(hours=24), ShipmentPriority.STANDARD),
    ShipmentStatus.BOOKED: ("Arrange pickup with courier", timedelta(hours=2), ShipmentPriority.URGENT),
    ShipmentStatus.PICKUP: ("Confirm pickup completion", timedelta(hours=4), ShipmentPriority.URGENT),
    ShipmentStatus.IN_TRANSIT: ("Monitor shipment progress", None, None),
    ShipmentStatus.DELIVERED: ("Obtain proof of delivery", timedelta(hours=24), ShipmentPriority.STANDARD),
    ShipmentStatus.DOCUMENT: ("Prepare and send invoice", timedelta(hours=48), ShipmentPriority.STANDARD),
}


def next_task_for(
    status: ShipmentStatus | str,
    sla_deadline: datetime,
    priority: ShipmentPriority | str,
    now: datetime,
) -> NextTask | None:
    """Return the next task for a shipment in ``status``, or None once closed.

    In transit the task is due at the SLA deadline and keeps the shipment's
    own priority.
    """
    entry = _TASKS.get(ShipmentStatus(status))
    if entry is None:
        return None

    description, due_after, task_priority = entry
    return NextTask(
        description=description,
        due_at=sla_deadline if due_after is None else now + due_after,
        priority=task_priority or ShipmentPriority(priority),
    )
