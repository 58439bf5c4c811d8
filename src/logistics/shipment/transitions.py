"""Shipment status state machine.

State Machine:
    QUOTED → BOOKED → PICKUP → IN_TRANSIT → DELIVERED → DOCUMENT → INVOICED
    {QUOTED, BOOKED, PICKUP, IN_TRANSIT} → CANCELLED

The validator only answers whether an edge is legal. Business preconditions
layered on top (cancellation reason, proof of delivery, completion checklist)
are enforced by the aggregate and the completion workflow.
"""

from logistics.exceptions import InvalidTransition
from logistics.shipment.types import ShipmentStatus

_VALID_TRANSITIONS: dict[ShipmentStatus, frozenset[ShipmentStatus]] = {
    ShipmentStatus.QUOTED: frozenset({ShipmentStatus.BOOKED, ShipmentStatus.CANCELLED}),
    ShipmentStatus.BOOKED: frozenset({ShipmentStatus.PICKUP, ShipmentStatus.CANCELLED}),
    ShipmentStatus.PICKUP: frozenset({ShipmentStatus.IN_TRANSIT, ShipmentStatus.CANCELLED}),
    ShipmentStatus.IN_TRANSIT: frozenset({ShipmentStatus.DELIVERED, ShipmentStatus.CANCELLED}),
    ShipmentStatus.DELIVERED: frozenset({ShipmentStatus.DOCUMENT}),
    ShipmentStatus.DOCUMENT: frozenset({ShipmentStatus.INVOICED}),
    ShipmentStatus.INVOICED: frozenset(),  # terminal
    ShipmentStatus.CANCELLED: frozenset(),  # terminal
}


def allowed_transitions(current: ShipmentStatus | str) -> frozenset[ShipmentStatus]:
    """Return the statuses reachable in one step from ``current``."""
    return _VALID_TRANSITIONS[ShipmentStatus(current)]


def can_transition(current: ShipmentStatus | str, proposed: ShipmentStatus | str) -> bool:
    """Whether ``current → proposed`` is an edge of the state machine.

    Self-transitions are never legal.
    """
    return ShipmentStatus(proposed) in allowed_transitions(current)


def assert_transition(current: ShipmentStatus | str, proposed: ShipmentStatus | str) -> None:
    if not can_transition(current, proposed):
        raise InvalidTransition(ShipmentStatus(current), ShipmentStatus(proposed))
