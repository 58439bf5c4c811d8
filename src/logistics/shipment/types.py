"""Enumerations shared across the shipment lifecycle."""

from enum import Enum


class ShipmentStatus(str, Enum):
    QUOTED = "quoted"
    BOOKED = "booked"
    PICKUP = "pickup"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    DOCUMENT = "document"
    INVOICED = "invoiced"
    CANCELLED = "cancelled"


class ServiceType(str, Enum):
    OBC = "OBC"  # On-Board Courier
    NFO = "NFO"  # Next-Flight-Out


class ShipmentPriority(str, Enum):
    STANDARD = "standard"
    URGENT = "urgent"


class DocumentSlot(str, Enum):
    AWB = "awb"
    HAWB = "hawb"
    MAWB = "mawb"
    POD = "pod"


class DocumentState(str, Enum):
    MISSING = "missing"
    PENDING = "pending"
    COMPLETE = "complete"


# Absorbing states: no status, document or deadline mutation afterwards.
CLOSED_STATUSES = frozenset({ShipmentStatus.INVOICED, ShipmentStatus.CANCELLED})
