"""Commission domain events.

Money travels as decimal strings so no amount ever passes through a float.
"""

from protean.fields import DateTime, Identifier, String

from logistics.domain import logistics


@logistics.event(part_of="Commission")
class CommissionRecorded:
    """A commission was calculated for a payable task."""

    __version__ = "v1"

    commission_id = Identifier(required=True)
    shipment_id = Identifier()
    commission_type = String(required=True, max_length=20)
    rate = String(required=True, max_length=32)
    base_amount = String(required=True, max_length=32)
    commission_amount = String(required=True, max_length=32)
    currency = String(required=True, max_length=3)
    recorded_at = DateTime(required=True)


@logistics.event(part_of="Commission")
class CommissionPaid:
    __version__ = "v1"

    commission_id = Identifier(required=True)
    commission_amount = String(required=True, max_length=32)
    payment_reference = String(max_length=100)
    paid_at = DateTime(required=True)
