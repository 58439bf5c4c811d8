"""Integration tests for the overdue shipment view."""

from datetime import UTC, datetime, timedelta

from logistics.shipment.monitoring import overdue_shipments
from logistics.shipment.payloads import BookedPayload, DeliveredPayload, InTransitPayload, PickupPayload
from logistics.shipment.shipment import Shipment
from protean import current_domain

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _persisted(deadline, deliver=False):
    shipment = Shipment.create(service_type="OBC", sla_deadline=deadline, now=deadline - timedelta(days=2))
    if deliver:
        for payload in (BookedPayload(), PickupPayload(), InTransitPayload()):
            shipment.change_status(payload, now=deadline - timedelta(days=1))
        shipment.change_status(DeliveredPayload(pod_confirmed=True), now=deadline + timedelta(hours=1))
    current_domain.repository_for(Shipment).add(shipment)
    return shipment


class TestOverdueShipments:
    def test_only_past_deadline_active_shipments(self):
        late = _persisted(NOW - timedelta(hours=3))
        _persisted(NOW + timedelta(hours=3))
        _persisted(NOW - timedelta(hours=5), deliver=True)

        [item] = overdue_shipments(now=NOW)
        assert item.shipment.id == late.id
        assert item.hours_overdue == 3

    def test_most_overdue_first(self):
        recent = _persisted(NOW - timedelta(hours=1))
        oldest = _persisted(NOW - timedelta(hours=40))
        assert [item.shipment.id for item in overdue_shipments(now=NOW)] == [oldest.id, recent.id]

    def test_limit(self):
        oldest = _persisted(NOW - timedelta(hours=40))
        _persisted(NOW - timedelta(hours=1))
        assert [item.shipment.id for item in overdue_shipments(limit=1, now=NOW)] == [oldest.id]

    def test_nothing_overdue(self):
        _persisted(NOW + timedelta(hours=1))
        assert overdue_shipments(now=NOW) == []
