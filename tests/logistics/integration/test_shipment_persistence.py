"""Integration tests for Shipment persistence and its optimistic concurrency check."""

from datetime import UTC, datetime, timedelta

import pytest
from logistics.shipment.payloads import (
    BookedPayload,
    CancelledPayload,
    DeliveredPayload,
    InTransitPayload,
    PickupPayload,
)
from logistics.shipment.repository import ShipmentRepository
from logistics.shipment.shipment import Shipment
from protean import current_domain
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError


def _make_shipment(hours=48, service_type="OBC"):
    return Shipment.create(service_type=service_type, sla_deadline=datetime.now(UTC) + timedelta(hours=hours))


class TestShipmentPersistence:
    def test_persist_and_retrieve(self):
        shipment = _make_shipment()
        shipment.record_document("pod", "pending")
        current_domain.repository_for(Shipment).add(shipment)

        loaded = current_domain.repository_for(Shipment).get(shipment.id)
        assert loaded.service_type == "OBC"
        assert loaded.current_status == "quoted"
        assert loaded.documents()["pod"] == "pending"
        assert [entry.status for entry in loaded.history()] == ["quoted"]

    def test_first_save_sets_version(self):
        shipment = _make_shipment()
        current_domain.repository_for(Shipment).add(shipment)
        assert current_domain.repository_for(Shipment).get(shipment.id)._version == 0

    def test_version_increments_per_write(self):
        repo = current_domain.repository_for(Shipment)
        shipment = _make_shipment()
        repo.add(shipment)

        loaded = repo.get(shipment.id)
        loaded.change_status(BookedPayload())
        repo.add(loaded)

        assert repo.get(shipment.id)._version == 1

    def test_status_history_persisted_in_order(self):
        repo = current_domain.repository_for(Shipment)
        shipment = _make_shipment()
        repo.add(shipment)

        loaded = repo.get(shipment.id)
        loaded.change_status(BookedPayload(notes="Courier assigned"))
        loaded.change_status(PickupPayload(location="FRA"))
        repo.add(loaded)

        history = repo.get(shipment.id).history()
        assert [entry.status for entry in history] == ["quoted", "booked", "pickup"]
        assert history[1].notes == "Courier assigned"
        assert history[2].location == "FRA"

    def test_missing_id(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Shipment).get("nope")

    def test_stale_copy_rejected(self):
        repo = current_domain.repository_for(Shipment)
        shipment = _make_shipment()
        repo.add(shipment)

        first = repo.get(shipment.id)
        second = repo.get(shipment.id)
        first.change_status(BookedPayload())
        repo.add(first)

        second.change_status(CancelledPayload(reason="Duplicate"))
        with pytest.raises(ExpectedVersionError):
            repo.add(second)
        assert repo.get(shipment.id).current_status == "booked"


class TestFindActive:
    def test_custom_repository_is_registered(self):
        assert isinstance(current_domain.repository_for(Shipment), ShipmentRepository)

    def test_excludes_delivered_and_cancelled(self):
        repo = current_domain.repository_for(Shipment)
        active, delivered, cancelled = _make_shipment(), _make_shipment(), _make_shipment()
        for payload in (BookedPayload(), PickupPayload(), InTransitPayload(), DeliveredPayload(pod_confirmed=True)):
            delivered.change_status(payload)
        cancelled.change_status(CancelledPayload(reason="Customer withdrew"))
        for shipment in (active, delivered, cancelled):
            repo.add(shipment)

        assert [s.id for s in repo.find_active()] == [active.id]

    def test_earliest_deadline_first(self):
        repo = current_domain.repository_for(Shipment)
        later, sooner = _make_shipment(hours=72), _make_shipment(hours=6)
        repo.add(later)
        repo.add(sooner)

        assert [s.id for s in repo.find_active()] == [sooner.id, later.id]
