"""Tests for the fake billing channel and the billing handoff."""

from datetime import UTC, datetime

from logistics.billing.fake_adapter import FakeBillingChannel
from logistics.billing.handoff import dispatch_billing_signal
from logistics.billing.port import BillingChannel, HandoffResult
from logistics.shipment.events import ShipmentReadyForBilling

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _signal():
    return ShipmentReadyForBilling(
        shipment_id="shp-1",
        service_type="NFO",
        customer_reference="PO-1",
        completed_at=NOW,
        ready_at=NOW,
    )


class _ExplodingChannel(BillingChannel):
    def notify_ready_for_invoicing(self, shipment_id, completed_at):
        raise ConnectionError("billing host unreachable")


class TestFakeBillingChannel:
    def test_success_returns_reference(self):
        result = FakeBillingChannel().notify_ready_for_invoicing("shp-1", NOW)
        assert result.success is True
        assert result.reference.startswith("bill-")

    def test_records_calls(self):
        channel = FakeBillingChannel()
        channel.notify_ready_for_invoicing("shp-1", NOW)
        assert channel.calls == [{"method": "notify_ready_for_invoicing", "shipment_id": "shp-1", "completed_at": NOW}]

    def test_configured_failure(self):
        channel = FakeBillingChannel()
        channel.configure(should_succeed=False, failure_reason="Queue full")
        result = channel.notify_ready_for_invoicing("shp-1", NOW)
        assert result == HandoffResult(success=False, failure_reason="Queue full")


class TestDispatchBillingSignal:
    def test_success(self):
        channel = FakeBillingChannel()
        result = dispatch_billing_signal(_signal(), channel)
        assert result.success
        assert channel.calls[0]["shipment_id"] == "shp-1"

    def test_failure_is_returned(self):
        channel = FakeBillingChannel()
        channel.configure(should_succeed=False)
        result = dispatch_billing_signal(_signal(), channel)
        assert result.success is False
        assert result.failure_reason == "Billing service unavailable"

    def test_channel_exception_is_contained(self):
        result = dispatch_billing_signal(_signal(), _ExplodingChannel())
        assert result.success is False
        assert result.failure_reason == "billing host unreachable"
