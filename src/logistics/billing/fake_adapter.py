"""Configurable fake billing channel for development and testing.

Records every notification it receives and can be configured at runtime to
fail, which exercises the operator follow-up path without a real billing
system.
"""

from datetime import datetime
from uuid import uuid4

from logistics.billing.port import BillingChannel, HandoffResult


class FakeBillingChannel(BillingChannel):
    """Configurable fake billing channel."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Billing service unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Billing service unavailable") -> None:
        """Configure channel behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def notify_ready_for_invoicing(self, shipment_id: str, completed_at: datetime) -> HandoffResult:
        self.calls.append(
            {
                "method": "notify_ready_for_invoicing",
                "shipment_id": shipment_id,
                "completed_at": completed_at,
            }
        )

        if self.should_succeed:
            return HandoffResult(success=True, reference=f"bill-{uuid4().hex[:12]}")
        return HandoffResult(success=False, failure_reason=self.failure_reason)
