"""Billing channel port (abstract interface).

Defines the contract for handing completed shipments over to invoicing.
The handoff is fire-and-forget from the shipment's point of view: a failed
delivery is reported back, never raised into the lifecycle.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class HandoffResult:
    """Result of a billing handoff attempt."""

    success: bool
    reference: str | None = None
    failure_reason: str | None = None


class BillingChannel(ABC):
    """Abstract billing channel interface."""

    @abstractmethod
    def notify_ready_for_invoicing(self, shipment_id: str, completed_at: datetime) -> HandoffResult:
        """Tell billing that ``shipment_id`` may now be invoiced."""
        ...
