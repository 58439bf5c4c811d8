"""Billing handoff: delivers the billing-ready signal to the billing channel.

Runs after the completed shipment has been persisted. Whatever happens in
the channel, the shipment stays in its documentation phase; failures are
logged for manual follow-up and returned to the caller.
"""

import structlog

from logistics.billing.port import BillingChannel, HandoffResult
from logistics.shipment.events import ShipmentReadyForBilling

logger = structlog.get_logger(__name__)


def dispatch_billing_signal(event: ShipmentReadyForBilling, channel: BillingChannel) -> HandoffResult:
    try:
        result = channel.notify_ready_for_invoicing(event.shipment_id, event.completed_at)
    except Exception as exc:  # channel errors must not reach the lifecycle
        logger.exception(
            "Billing handoff raised, manual follow-up required",
            shipment_id=event.shipment_id,
            channel=type(channel).__name__,
        )
        return HandoffResult(success=False, failure_reason=str(exc) or type(exc).__name__)

    if result.success:
        logger.info(
            "Billing notified, shipment ready for invoicing",
            shipment_id=event.shipment_id,
            reference=result.reference,
        )
    else:
        logger.error(
            "Billing handoff failed, manual follow-up required",
            shipment_id=event.shipment_id,
            channel=type(channel).__name__,
            reason=result.failure_reason,
        )
    return result
