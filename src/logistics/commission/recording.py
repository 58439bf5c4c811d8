"""Commission recording and payment — commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from logistics.commission.calculator import CommissionCalculator, CommissionType
from logistics.commission.commission import Commission
from logistics.config import get_config
from logistics.domain import logistics
from logistics.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@logistics.command(part_of="Commission")
class RecordCommission:
    """Record the commission for a payable task, optionally tied to a shipment.

    Amounts travel as decimal strings.
    """

    base_amount = String(required=True, max_length=32)
    rate = String(required=True, max_length=32)
    commission_type = String(required=True, max_length=20, choices=CommissionType)
    shipment_id = Identifier()
    commission_amount = String(max_length=32)


@logistics.command(part_of="Commission")
class PayCommission:
    commission_id = Identifier(required=True)
    payment_reference = String(max_length=100)


@logistics.command_handler(part_of=Commission)
class CommissionHandler:
    @handle(RecordCommission)
    def record_commission(self, command):
        repo = current_domain.repository_for(Commission)
        if command.shipment_id:
            # Raises ObjectNotFoundError for unknown shipments
            current_domain.repository_for(Shipment).get(command.shipment_id)
            if repo.find_for_shipment(str(command.shipment_id)):
                raise ValidationError({"shipment_id": ["Shipment already has a commission"]})

        commission = Commission.create(
            base_amount=command.base_amount,
            rate=command.rate,
            commission_type=command.commission_type,
            shipment_id=command.shipment_id,
            commission_amount=command.commission_amount,
            calculator=CommissionCalculator(get_config().commission),
        )
        repo.add(commission)
        logger.info(
            "Commission recorded",
            commission_id=str(commission.id),
            shipment_id=command.shipment_id,
            commission_amount=commission.commission_amount,
        )
        return str(commission.id)

    @handle(PayCommission)
    def pay_commission(self, command):
        repo = current_domain.repository_for(Commission)
        commission = repo.get(command.commission_id)
        commission.mark_paid(command.payment_reference)
        repo.add(commission)
        logger.info(
            "Commission paid",
            commission_id=str(commission.id),
            payment_reference=commission.payment_reference,
        )
