"""Commission aggregate (CQRS) — a derived payable linked to at most one shipment.

State Machine:
    PENDING → PAID

The commission amount is never taken from the caller: it is recomputed from
base amount, rate and type, and any supplied amount is only cross-checked.
Amounts are kept as decimal strings and read back through the Decimal
accessors.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from logistics.commission.calculator import CommissionCalculator, CommissionType, to_decimal
from logistics.commission.events import CommissionPaid, CommissionRecorded
from logistics.domain import logistics


class CommissionStatus(Enum):
    PENDING = "pending"
    PAID = "paid"


@logistics.aggregate
class Commission:
    shipment_id = Identifier()
    commission_type = String(required=True, max_length=20, choices=CommissionType)
    rate = String(required=True, max_length=32)
    base_amount = String(required=True, max_length=32)
    commission_amount = String(required=True, max_length=32)
    currency = String(max_length=3, default="EUR")
    status = String(
        max_length=20,
        choices=CommissionStatus,
        default=CommissionStatus.PENDING.value,
    )
    payment_reference = String(max_length=100)
    paid_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(
        cls,
        base_amount,
        rate,
        commission_type: CommissionType | str,
        shipment_id: str | None = None,
        commission_amount=None,
        calculator: CommissionCalculator | None = None,
        now: datetime | None = None,
    ):
        """Record a commission, recomputing and cross-checking its amount."""
        calculator = calculator or CommissionCalculator()
        amount = calculator.verify(base_amount, rate, commission_type, commission_amount)

        now = now or datetime.now(UTC)
        commission = cls(
            shipment_id=shipment_id,
            commission_type=CommissionType(commission_type).value,
            rate=str(to_decimal(rate)),
            base_amount=str(to_decimal(base_amount)),
            commission_amount=str(amount),
            currency=calculator.config.currency,
            status=CommissionStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        commission.raise_(
            CommissionRecorded(
                commission_id=str(commission.id),
                shipment_id=shipment_id,
                commission_type=commission.commission_type,
                rate=commission.rate,
                base_amount=commission.base_amount,
                commission_amount=commission.commission_amount,
                currency=commission.currency,
                recorded_at=now,
            )
        )
        return commission

    # -------------------------------------------------------------------
    # Decimal accessors
    # -------------------------------------------------------------------
    @property
    def rate_value(self) -> Decimal:
        return Decimal(self.rate)

    @property
    def base_amount_value(self) -> Decimal:
        return Decimal(self.base_amount)

    @property
    def amount(self) -> Decimal:
        return Decimal(self.commission_amount)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def mark_paid(self, payment_reference: str | None = None, now: datetime | None = None) -> None:
        if CommissionStatus(self.status) != CommissionStatus.PENDING:
            raise ValidationError({"status": [f"Commission is {self.status} and cannot be paid"]})

        now = now or datetime.now(UTC)
        self.status = CommissionStatus.PAID.value
        self.payment_reference = (payment_reference or "").strip() or None
        self.paid_at = now
        self.updated_at = now
        self.raise_(
            CommissionPaid(
                commission_id=str(self.id),
                commission_amount=self.commission_amount,
                payment_reference=self.payment_reference,
                paid_at=now,
            )
        )
