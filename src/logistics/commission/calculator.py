"""Commission calculator.

Amounts are computed in Decimal and rounded half-up to cents, so repeated
calculations never drift through binary floating point. For ``fixed``
commissions the ``rate`` field carries the flat amount itself.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum

from protean.exceptions import ValidationError

_CENT = Decimal("0.01")
_HUNDRED = Decimal(100)


class CommissionType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class CommissionConfig:
    currency: str = "EUR"
    tolerance: Decimal = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Convert ``value`` to Decimal through its decimal string form."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round2(amount: Decimal) -> Decimal:
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def _parse_amount(value, field: str, errors: dict[str, list[str]]) -> Decimal | None:
    """Decimal form of ``value``, or None after recording why it is unusable."""
    try:
        amount = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        errors[field] = [f"{value!r} is not a valid number"]
        return None
    if not amount.is_finite():
        errors[field] = ["Value must be a finite number"]
        return None
    return amount


class CommissionCalculator:
    def __init__(self, config: CommissionConfig | None = None):
        self.config = config or CommissionConfig()

    def validate(self, base_amount, rate, commission_type: CommissionType | str) -> None:
        """Reject unusable or out-of-range input before any calculation.

        Every violation is reported, not just the first.
        """
        errors: dict[str, list[str]] = {}
        base = _parse_amount(base_amount, "base_amount", errors)
        rate = _parse_amount(rate, "rate", errors)
        try:
            commission_type = CommissionType(commission_type)
        except ValueError:
            errors["commission_type"] = [f"Unknown commission type {commission_type!r}"]
            commission_type = None

        if base is not None and base <= 0:
            errors["base_amount"] = ["Base amount must be greater than 0"]
        if rate is not None:
            if commission_type == CommissionType.PERCENTAGE and not (0 <= rate <= _HUNDRED):
                errors["rate"] = ["Commission rate must be between 0 and 100"]
            elif commission_type == CommissionType.FIXED and rate < 0:
                errors["rate"] = ["Fixed commission amount cannot be negative"]
        if errors:
            raise ValidationError(errors)

    def calculate(self, base_amount, rate, commission_type: CommissionType | str) -> Decimal:
        self.validate(base_amount, rate, commission_type)
        if CommissionType(commission_type) == CommissionType.FIXED:
            return to_decimal(rate)
        return round2(to_decimal(base_amount) * to_decimal(rate) / _HUNDRED)

    def verify(self, base_amount, rate, commission_type: CommissionType | str, commission_amount) -> Decimal:
        """Recompute the commission and cross-check a caller-supplied amount.

        Returns the recomputed amount; a supplied amount further than the
        configured tolerance from it is rejected.
        """
        expected = self.calculate(base_amount, rate, commission_type)
        if commission_amount is None:
            return expected

        errors: dict[str, list[str]] = {}
        supplied = _parse_amount(commission_amount, "commission_amount", errors)
        if supplied is not None and abs(supplied - expected) > self.config.tolerance:
            errors["commission_amount"] = [f"Commission amount does not match calculated amount {expected}"]
        if errors:
            raise ValidationError(errors)
        return expected


def calculate_commission(base_amount, rate, commission_type: CommissionType | str) -> Decimal:
    return CommissionCalculator().calculate(base_amount, rate, commission_type)
