"""SLA evaluation: classifies deadline pressure for a shipment.

Active shipments are classified against the live clock. Once a shipment is
delivered (or later closed) its classification is frozen at the instant the
SLA closed and never recomputed.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from logistics.shipment.types import ShipmentStatus

_MICROSECOND = timedelta(microseconds=1)
_MICROS_PER_HOUR = timedelta(hours=1) // _MICROSECOND

# Statuses whose classification is frozen at the SLA-closing instant.
SLA_CLOSED_STATUSES = frozenset(
    {
        ShipmentStatus.DELIVERED,
        ShipmentStatus.DOCUMENT,
        ShipmentStatus.INVOICED,
        ShipmentStatus.CANCELLED,
    }
)


class SLAStatus(str, Enum):
    ON_TIME = "on_time"
    WARNING = "warning"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class SLAConfig:
    warning_threshold_hours: int = 24


@dataclass(frozen=True)
class SLAResult:
    deadline: datetime
    status: SLAStatus
    remaining_hours: int | None = None


def _ceil_hours(delta: timedelta) -> int:
    micros = delta // _MICROSECOND
    return -(-micros // _MICROS_PER_HOUR)


def hours_overdue(deadline: datetime, now: datetime) -> int:
    """Whole hours (rounded up) by which ``deadline`` has passed, 0 if it has not."""
    if now <= deadline:
        return 0
    return _ceil_hours(now - deadline)


class SLAEvaluator:
    """Three-tier deadline classifier.

    Stateless apart from its configuration: identical inputs always yield
    identical results.
    """

    def __init__(self, config: SLAConfig | None = None):
        self.config = config or SLAConfig()

    def evaluate(
        self,
        deadline: datetime,
        current_status: ShipmentStatus | str,
        now: datetime,
        closed_at: datetime | None = None,
    ) -> SLAResult:
        """Classify ``deadline`` for a shipment in ``current_status``.

        For delivered/closed shipments ``closed_at`` is the instant the SLA
        closed; when omitted, ``now`` is taken to be that instant. The
        classification is then binary and ``remaining_hours`` is None.
        """
        status = ShipmentStatus(current_status)

        if status in SLA_CLOSED_STATUSES:
            reference = closed_at or now
            frozen = SLAStatus.ON_TIME if reference <= deadline else SLAStatus.OVERDUE
            return SLAResult(deadline=deadline, status=frozen)

        remaining = max(0, _ceil_hours(deadline - now))

        if now > deadline:
            classification = SLAStatus.OVERDUE
        elif remaining <= self.config.warning_threshold_hours:
            classification = SLAStatus.WARNING
        else:
            classification = SLAStatus.ON_TIME

        return SLAResult(
            deadline=deadline,
            status=classification,
            remaining_hours=remaining if remaining > 0 else None,
        )


def evaluate_sla(
    deadline: datetime,
    current_status: ShipmentStatus | str,
    now: datetime,
    closed_at: datetime | None = None,
    config: SLAConfig | None = None,
) -> SLAResult:
    return SLAEvaluator(config).evaluate(deadline, current_status, now, closed_at=closed_at)
