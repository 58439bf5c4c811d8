"""Logistics configuration.

Tunables are read from the environment once and passed explicitly into the
SLA evaluator and commission calculator at construction.

Environment variables:
    SLA_WARNING_THRESHOLD_HOURS  hours before the deadline that count as "warning" (24)
    COMMISSION_CURRENCY          currency recorded on commissions (EUR)
    COMMISSION_TOLERANCE         accepted deviation for supplied commission amounts (0.01)
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from logistics.commission.calculator import CommissionConfig
from logistics.shipment.sla import SLAConfig


@dataclass(frozen=True)
class LogisticsConfig:
    sla: SLAConfig = field(default_factory=SLAConfig)
    commission: CommissionConfig = field(default_factory=CommissionConfig)


def load_config(environ: Mapping[str, str] | None = None) -> LogisticsConfig:
    """Build the configuration from ``environ`` (defaults to ``os.environ``)."""
    environ = os.environ if environ is None else environ
    defaults_sla = SLAConfig()
    defaults_commission = CommissionConfig()

    return LogisticsConfig(
        sla=SLAConfig(
            warning_threshold_hours=int(
                environ.get("SLA_WARNING_THRESHOLD_HOURS", defaults_sla.warning_threshold_hours)
            ),
        ),
        commission=CommissionConfig(
            currency=environ.get("COMMISSION_CURRENCY", defaults_commission.currency),
            tolerance=Decimal(str(environ.get("COMMISSION_TOLERANCE", defaults_commission.tolerance))),
        ),
    )


_config: LogisticsConfig | None = None


def get_config() -> LogisticsConfig:
    """Return the process-wide configuration (loaded on first use)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration (useful for tests)."""
    global _config
    _config = None
