"""Billing channel factory.

Provides get_billing_channel() / set_billing_channel() to swap implementations.
Uses FakeBillingChannel by default; configure via the BILLING_CHANNEL
environment variable.
"""

import os

from logistics.billing.port import BillingChannel

_current_channel: BillingChannel | None = None


def get_billing_channel() -> BillingChannel:
    """Return the configured billing channel (singleton)."""
    global _current_channel
    if _current_channel is None:
        adapter = os.environ.get("BILLING_CHANNEL", "fake")
        if adapter == "fake":
            from logistics.billing.fake_adapter import FakeBillingChannel

            _current_channel = FakeBillingChannel()
        else:
            raise ValueError(f"Unknown billing channel: {adapter}")
    return _current_channel


def set_billing_channel(channel: BillingChannel) -> None:
    """Override the active billing channel (useful for tests)."""
    global _current_channel
    _current_channel = channel


def reset_billing_channel() -> None:
    """Reset to the default channel."""
    global _current_channel
    _current_channel = None
