"""Error taxonomy for the logistics domain.

Every domain error is a protean ``ValidationError``, carrying a ``messages``
mapping of field name to a list of human-readable messages, so the UI can
render a complete checklist instead of a single opaque string. Unknown ids
surface as protean's ``ObjectNotFoundError`` and concurrent writes as its
``ExpectedVersionError``.
"""

from protean.exceptions import ValidationError


class InvalidTransition(ValidationError):
    """The proposed status is not reachable from the current status."""

    def __init__(self, current, proposed):
        self.current = current
        self.proposed = proposed
        super().__init__(
            {"status": [f"Cannot change status from {_value(current)} to {_value(proposed)}"]},
        )


class MissingRequiredField(ValidationError):
    """A status change lacks the side data its target status requires."""


class ShipmentClosed(ValidationError):
    """A mutation was attempted on an invoiced or cancelled shipment."""

    def __init__(self, status):
        self.status = status
        super().__init__({"status": [f"Shipment is {_value(status)} and can no longer be modified"]})


class CompletionBlocked(ValidationError):
    """Aggregate error listing every unmet completion precondition."""

    def __init__(self, reasons):
        self.reasons = list(reasons)
        messages: dict[str, list[str]] = {}
        for reason in self.reasons:
            messages.setdefault(reason.field, []).append(reason.message)
        super().__init__(messages)


def _value(status) -> str:
    return getattr(status, "value", status)
