"""
Shared helpers for the sweep services.
"""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class SweepResult:
    """
    Outcome of one sweep over many entities.

    ``failed`` holds the ids of entities whose processing raised; the sweep
    went on without them.
    """

    processed: int = 0
    alerts_created: int = 0
    failed: list = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def fmt_qty(value) -> str:
    """Render a quantity for alert messages: Decimal('10.000') → '10'."""
    if isinstance(value, Decimal):
        value = value.normalize()
        return f"{value:f}"
    return str(value)
