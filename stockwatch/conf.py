"""
Stockwatch configuration.

Usage in settings.py:
    STOCKWATCH = {
        "STORE_BACKEND": "stockwatch.adapters.django_orm.DjangoInventoryStore",
        "PRODUCT_MODEL": "catalog.Product",
        "EXPIRY_HORIZON_DAYS": 30,
        "TASK_TIMEOUT_SECONDS": 600,
        "INTERVALS": {"stock_status": 120},
    }
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


# Default cadence per scheduled task, in seconds
DEFAULT_INTERVALS = {
    'stock_status': 5 * 60,
    'expiry_check': 60 * 60,
    'automation': 30 * 60,
    'auto_resolve': 24 * 60 * 60,
    'optimization': 7 * 24 * 60 * 60,
}


@dataclass
class StockwatchSettings:
    """Stockwatch configuration settings."""

    # Inventory store backend (dotted path)
    STORE_BACKEND: str = "stockwatch.adapters.django_orm.DjangoInventoryStore"

    # Host product model ("app_label.ModelName")
    PRODUCT_MODEL: str = ""

    # Batches expiring within this many days raise EXPIRY alerts
    EXPIRY_HORIZON_DAYS: int = 30

    # Open alerts older than this are auto-resolved
    ALERT_MAX_AGE_DAYS: int = 30

    # Reorder point as a fraction of max_stock
    REORDER_POINT_RATIO: float = 0.5

    # Sales velocity window and cover target (days)
    VELOCITY_WINDOW_DAYS: int = 30
    COVER_DAYS: int = 7

    # Relative deviation from min_stock that triggers an advisory
    VELOCITY_TOLERANCE: float = 0.2

    # Deadline per scheduled task run (None = no deadline)
    TASK_TIMEOUT_SECONDS: float | None = 600

    # Per-task cadence overrides, in seconds
    INTERVALS: dict[str, float] = field(default_factory=dict)

    def interval_for(self, task_name: str) -> float:
        return self.INTERVALS.get(task_name, DEFAULT_INTERVALS[task_name])


def get_stockwatch_settings() -> StockwatchSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCKWATCH", {})
    return StockwatchSettings(**{
        k: v for k, v in user_settings.items()
        if k in StockwatchSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_stockwatch_settings(), name)


stockwatch_settings = _LazySettings()
