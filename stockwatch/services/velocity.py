"""
Safety-stock advice from sales velocity.

    daily_average = units sold in the window / window_days
    suggested     = ceil(daily_average * cover_days)

When |suggested - min_stock| > tolerance * min_stock, a low-severity
REORDER advisory is raised carrying both values. min_stock itself is never
changed; applying the suggestion is a human decision. The tolerance band
keeps week-to-week noise out of the alert list.
"""

import logging
import math
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from stockwatch.models.enums import AlertType, Severity
from stockwatch.protocols.store import InventoryStore, ProductScoped, ProductSnapshot
from stockwatch.services.alerts import AlertManager
from stockwatch.services.base import fmt_qty

logger = logging.getLogger('stockwatch')


@dataclass
class StockAdvice:
    """A min stock suggestion outside the tolerance band."""

    product_id: int
    product_name: str
    units_sold: Decimal
    current_min_stock: Decimal
    suggested_min_stock: int
    alert_created: bool = False


def suggest_min_stock(units_sold: Decimal, window_days: int, cover_days: int) -> int:
    daily_average = Decimal(units_sold) / Decimal(window_days)
    return math.ceil(daily_average * cover_days)


def outside_tolerance(suggested, current, tolerance: Decimal) -> bool:
    return abs(suggested - current) > current * tolerance


class SafetyStockAdvisor:

    def __init__(self, store: InventoryStore, alerts: AlertManager, window_days: int = 30,
                 cover_days: int = 7, tolerance: float = 0.2):
        self.store = store
        self.alerts = alerts
        self.window_days = window_days
        self.cover_days = cover_days
        self.tolerance = Decimal(str(tolerance))

    async def run(self) -> list[StockAdvice]:
        since = timezone.now() - timedelta(days=self.window_days)
        advice = []

        for product in await self.store.list_products(active_only=True):
            try:
                item = await self._advise(product, since)
            except Exception:
                logger.exception(
                    "stockwatch.velocity.product_failed",
                    extra={"product_id": product.id},
                )
                continue
            if item is not None:
                advice.append(item)

        logger.info("stockwatch.velocity.done", extra={"suggestions": len(advice)})
        return advice

    async def _advise(self, product: ProductSnapshot, since) -> StockAdvice | None:
        sold = await self.store.units_sold(product.id, since)
        suggested = suggest_min_stock(sold, self.window_days, self.cover_days)

        if not outside_tolerance(suggested, product.min_stock, self.tolerance):
            return None

        logger.info(
            "Suggested min stock for %s: %s (current: %s)",
            product.name, suggested, fmt_qty(product.min_stock),
        )
        alert = await self.alerts.ensure_alert(
            ProductScoped(product.id),
            AlertType.REORDER,
            Severity.LOW,
            f"Stock optimization suggestion: {product.name} min stock should be adjusted "
            f"from {fmt_qty(product.min_stock)} to {suggested} "
            f"based on {self.window_days}-day sales velocity",
        )
        return StockAdvice(
            product_id=product.id,
            product_name=product.name,
            units_sold=sold,
            current_min_stock=product.min_stock,
            suggested_min_stock=suggested,
            alert_created=alert is not None,
        )
