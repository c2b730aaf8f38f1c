"""
Reorder point check.

The reorder point is a fraction (REORDER_POINT_RATIO, 0.5 by default) of a
product's max_stock. Products without max_stock are skipped.
"""

import logging
import math
from decimal import Decimal

from stockwatch.models.enums import AlertType, Severity
from stockwatch.protocols.store import InventoryStore, ProductScoped, ProductSnapshot
from stockwatch.services.alerts import AlertManager
from stockwatch.services.base import SweepResult, fmt_qty

logger = logging.getLogger('stockwatch')


class ReorderDetector:

    def __init__(self, store: InventoryStore, alerts: AlertManager, ratio: float = 0.5):
        self.store = store
        self.alerts = alerts
        self.ratio = Decimal(str(ratio))

    def reorder_point(self, product: ProductSnapshot) -> Decimal:
        return product.max_stock * self.ratio

    async def run(self) -> SweepResult:
        """Raise REORDER alerts for products at or below their reorder point."""
        result = SweepResult()
        products = await self.store.list_products(active_only=True)

        for product in products:
            if product.max_stock is None:
                continue
            try:
                created = await self._check(product)
            except Exception:
                logger.exception(
                    "stockwatch.reorder.product_failed",
                    extra={"product_id": product.id},
                )
                result.failed.append(product.id)
                continue
            result.processed += 1
            result.alerts_created += created

        logger.info(
            "stockwatch.reorder.done",
            extra={"checked": result.processed, "alerts_created": result.alerts_created},
        )
        return result

    async def _check(self, product: ProductSnapshot) -> int:
        total = await self.store.total_quantity(product.id)
        point = self.reorder_point(product)
        if total > point:
            return 0

        severity = Severity.HIGH if total <= product.min_stock else Severity.MEDIUM
        alert = await self.alerts.ensure_alert(
            ProductScoped(product.id),
            AlertType.REORDER,
            severity,
            f"Reorder alert: {product.name} stock is low "
            f"({fmt_qty(total)} remaining, reorder at {math.floor(point)})",
        )
        return 1 if alert else 0
