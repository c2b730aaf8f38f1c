"""
Stock status reconciliation — recompute StockRecord.status per product.

For every active product:
    total  = sum(quantity) over its stock records
    status = classify(total, min_stock)
    write status + timestamp on all its records
    raise LOW_STOCK alerts when low or out of stock

Running it twice on unchanged data writes the same statuses and creates
no new alerts (open alerts suppress repeats).
"""

import logging

from django.utils import timezone

from stockwatch.exceptions import StockwatchError
from stockwatch.models.enums import AlertType, Severity, StockStatus
from stockwatch.protocols.store import InventoryStore, ProductScoped, ProductSnapshot
from stockwatch.services.alerts import AlertManager
from stockwatch.services.base import SweepResult, fmt_qty
from stockwatch.services.classifier import classify

logger = logging.getLogger('stockwatch')


class StockStatusReconciler:
    """Writes derived status and raises low/out-of-stock alerts."""

    def __init__(self, store: InventoryStore, alerts: AlertManager):
        self.store = store
        self.alerts = alerts

    async def run(self) -> SweepResult:
        """
        Reconcile every active product.

        A product that fails is logged and skipped; the others are still
        processed.
        """
        result = SweepResult()
        products = await self.store.list_products(active_only=True)

        for product in products:
            try:
                _, created = await self._reconcile(product)
            except Exception:
                logger.exception(
                    "stockwatch.reconcile.product_failed",
                    extra={"product_id": product.id},
                )
                result.failed.append(product.id)
                continue
            result.processed += 1
            result.alerts_created += created

        logger.info(
            "stockwatch.reconcile.done",
            extra={
                "processed": result.processed,
                "failed": len(result.failed),
                "alerts_created": result.alerts_created,
            },
        )
        return result

    async def reconcile_product(self, product_id: int) -> StockStatus:
        """
        Reconcile a single product, e.g. right after a stock movement.

        Raises:
            StockwatchError: PRODUCT_NOT_FOUND
        """
        product = await self.store.get_product(product_id)
        if product is None:
            raise StockwatchError('PRODUCT_NOT_FOUND', product_id=product_id)
        status, _ = await self._reconcile(product)
        return status

    async def _reconcile(self, product: ProductSnapshot) -> tuple[StockStatus, int]:
        total = await self.store.total_quantity(product.id)
        status = classify(total, product.min_stock)
        await self.store.update_stock_status(product.id, status, timezone.now())
        return status, await self._check_alerts(product, total, status)

    async def _check_alerts(self, product: ProductSnapshot, total, status: StockStatus) -> int:
        entity = ProductScoped(product.id)

        if status == StockStatus.OUT_OF_STOCK:
            alert = await self.alerts.ensure_alert(
                entity,
                AlertType.LOW_STOCK,
                Severity.HIGH,
                f"Out of stock alert: {product.name} is out of stock",
            )
        elif status == StockStatus.LOW_STOCK:
            alert = await self.alerts.ensure_alert(
                entity,
                AlertType.LOW_STOCK,
                Severity.MEDIUM,
                f"Low stock alert: {product.name} ({fmt_qty(total)} remaining, min: {fmt_qty(product.min_stock)})",
            )
        else:
            return 0

        return 1 if alert else 0
