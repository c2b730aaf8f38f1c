"""
Expiry scanning — EXPIRY alerts for batches near or past their expiry date.

Severity:
    expiry_date < today          → high   ("Expired batch alert")
    today <= expiry_date <= until → medium ("Expiry alert")

A product with several expiring batches gets a single open EXPIRY alert,
keyed by whichever batch triggered first. A later, more urgent batch does
not escalate it.
"""

import logging
from datetime import date, timedelta

from stockwatch.models.enums import AlertType, Severity
from stockwatch.protocols.store import BatchSnapshot, InventoryStore, ProductScoped
from stockwatch.services.alerts import AlertManager
from stockwatch.services.base import SweepResult

logger = logging.getLogger('stockwatch')


def expiry_severity(expiry_date: date, today: date) -> Severity:
    return Severity.HIGH if expiry_date < today else Severity.MEDIUM


class ExpiryScanner:
    """Scans batches for upcoming and past expiry dates."""

    def __init__(self, store: InventoryStore, alerts: AlertManager):
        self.store = store
        self.alerts = alerts

    async def scan(self, horizon_days: int) -> SweepResult:
        """
        Raise EXPIRY alerts for batches expiring within ``horizon_days``,
        including batches that already expired.
        """
        today = date.today()
        result = SweepResult()
        batches = await self.store.list_expiring_batches(today + timedelta(days=horizon_days))

        for batch in batches:
            try:
                alert = await self.alerts.ensure_alert(
                    ProductScoped(batch.product_id),
                    AlertType.EXPIRY,
                    expiry_severity(batch.expiry_date, today),
                    self._message(batch, today),
                )
            except Exception:
                logger.exception(
                    "stockwatch.expiry.batch_failed",
                    extra={"batch_id": batch.id, "product_id": batch.product_id},
                )
                result.failed.append(batch.id)
                continue
            result.processed += 1
            if alert:
                result.alerts_created += 1

        logger.info(
            "stockwatch.expiry.done",
            extra={"checked": result.processed, "alerts_created": result.alerts_created},
        )
        return result

    @staticmethod
    def _message(batch: BatchSnapshot, today: date) -> str:
        when = batch.expiry_date.isoformat()
        if batch.expiry_date < today:
            return f"Expired batch alert: {batch.product_name} batch {batch.code} expired on {when}"
        return f"Expiry alert: {batch.product_name} batch {batch.code} will expire on {when}"
