"""
Stock discrepancy detection — detection only, never correction.

Flags stock records that violate invariants owned by the host's inventory
code:
    quantity < 0 or available < 0 → NEGATIVE_STOCK (high)
    reserved > available           → OVER_RESERVED (high)

Quantities are never touched here. Fixing the data is a human decision.
"""

import logging

from stockwatch.models.enums import AlertType, Severity
from stockwatch.protocols.store import InventoryStore, ProductScoped, StockRecordSnapshot
from stockwatch.services.alerts import AlertManager
from stockwatch.services.base import SweepResult, fmt_qty

logger = logging.getLogger('stockwatch')


def negative_stock_message(record: StockRecordSnapshot) -> str:
    if record.quantity < 0:
        detail = f"negative stock ({fmt_qty(record.quantity)})"
    else:
        detail = f"negative available stock ({fmt_qty(record.available)})"
    return f"Negative stock alert: {record.product_name} at {record.location} has {detail}"


def over_reserved_message(record: StockRecordSnapshot) -> str:
    return (
        f"Over-reserved alert: {record.product_name} at {record.location} has more reserved "
        f"stock ({fmt_qty(record.reserved)}) than available ({fmt_qty(record.available)})"
    )


class DiscrepancyDetector:

    def __init__(self, store: InventoryStore, alerts: AlertManager):
        self.store = store
        self.alerts = alerts

    async def run(self) -> SweepResult:
        result = SweepResult()

        for record in await self.store.find_negative_records():
            await self._raise(
                result, record, AlertType.NEGATIVE_STOCK, negative_stock_message(record),
            )

        for record in await self.store.find_over_reserved_records():
            await self._raise(
                result, record, AlertType.OVER_RESERVED, over_reserved_message(record),
            )

        logger.info(
            "stockwatch.discrepancies.done",
            extra={"records": result.processed, "alerts_created": result.alerts_created},
        )
        return result

    async def _raise(self, result: SweepResult, record: StockRecordSnapshot,
                     alert_type: str, message: str) -> None:
        try:
            alert = await self.alerts.ensure_alert(
                ProductScoped(record.product_id), alert_type, Severity.HIGH, message,
            )
        except Exception:
            logger.exception(
                "stockwatch.discrepancies.record_failed",
                extra={"record_id": record.id, "type": str(alert_type)},
            )
            result.failed.append(record.id)
            return
        result.processed += 1
        if alert:
            result.alerts_created += 1
