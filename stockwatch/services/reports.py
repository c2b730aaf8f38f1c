"""
Daily movement summary.

Groups the last 24 hours of stock movements by kind, ranks products and
positions by movement count, and posts one system-wide DAILY_SUMMARY alert
per day for admin review.
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from django.utils import timezone

from stockwatch.models.enums import AlertType, MovementKind, Severity
from stockwatch.protocols.store import SYSTEM, InventoryStore, MovementSnapshot
from stockwatch.services.alerts import AlertManager

logger = logging.getLogger('stockwatch')

TOP_N = 5


@dataclass
class Ranking:
    key: str
    count: int
    total_quantity: Decimal


@dataclass
class DailySummary:
    since: datetime
    until: datetime
    total_movements: int = 0
    stock_in: int = 0
    stock_out: int = 0
    adjustments: int = 0
    top_products: list[Ranking] = field(default_factory=list)
    top_locations: list[Ranking] = field(default_factory=list)
    alert_created: bool = False

    @property
    def message(self) -> str:
        return (
            f"Daily stock summary: {self.total_movements} movements "
            f"({self.stock_in} in, {self.stock_out} out, {self.adjustments} adjustments)"
        )


def rank(movements: list[MovementSnapshot], key) -> list[Ranking]:
    """Top entries by movement count (ties keep first-seen order)."""
    counts = Counter()
    totals = defaultdict(Decimal)
    for movement in movements:
        k = key(movement)
        counts[k] += 1
        totals[k] += movement.delta
    return [Ranking(k, n, totals[k]) for k, n in counts.most_common(TOP_N)]


class DailyReport:

    def __init__(self, store: InventoryStore, alerts: AlertManager):
        self.store = store
        self.alerts = alerts

    async def generate(self) -> DailySummary:
        until = timezone.now()
        since = until - timedelta(days=1)
        movements = await self.store.list_movements(since, until)

        by_kind = Counter(m.kind for m in movements)
        summary = DailySummary(
            since=since,
            until=until,
            total_movements=len(movements),
            stock_in=by_kind[MovementKind.IN],
            stock_out=by_kind[MovementKind.OUT],
            adjustments=by_kind[MovementKind.ADJUSTMENT],
            top_products=rank(movements, lambda m: m.product_name),
            top_locations=rank(movements, lambda m: m.location),
        )

        alert = await self.alerts.ensure_daily_alert(
            SYSTEM, AlertType.DAILY_SUMMARY, Severity.LOW, summary.message,
        )
        summary.alert_created = alert is not None

        logger.info(
            "stockwatch.report.daily",
            extra={"movements": summary.total_movements, "alert_created": summary.alert_created},
        )
        return summary
